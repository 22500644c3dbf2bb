"""
Tests for ai/prompts.

Covers:
  - Prompt.extract_json(): fenced blocks, surrounding prose, failures
  - RoomAnalysisPrompt / RoomVisualizationPrompt formatting
"""
from __future__ import annotations

import pytest

from sustainaview.ai.prompts.base import Prompt
from sustainaview.ai.prompts.room_analysis import RoomAnalysisPrompt
from sustainaview.ai.prompts.visualization import RoomVisualizationPrompt
from sustainaview.schemas.analysis import ProductSuggestion
from sustainaview.utils.errors import InvalidResponseError


class TestExtractJson:
    def test_plain_object(self):
        assert Prompt.extract_json('{"a": 1}') == {"a": 1}

    def test_fenced_block(self):
        output = 'Here you go:\n```json\n{"analysis": "ok", "products": []}\n```\nEnjoy'
        assert Prompt.extract_json(output) == {"analysis": "ok", "products": []}

    def test_prose_around_object(self):
        assert Prompt.extract_json('Sure! {"score": 7} Hope it helps.') == {"score": 7}

    def test_no_object(self):
        with pytest.raises(InvalidResponseError):
            Prompt.extract_json("I cannot analyze this image.")

    def test_broken_json(self):
        with pytest.raises(InvalidResponseError) as exc:
            Prompt.extract_json('{"analysis": "unterminated}')
        assert exc.value.raw is not None


class TestRoomAnalysisPrompt:
    def test_format_embeds_bounds_and_schema(self):
        text = RoomAnalysisPrompt(min_products=3, max_products=4).format()
        assert "3-4" in text
        assert '"searchKeywords"' in text
        assert "{{" not in text


class TestRoomVisualizationPrompt:
    def test_lists_products(self):
        text = RoomVisualizationPrompt().format(
            [
                ProductSuggestion(name="LED Bulbs", type="Lighting", reason="Save energy"),
                ProductSuggestion(name="Snake Plant"),
            ]
        )
        assert "- LED Bulbs (Lighting): Save energy" in text
        assert "- Snake Plant\n" in text
