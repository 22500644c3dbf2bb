"""
Tests for client/selector.py.

Covers:
  - partition invariant across select/deselect
  - selection by name or product, and by generated key; no-op moves
  - generate(): empty selection, success, failure keeps previous image
"""
from __future__ import annotations

import pytest

from sustainaview.client.api import ServiceResult
from sustainaview.client.selector import EMPTY_SELECTION, VisualizationSelector
from sustainaview.schemas.analysis import ProductSuggestion, RoomAnalysis
from sustainaview.schemas.visualization import GeneratedImage

NAMES = ["LED Bulbs", "Snake Plant", "Smart Thermostat", "Bamboo Organizer"]


def make_selector(api, names=NAMES) -> VisualizationSelector:
    analysis = RoomAnalysis(products=[ProductSuggestion(name=n) for n in names])
    return VisualizationSelector(api, analysis, photo_base64="cGhvdG8=")


def assert_partition(selector: VisualizationSelector):
    available, selected = set(selector.available_keys), set(selector.selected_keys)
    assert available | selected == set(selector.keys)
    assert not available & selected


class TestBuckets:
    def test_initially_all_available(self, api):
        selector = make_selector(api)
        assert [p.name for p in selector.available] == NAMES
        assert selector.selected == []
        assert_partition(selector)

    def test_moves_keep_analysis_order(self, api):
        selector = make_selector(api)
        assert selector.select("Smart Thermostat")
        assert selector.select_key("led-bulbs")
        assert [p.name for p in selector.selected] == ["LED Bulbs", "Smart Thermostat"]
        assert [p.name for p in selector.available] == ["Snake Plant", "Bamboo Organizer"]
        assert_partition(selector)

        assert selector.deselect(selector.products[0])
        assert [p.name for p in selector.available] == ["LED Bulbs", "Snake Plant", "Bamboo Organizer"]
        assert_partition(selector)

    def test_invalid_moves_are_noops(self, api):
        selector = make_selector(api)
        assert selector.deselect("LED Bulbs") is False
        assert selector.select("LED Bulbs") is True
        assert selector.select("LED Bulbs") is False
        assert selector.select("Unknown") is False
        assert [p.name for p in selector.selected] == ["LED Bulbs"]
        assert_partition(selector)

    def test_duplicate_names(self, api):
        selector = make_selector(api, ["Plant", "Plant"])
        assert selector.select("Plant")
        assert selector.select("Plant")
        assert selector.selected_keys == ["plant", "plant-2"]
        assert selector.select("Plant") is False
        assert_partition(selector)

    def test_name_matching_another_key(self, api):
        selector = make_selector(api, ["Plant", "Plant", "plant-2"])
        assert selector.keys == ["plant", "plant-2", "plant-2-2"]

        assert selector.select("plant-2")
        assert [p.name for p in selector.selected] == ["plant-2"]
        assert selector.selected_keys == ["plant-2-2"]

    def test_key_moves(self, api):
        selector = make_selector(api, ["Plant", "Plant"])
        assert selector.select_key("plant-2")
        assert selector.select_key("plant-2") is False
        assert selector.select_key("missing") is False
        assert selector.selected_keys == ["plant-2"]

        assert selector.deselect_key("plant-2")
        assert selector.deselect_key("plant-2") is False
        assert selector.selected == []
        assert_partition(selector)


class TestGenerate:
    @pytest.mark.asyncio
    async def test_empty_selection_makes_no_call(self, api):
        result = await make_selector(api).generate()
        assert result.success is False
        assert result.error == EMPTY_SELECTION
        api.generate_visualization.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_zero_product_analysis(self, api):
        selector = make_selector(api, [])
        assert selector.select("anything") is False
        result = await selector.generate()
        assert result.error == EMPTY_SELECTION
        api.generate_visualization.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_success_replaces_image(self, api):
        image = GeneratedImage(mime_type="image/png", data="QUJD")
        api.generate_visualization.return_value = ServiceResult.ok(image)
        selector = make_selector(api)
        selector.select("Snake Plant")

        result = await selector.generate()

        assert result.success is True
        assert selector.generated_image == image
        assert selector.generating is False
        products = api.generate_visualization.call_args.args[0]
        assert [p.name for p in products] == ["Snake Plant"]
        assert api.generate_visualization.call_args.args[1] == "cGhvdG8="

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_image(self, api):
        previous = GeneratedImage(data="T0xE")
        api.generate_visualization.side_effect = [
            ServiceResult.ok(previous),
            ServiceResult.fail("No image generated"),
        ]
        selector = make_selector(api)
        selector.select("Snake Plant")

        await selector.generate()
        result = await selector.generate()

        assert result.success is False
        assert selector.generated_image == previous
        assert selector.last_error == "No image generated"
