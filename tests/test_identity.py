"""
Tests for utils/identity.py.

Covers:
  - normalize_id(): str/int ids, blanks and booleans
  - resolve_identity(): explicit id > source id > fallback
  - fallback modes: session tokens vs. derived hashes
  - the configured FALLBACK_IDENTITY_MODE applies to listings built anywhere
"""
from __future__ import annotations

import pytest

from sustainaview.config import FallbackIdentityMode, settings
from sustainaview.schemas.listings import ProductListing, fallback_listing
from sustainaview.utils.identity import (
    DERIVED_PREFIX,
    SESSION_PREFIX,
    derived_identity,
    is_session_identity,
    normalize_id,
    resolve_identity,
    session_identity,
)


class TestNormalizeId:
    @pytest.mark.parametrize(
        "value, expected",
        [("5", "5"), (7, "7"), ("  abc ", "abc"), ("", None), ("   ", None), (None, None), (True, None)],
    )
    def test_values(self, value, expected):
        assert normalize_id(value) == expected


class TestResolveIdentity:
    def test_explicit_product_id_wins(self):
        assert resolve_identity("5", 7) == ("5", False)

    def test_source_id_used_when_no_product_id(self):
        assert resolve_identity(None, 7) == ("7", False)

    def test_blank_product_id_falls_through(self):
        assert resolve_identity("", "abc") == ("abc", False)

    def test_session_fallback(self):
        identity, is_fallback = resolve_identity(
            None, None, source="Amazon", name="Bulb", url="#", mode=FallbackIdentityMode.SESSION
        )
        assert is_fallback is True
        assert identity.startswith(SESSION_PREFIX)
        assert is_session_identity(identity)

    def test_session_fallbacks_are_unique(self):
        assert session_identity() != session_identity()

    def test_deterministic_fallback_is_stable(self):
        first, is_fallback = resolve_identity(
            None, None, source="Amazon", name="LED Bulb", url="https://x", mode=FallbackIdentityMode.DETERMINISTIC
        )
        second, _ = resolve_identity(
            None, None, source="amazon ", name="led bulb", url="https://x", mode=FallbackIdentityMode.DETERMINISTIC
        )
        assert is_fallback is True
        assert first == second
        assert first.startswith(DERIVED_PREFIX)
        assert not is_session_identity(first)

    def test_deterministic_fallback_differs_per_url(self):
        assert derived_identity("Amazon", "Bulb", "https://a") != derived_identity("Amazon", "Bulb", "https://b")


class TestConfiguredMode:
    @pytest.fixture
    def deterministic(self, monkeypatch):
        monkeypatch.setattr(settings.search, "fallback_identity_mode", FallbackIdentityMode.DETERMINISTIC)

    def test_default_follows_settings(self, deterministic):
        identity, is_fallback = resolve_identity(None, None, source="Amazon", name="Bulb", url="#")
        assert is_fallback is True
        assert identity == derived_identity("Amazon", "Bulb", "#")

    def test_listing_without_ids_uses_settings(self, deterministic):
        first = ProductListing(name="Bamboo Towels", source="Etsy", url="https://etsy/towels")
        second = ProductListing(name="Bamboo Towels", source="Etsy", url="https://etsy/towels")
        assert first.fallback_identity is True
        assert first.identity == second.identity
        assert first.identity.startswith(DERIVED_PREFIX)

    def test_fallback_listing_uses_settings(self, deterministic):
        assert fallback_listing("Smart Plug").identity == fallback_listing("Smart Plug").identity
