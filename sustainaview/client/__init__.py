"""Async client library: server API wrapper plus per-screen state machines."""

from sustainaview.client.api import ServiceResult, SustainaViewClient
from sustainaview.client.config import ClientSettings
from sustainaview.client.listing_cache import ProductListingCache
from sustainaview.client.reconciler import MutationResult, MutationStatus, WishlistReconciler
from sustainaview.client.selector import VisualizationSelector
from sustainaview.client.session import CapturedPhoto, RoomSession

__all__ = [
    "CapturedPhoto",
    "ClientSettings",
    "MutationResult",
    "MutationStatus",
    "ProductListingCache",
    "RoomSession",
    "ServiceResult",
    "SustainaViewClient",
    "VisualizationSelector",
    "WishlistReconciler",
]
