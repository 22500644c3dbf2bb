"""Per-product listing cache for one analysis session.

Listings for a product are fetched on demand, at most once per session, and
drive the product's expand/collapse state. Loading a different analysis starts
a new session; responses that arrive for an abandoned session are dropped.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Optional, Sequence

from sustainaview.client.keys import assign_product_keys
from sustainaview.schemas.analysis import ProductSuggestion, RoomAnalysis
from sustainaview.schemas.listings import ProductListing

logger = logging.getLogger(__name__)

ListingSource = Callable[[Sequence[str], str], Awaitable[List[ProductListing]]]


@dataclass
class ProductListingState:
    listings: List[ProductListing] = field(default_factory=list)
    loading: bool = False
    fetched: bool = False
    expanded: bool = False


class ProductListingCache:
    def __init__(
        self,
        source: ListingSource,
        timeout: Optional[float] = None,
        on_change: Optional[Callable[[str], None]] = None,
    ):
        """
        Args:
            source: Coroutine function ``(keywords, product_name) -> listings``.
            timeout: Seconds before a single fetch is abandoned and treated as empty.
            on_change: Called with the product key whenever its state changes.
        """
        self._source = source
        self.timeout = timeout
        self.on_change = on_change

        self.analysis: Optional[RoomAnalysis] = None
        self.analysis_key: Optional[str] = None
        self._generation = 0
        self._products: Dict[str, ProductSuggestion] = {}
        self._states: Dict[str, ProductListingState] = {}

    # ── session ──

    def load_analysis(self, analysis: RoomAnalysis, analysis_key: str) -> bool:
        """Start a session for ``analysis`` unless it is already the active one.

        Returns:
            True if per-product state was reset
        """
        if analysis_key == self.analysis_key and analysis is self.analysis:
            return False

        self.reset(analysis_key)
        self.analysis = analysis
        keys = assign_product_keys(analysis.products)
        self._products = dict(zip(keys, analysis.products))
        self._states = {key: ProductListingState() for key in keys}
        return True

    def reset(self, analysis_key: Optional[str] = None) -> None:
        """Drop all per-product state; in-flight fetches will be discarded."""
        self._generation += 1
        self.analysis_key = analysis_key
        self.analysis = None
        self._products = {}
        self._states = {}
        logger.debug(f"Listing cache reset for analysis {analysis_key}")

    # ── lookups ──

    @property
    def keys(self) -> List[str]:
        return list(self._products)

    def key_for(self, name: str) -> Optional[str]:
        """First product key whose product has ``name``."""
        for key, product in self._products.items():
            if product.name == name:
                return key
        return None

    def product(self, product_key: str) -> Optional[ProductSuggestion]:
        return self._products.get(product_key)

    def state(self, product_key: str) -> ProductListingState:
        return self._states.get(product_key) or ProductListingState()

    def listings(self, product_key: str) -> List[ProductListing]:
        return self.state(product_key).listings

    def is_loading(self, product_key: str) -> bool:
        return self.state(product_key).loading

    def is_fetched(self, product_key: str) -> bool:
        return self.state(product_key).fetched

    def is_expanded(self, product_key: str) -> bool:
        return self.state(product_key).expanded

    def _notify(self, product_key: str) -> None:
        if self.on_change is not None:
            self.on_change(product_key)

    def _ensure(self, product_key: str, product: Optional[ProductSuggestion]) -> ProductListingState:
        if product is not None and product_key not in self._products:
            self._products[product_key] = product
        if product_key not in self._products:
            raise KeyError(f"Unknown product key: {product_key}")
        return self._states.setdefault(product_key, ProductListingState())

    # ── operations ──

    async def request_listings(
        self, product_key: str, product: Optional[ProductSuggestion] = None
    ) -> List[ProductListing]:
        """Fetch listings for a product unless they are fetched or already in flight.

        Failures and timeouts are stored as an empty result so the product is
        not fetched again this session.
        """
        state = self._ensure(product_key, product)
        if state.loading or state.fetched:
            return state.listings

        product = self._products[product_key]
        generation = self._generation
        state.loading = True
        self._notify(product_key)

        listings: List[ProductListing] = []
        try:
            listings = await asyncio.wait_for(
                self._source(product.search_keywords, product.name), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            logger.warning(f"Listing fetch for '{product.name}' timed out")
        except Exception as e:
            logger.warning(f"Listing fetch for '{product.name}' failed: {e}", exc_info=True)
        finally:
            if generation == self._generation:
                state.loading = False

        if generation != self._generation:
            logger.debug(f"Discarding late listings for '{product.name}' from an abandoned session")
            return []

        state.listings = list(listings or [])
        state.fetched = True
        self._notify(product_key)
        return state.listings

    async def toggle_expansion(self, product_key: str, product: Optional[ProductSuggestion] = None) -> bool:
        """Flip the expanded flag; expanding an unfetched product fetches its listings.

        Returns:
            The new expanded flag
        """
        state = self._ensure(product_key, product)
        state.expanded = expanded = not state.expanded
        self._notify(product_key)

        if expanded and not state.fetched:
            await self.request_listings(product_key)
        return expanded
