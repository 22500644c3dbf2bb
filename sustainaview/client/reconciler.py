"""Keeps the local "is this listing saved?" view consistent with the remote wishlist.

Membership is a map from every known key of a stored item (its ``product_id``
and, when present, its ``source_id``) to the stored ``product_id``, which is the
id used for remote removal. Adds and removes for one identity are serialized
by a pending guard; a second request while one is in flight is refused.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, FrozenSet, Iterable, Optional, Sequence, Set

from sustainaview.client.api import ServiceResult, SustainaViewClient
from sustainaview.schemas.listings import ProductListing
from sustainaview.schemas.wishlist import WishlistItem
from sustainaview.utils.identity import is_session_identity

logger = logging.getLogger(__name__)


class MutationStatus(str, Enum):
    SAVED = "saved"
    ALREADY_SAVED = "already_saved"
    REMOVED = "removed"
    NOT_SAVED = "not_saved"
    PENDING = "pending"
    FAILED = "failed"


@dataclass
class MutationResult:
    status: MutationStatus
    product_id: str
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status in (MutationStatus.SAVED, MutationStatus.ALREADY_SAVED, MutationStatus.REMOVED)


class WishlistReconciler:
    def __init__(self, api: SustainaViewClient, on_change: Optional[Callable[[], None]] = None):
        self.api = api
        self.on_change = on_change
        self.last_error: Optional[str] = None

        self._aliases: Dict[str, str] = {}
        self._pending: Set[str] = set()
        # Bumped whenever a mutation starts or ends
        self._revision = 0
        # Session fallback identities minted or saved while this reconciler was alive
        self._session_ids: Set[str] = set()

    @property
    def members(self) -> FrozenSet[str]:
        """Every key currently known to be saved."""
        return frozenset(self._aliases)

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def track(self, listings: Iterable[ProductListing]) -> None:
        """Record session fallback identities minted in the current session."""
        for listing in listings:
            if is_session_identity(listing.identity):
                self._session_ids.add(listing.identity)

    def _resolve(self, listing: ProductListing) -> Optional[str]:
        for key in listing.membership_keys:
            if key in self._aliases:
                return self._aliases[key]
        return None

    def _remember(self, product_id: str, source_id: Optional[str]) -> None:
        self._aliases[product_id] = product_id
        if source_id:
            self._aliases.setdefault(source_id, product_id)

    def is_saved(self, listing: ProductListing) -> bool:
        return self._resolve(listing) is not None

    def is_pending(self, listing: ProductListing) -> bool:
        keys = set(listing.membership_keys)
        resolved = self._resolve(listing)
        if resolved:
            keys.add(resolved)
        return bool(keys & self._pending)

    def _rebuild(self, items: Iterable[WishlistItem]) -> None:
        aliases: Dict[str, str] = {}
        for item in items:
            if is_session_identity(item.product_id) and item.product_id not in self._session_ids:
                # Minted by an earlier session; cannot match any listing shown now
                continue
            aliases[item.product_id] = item.product_id
            if item.source_id:
                aliases.setdefault(item.source_id, item.product_id)
        self._aliases = aliases

    def _begin(self, key: str) -> None:
        self._pending.add(key)
        self._revision += 1
        self._notify()

    def _finish(self, key: str) -> None:
        self._pending.discard(key)
        self._revision += 1

    async def load(self) -> ServiceResult:
        """Rebuild membership from the remote wishlist; keeps the old state on failure.

        A snapshot that overlaps an add or remove is discarded, since it may
        predate that mutation.
        """
        revision = self._revision
        result = await self.api.get_wishlist()
        if not result.success:
            self.last_error = result.error
            logger.warning(f"Could not load wishlist: {result.error}")
            return result

        if self._revision != revision or self._pending:
            logger.debug("Discarding wishlist snapshot that overlapped a mutation")
            return result

        self._rebuild(result.data.items)
        self.last_error = None
        logger.debug(f"Wishlist membership reloaded: {len(self._aliases)} keys")
        self._notify()
        return result

    async def add(
        self,
        listing: ProductListing,
        search_keywords: Sequence[str] = (),
        category: Optional[str] = None,
    ) -> MutationResult:
        product_id = listing.identity
        if self.is_pending(listing):
            return MutationResult(MutationStatus.PENDING, self._resolve(listing) or product_id)
        stored = self._resolve(listing)
        if stored is not None:
            return MutationResult(MutationStatus.ALREADY_SAVED, stored)

        self._begin(product_id)
        try:
            result = await self.api.add_to_wishlist(listing, search_keywords=search_keywords, category=category)
        finally:
            self._finish(product_id)

        if not result.success:
            self.last_error = result.error
            logger.warning(f"Failed to save {product_id}: {result.error}")
            self._notify()
            return MutationResult(MutationStatus.FAILED, product_id, error=result.error)

        if is_session_identity(product_id):
            self._session_ids.add(product_id)
        self._remember(product_id, listing.source_id)
        self._notify()
        return MutationResult(MutationStatus.SAVED, product_id)

    async def remove(self, listing: ProductListing) -> MutationResult:
        if self.is_pending(listing):
            return MutationResult(MutationStatus.PENDING, self._resolve(listing) or listing.identity)
        stored = self._resolve(listing)
        if stored is None:
            return MutationResult(MutationStatus.NOT_SAVED, listing.identity)

        self._begin(stored)
        try:
            result = await self.api.remove_from_wishlist(stored)
        finally:
            self._finish(stored)

        if not result.success and result.status_code != 404:
            self.last_error = result.error
            logger.warning(f"Failed to remove {stored}: {result.error}")
            self._notify()
            return MutationResult(MutationStatus.FAILED, stored, error=result.error)

        self._aliases = {key: value for key, value in self._aliases.items() if value != stored}
        self._notify()
        if not result.success:
            # The server no longer has it; local state now agrees
            return MutationResult(MutationStatus.NOT_SAVED, stored, error=result.error)
        return MutationResult(MutationStatus.REMOVED, stored)
