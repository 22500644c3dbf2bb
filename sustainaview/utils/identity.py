"""Listing identity resolution.

A listing's identity is the key that correlates it with wishlist membership.
Upstream ids are preferred; when the shopping source provides none, a fallback
is generated according to ``FallbackIdentityMode``:

* ``session``: a time + random token. Unique per fetch, so it is only meaningful
  inside the session that minted it.
* ``deterministic``: a hash of (source, name, url), so repeated fetches of the
  same item converge on the same key.
"""

import hashlib
import secrets
import time
from typing import Any, Optional, Tuple

from sustainaview.config import FallbackIdentityMode, settings

SESSION_PREFIX = "session-"
DERIVED_PREFIX = "derived-"


def session_identity() -> str:
    """Mint a session-local fallback identity."""
    return f"{SESSION_PREFIX}{int(time.time() * 1000)}-{secrets.token_hex(4)}"


def derived_identity(source: str, name: str, url: str) -> str:
    """Hash (source, name, url) into a stable fallback identity."""
    material = "\x1f".join(part.strip().lower() for part in (source or "", name or "", url or ""))
    return f"{DERIVED_PREFIX}{hashlib.sha256(material.encode('utf-8')).hexdigest()[:20]}"


def is_session_identity(identity: Optional[str]) -> bool:
    return bool(identity) and identity.startswith(SESSION_PREFIX)  # type: ignore[union-attr]


def normalize_id(value: Any) -> Optional[str]:
    """Upstream ids arrive as str or int; empty values count as missing."""
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    return text or None


def resolve_identity(
    product_id: Any,
    source_id: Any,
    *,
    source: str = "",
    name: str = "",
    url: str = "",
    mode: Optional[FallbackIdentityMode] = None,
) -> Tuple[str, bool]:
    """Resolve a listing identity.

    Returns:
        Tuple of (identity, is_fallback). ``is_fallback`` is True only when no
        upstream id was available. ``mode`` defaults to the configured
        ``FALLBACK_IDENTITY_MODE``.
    """
    explicit = normalize_id(product_id)
    if explicit:
        return explicit, False

    upstream = normalize_id(source_id)
    if upstream:
        return upstream, False

    mode = mode or settings.search.fallback_identity_mode
    if mode == FallbackIdentityMode.DETERMINISTIC:
        return derived_identity(source, name, url), True
    return session_identity(), True
