"""Per-analysis product keys.

Product names are not guaranteed unique inside one analysis, so per-product
state is keyed by a slug of the name with ``-2``, ``-3``... appended to repeats.
"""

import re
from typing import List, Sequence

from sustainaview.schemas.analysis import ProductSuggestion

_NON_SLUG = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    return _NON_SLUG.sub("-", name.lower()).strip("-") or "product"


def assign_product_keys(products: Sequence[ProductSuggestion]) -> List[str]:
    """Return one unique key per product, in order."""
    keys: List[str] = []
    taken = set()
    for product in products:
        base = slugify(product.name)
        key, n = base, 1
        while key in taken:
            n += 1
            key = f"{base}-{n}"
        taken.add(key)
        keys.append(key)
    return keys
