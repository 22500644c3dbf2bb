"""Two-bucket chooser feeding a single image-generation call."""

import asyncio
import logging
from typing import Dict, List, Optional, Union

from sustainaview.client.api import TIMED_OUT, ServiceResult, SustainaViewClient
from sustainaview.client.keys import assign_product_keys
from sustainaview.schemas.analysis import ProductSuggestion, RoomAnalysis
from sustainaview.schemas.visualization import GeneratedImage

logger = logging.getLogger(__name__)

EMPTY_SELECTION = "Please select at least one product to visualize."

ProductRef = Union[str, ProductSuggestion]


class VisualizationSelector:
    """Products of one analysis split between ``available`` and ``selected``.

    Every product is in exactly one bucket; both buckets keep the analysis order.
    """

    def __init__(
        self,
        api: SustainaViewClient,
        analysis: RoomAnalysis,
        photo_base64: str,
        mime_type: str = "image/jpeg",
        timeout: Optional[float] = None,
    ):
        self.api = api
        self.photo_base64 = photo_base64
        self.mime_type = mime_type
        self.timeout = timeout or api.settings.generation_timeout

        self.keys: List[str] = assign_product_keys(analysis.products)
        self._products: Dict[str, ProductSuggestion] = dict(zip(self.keys, analysis.products))
        self._selected: set = set()

        self.generated_image: Optional[GeneratedImage] = None
        self.generating = False
        self.last_error: Optional[str] = None

    @property
    def products(self) -> List[ProductSuggestion]:
        return [self._products[key] for key in self.keys]

    @property
    def available_keys(self) -> List[str]:
        return [key for key in self.keys if key not in self._selected]

    @property
    def selected_keys(self) -> List[str]:
        return [key for key in self.keys if key in self._selected]

    @property
    def available(self) -> List[ProductSuggestion]:
        return [self._products[key] for key in self.available_keys]

    @property
    def selected(self) -> List[ProductSuggestion]:
        return [self._products[key] for key in self.selected_keys]

    def _find(self, product: ProductRef, bucket: List[str]) -> Optional[str]:
        """First key in ``bucket`` whose product has this name, or is this product."""
        if isinstance(product, str):
            return next((key for key in bucket if self._products[key].name == product), None)
        return next((key for key in bucket if self._products[key] == product), None)

    def _move(self, key: Optional[str], selected: bool) -> bool:
        if key is None:
            return False
        if selected:
            self._selected.add(key)
        else:
            self._selected.discard(key)
        return True

    def select(self, product: ProductRef) -> bool:
        """Move a product, by name or value, to ``selected``; False if none is available."""
        return self._move(self._find(product, self.available_keys), selected=True)

    def deselect(self, product: ProductRef) -> bool:
        """Move a product, by name or value, back to ``available``; False if none is selected."""
        return self._move(self._find(product, self.selected_keys), selected=False)

    def select_key(self, key: str) -> bool:
        return self._move(key if key in self.available_keys else None, selected=True)

    def deselect_key(self, key: str) -> bool:
        return self._move(key if key in self.selected_keys else None, selected=False)

    async def generate(self) -> ServiceResult[GeneratedImage]:
        """Render the room with the selected products.

        An empty selection is rejected without a network call. A failure keeps
        the previously generated image.
        """
        products = self.selected
        if not products:
            self.last_error = EMPTY_SELECTION
            return ServiceResult.fail(EMPTY_SELECTION)
        if self.generating:
            return ServiceResult.fail("Visualization already in progress")

        self.generating = True
        try:
            result = await asyncio.wait_for(
                self.api.generate_visualization(
                    products, self.photo_base64, mime_type=self.mime_type, timeout=self.timeout
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            result = ServiceResult.fail(TIMED_OUT)
        finally:
            self.generating = False

        if result.success:
            self.generated_image = result.data
            self.last_error = None
            logger.info(f"Generated visualization with {len(products)} products")
        else:
            self.last_error = result.error
            logger.warning(f"Visualization failed: {result.error}")
        return result
