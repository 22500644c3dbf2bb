"""Room visualization prompt."""

from typing import Sequence

from sustainaview.ai.prompts.base import Prompt
from sustainaview.schemas.analysis import ProductSuggestion


class RoomVisualizationPrompt(Prompt):
    """Prompt asking an image model to edit the room photo with the chosen products."""

    def __init__(self):
        system_prompt = "You are an interior designer specialising in sustainable, realistic home makeovers."
        template = (
            "Edit this photo of a room so it shows the same room after adding these sustainable products:\n"
            "{product_lines}\n\n"
            "Keep the room's layout, walls, windows, perspective and lighting direction unchanged. "
            "Place each product where it would naturally be used, at a realistic scale, "
            "and keep the result photorealistic and achievable."
        )
        super().__init__(template=template, system_prompt=system_prompt)

    def format(self, products: Sequence[ProductSuggestion]) -> str:  # type: ignore[override]
        lines = []
        for product in products:
            line = f"- {product.name}"
            if product.type:
                line += f" ({product.type})"
            if product.reason:
                line += f": {product.reason}"
            lines.append(line)
        return self.template.format(product_lines="\n".join(lines))
