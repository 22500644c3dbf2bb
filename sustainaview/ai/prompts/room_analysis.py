# flake8: noqa: E501

"""Room sustainability analysis prompt."""

from sustainaview.ai.prompts.base import Prompt


class RoomAnalysisPrompt(Prompt):
    """Prompt asking a vision model for sustainable product suggestions."""

    def __init__(self, min_products: int = 5, max_products: int = 7):
        system_prompt = (
            "You are a sustainability consultant who helps people make their homes more "
            "environmentally friendly with practical, purchasable products."
        )

        template = """
Analyze this room image and suggest {min_products}-{max_products} specific sustainable, eco-friendly products that would make this room more environmentally friendly. For each product, provide:

1. Product name and type
2. Why it would benefit this specific room
3. Environmental benefits
4. Estimated price range
5. Where to buy it (Amazon, eBay, local stores)
6. Keywords for searching online

Focus on practical suggestions like:
- LED light bulbs
- Energy-efficient appliances
- Sustainable furniture
- Air purifying plants
- Eco-friendly decor
- Energy-saving devices
- Sustainable storage solutions

Product names must be unique within your answer.

Format your response as a JSON object with this structure:
{{
  "analysis": "Brief description of the room and current sustainability status",
  "products": [
    {{
      "name": "Product name",
      "type": "Product category",
      "reason": "Why this room needs this product",
      "benefits": "Environmental benefits",
      "priceRange": "$X - $Y",
      "whereToFind": ["Amazon", "eBay", "Home Depot"],
      "searchKeywords": ["keyword1", "keyword2", "keyword3"]
    }}
  ],
  "sustainabilityScore": 7,
  "potentialSavings": "$XXX/year in energy costs"
}}
"""
        super().__init__(template=template, system_prompt=system_prompt)
        self.min_products = min_products
        self.max_products = max_products

    def format(self) -> str:  # type: ignore[override]
        return self.template.format(min_products=self.min_products, max_products=self.max_products)
