"""Schemas for room sustainability analysis."""

from typing import List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class ProductSuggestion(BaseModel):
    """A sustainable product recommended for the photographed room."""

    name: str
    type: str = ""
    reason: str = ""
    benefits: str = ""
    price_range: str = Field(default="", validation_alias=AliasChoices("price_range", "priceRange"))
    where_to_find: List[str] = Field(
        default_factory=list, validation_alias=AliasChoices("where_to_find", "whereToFind")
    )
    search_keywords: List[str] = Field(
        default_factory=list, validation_alias=AliasChoices("search_keywords", "searchKeywords")
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("search_keywords", "where_to_find", mode="before")
    @classmethod
    def _split_strings(cls, v):
        # Models occasionally answer with a comma separated string instead of a list
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v


class RoomAnalysis(BaseModel):
    """Structured recommendation set for one photo."""

    analysis: str = Field(default="", description="Narrative description of the room")
    sustainability_score: float = Field(
        default=0,
        ge=0,
        le=10,
        validation_alias=AliasChoices("sustainability_score", "sustainabilityScore"),
    )
    potential_savings: str = Field(
        default="", validation_alias=AliasChoices("potential_savings", "potentialSavings")
    )
    products: List[ProductSuggestion] = Field(default_factory=list)
    is_fallback: bool = Field(default=False, description="True when static content replaced the model output")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("sustainability_score", mode="before")
    @classmethod
    def _clamp_score(cls, v):
        try:
            return min(max(float(v), 0.0), 10.0)
        except (TypeError, ValueError):
            return 0


class AnalysisRequest(BaseModel):
    """Request body for room analysis."""

    image_base64: str = Field(..., min_length=1, description="Base64 encoded room photo")
    mime_type: str = Field(default="image/jpeg")


def partial_room_analysis() -> RoomAnalysis:
    """Analysis used when the model answered but not with parseable JSON."""
    return RoomAnalysis(
        analysis="Room analysis completed. Multiple sustainable improvement opportunities identified.",
        products=[
            ProductSuggestion(
                name="LED Light Bulbs",
                type="Lighting",
                reason="Replace energy-intensive incandescent bulbs",
                benefits="75% less energy consumption, longer lifespan",
                price_range="$5 - $15 per bulb",
                where_to_find=["Amazon", "Home Depot", "Walmart"],
                search_keywords=["LED bulbs", "energy efficient lighting", "smart bulbs"],
            ),
            ProductSuggestion(
                name="Air Purifying Plants",
                type="Decor/Health",
                reason="Improve indoor air quality naturally",
                benefits="Remove toxins, produce oxygen, natural humidity control",
                price_range="$10 - $50 per plant",
                where_to_find=["Local nurseries", "Amazon", "Home Depot"],
                search_keywords=["snake plant", "pothos", "peace lily", "air purifying plants"],
            ),
        ],
        sustainability_score=6,
        potential_savings="$200/year in energy costs",
        is_fallback=True,
    )


def fallback_room_analysis() -> RoomAnalysis:
    """Static analysis substituted when the analysis service is unavailable."""
    return RoomAnalysis(
        analysis="Room analysis completed. This space has good potential for sustainable improvements.",
        products=[
            ProductSuggestion(
                name="LED Light Bulbs",
                type="Lighting",
                reason="Replace traditional bulbs for energy efficiency",
                benefits="Up to 75% energy savings, 25x longer lifespan",
                price_range="$8 - $20",
                where_to_find=["Amazon", "Home Depot", "Best Buy"],
                search_keywords=["LED bulbs", "energy efficient", "smart lighting"],
            ),
            ProductSuggestion(
                name="Smart Thermostat",
                type="Climate Control",
                reason="Optimize heating and cooling efficiency",
                benefits="10-15% energy savings, remote control, learning algorithms",
                price_range="$150 - $300",
                where_to_find=["Amazon", "Best Buy", "Home Depot"],
                search_keywords=["smart thermostat", "Nest", "Ecobee", "energy saving"],
            ),
            ProductSuggestion(
                name="Air Purifying Plants",
                type="Natural Air Filter",
                reason="Improve indoor air quality naturally",
                benefits="Remove VOCs, increase oxygen, natural humidity control",
                price_range="$15 - $40",
                where_to_find=["Local nurseries", "Amazon", "Walmart"],
                search_keywords=["snake plant", "spider plant", "peace lily", "air plants"],
            ),
            ProductSuggestion(
                name="Bamboo Storage Organizers",
                type="Storage",
                reason="Replace plastic storage with sustainable materials",
                benefits="Renewable material, biodegradable, stylish design",
                price_range="$25 - $80",
                where_to_find=["Amazon", "Target", "IKEA"],
                search_keywords=["bamboo organizer", "sustainable storage", "eco-friendly containers"],
            ),
            ProductSuggestion(
                name="Energy Star Appliances",
                type="Electronics",
                reason="Upgrade to energy-efficient models",
                benefits="20-30% less energy usage, government rebates available",
                price_range="$200 - $1500",
                where_to_find=["Best Buy", "Home Depot", "Amazon"],
                search_keywords=["Energy Star", "efficient appliances", "eco-friendly electronics"],
            ),
        ],
        sustainability_score=7,
        potential_savings="$300-500/year in energy and utility costs",
        is_fallback=True,
    )
