"""Schema package exports."""

from .analysis import ProductSuggestion, RoomAnalysis
from .listings import ProductListing
from .visualization import GeneratedImage, VisualizationResult
