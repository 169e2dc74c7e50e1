"""Pacote para comparação visual de imagens em testes de regressão."""

from .compare import ComparisonResult, ImageComparator, compare_images, images_similar
from .config import (
    CircleStyle,
    ComparisonConfig,
    MissingImagePolicy,
    ResizePolicy,
    ThresholdConvention,
    load_config,
)
from .imaging import Region
from .log import configure_logging

__all__ = [
    "CircleStyle",
    "ComparisonConfig",
    "ComparisonResult",
    "ImageComparator",
    "MissingImagePolicy",
    "Region",
    "ResizePolicy",
    "ThresholdConvention",
    "compare_images",
    "configure_logging",
    "images_similar",
    "load_config",
]
