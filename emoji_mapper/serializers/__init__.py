"""
Serializers for the emoji mapping artifacts.
"""

from emoji_mapper.serializers.mapping_writer import (
    MappingSerializer,
    MappingViews,
    OutputPaths,
)
from emoji_mapper.serializers.sorting import (
    collation_key,
    emoji_unit_count,
    utf16_length,
)

__all__ = [
    "MappingSerializer",
    "MappingViews",
    "OutputPaths",
    "collation_key",
    "emoji_unit_count",
    "utf16_length",
]
