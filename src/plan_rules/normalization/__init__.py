"""Plan normalization and resource selection."""

from .resource_normalizer import ResourceNormalizer
from .selection import ALL_TYPES, find_all_resources, find_datasources, find_resources

__all__ = [
    "ALL_TYPES",
    "ResourceNormalizer",
    "find_all_resources",
    "find_datasources",
    "find_resources",
]
