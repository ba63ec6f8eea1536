"""Attribute path evaluation and resource filters."""

from .filters import (
    Sink,
    filter_attribute_does_not_match_regex,
    filter_attribute_greater_than_value,
    filter_attribute_in_list,
    filter_attribute_is_not_value,
    filter_attribute_is_value,
    filter_attribute_less_than_value,
    filter_attribute_matches_regex,
    filter_attribute_not_in_list,
    print_violations,
)
from .paths import (
    MAX_PATH_DEPTH,
    AttributeRoot,
    ResourceRoot,
    as_root,
    evaluate_attribute,
    split_path,
)
from .values import ABSENT, Kind, classify, is_missing, to_number, to_string, values_equal

__all__ = [
    "ABSENT",
    "MAX_PATH_DEPTH",
    "AttributeRoot",
    "Kind",
    "ResourceRoot",
    "Sink",
    "as_root",
    "classify",
    "evaluate_attribute",
    "filter_attribute_does_not_match_regex",
    "filter_attribute_greater_than_value",
    "filter_attribute_in_list",
    "filter_attribute_is_not_value",
    "filter_attribute_is_value",
    "filter_attribute_less_than_value",
    "filter_attribute_matches_regex",
    "filter_attribute_not_in_list",
    "is_missing",
    "print_violations",
    "split_path",
    "to_number",
    "to_string",
    "values_equal",
]
