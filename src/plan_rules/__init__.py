"""Rule helpers for policy checks over Terraform plan resource changes."""

from .evaluation import (
    ABSENT,
    AttributeRoot,
    Kind,
    ResourceRoot,
    classify,
    evaluate_attribute,
    filter_attribute_does_not_match_regex,
    filter_attribute_greater_than_value,
    filter_attribute_in_list,
    filter_attribute_is_not_value,
    filter_attribute_is_value,
    filter_attribute_less_than_value,
    filter_attribute_matches_regex,
    filter_attribute_not_in_list,
    print_violations,
    to_string,
)
from .models import ResourceChange, ViolationReport
from .normalization import find_all_resources, find_datasources, find_resources

__all__ = [
    "ABSENT",
    "AttributeRoot",
    "Kind",
    "ResourceChange",
    "ResourceRoot",
    "ViolationReport",
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
    "find_all_resources",
    "find_datasources",
    "find_resources",
    "print_violations",
    "to_string",
]
