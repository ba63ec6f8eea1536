"""Attribute filters that split resource changes into compliant and violating sets.

Every filter walks ``resources`` in order, resolves ``attr`` for each entry
with :func:`~plan_rules.evaluation.paths.evaluate_attribute` and records the
entries that fail the predicate in a fresh :class:`ViolationReport`. When
``report`` is true each violation message is handed to ``sink`` as soon as it
is found. Resource data never raises: missing, null and non-coercible values
are reported as violations (or ignored, for the "must not be" predicates).
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Iterable, Mapping, Optional

from ..models import ViolationReport
from .paths import evaluate_attribute
from .values import is_missing, to_number, to_string, values_equal

logger = logging.getLogger(__name__)

Sink = Callable[..., None]
Judge = Callable[[str, Any], Optional[str]]


def print_violations(
    messages: Mapping[str, str] | ViolationReport,
    prefix: str,
    *,
    sink: Sink = print,
) -> None:
    """Emit every message, preceded by ``prefix``, in mapping order."""

    if isinstance(messages, ViolationReport):
        messages = messages.messages
    for message in messages.values():
        sink(prefix, message)


# Predicates ----------------------------------------------------------------
def filter_attribute_is_not_value(
    resources: Mapping[str, Any],
    attr: str,
    value: Any,
    report: bool = False,
    *,
    sink: Sink = print,
) -> ViolationReport:
    """Flag resources whose ``attr`` is missing or differs from ``value``."""

    def judge(address: str, actual: Any) -> str | None:
        if is_missing(actual):
            return _null_message(address, attr)
        if not values_equal(actual, value):
            return _value_message(address, attr, actual, f"is not equal to {to_string(value)}")
        return None

    return _scan(resources, attr, judge, report=report, sink=sink)


def filter_attribute_is_value(
    resources: Mapping[str, Any],
    attr: str,
    value: Any,
    report: bool = False,
    *,
    sink: Sink = print,
) -> ViolationReport:
    """Flag resources whose ``attr`` equals ``value``."""

    def judge(address: str, actual: Any) -> str | None:
        if not is_missing(actual) and values_equal(actual, value):
            return _value_message(address, attr, actual, "is not allowed")
        return None

    return _scan(resources, attr, judge, report=report, sink=sink)


def filter_attribute_greater_than_value(
    resources: Mapping[str, Any],
    attr: str,
    value: Any,
    report: bool = False,
    *,
    sink: Sink = print,
) -> ViolationReport:
    """Flag resources whose ``attr`` is not numeric or is above ``value``."""

    threshold = _threshold(value)

    def judge(address: str, actual: Any) -> str | None:
        number = to_number(actual)
        if number is None:
            return _null_message(address, attr)
        if number > threshold:
            return _value_message(
                address, attr, actual, f"is greater than {to_string(value)}"
            )
        return None

    return _scan(resources, attr, judge, report=report, sink=sink)


def filter_attribute_less_than_value(
    resources: Mapping[str, Any],
    attr: str,
    value: Any,
    report: bool = False,
    *,
    sink: Sink = print,
) -> ViolationReport:
    """Flag resources whose ``attr`` is not numeric or is below ``value``."""

    threshold = _threshold(value)

    def judge(address: str, actual: Any) -> str | None:
        number = to_number(actual)
        if number is None:
            return _null_message(address, attr)
        if number < threshold:
            return _value_message(address, attr, actual, f"is less than {to_string(value)}")
        return None

    return _scan(resources, attr, judge, report=report, sink=sink)


def filter_attribute_not_in_list(
    resources: Mapping[str, Any],
    attr: str,
    allowed: Iterable[Any],
    report: bool = False,
    *,
    sink: Sink = print,
) -> ViolationReport:
    """Flag resources whose ``attr`` is missing or outside ``allowed``."""

    allowed = list(allowed)

    def judge(address: str, actual: Any) -> str | None:
        if is_missing(actual):
            return _null_message(address, attr)
        if not any(values_equal(actual, candidate) for candidate in allowed):
            return _value_message(
                address, attr, actual, f"is not in the allowed list {to_string(allowed)}"
            )
        return None

    return _scan(resources, attr, judge, report=report, sink=sink)


def filter_attribute_in_list(
    resources: Mapping[str, Any],
    attr: str,
    forbidden: Iterable[Any],
    report: bool = False,
    *,
    sink: Sink = print,
) -> ViolationReport:
    """Flag resources whose ``attr`` is one of ``forbidden``."""

    forbidden = list(forbidden)

    def judge(address: str, actual: Any) -> str | None:
        if is_missing(actual):
            return None
        if any(values_equal(actual, candidate) for candidate in forbidden):
            return _value_message(
                address, attr, actual, f"is in the forbidden list {to_string(forbidden)}"
            )
        return None

    return _scan(resources, attr, judge, report=report, sink=sink)


def filter_attribute_does_not_match_regex(
    resources: Mapping[str, Any],
    attr: str,
    pattern: str,
    report: bool = False,
    *,
    sink: Sink = print,
) -> ViolationReport:
    """Flag resources whose ``attr`` is missing or has no match for ``pattern``."""

    compiled = _compile(pattern)

    def judge(address: str, actual: Any) -> str | None:
        if is_missing(actual):
            return _null_message(address, attr)
        if compiled.search(to_string(actual)) is None:
            return _value_message(
                address, attr, actual, f"does not match the regex {pattern}"
            )
        return None

    return _scan(resources, attr, judge, report=report, sink=sink)


def filter_attribute_matches_regex(
    resources: Mapping[str, Any],
    attr: str,
    pattern: str,
    report: bool = False,
    *,
    sink: Sink = print,
) -> ViolationReport:
    """Flag resources whose ``attr`` contains a match for ``pattern``."""

    compiled = _compile(pattern)

    def judge(address: str, actual: Any) -> str | None:
        if is_missing(actual):
            return None
        if compiled.search(to_string(actual)) is not None:
            return _value_message(address, attr, actual, f"matches the regex {pattern}")
        return None

    return _scan(resources, attr, judge, report=report, sink=sink)


# Shared scan ---------------------------------------------------------------
def _scan(
    resources: Mapping[str, Any],
    attr: str,
    judge: Judge,
    *,
    report: bool,
    sink: Sink,
) -> ViolationReport:
    violations = ViolationReport()
    for address, resource in resources.items():
        message = judge(address, evaluate_attribute(resource, attr))
        if message is None:
            continue

        violations.add(address, resource, message)
        if report:
            sink(message)

    logger.debug(
        "Evaluated %r on %d resources: %d violations", attr, len(resources), len(violations)
    )
    return violations


def _null_message(address: str, attr: str) -> str:
    return f"{address} has {attr} that is null or undefined"


def _value_message(address: str, attr: str, actual: Any, clause: str) -> str:
    return f"{address} has {attr} with value {to_string(actual)} that {clause}"


def _threshold(value: Any) -> int | float:
    threshold = to_number(value)
    if threshold is None:
        raise ValueError(f"Comparison value must be numeric, got {value!r}")
    return threshold


def _compile(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ValueError(f"Invalid regular expression {pattern!r}: {exc}") from exc


__all__ = [
    "Sink",
    "filter_attribute_does_not_match_regex",
    "filter_attribute_greater_than_value",
    "filter_attribute_in_list",
    "filter_attribute_is_not_value",
    "filter_attribute_is_value",
    "filter_attribute_less_than_value",
    "filter_attribute_matches_regex",
    "filter_attribute_not_in_list",
    "print_violations",
]
