"""Resolution of dot-delimited attribute paths against plan values.

A path such as ``ingress.0.cidr_blocks`` is split on ``.``; segments made
only of digits index into sequences and every other segment names a mapping
key. Resolution distinguishes two ways of "not finding" a value:

* a key missing from a mapping that does exist resolves to ``None``;
* any structural mismatch (an index into a non-sequence, an index out of
  range, a key lookup on a scalar or ``None``) resolves to :data:`ABSENT`.

Callers that only care whether a value is present can treat both the same
via :func:`~plan_rules.evaluation.values.is_missing`.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, List, Union

from ..models import ResourceChange
from .values import ABSENT, Kind, classify

logger = logging.getLogger(__name__)

MAX_PATH_DEPTH = 64

_INDEX_SEGMENT = re.compile(r"[0-9]+")


@dataclass(frozen=True, slots=True)
class AttributeRoot:
    """Resolve paths directly against ``value``."""

    value: Any


@dataclass(frozen=True, slots=True)
class ResourceRoot:
    """Resolve paths against the post-change attributes of ``record``."""

    record: Any

    @property
    def attributes(self) -> Any:
        if isinstance(self.record, ResourceChange):
            return self.record.after
        if not isinstance(self.record, Mapping):
            return ABSENT
        change = self.record.get("change")
        if isinstance(change, Mapping):
            return change.get("after")
        return ABSENT


Root = Union[AttributeRoot, ResourceRoot]


def is_resource_shaped(value: Any) -> bool:
    """Return ``True`` for raw mappings carrying a ``change.after`` block."""

    if not isinstance(value, Mapping):
        return False
    change = value.get("change")
    return isinstance(change, Mapping) and "after" in change


def as_root(value: Any) -> Root:
    """Wrap ``value`` in the root variant matching its shape."""

    if isinstance(value, (AttributeRoot, ResourceRoot)):
        return value
    if isinstance(value, ResourceChange) or is_resource_shaped(value):
        return ResourceRoot(value)
    return AttributeRoot(value)


def split_path(path: str) -> List[str | int]:
    """Split ``path`` into key names and integer sequence indices."""

    return [
        int(segment) if _INDEX_SEGMENT.fullmatch(segment) else segment
        for segment in path.split(".")
    ]


def evaluate_attribute(root: Any, path: str) -> Any:
    """Return the value at ``path`` under ``root``.

    ``root`` may be a :class:`ResourceChange`, a raw resource change mapping,
    an explicit :class:`AttributeRoot`/:class:`ResourceRoot`, or any plain
    attribute value. The result is the resolved value, ``None`` for a key
    missing from an existing mapping, or :data:`ABSENT`.
    """

    segments = split_path(path)
    if len(segments) > MAX_PATH_DEPTH:
        logger.debug(
            "Attribute path %r has %d segments; limit is %d",
            path,
            len(segments),
            MAX_PATH_DEPTH,
        )
        return ABSENT

    wrapped = as_root(root)
    current = wrapped.attributes if isinstance(wrapped, ResourceRoot) else wrapped.value

    for segment in segments:
        current = _step(current, segment)
        if current is ABSENT:
            return ABSENT

    return current


def _step(current: Any, segment: str | int) -> Any:
    kind = classify(current)

    if isinstance(segment, int):
        if kind is not Kind.SEQUENCE:
            return ABSENT
        if segment >= len(current):
            return ABSENT
        return current[segment]

    if kind is not Kind.MAPPING:
        return ABSENT
    return current.get(segment)


__all__ = [
    "MAX_PATH_DEPTH",
    "AttributeRoot",
    "ResourceRoot",
    "Root",
    "as_root",
    "evaluate_attribute",
    "is_resource_shaped",
    "split_path",
]
