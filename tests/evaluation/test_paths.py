from __future__ import annotations

from plan_rules.evaluation import (
    ABSENT,
    MAX_PATH_DEPTH,
    AttributeRoot,
    ResourceRoot,
    as_root,
    evaluate_attribute,
    split_path,
)
from plan_rules.models import ResourceChange


def test_resolves_nested_keys_and_indices() -> None:
    root = {"a": {"b": 5}, "items": [10, 20], "rules": [{"ports": [22, 443]}]}

    assert evaluate_attribute(root, "a.b") == 5
    assert evaluate_attribute(root, "items.1") == 20
    assert evaluate_attribute(root, "rules.0.ports.1") == 443


def test_missing_key_in_existing_mapping_is_null() -> None:
    assert evaluate_attribute({"a": {"b": 5}}, "a.c") is None


def test_explicit_null_is_returned_as_null() -> None:
    assert evaluate_attribute({"a": None}, "a") is None


def test_structural_mismatches_are_absent() -> None:
    root = {"a": [10, 20], "s": "text", "m": {"0": "zero"}}

    assert evaluate_attribute(root, "a.5") is ABSENT
    assert evaluate_attribute(root, "s.0") is ABSENT
    assert evaluate_attribute(root, "s.length") is ABSENT
    assert evaluate_attribute(root, "a.first") is ABSENT
    assert evaluate_attribute(root, "m.0") is ABSENT


def test_descending_past_a_missing_key_is_absent() -> None:
    assert evaluate_attribute({"a": {}}, "a.b.c") is ABSENT
    assert evaluate_attribute({"a": None}, "a.b") is ABSENT


def test_scalar_root_is_absent() -> None:
    assert evaluate_attribute(42, "a") is ABSENT
    assert evaluate_attribute(None, "0") is ABSENT


def test_raw_resource_change_is_unwrapped() -> None:
    record = {
        "address": "aws_s3_bucket.logs",
        "type": "aws_s3_bucket",
        "change": {"actions": ["create"], "after": {"acl": "private", "change": "x"}},
    }

    assert evaluate_attribute(record, "acl") == "private"
    assert evaluate_attribute(record, "type") is None


def test_resource_change_model_is_unwrapped() -> None:
    record = ResourceChange(
        address="aws_instance.web",
        actions=["create"],
        after={"root_block_device": [{"volume_size": 8}]},
    )

    assert evaluate_attribute(record, "root_block_device.0.volume_size") == 8


def test_resource_without_after_is_absent() -> None:
    record = {"change": {"actions": ["delete"], "after": None}}

    assert evaluate_attribute(record, "acl") is ABSENT


def test_nested_resource_shaped_values_are_not_unwrapped() -> None:
    root = {"inner": {"change": {"after": {"x": 1}}}}

    assert evaluate_attribute(root, "inner.change.after.x") == 1
    assert evaluate_attribute(root, "inner.x") is None


def test_explicit_roots_override_shape_detection() -> None:
    record = {"change": {"after": {"x": 1}}}

    assert evaluate_attribute(AttributeRoot(record), "change.after.x") == 1
    assert evaluate_attribute(ResourceRoot(record), "x") == 1


def test_as_root_picks_variant() -> None:
    assert isinstance(as_root({"change": {"after": {}}}), ResourceRoot)
    assert isinstance(as_root(ResourceChange(address="a.b")), ResourceRoot)
    assert isinstance(as_root({"change": "text"}), AttributeRoot)
    assert isinstance(as_root([1, 2]), AttributeRoot)

    root = AttributeRoot({})
    assert as_root(root) is root


def test_split_path() -> None:
    assert split_path("ingress.0.cidr_blocks") == ["ingress", 0, "cidr_blocks"]
    assert split_path("a1.b") == ["a1", "b"]


def test_overlong_paths_are_absent() -> None:
    value: object = 1
    for _ in range(MAX_PATH_DEPTH + 1):
        value = {"k": value}
    path = ".".join(["k"] * (MAX_PATH_DEPTH + 1))

    assert evaluate_attribute(value, path) is ABSENT


def test_resolution_is_deterministic() -> None:
    root = {"a": [{"b": {"c": [1, 2, 3]}}]}

    results = {repr(evaluate_attribute(root, "a.0.b.c")) for _ in range(5)}

    assert results == {"[1, 2, 3]"}
