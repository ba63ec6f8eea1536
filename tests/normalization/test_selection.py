from __future__ import annotations

import json
from pathlib import Path

from plan_rules.normalization import (
    ResourceNormalizer,
    find_all_resources,
    find_datasources,
    find_resources,
)

FIXTURES = Path(__file__).resolve().parent.parent / "fixtures"


def load_changes() -> dict[str, object]:
    plan = json.loads((FIXTURES / "aws" / "plan.json").read_text(encoding="utf-8"))
    return ResourceNormalizer().normalize(plan)


def test_find_resources_selects_created_and_updated_of_type() -> None:
    selected = find_resources(load_changes(), "aws_instance")

    assert list(selected) == [
        "module.network.aws_instance.bastion",
        "module.network.aws_instance.worker[0]",
    ]


def test_find_resources_skips_replacements_without_create_or_update() -> None:
    changes = load_changes()

    # ["delete", "create"] still contains "create"
    assert list(find_resources(changes, "aws_security_group")) == ["aws_security_group.web"]
    assert find_resources(changes, "aws_ami") == {}


def test_find_all_resources_covers_every_type() -> None:
    selected = find_all_resources(load_changes())

    assert "aws_instance.legacy" not in selected
    assert "data.aws_ami.ubuntu" not in selected
    assert len(selected) == 5


def test_find_datasources() -> None:
    assert list(find_datasources(load_changes(), "aws_ami")) == ["data.aws_ami.ubuntu"]


def test_selection_accepts_raw_records() -> None:
    changes = {
        "aws_s3_bucket.a": {
            "type": "aws_s3_bucket",
            "mode": "managed",
            "change": {"actions": ["update"], "after": {}},
        },
        "aws_s3_bucket.b": {
            "type": "aws_s3_bucket",
            "mode": "managed",
            "change": {"actions": ["no-op"], "after": {}},
        },
        "aws_s3_bucket.c": {"type": "aws_s3_bucket", "mode": "managed"},
    }

    selected = find_resources(changes, "aws_s3_bucket")

    assert selected == {"aws_s3_bucket.a": changes["aws_s3_bucket.a"]}
    assert selected["aws_s3_bucket.a"] is changes["aws_s3_bucket.a"]
