from __future__ import annotations

import pytest

from recordsync.domain.records import difference, merge, values_equal


def test_merge_overwrites_and_keeps_inputs_untouched() -> None:
    old = {"a": 1, "b": 2}
    new = {"b": 3, "c": 4}

    merged = merge(old, new)

    assert merged == {"a": 1, "b": 3, "c": 4}
    assert old == {"a": 1, "b": 2}
    assert new == {"b": 3, "c": 4}


def test_merge_is_shallow() -> None:
    merged = merge({"nested": {"a": 1, "b": 2}}, {"nested": {"a": 5}})

    assert merged == {"nested": {"a": 5}}


def test_merge_is_idempotent() -> None:
    old = {"name": "Ada", "age": 36, "address": {"city": "London"}}
    new = {"age": 37, "address": {"zip": "N1"}, "tags": ["math"]}

    once = merge(old, new)

    assert merge(once, new) == once


def test_merge_with_empty_record_is_identity() -> None:
    record = {"a": 1}

    assert merge(record, {}) == record
    assert merge({}, record) == record


def test_difference_reports_changed_added_and_removed_keys() -> None:
    old = {"name": "Ada", "age": 36, "city": "London"}
    new = {"name": "Ada", "age": 37, "email": "ada@example.com"}

    assert difference(old, new) == {"age": 37, "email": "ada@example.com", "city": None}


def test_difference_of_equal_records_is_empty() -> None:
    record = {"name": "Ada", "nested": {"a": [1, 2]}, "flag": True}

    assert difference(record, dict(record)) == {}


def test_difference_of_merged_disjoint_record_is_that_record() -> None:
    a = {"name": "Ada", "address": {"city": "London"}}
    b = {"email": "ada@example.com", "age": 36, "profile": {"title": "Countess"}}

    diff = difference(a, merge(a, b))

    assert diff == b
    assert None not in diff.values()


def test_difference_recurses_into_nested_records() -> None:
    old = {"address": {"city": "London", "zip": "N1"}}
    new = {"address": {"city": "Paris", "zip": "N1"}}

    assert difference(old, new) == {"address": {"city": "Paris"}}


def test_difference_omits_unchanged_nested_records() -> None:
    old = {"address": {"city": "London"}, "name": "Ada"}
    new = {"address": {"city": "London"}, "name": "Grace"}

    assert difference(old, new) == {"name": "Grace"}


def test_difference_includes_new_nested_record_whole() -> None:
    assert difference({"address": "unknown"}, {"address": {"city": "Paris"}}) == {
        "address": {"city": "Paris"}
    }


def test_difference_skips_arrays() -> None:
    old = {"tags": ["a"], "name": "Ada"}
    new = {"tags": ["a", "b"], "name": "Ada"}

    assert difference(old, new) == {}


def test_difference_does_not_mark_removed_arrays() -> None:
    assert difference({"tags": ["a"]}, {}) == {}


def test_merging_the_difference_reproduces_the_new_record() -> None:
    old = {"name": "Ada", "age": 36}
    new = {"name": "Ada", "age": 37, "email": "ada@example.com"}

    assert merge(old, difference(old, new)) == new


def test_merging_the_difference_reproduces_every_non_array_key() -> None:
    old = {"name": "Ada", "tags": ["math"], "address": {"city": "London"}}
    new = {"name": "Grace", "tags": ["navy", "cobol"], "address": {"city": "Arlington"}}

    patched = merge(old, difference(old, new))

    assert {key: value for key, value in patched.items() if key != "tags"} == {
        "name": "Grace",
        "address": {"city": "Arlington"},
    }
    assert patched["tags"] == ["math"]


def test_difference_is_idempotent_after_merge() -> None:
    old = {"name": "Ada", "address": {"city": "London"}}
    new = {"name": "Grace", "address": {"city": "Paris"}}

    patched = merge(old, difference(old, new))

    assert difference(patched, new) == {}


@pytest.mark.parametrize(
    ("left", "right", "expected"),
    [
        (1, 1, True),
        (1, 1.0, True),
        (True, 1, False),
        (False, 0, False),
        ("a", "a", True),
        ({"a": [1, {"b": 2}]}, {"a": [1, {"b": 2}]}, True),
        ({"a": 1}, {"a": 1, "b": 2}, False),
        ([1, 2], (1, 2), True),
        ([1, 2], [2, 1], False),
        (None, None, True),
        (None, 0, False),
    ],
)
def test_values_equal(left: object, right: object, expected: bool) -> None:  # noqa: FBT001
    assert values_equal(left, right) is expected
