"""Record transformations shared by the patch computer and the synchronizer.

A record is the wire/storage agnostic representation of an entity: a mapping
from field name to a JSON-like value. Two pure operations are defined here:

* :func:`merge` overlays a (partial) record onto a full one.
* :func:`difference` computes the minimal partial record that turns ``old``
  into ``new``, using ``None`` as the explicit "field was cleared" marker.

Arrays are opaque to :func:`difference`: a key whose value is a list is never
reported, neither when it changed nor when it was removed. Partial array
updates are not supported by the remote API, and PATCH payloads rely on list
fields being absent from the diff.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final, TypeGuard

type Record = dict[str, Any]

DEFAULT_IDENTIFIER_KEY: Final[str] = "_id"


def is_array(value: object) -> bool:
    return isinstance(value, (list, tuple))


def is_record(value: object) -> TypeGuard[Mapping[str, Any]]:
    return isinstance(value, Mapping)


def merge(old: Mapping[str, Any], new: Mapping[str, Any]) -> Record:
    """Return a copy of ``old`` with every key of ``new`` overwritten.

    The overwrite is shallow: a nested record in ``new`` replaces the value in
    ``old`` entirely. Keys that only exist in ``old`` are kept; no key is ever
    removed.
    """

    merged = dict(old)
    for key, value in new.items():
        merged[key] = value
    return merged


def difference(old: Mapping[str, Any], new: Mapping[str, Any]) -> Record:
    """Return the fields of ``new`` that differ from ``old``.

    - keys added or changed in ``new`` carry the new value
    - nested records are compared recursively and only kept if they changed
    - keys removed in ``new`` are reported as ``None``
    - list values are skipped in both directions
    """

    diff: Record = {}

    for key, value in new.items():
        if is_array(value):
            continue

        if is_record(value):
            previous = old.get(key)
            if is_record(previous):
                nested = difference(previous, value)
                if nested:
                    diff[key] = nested
            else:
                diff[key] = dict(value)
            continue

        if key not in old or not values_equal(old[key], value):
            diff[key] = value

    for key, value in old.items():
        if is_array(value):
            continue
        if key not in new:
            diff[key] = None

    return diff


def values_equal(left: object, right: object) -> bool:
    """Deep value equality that does not conflate booleans with numbers."""

    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if is_record(left) and is_record(right):
        if left.keys() != right.keys():
            return False
        return all(values_equal(left[key], right[key]) for key in left)
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        if len(left) != len(right):
            return False
        return all(values_equal(a, b) for a, b in zip(left, right, strict=True))
    return left == right
