"""Compare two mappings key by key."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Generic, Hashable, Mapping, TypeVar

K = TypeVar("K", bound=Hashable)
V1 = TypeVar("V1")
V2 = TypeVar("V2")


class Comparison(Enum):
    """Outcome of comparing two values stored under the same key."""

    EQUIVALENT = "equivalent"
    MODIFIED = "modified"


@dataclass
class MapDiff(Generic[K]):
    """Keys sorted into added, removed, modified and unchanged."""

    added: set[K] = field(default_factory=set)
    removed: set[K] = field(default_factory=set)
    modified: set[K] = field(default_factory=set)
    unchanged: set[K] = field(default_factory=set)


def diff_maps(
    old_map: Mapping[K, V1],
    new_map: Mapping[K, V2],
    compare_values: Callable[[V1, V2], Comparison],
) -> MapDiff[K]:
    """Categorise the keys of two mappings; shared keys are judged by ``compare_values``."""
    old_keys = set(old_map)
    new_keys = set(new_map)
    diff: MapDiff[K] = MapDiff(added=new_keys - old_keys, removed=old_keys - new_keys)
    for key in old_keys & new_keys:
        if compare_values(old_map[key], new_map[key]) is Comparison.MODIFIED:
            diff.modified.add(key)
        else:
            diff.unchanged.add(key)
    return diff