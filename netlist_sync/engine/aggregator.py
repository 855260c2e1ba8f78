"""Order-independent union of parsed prefixes."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Iterator

from .parser import NetworkPrefix


class PrefixSet:
    """Deduplicated collection of canonical prefixes.

    Iteration is always in ascending canonical order, so the contents do not
    depend on which source contributed an entry first.
    """

    def __init__(self, prefixes: Iterable[NetworkPrefix] = ()) -> None:
        self._items: set[NetworkPrefix] = set()
        self.update(prefixes)

    @classmethod
    def merge(cls, *sources: Iterable[NetworkPrefix]) -> "PrefixSet":
        merged = cls()
        for source in sources:
            merged.update(source)
        return merged

    def add(self, prefix: NetworkPrefix) -> None:
        self._items.add(prefix)

    def update(self, prefixes: Iterable[NetworkPrefix]) -> int:
        """Add every prefix and return how many entries were consumed."""

        consumed = 0
        for prefix in prefixes:
            self._items.add(prefix)
            consumed += 1
        return consumed

    def families(self) -> dict[str, int]:
        counts = Counter(f"ipv{prefix.family}" for prefix in self._items)
        return {"ipv4": counts["ipv4"], "ipv6": counts["ipv6"]}

    def __contains__(self, prefix: object) -> bool:
        return prefix in self._items

    def __iter__(self) -> Iterator[NetworkPrefix]:
        return iter(sorted(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PrefixSet):
            return NotImplemented
        return self._items == other._items

    def __repr__(self) -> str:
        return f"PrefixSet({len(self._items)} prefixes)"


__all__ = ["PrefixSet"]
