from __future__ import annotations

from typing import List


class AmbiguousMatchError(LookupError):
    """More than one catalog entry shares the same (size, diameter, name)."""

    def __init__(self, descriptor, entry_ids: List[str]):
        self.descriptor = descriptor
        self.entry_ids = entry_ids
        super().__init__(
            f"{len(entry_ids)} catalog entries match {descriptor.name!r} {descriptor.size!r}"
            f" (diameter={descriptor.diameter!r}): {', '.join(entry_ids)}"
        )


class SnapshotError(ValueError):
    """A snapshot file could not be read or does not fit the data model."""
