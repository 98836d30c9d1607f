"""
Header normalization for tabular sources.

Turns the raw header cells of a dataset into a unique, non-blank, ordered
list of display names. Blank or missing headers become ``UnnamedColumn``;
repeated names get a numeric suffix (``_2``, ``_3``, ...).

Module Input:
    - Raw header cells in source order (strings, numbers or None)

Module Output:
    - HeaderNormalization with final names and the collided base names
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Any

UNNAMED_COLUMN = "UnnamedColumn"


@dataclass(frozen=True)
class HeaderNormalization:
    names: List[str]
    collisions: List[str] = field(default_factory=list)

    @property
    def has_collisions(self) -> bool:
        return bool(self.collisions)


def _candidate_name(raw: Optional[Any]) -> str:
    if raw is None:
        return UNNAMED_COLUMN
    text = str(raw).strip()
    return text or UNNAMED_COLUMN


def normalize_headers(names: Iterable[Optional[Any]]) -> HeaderNormalization:
    """
    Produce unique display names for raw header cells.

    Names are processed left to right. When a candidate is already taken
    the base name is recorded once in ``collisions`` and the first free
    ``<base>_<n>`` (n >= 2) is used instead. Comparison is case-sensitive.

    Args:
        names: Raw header cells in source order

    Returns:
        HeaderNormalization: Final names (same length and order as input)
        and the base names that collided, in order of first collision

    Example:
        normalize_headers(["id", "", "id", None])
        -> names ["id", "UnnamedColumn", "id_2", "UnnamedColumn_2"],
           collisions ["id", "UnnamedColumn"]
    """
    final: List[str] = []
    taken: set[str] = set()
    collisions: List[str] = []

    for raw in names:
        candidate = _candidate_name(raw)
        name = candidate
        if name in taken:
            if candidate not in collisions:
                collisions.append(candidate)
            suffix = 2
            name = f"{candidate}_{suffix}"
            while name in taken:
                suffix += 1
                name = f"{candidate}_{suffix}"
        taken.add(name)
        final.append(name)

    return HeaderNormalization(names=final, collisions=collisions)
