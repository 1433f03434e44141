"""Node metadata for the assembled tree.

The tree itself is plain data (``dict``, ``list`` and scalars).  Everything
the assembler needs to know about a container lives in a :class:`NodeInfo`
kept beside the tree, never on it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ArrayKind(Enum):
    STANDARD = "standard"  # rows of objects
    SIMPLE = "simple"      # bare strings from ``*`` items
    FREEFORM = "freeform"  # {"type": ..., "value": ...} records


@dataclass(slots=True)
class NodeInfo:
    parent: Any = None               # containing dict/list, None for the root
    name: str | None = None          # terminal key segment that created it
    kind: ArrayKind | None = None    # arrays only; fixed once set
