"""Quest definition data structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Tuple

from kappa.core.types import ItemCategory

ANY_LOCATION = "Any Location"


@dataclass(frozen=True, slots=True)
class RequiredItemDef:
    category: ItemCategory
    name: str
    count: int = 1
    display_name: str | None = None

    @property
    def label(self) -> str:
        return self.display_name or self.name.replace("_", " ")


@dataclass(frozen=True, slots=True)
class QuestObjectiveDef:
    """Single objective step; ``data`` keeps the structured payload when present."""

    text: str
    data: Mapping[str, object] | None = field(default=None, hash=False)


@dataclass(frozen=True, slots=True)
class QuestDef:
    """Immutable catalog entry for one quest."""

    id: str
    name: str
    trader: str
    level: int = 1
    map_name: str = ANY_LOCATION
    prerequisite_ids: Tuple[str, ...] = ()
    prerequisites_valid: bool = True
    required_for_kappa: bool = False
    required_items: Tuple[RequiredItemDef, ...] = ()
    objectives: Tuple[QuestObjectiveDef, ...] = ()
    wiki_link: str | None = None
    extras: Mapping[str, object] = field(default_factory=dict, hash=False, compare=False)
