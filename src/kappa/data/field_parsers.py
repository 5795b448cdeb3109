"""Parse-or-default adapters for loosely structured quest fields.

Quest payloads come from an import pipeline that stores list fields either as
native JSON lists or as JSON-encoded strings, and not always correctly. Every
adapter here returns a usable value no matter what it is given and appends a
``FieldIssue`` describing anything it had to discard. Nothing downstream of
the catalog parses or swallows errors on its own.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import List, Tuple

from kappa.core.types import ITEM_CATEGORIES, ItemCategory, Severity
from kappa.domain.defs import ANY_LOCATION, QuestObjectiveDef, RequiredItemDef

logger = logging.getLogger(__name__)

_MAP_NORMALIZATIONS = {
    "night factory": "Factory",
    "factory day": "Factory",
    "factory night": "Factory",
    "the lab": "The Lab",
    "lab": "The Lab",
    "laboratory": "The Lab",
    "ground zero": "Ground Zero",
    "streets of tarkov": "Streets of Tarkov",
    "lighthouse": "Lighthouse",
    "shoreline": "Shoreline",
    "customs": "Customs",
    "woods": "Woods",
    "reserve": "Reserve",
    "interchange": "Interchange",
}


@dataclass(frozen=True, slots=True)
class FieldIssue:
    severity: Severity
    code: str
    message: str
    context: dict[str, str]


def format_issue(issue: FieldIssue) -> str:
    context = " ".join(f"{key}={value}" for key, value in issue.context.items())
    suffix = f" ({context})" if context else ""
    return f"[{issue.severity}] {issue.code}: {issue.message}{suffix}"


def _record(issues: List[FieldIssue], code: str, message: str, quest_id: str, field_path: str) -> None:
    issue = FieldIssue(
        severity="WARN",
        code=code,
        message=message,
        context={"quest_id": quest_id, "field_path": field_path},
    )
    issues.append(issue)
    logger.warning(format_issue(issue))


def _decode_list(
    raw: object, quest_id: str, field_path: str, issues: List[FieldIssue]
) -> list[object] | None:
    """Return ``raw`` as a list, or None when it is unusable.

    Absent values (``None``, blank strings, a JSON ``null``) are an empty list.
    """
    if raw is None:
        return []
    if isinstance(raw, str):
        if not raw.strip():
            return []
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as exc:
            _record(issues, "MALFORMED_FIELD", f"Field is not valid JSON: {exc.msg}.", quest_id, field_path)
            return None
        if raw is None:
            return []
    if not isinstance(raw, list):
        _record(issues, "MALFORMED_FIELD", "Field must be a list.", quest_id, field_path)
        return None
    return raw


def parse_prerequisites(
    raw: object, quest_id: str, issues: List[FieldIssue]
) -> Tuple[Tuple[str, ...], bool]:
    """Return ``(prerequisite_ids, valid)``.

    An absent field means the quest has no prerequisites. A malformed field
    also yields no prerequisites but is flagged invalid so callers can tell a
    root quest from one whose gating could not be read.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return (), True
    entries = _decode_list(raw, quest_id, "prerequisiteQuests", issues)
    if entries is None:
        return (), False
    prerequisite_ids: List[str] = []
    for index, entry in enumerate(entries):
        if isinstance(entry, dict):
            entry = entry.get("id")
        if not isinstance(entry, str) or not entry:
            _record(
                issues,
                "INVALID_PREREQUISITE",
                "Prerequisite entry must be a quest id string.",
                quest_id,
                f"prerequisiteQuests[{index}]",
            )
            continue
        if entry not in prerequisite_ids:
            prerequisite_ids.append(entry)
    return tuple(prerequisite_ids), True


def _infer_category(item: dict[str, object]) -> ItemCategory | None:
    category = item.get("category")
    if isinstance(category, str) and category in ITEM_CATEGORIES:
        return category  # type: ignore[return-value]
    item_type = item.get("type")
    name = item.get("name") if isinstance(item.get("name"), str) else ""
    if item_type == "key":
        return "keys"
    if item_type == "plantItem":
        if "Marker" in name or "MS2000" in name:
            return "markers"
        if "Jammer" in name or "SJ" in name:
            return "jammers"
        if "Camera" in name or "WI-FI" in name:
            return "cameras"
    return None


def parse_required_items(
    raw: object, quest_id: str, issues: List[FieldIssue]
) -> Tuple[RequiredItemDef, ...]:
    entries = _decode_list(raw, quest_id, "requiredItems", issues)
    if entries is None:
        return ()
    items: List[RequiredItemDef] = []
    for index, entry in enumerate(entries):
        field_path = f"requiredItems[{index}]"
        if not isinstance(entry, dict) or not isinstance(entry.get("name"), str):
            _record(issues, "INVALID_REQUIRED_ITEM", "Required item must be an object with a name.", quest_id, field_path)
            continue
        category = _infer_category(entry)
        if category is None:
            _record(issues, "UNKNOWN_ITEM_CATEGORY", "Required item has no recognized category.", quest_id, field_path)
            continue
        count = entry.get("count", 1)
        if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
            count = 1
        display_name = entry.get("displayName")
        items.append(
            RequiredItemDef(
                category=category,
                name=entry["name"],  # type: ignore[arg-type]
                count=count,
                display_name=display_name if isinstance(display_name, str) else None,
            )
        )
    return tuple(items)


def parse_objectives(
    raw: object, quest_id: str, issues: List[FieldIssue]
) -> Tuple[QuestObjectiveDef, ...]:
    entries = _decode_list(raw, quest_id, "objectives", issues)
    if entries is None:
        return ()
    objectives: List[QuestObjectiveDef] = []
    for entry in entries:
        if isinstance(entry, str):
            objectives.append(QuestObjectiveDef(text=entry))
        elif isinstance(entry, dict):
            text = entry.get("description") or entry.get("text") or entry.get("name")
            if not isinstance(text, str):
                text = json.dumps(entry, sort_keys=True)
            objectives.append(QuestObjectiveDef(text=text, data=dict(entry)))
        elif entry is not None:
            objectives.append(QuestObjectiveDef(text=str(entry)))
    return tuple(objectives)


def parse_level(raw: object, quest_id: str, issues: List[FieldIssue]) -> int:
    if raw is None:
        return 1
    if isinstance(raw, bool) or not isinstance(raw, int):
        _record(issues, "INVALID_LEVEL", "Level must be an integer; defaulting to 1.", quest_id, "level")
        return 1
    return max(1, raw)


def normalize_map_name(raw: object) -> str:
    if not isinstance(raw, str) or not raw.strip():
        return ANY_LOCATION
    name = raw.strip()
    lowered = name.lower()
    if "factory" in lowered:
        return "Factory"
    return _MAP_NORMALIZATIONS.get(lowered, name)
