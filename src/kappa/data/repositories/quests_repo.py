"""Repository for the quest catalog."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Sequence

from kappa.data import paths
from kappa.data.errors import DataValidationError
from kappa.data.field_parsers import (
    FieldIssue,
    format_issue,
    normalize_map_name,
    parse_level,
    parse_objectives,
    parse_prerequisites,
    parse_required_items,
)
from kappa.data.repositories.base import RepositoryBase
from kappa.domain.defs import QuestDef

logger = logging.getLogger(__name__)

_EXTRA_FIELDS = ("notes", "images", "shoppingList", "gunsmithShoppingList")


class QuestsRepository(RepositoryBase[QuestDef]):
    """Loads the immutable quest catalog for a session.

    The catalog is read from ``quests.json`` unless ``records`` is given, in
    which case those plain-data records are used as-is. Malformed optional
    fields are normalized (see ``kappa.data.field_parsers``) and reported
    through ``issues()`` instead of failing the load.
    """

    def __init__(
        self,
        base_path: Path | str | None = None,
        *,
        records: Sequence[object] | None = None,
        filename: str = paths.QUESTS_FILENAME,
    ) -> None:
        super().__init__(filename, base_path)
        self._records = list(records) if records is not None else None
        self._issues: List[FieldIssue] = []

    def _load_raw(self) -> object:
        if self._records is not None:
            return self._records
        return super()._load_raw()

    def _build(self, raw: object) -> Dict[str, QuestDef]:
        entries = self._require_quest_list(raw)
        self._issues = []
        definitions: Dict[str, QuestDef] = {}
        for index, payload in enumerate(entries):
            if not isinstance(payload, dict):
                self._record_error("INVALID_QUEST", "Quest entry must be an object.", f"quests[{index}]")
                continue
            quest_id = payload.get("id")
            if not isinstance(quest_id, str) or not quest_id:
                self._record_error("MISSING_QUEST_ID", "Quest entry has no string id.", f"quests[{index}]")
                continue
            if quest_id in definitions:
                self._record_error(
                    "DUPLICATE_QUEST_ID", "Duplicate quest id; keeping the first.", f"quests[{index}]"
                )
                continue
            definitions[quest_id] = self._build_quest(quest_id, payload)
        if self._issues:
            logger.info("Quest catalog loaded with %d field issue(s).", len(self._issues))
        logger.debug("Loaded %d quests.", len(definitions))
        return definitions

    def _build_quest(self, quest_id: str, payload: dict[str, object]) -> QuestDef:
        name = payload.get("name")
        prerequisite_ids, prerequisites_valid = parse_prerequisites(
            payload.get("prerequisiteQuests"), quest_id, self._issues
        )
        wiki_link = payload.get("wikiLink")
        return QuestDef(
            id=quest_id,
            name=name if isinstance(name, str) else quest_id,
            trader=self._parse_trader(payload.get("trader")),
            level=parse_level(payload.get("level"), quest_id, self._issues),
            map_name=normalize_map_name(payload.get("mapName")),
            prerequisite_ids=prerequisite_ids,
            prerequisites_valid=prerequisites_valid,
            required_for_kappa=payload.get("requiredForKappa") is True,
            required_items=parse_required_items(payload.get("requiredItems"), quest_id, self._issues),
            objectives=parse_objectives(payload.get("objectives"), quest_id, self._issues),
            wiki_link=wiki_link if isinstance(wiki_link, str) else None,
            extras={key: payload[key] for key in _EXTRA_FIELDS if key in payload},
        )

    def issues(self) -> list[FieldIssue]:
        """Return diagnostics collected while loading the catalog."""
        self._ensure_loaded()
        return list(self._issues)

    def kappa_quests(self) -> list[QuestDef]:
        """Return the Kappa-required quests in catalog order."""
        return [quest for quest in self.all() if quest.required_for_kappa]

    def _record_error(self, code: str, message: str, field_path: str) -> None:
        issue = FieldIssue(severity="ERROR", code=code, message=message, context={"field_path": field_path})
        self._issues.append(issue)
        logger.warning(format_issue(issue))

    @staticmethod
    def _parse_trader(value: object) -> str:
        if isinstance(value, dict):
            value = value.get("name")
        return value.strip() if isinstance(value, str) else ""

    @staticmethod
    def _require_quest_list(raw: object) -> list[object]:
        if isinstance(raw, dict):
            raw = raw.get("quests")
        if not isinstance(raw, list):
            raise DataValidationError("quests.json must be a list of quests or an object with a 'quests' list.")
        return raw
