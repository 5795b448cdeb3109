"""Domain definition exports."""

from .quest_def import ANY_LOCATION, QuestDef, QuestObjectiveDef, RequiredItemDef

__all__ = [
    "ANY_LOCATION",
    "QuestDef",
    "QuestObjectiveDef",
    "RequiredItemDef",
]
