from enum import Enum
from typing import Any, Dict, Optional, Tuple
from pydantic import BaseModel, ConfigDict, model_validator
from core.exceptions import ValidationError


class ViewKind(str, Enum):
    OVERVIEW = "overview"
    TASKS = "tasks"
    FOCUS = "focus"
    JOURNAL = "journal"
    HABIT = "habit"


# Older clients call the overview tab "all"
VIEW_ALIASES = {"all": ViewKind.OVERVIEW}


class ModePolicy(BaseModel):
    """How one view kind is labelled and shaded."""
    model_config = ConfigDict(frozen=True)

    label: str
    thresholds: Tuple[int, int, int, int]


DEFAULT_THRESHOLDS = (1, 3, 5, 8)

MODE_POLICIES: Dict[ViewKind, ModePolicy] = {
    ViewKind.OVERVIEW: ModePolicy(label="Score", thresholds=DEFAULT_THRESHOLDS),
    ViewKind.TASKS: ModePolicy(label="Tasks", thresholds=DEFAULT_THRESHOLDS),
    ViewKind.FOCUS: ModePolicy(label="Minutes", thresholds=(15, 30, 60, 120)),
    ViewKind.JOURNAL: ModePolicy(label="Entries", thresholds=(1, 1, 2, 3)),
    ViewKind.HABIT: ModePolicy(label="Days", thresholds=(1, 1, 1, 1)),
}

# Per-record weights when records are folded into the overview score
OVERVIEW_TASK_WEIGHT = 1
OVERVIEW_JOURNAL_WEIGHT = 3
OVERVIEW_FOCUS_MINUTES_PER_POINT = 15
OVERVIEW_HABIT_WEIGHT = 1


class ViewMode(BaseModel):
    """
    Heatmap view selection. A habit view always carries the habit id;
    every other kind never does.
    """
    model_config = ConfigDict(frozen=True)

    kind: ViewKind
    habit_id: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def habit_id_only_for_habits(cls, data: Any):
        if isinstance(data, dict):
            kind = data.get("kind")
            if kind in (ViewKind.HABIT, ViewKind.HABIT.value):
                if not data.get("habit_id"):
                    raise ValidationError("habit view requires a habit_id",
                                          details={"mode": ViewKind.HABIT.value})
            elif data.get("habit_id") is not None:
                data = {**data, "habit_id": None}
        return data

    @classmethod
    def overview(cls) -> "ViewMode":
        return cls(kind=ViewKind.OVERVIEW)

    @classmethod
    def tasks(cls) -> "ViewMode":
        return cls(kind=ViewKind.TASKS)

    @classmethod
    def focus(cls) -> "ViewMode":
        return cls(kind=ViewKind.FOCUS)

    @classmethod
    def journal(cls) -> "ViewMode":
        return cls(kind=ViewKind.JOURNAL)

    @classmethod
    def habit(cls, habit_id: str) -> "ViewMode":
        return cls(kind=ViewKind.HABIT, habit_id=habit_id)

    @classmethod
    def parse(cls, value, habit_id: Optional[str] = None) -> "ViewMode":
        """
        Build a mode from its wire name.

        Unknown names raise ValidationError instead of falling back to
        overview.
        """
        if isinstance(value, ViewMode):
            return value
        if isinstance(value, ViewKind):
            return cls(kind=value, habit_id=habit_id)
        name = str(value or "").strip().lower()
        kind = VIEW_ALIASES.get(name)
        if kind is None:
            try:
                kind = ViewKind(name)
            except ValueError:
                raise ValidationError(
                    f"Unknown view mode: {value!r}",
                    details={"mode": value,
                             "allowed": [k.value for k in ViewKind]})
        return cls(kind=kind, habit_id=habit_id)

    @property
    def policy(self) -> ModePolicy:
        return MODE_POLICIES[self.kind]

    @property
    def label(self) -> str:
        return self.policy.label

    @property
    def thresholds(self) -> Tuple[int, int, int, int]:
        return self.policy.thresholds

    def __str__(self) -> str:
        if self.kind == ViewKind.HABIT:
            return f"habit:{self.habit_id}"
        return self.kind.value
