"""Operational cost inputs used by the costing policies."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


WEEKDAYS = ('monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday')


class CostType(str, Enum):
    FIXED = "fixed"
    VARIABLE = "variable"


@dataclass(frozen=True)
class OperationalCost:
    """A monthly business expense (rent, energy, products spent...)."""
    description: str
    value: float
    type: CostType = CostType.FIXED

    def __post_init__(self):
        if not isinstance(self.type, CostType):
            object.__setattr__(self, 'type', CostType(str(self.type).strip().lower()))


@dataclass(frozen=True)
class OperationalHours:
    """
    Opening hours per weekday as "HH:MM" strings.

    A day with neither start nor end set is closed.
    """
    start: dict[str, Optional[str]] = field(default_factory=dict)
    end: dict[str, Optional[str]] = field(default_factory=dict)

    def is_open(self, day: str) -> bool:
        return bool(self.start.get(day) or self.end.get(day))

    def span(self, day: str) -> tuple[Optional[str], Optional[str]]:
        return self.start.get(day), self.end.get(day)
