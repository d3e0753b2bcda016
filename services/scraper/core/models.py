"""
Data model for collection schedules.
"""

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional


class WasteType(str, Enum):
    RESIDUAL = "residual"
    ORGANIC = "organic"
    RECYCLABLE = "recyclable"
    PAPER = "paper"
    BULKY = "bulky"

    @property
    def label(self) -> str:
        """German name as printed on the city's waste calendar."""
        return WASTE_TYPE_LABELS[self]


# Order matters: rows are matched against these labels top to bottom
WASTE_TYPE_LABELS: Dict[WasteType, str] = {
    WasteType.RESIDUAL: "Restmüll",
    WasteType.ORGANIC: "Bioabfall",
    WasteType.RECYCLABLE: "Wertstoff",
    WasteType.PAPER: "Papier",
    WasteType.BULKY: "Sperrmüllabholung",
}


@dataclass(frozen=True)
class CollectionEvent:
    """One pickup of one waste type on one day."""

    date: datetime.date
    waste_type: WasteType


@dataclass(frozen=True)
class ScheduleQuery:
    street: str
    street_number: str
    excluded: FrozenSet[WasteType] = frozenset()

    @property
    def included(self) -> List[WasteType]:
        return [waste_type for waste_type in WasteType if waste_type not in self.excluded]


@dataclass
class WasteData:
    """
    Everything that can be read from the official page for one address.

    Periodic waste types carry a list of dates, bulky waste at most one
    (it is collected on request).
    """

    residual: List[datetime.date] = field(default_factory=list)
    organic: List[datetime.date] = field(default_factory=list)
    recyclable: List[datetime.date] = field(default_factory=list)
    paper: List[datetime.date] = field(default_factory=list)
    bulky: Optional[datetime.date] = None

    def dates_for(self, waste_type: WasteType) -> List[datetime.date]:
        if waste_type is WasteType.BULKY:
            return [self.bulky] if self.bulky else []
        return getattr(self, waste_type.value)

    def is_empty(self) -> bool:
        return not any(self.dates_for(waste_type) for waste_type in WasteType)

    def to_events(self) -> List[CollectionEvent]:
        """All pickups as de-duplicated events in chronological order."""
        events = {
            CollectionEvent(date=collection_date, waste_type=waste_type)
            for waste_type in WasteType
            for collection_date in self.dates_for(waste_type)
        }
        return sorted(events, key=lambda event: (event.date, list(WasteType).index(event.waste_type)))
