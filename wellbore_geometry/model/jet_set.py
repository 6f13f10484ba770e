"""JetSet - Bit nozzle groups and their total flow area.

A JetSet is a group of identical nozzles. Its TFA is only defined when both
the nozzle count and the diameter are present and positive; otherwise it
stays None ("not calculated") rather than silently becoming 0.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from wellbore_geometry.core.jet_calculator import JetCalculator

logger = logging.getLogger(__name__)


@dataclass
class JetSet:
    """Group of identical bit nozzles.

    Attributes:
        id: Position in its collection, 1..N
        number_of_jets: Nozzle count, None until entered
        jet_diameter_32nds: Nozzle diameter in 32nds of an inch, None until entered
        tfa: Derived total flow area (in²), None unless both inputs are set
    """

    id: int = 0
    number_of_jets: Optional[int] = None
    jet_diameter_32nds: Optional[int] = None
    tfa: Optional[float] = field(default=None, init=False)

    def __post_init__(self) -> None:
        self.recalculate()

    def recalculate(self) -> None:
        self.tfa = JetCalculator.total_flow_area(
            number_of_jets=self.number_of_jets,
            jet_diameter_32nds=self.jet_diameter_32nds,
        )

    def update(self, number_of_jets: Optional[int], jet_diameter_32nds: Optional[int]) -> None:
        self.number_of_jets = number_of_jets
        self.jet_diameter_32nds = jet_diameter_32nds
        self.recalculate()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "number_of_jets": self.number_of_jets,
            "jet_diameter_32nds": self.jet_diameter_32nds,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JetSet":
        return cls(
            id=data.get("id", 0),
            number_of_jets=data.get("number_of_jets"),
            jet_diameter_32nds=data.get("jet_diameter_32nds"),
        )


@dataclass
class JetSetCollection:
    """All nozzle groups on one bit."""

    jet_sets: list[JetSet] = field(default_factory=list)

    @property
    def total_tfa(self) -> float:
        """Sum of the calculated TFAs (in²), sets without a TFA are skipped."""
        total = sum(s.tfa for s in self.jet_sets if s.tfa is not None)
        return round(total, 3)

    @property
    def total_jets(self) -> int:
        return sum(s.number_of_jets or 0 for s in self.jet_sets)

    def add(self, jet_set: JetSet) -> JetSet:
        """Append a set with the next free id and a fresh TFA."""
        jet_set.id = max((s.id for s in self.jet_sets), default=0) + 1
        jet_set.recalculate()
        self.jet_sets.append(jet_set)
        return jet_set

    def remove(self, jet_set_id: int) -> None:
        self.jet_sets = [s for s in self.jet_sets if s.id != jet_set_id]
        self.reindex()

    def update(
        self,
        jet_set_id: int,
        number_of_jets: Optional[int],
        jet_diameter_32nds: Optional[int],
    ) -> None:
        """Change one set's inputs. Unknown ids are ignored."""
        for jet_set in self.jet_sets:
            if jet_set.id == jet_set_id:
                jet_set.update(number_of_jets=number_of_jets, jet_diameter_32nds=jet_diameter_32nds)
                return
        logger.warning(f"Jet set {jet_set_id} not found, update ignored")

    def reindex(self) -> None:
        for index, jet_set in enumerate(self.jet_sets):
            jet_set.id = index + 1

    def to_dict(self) -> dict[str, Any]:
        return {"jet_sets": [s.to_dict() for s in self.jet_sets]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JetSetCollection":
        return cls(jet_sets=[JetSet.from_dict(data=s) for s in data.get("jet_sets", [])])

    def __len__(self) -> int:
        return len(self.jet_sets)
