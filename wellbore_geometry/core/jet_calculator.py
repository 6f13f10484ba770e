"""Bit nozzle hydraulics: total flow area and nozzle suggestions.

Nozzle diameters are given in 32nds of an inch, as stamped on the jets.
TFA is the summed circular area of all nozzles in square inches.
"""

from dataclasses import dataclass
from math import pi
from typing import Optional

from wellbore_geometry.constants import JetConfig


@dataclass(frozen=True)
class JetSuggestion:
    """One candidate nozzle configuration for a target TFA."""

    number_of_jets: int
    jet_diameter_32nds: int
    tfa: float
    difference_from_target: float

    @property
    def size_label(self) -> str:
        return f'{self.jet_diameter_32nds}/32"'


@dataclass(frozen=True)
class EquivalentNozzles:
    """A TFA expressed as a count of reference nozzles."""

    tfa_total: float
    equivalent_count: float
    reference_size_32nds: int
    reference_area: float


class JetCalculator:
    """Static methods for nozzle flow area."""

    @staticmethod
    def total_flow_area(
        number_of_jets: Optional[int],
        jet_diameter_32nds: Optional[int],
    ) -> Optional[float]:
        """Calculate TFA = n * pi * (d / 32 / 2)^2.

        Args:
            number_of_jets: Nozzle count
            jet_diameter_32nds: Nozzle diameter in 32nds of an inch

        Returns:
            TFA in square inches rounded to 3 decimals, or None if either
            input is missing or not positive.
        """
        if number_of_jets is None or jet_diameter_32nds is None:
            return None
        if number_of_jets <= 0 or jet_diameter_32nds <= 0:
            return None
        radius_in = jet_diameter_32nds / 32.0 / 2.0
        return round(number_of_jets * pi * radius_in**2, JetConfig.TFA_DECIMALS)

    @staticmethod
    def standard_sizes() -> tuple[int, ...]:
        return JetConfig.STANDARD_SIZES_32NDS

    @staticmethod
    def size_options() -> list[tuple[int, str, str]]:
        """Standard sizes as (value, label, decimal inches) for pick lists."""
        return [(size, f'{size}/32"', f'{size / 32.0:.3f}"') for size in JetConfig.STANDARD_SIZES_32NDS]

    @staticmethod
    def suggest_configurations(
        target_tfa: float,
        number_of_jets: Optional[int] = JetConfig.DEFAULT_SUGGESTION_JETS,
    ) -> list[JetSuggestion]:
        """Standard nozzle sizes whose TFA is closest to a target.

        Args:
            target_tfa: Desired TFA (in²)
            number_of_jets: Nozzle count to assume

        Returns:
            Up to JetConfig.SUGGESTION_COUNT suggestions, closest first.
            Empty if number_of_jets is missing or not positive.
        """
        if number_of_jets is None or number_of_jets <= 0:
            return []

        suggestions = []
        for size in JetConfig.STANDARD_SIZES_32NDS:
            tfa = JetCalculator.total_flow_area(number_of_jets=number_of_jets, jet_diameter_32nds=size)
            if tfa is not None:
                suggestions.append(
                    JetSuggestion(
                        number_of_jets=number_of_jets,
                        jet_diameter_32nds=size,
                        tfa=tfa,
                        difference_from_target=abs(tfa - target_tfa),
                    )
                )
        suggestions.sort(key=lambda s: s.difference_from_target)
        return suggestions[: JetConfig.SUGGESTION_COUNT]

    @staticmethod
    def recommended_tfa_range(bit_size_in: float) -> tuple[float, float]:
        """Recommended (min, max) TFA for the tabulated bit size nearest to bit_size_in."""
        nearest = min(JetConfig.RECOMMENDED_TFA_RANGES, key=lambda size: abs(size - bit_size_in))
        return JetConfig.RECOMMENDED_TFA_RANGES[nearest]

    @staticmethod
    def equivalent_nozzles(total_tfa: float) -> EquivalentNozzles:
        """Express a TFA as a number of 12/32" nozzles (2 decimals)."""
        reference = JetConfig.REFERENCE_NOZZLE_32NDS
        area = JetCalculator.total_flow_area(number_of_jets=1, jet_diameter_32nds=reference) or 0.0
        count = round(total_tfa / area, 2) if area > 0 else 0.0
        return EquivalentNozzles(
            tfa_total=total_tfa,
            equivalent_count=count,
            reference_size_32nds=reference,
            reference_area=area,
        )
