"""DrillStringComponent - One tubular or tool in the drill string.

Components are ordered top-down by list position, not by depth. Volumes are
derived on access from OD, ID and length.

Kind-specific data (mud motor ratings, bit design, tool joint dimensions) is
carried in an optional `details` value whose type must match the component
kind, so each kind only carries the fields that apply to it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from wellbore_geometry.constants import (
    BitConfig,
    DrillStringConfig,
    MotorConfig,
    RoughnessConfig,
    ToolJointConfig,
)
from wellbore_geometry.core.volume_calculator import VolumeCalculator
from wellbore_geometry.model.jet_set import JetSetCollection


class ComponentType(Enum):
    """Kind of drill-string component."""

    BIT = "Bit"
    MOTOR = "Motor"
    MWD = "MWD"
    LWD = "LWD"
    PWD = "PWD"
    PWO = "PWO"
    DRILL_PIPE = "DrillPipe"
    HWDP = "HWDP"
    DC = "DC"
    JAR = "Jar"
    ACCELERATOR = "Accelerator"
    STABILIZER = "Stabilizer"
    NEAR_BIT = "NearBit"
    BIT_SUB = "BitSub"
    XO = "XO"
    CASING = "Casing"
    LINER = "Liner"
    SETTING_TOOL = "SettingTool"

    @property
    def label(self) -> str:
        """Display label, e.g. "Drill Pipe"."""
        return DrillStringConfig.LABELS[self.value]

    @property
    def is_unique(self) -> bool:
        """At most one per string (Bit, Motor and the MWD family)."""
        return self.value in DrillStringConfig.UNIQUE_KINDS

    @classmethod
    def from_label(cls, label: str) -> "ComponentType":
        """Parse an enum value or display label ("DC", "Drill Collar", "drill pipe", ...).

        Raises:
            ValueError: If the label names no known component type.
        """
        key = label.replace(" ", "").replace("_", "").lower()
        for member in cls:
            if key in (member.value.lower(), member.label.replace(" ", "").lower()):
                return member
        raise ValueError(f"Unknown component type: {label!r}")


# =============================================================================
# Kind-specific details
# =============================================================================


@dataclass
class MudMotorDetails:
    """Positive displacement motor ratings.

    Attributes:
        motor_type: "BentHousing" or "Straight"
        stall_pressure_psi: Differential pressure at which the motor stalls
        best_flow_rate_gpm: Rated flow rate
        max_torque_ft_lbs: Maximum output torque
    """

    motor_type: str = MotorConfig.DEFAULT_TYPE
    stall_pressure_psi: float = 0.0
    best_flow_rate_gpm: float = 0.0
    max_torque_ft_lbs: float = 0.0
    kind: str = "MudMotor"

    def would_stall(self, supply_pressure_psi: float, annular_pressure_loss_psi: float) -> bool:
        """True if the pressure left at the motor is below its stall pressure."""
        effective_psi = supply_pressure_psi - annular_pressure_loss_psi
        return effective_psi < self.stall_pressure_psi


@dataclass
class PdcBitDetails:
    """Bit design data.

    Attributes:
        bit_type: "PDC" or "RollerCone"
        gauge_in: Gauge diameter (in)
        nozzle_count: Nozzles the bit body has ports for
        aggressiveness: Cutting aggressiveness on a 1-5 scale
        jets: Nozzle groups actually installed
    """

    bit_type: str = BitConfig.DEFAULT_TYPE
    gauge_in: float = 0.0
    nozzle_count: int = 0
    aggressiveness: int = BitConfig.DEFAULT_AGGRESSIVENESS
    jets: JetSetCollection = field(default_factory=JetSetCollection)
    kind: str = "PdcBit"


@dataclass
class ToolJointDetails:
    """Tool joint dimensions for jointed pipe. All dimensions are optional."""

    od: Optional[float] = None
    id_: Optional[float] = None
    length: Optional[float] = None
    joint_length: Optional[float] = None
    weight: Optional[float] = None
    grade: str = ToolJointConfig.DEFAULT_GRADE
    has_float_sub: bool = False
    kind: str = "ToolJoint"

    def _filled_count(self) -> int:
        return sum(v is not None for v in (self.od, self.id_, self.length, self.joint_length))

    @property
    def is_fully_configured(self) -> bool:
        return self._filled_count() == 4

    @property
    def is_partially_configured(self) -> bool:
        return 0 < self._filled_count() < 4


ComponentDetails = MudMotorDetails | PdcBitDetails | ToolJointDetails

# Which kinds may carry which details
DETAIL_KINDS: dict[type, frozenset[ComponentType]] = {
    MudMotorDetails: frozenset({ComponentType.MOTOR}),
    PdcBitDetails: frozenset({ComponentType.BIT}),
    ToolJointDetails: frozenset({ComponentType.DRILL_PIPE, ComponentType.HWDP}),
}


def _details_from_dict(data: Optional[dict[str, Any]]) -> Optional[ComponentDetails]:
    if data is None:
        return None
    values = dict(data)
    kind = values.pop("kind")
    if kind == "MudMotor":
        return MudMotorDetails(**values)
    if kind == "PdcBit":
        jets = JetSetCollection.from_dict(data=values.pop("jets", {}))
        return PdcBitDetails(jets=jets, **values)
    if kind == "ToolJoint":
        return ToolJointDetails(**values)
    raise ValueError(f"Unknown component details kind: {kind!r}")


def _details_to_dict(details: Optional[ComponentDetails]) -> Optional[dict[str, Any]]:
    if details is None:
        return None
    if isinstance(details, PdcBitDetails):
        return {
            "kind": details.kind,
            "bit_type": details.bit_type,
            "gauge_in": details.gauge_in,
            "nozzle_count": details.nozzle_count,
            "aggressiveness": details.aggressiveness,
            "jets": details.jets.to_dict(),
        }
    return dict(vars(details))


@dataclass
class DrillStringComponent:
    """A drill-string component.

    Attributes:
        id: Position id, 1..N top-down after renumbering
        component_type: Kind of component
        name: Display name, e.g. "Drill Pipe 2"
        length: Length (ft)
        od: Outer diameter (in)
        id_: Inner diameter (in)
        weight_per_ft: Nominal weight (lb/ft), optional
        details: Kind-specific data, type must match component_type

    Example:
        dp = DrillStringComponent(id=1, component_type=ComponentType.DRILL_PIPE,
                                  name="Drill Pipe 1", length=9000.0, od=5.0, id_=4.276)
    """

    id: int
    component_type: ComponentType
    name: str = ""
    length: Optional[float] = None
    od: Optional[float] = None
    id_: Optional[float] = None
    weight_per_ft: Optional[float] = None
    details: Optional[ComponentDetails] = None

    def __post_init__(self) -> None:
        """Reject details that do not belong to this kind."""
        self.set_details(self.details)

    def set_details(self, details: Optional[ComponentDetails]) -> None:
        """Attach kind-specific details.

        Raises:
            ValueError: If the details type does not belong to this component kind.
        """
        if details is not None and self.component_type not in DETAIL_KINDS[type(details)]:
            raise ValueError(
                f"{type(details).__name__} cannot be attached to a {self.component_type.value} component"
            )
        self.details = details

    def set_component_type(self, component_type: ComponentType) -> None:
        """Change kind. Details that do not fit the new kind are dropped."""
        self.component_type = component_type
        if self.details is not None and component_type not in DETAIL_KINDS[type(self.details)]:
            self.details = None

    @property
    def internal_volume(self) -> float:
        """Fluid capacity inside the component (bbl)."""
        return VolumeCalculator.internal_volume(id_=self.id_, length=self.length)

    @property
    def displacement_volume(self) -> float:
        """Steel displacement of the component wall (bbl)."""
        return VolumeCalculator.displacement_volume(od=self.od, id_=self.id_, length=self.length)

    @property
    def hydraulic_roughness_in(self) -> float:
        return RoughnessConfig.COMPONENT_IN.get(self.component_type.value, RoughnessConfig.COMPONENT_DEFAULT_IN)

    @property
    def is_unique_kind(self) -> bool:
        return self.component_type.is_unique

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "component_type": self.component_type.value,
            "name": self.name,
            "length": self.length,
            "od": self.od,
            "id_": self.id_,
            "weight_per_ft": self.weight_per_ft,
            "details": _details_to_dict(self.details),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DrillStringComponent":
        """Create DrillStringComponent from dictionary."""
        return cls(
            id=data["id"],
            component_type=ComponentType(data["component_type"]),
            name=data.get("name", ""),
            length=data.get("length"),
            od=data.get("od"),
            id_=data.get("id_"),
            weight_per_ft=data.get("weight_per_ft"),
            details=_details_from_dict(data.get("details")),
        )

    def __repr__(self) -> str:
        return f"DrillStringComponent({self.id}, {self.name!r}, {self.length} ft, od={self.od}, id={self.id_})"
