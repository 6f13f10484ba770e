"""Configuration constants for Wellbore Geometry.

All thresholds and tolerances are centralized here for easy tuning.
Units are oilfield imperial throughout: depths and lengths in feet,
diameters in inches, volumes in barrels (bbl), angles in degrees.

Classes:
    VolumeConfig: Capacity conversion factor
    DiameterConfig: Zero epsilon and reasonable OD/ID ranges
    DepthConfig: Continuity, gap and total-depth tolerances
    OverrideConfig: Casing-override matching tolerances
    WashoutConfig: Open hole washout limits and warning levels
    VolumeSanityConfig: Volume warning and error thresholds
    RoughnessConfig: Hydraulic roughness per section and component kind
    SurveyConfig: Minimum curvature and survey import limits
    DrillStringConfig: Component labels, unique kinds, naming limits
    JetConfig: Standard jet sizes and recommended TFA ranges
    ToolJointConfig: Tool joint grades
    MotorConfig: Mud motor types
    BitConfig: Bit types and aggressiveness scale
"""


class VolumeConfig:
    """Capacity conversion factor."""

    # bbl/ft = ID(in)^2 / 1029.4
    BBL_DIVISOR = 1029.4


class DiameterConfig:
    """Zero epsilon and reasonable physical ranges for diameters (inches)."""

    ZERO_EPSILON_IN = 0.001  # Anything at or below this is treated as empty

    OD_MIN_IN = 2.0
    OD_MAX_IN = 60.0
    ID_MIN_IN = 1.5
    ID_MAX_IN = 55.0

    # Values above this were most likely typed in thousandths of an inch
    UNIT_SLIP_THRESHOLD = 1000.0
    UNIT_SLIP_DIVISOR = 1000.0


assert DiameterConfig.OD_MIN_IN < DiameterConfig.OD_MAX_IN
assert DiameterConfig.ID_MIN_IN < DiameterConfig.ID_MAX_IN


class DepthConfig:
    """Depth tolerances (feet)."""

    CONTINUITY_TOLERANCE_FT = 0.01  # Max |bottom[n] - top[n+1]| before a break is reported
    GAP_TOLERANCE_FT = 0.01  # Gaps above this raise a warning
    TOTAL_MD_TOLERANCE_FT = 0.001  # Last bottom vs. total MD, and bottom beyond TD
    STRING_DEPTH_TOLERANCE_FT = 0.01  # Drill string vs. well MD
    ON_BOTTOM_TOLERANCE_FT = 0.1  # Bit-to-bottom counts as on bottom below this


class OverrideConfig:
    """Casing-override matching tolerances.

    A Casing/Liner that starts where the previous Casing/Liner starts, with the
    same OD and a deeper bottom, is read as an extension of the previous one.
    """

    TOP_TOLERANCE_FT = 0.01
    OD_TOLERANCE_IN = 0.001


class WashoutConfig:
    """Open hole washout limits (percent over nominal hole diameter)."""

    MIN_PCT = 0.0
    MAX_PCT = 100.0
    HIGH_PCT = 30.0  # Warning: may affect cementing
    EXCESSIVE_PCT = 50.0  # Warning: verify measurement


assert WashoutConfig.MIN_PCT < WashoutConfig.HIGH_PCT < WashoutConfig.EXCESSIVE_PCT < WashoutConfig.MAX_PCT


class VolumeSanityConfig:
    """Section volume thresholds (bbl)."""

    WARNING_BBL = 10_000.0  # Likely a unit or diameter mistake
    ERROR_BBL = 100_000.0  # Certainly a diameter mistake


assert VolumeSanityConfig.WARNING_BBL < VolumeSanityConfig.ERROR_BBL


class RoughnessConfig:
    """Hydraulic roughness (inches)."""

    OPEN_HOLE_IN = 0.006
    CASED_HOLE_IN = 0.0006

    COMPONENT_DEFAULT_IN = 0.0006
    # Keyed by ComponentType value
    COMPONENT_IN = {
        "DrillPipe": 0.0006,
        "HWDP": 0.0008,
        "DC": 0.001,
        "Jar": 0.0005,
        "Accelerator": 0.0006,
    }


class SurveyConfig:
    """Minimum curvature and survey limits."""

    STRAIGHT_HOLE_EPSILON_RAD = 1e-8  # Below this the ratio factor is 1
    RATE_PER_FT = 100.0  # Rates are reported in degrees per 100 ft
    TVD_TOLERANCE_FT = 0.01  # TVD may exceed MD by at most this much

    MIN_HOLE_ANGLE_DEG = 0.0
    MAX_HOLE_ANGLE_DEG = 93.0
    MIN_AZIMUTH_DEG = 0.0
    MAX_AZIMUTH_DEG = 360.0


class DrillStringConfig:
    """Component labels, unique kinds and naming limits."""

    # Keyed by ComponentType value
    LABELS = {
        "Bit": "Bit",
        "Motor": "Motor",
        "MWD": "MWD",
        "LWD": "LWD",
        "PWD": "PWD",
        "PWO": "PWO",
        "DrillPipe": "Drill Pipe",
        "HWDP": "HWDP",
        "DC": "Drill Collar",
        "Jar": "Jar",
        "Accelerator": "Accelerator",
        "Stabilizer": "Stabilizer",
        "NearBit": "Near Bit",
        "BitSub": "Bit Sub",
        "XO": "Crossover",
        "Casing": "Casing",
        "Liner": "Liner",
        "SettingTool": "Setting Tool",
    }

    # At most one per string, named by bare label
    UNIQUE_KINDS = frozenset({"Bit", "Motor", "MWD", "LWD", "PWD", "PWO"})

    MAX_NAME_LENGTH = 100


assert DrillStringConfig.UNIQUE_KINDS <= set(DrillStringConfig.LABELS)


class JetConfig:
    """Jet nozzle sizes (32nds of an inch) and TFA recommendations."""

    STANDARD_SIZES_32NDS = (8, 9, 10, 11, 12, 13, 14, 15, 16, 17, 18, 19, 20)
    MAX_JETS = 20
    MAX_DIAMETER_32NDS = 32  # 1 inch
    TFA_DECIMALS = 3

    REFERENCE_NOZZLE_32NDS = 12  # For equivalent-nozzle conversion
    SUGGESTION_COUNT = 3
    DEFAULT_SUGGESTION_JETS = 3

    # Bit size (in) -> (min, max) recommended TFA (in^2); nearest bit size wins
    RECOMMENDED_TFA_RANGES = {
        6.0: (0.25, 0.45),
        6.5: (0.30, 0.50),
        7.875: (0.35, 0.60),
        8.5: (0.40, 0.70),
        9.875: (0.50, 0.85),
        12.25: (0.70, 1.20),
        17.5: (1.20, 2.00),
    }


assert JetConfig.REFERENCE_NOZZLE_32NDS in JetConfig.STANDARD_SIZES_32NDS
assert all(low < high for low, high in JetConfig.RECOMMENDED_TFA_RANGES.values())


class ToolJointConfig:
    """Tool joint grades."""

    STANDARD_GRADES = ("E-75", "X-95", "G-105", "S-135", "V-150")
    DEFAULT_GRADE = "S-135"


class MotorConfig:
    """Mud motor types."""

    TYPES = ("BentHousing", "Straight")
    DEFAULT_TYPE = "BentHousing"


class BitConfig:
    """Bit types and aggressiveness scale."""

    TYPES = ("PDC", "RollerCone")
    DEFAULT_TYPE = "PDC"
    MIN_AGGRESSIVENESS = 1
    MAX_AGGRESSIVENESS = 5
    DEFAULT_AGGRESSIVENESS = 3
