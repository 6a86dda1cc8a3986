# tens_simulator/api_models.py
from enum import Enum
from typing import Annotated, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .constants import (
    DEFAULT_FREQUENCY_HZ, DEFAULT_PULSE_WIDTH_US, DEFAULT_INTENSITY_MA,
    FREQUENCY_RANGE_HZ, PULSE_WIDTH_RANGE_US, INTENSITY_RANGE_MA,
    ELECTRODE_DISTANCE_RANGE_CM, DEFAULT_ELECTRODE_DISTANCE_CM, DEFAULT_ELECTRODE_SIZE_CM,
)


class TensMode(str, Enum):
    CONVENTIONAL = "conventional"
    ACUPUNCTURE = "acupuncture"
    BURST = "burst"
    MODULATED = "modulated"


class InclusionType(str, Enum):
    BONE = "bone"
    METAL_IMPLANT = "metal_implant"


class TissueType(str, Enum):
    SOFT = "soft"
    MUSCULAR = "muscular"
    MIXED = "mixed"


class RiskLevel(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class TensParameters(BaseModel):
    """
    Electrical stimulation parameters for a single evaluation.

    Values outside the clinical ranges are accepted here; the normalizer clamps them.
    """
    model_config = ConfigDict(frozen=True)

    frequency_hz: float = Field(DEFAULT_FREQUENCY_HZ, description="Pulse repetition rate. Clinical range 1-200 Hz.")
    pulse_width_us: float = Field(DEFAULT_PULSE_WIDTH_US, description="Pulse width. Clinical range 50-400 us.")
    intensity_ma: float = Field(DEFAULT_INTENSITY_MA, description="Current amplitude. Clinical range 0-80 mA.")
    mode: TensMode = Field(TensMode.CONVENTIONAL)


class TissueInclusion(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    type: InclusionType = Field(InclusionType.BONE)
    depth: float = Field(0.5, description="0 = skin surface, 1 = deepest layer")
    span: float = Field(0.3, description="Relative width of the inclusion")
    position: float = Field(0.5, description="Lateral placement: 0 = left electrode, 1 = right electrode")


class TissueConfig(BaseModel):
    """
    Layered anatomical cross-section. Thicknesses are relative proportions, not millimeters,
    and are independent of each other (they need not sum to 1).
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    description: Optional[str] = None

    skin_thickness: float
    fat_thickness: float
    muscle_thickness: float
    bone_depth: float = Field(..., description="Normalized depth of the bone interface from the skin surface")

    has_metal_implant: bool = False
    metal_implant_depth: Optional[float] = None
    metal_implant_span: Optional[float] = None

    inclusions: Tuple[TissueInclusion, ...] = ()
    tissue_type: TissueType = TissueType.MIXED
    enable_risk_simulation: bool = True

    @model_validator(mode="after")
    def _check_implant_geometry(self):
        if self.has_metal_implant and (self.metal_implant_depth is None or self.metal_implant_span is None):
            raise ValueError("metal_implant_depth and metal_implant_span are required when has_metal_implant is true")
        return self


class ElectrodePlacement(str, Enum):
    DEFAULT = "default"
    MUSCLE_TARGET = "muscle_target"
    SUPERFICIAL = "superficial"
    SPREAD = "spread"


class ElectrodeConfig(BaseModel):
    """Circular electrode pair. Out-of-range sizes and distances are clamped by the field engine."""
    model_config = ConfigDict(frozen=True)

    distance_cm: float = Field(DEFAULT_ELECTRODE_DISTANCE_CM, description="Center-to-center distance. Range 2-12 cm.")
    size_cm: float = Field(DEFAULT_ELECTRODE_SIZE_CM, description="Electrode diameter. Range 2-5 cm.")
    placement: ElectrodePlacement = Field(ElectrodePlacement.DEFAULT)


class PlacementEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    placement: ElectrodePlacement
    label: str
    description: str = ""
    distance_cm: float


# --- Results (immutable snapshots) ---
class SimulationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    comfort_level: int = Field(..., ge=0, le=100)
    activation_level: int = Field(..., ge=0, le=100)
    comfort_message: str


class RiskResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    risk_score: int = Field(..., ge=0, le=100)
    risk_level: RiskLevel
    messages: Tuple[str, ...] = ()


class FieldResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    activation_depth_mm: float = Field(..., description="Estimated depth of neural activation")
    activated_area_cm2: float
    field_spread_cm: float
    sensory_activation: int = Field(..., ge=0, le=100)
    motor_activation: int = Field(..., ge=0, le=100)
    distance_explanation: str


class PresetEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    description: str = ""
    is_custom: bool = False
    config: TissueConfig


# --- Tissue Selection (tagged variant) ---
class PresetSelection(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["preset"] = "preset"
    preset_id: str


class CustomSelection(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["custom"] = "custom"
    config: TissueConfig


Selection = Annotated[Union[PresetSelection, CustomSelection], Field(discriminator="kind")]


# --- Lab Configuration ---
class ParameterRange(BaseModel):
    min: float
    max: float

    @model_validator(mode="after")
    def _check_order(self):
        if self.min > self.max:
            raise ValueError(f"range min ({self.min}) must not exceed max ({self.max})")
        return self


class EnabledControls(BaseModel):
    """Which controls the lab UI exposes. Display flags only; the engine ignores them."""
    frequency: bool = True
    pulse_width: bool = True
    intensity: bool = True
    mode: bool = True
    electrode_distance: bool = True


class TensLabConfig(BaseModel):
    enabled_controls: EnabledControls = Field(default_factory=EnabledControls)
    allowed_modes: List[TensMode] = Field(default_factory=lambda: list(TensMode), min_length=1)

    frequency_range: ParameterRange = Field(default_factory=lambda: ParameterRange(min=FREQUENCY_RANGE_HZ[0], max=FREQUENCY_RANGE_HZ[1]))
    pulse_width_range: ParameterRange = Field(default_factory=lambda: ParameterRange(min=PULSE_WIDTH_RANGE_US[0], max=PULSE_WIDTH_RANGE_US[1]))
    intensity_range: ParameterRange = Field(default_factory=lambda: ParameterRange(min=INTENSITY_RANGE_MA[0], max=INTENSITY_RANGE_MA[1]))
    electrode_distance_range: ParameterRange = Field(default_factory=lambda: ParameterRange(min=ELECTRODE_DISTANCE_RANGE_CM[0], max=ELECTRODE_DISTANCE_RANGE_CM[1]))

    # Display flags for the lab UI
    show_feedback_section: bool = True
    show_risk_section: bool = True
    show_waveform_section: bool = True

    tissue_config_id: Optional[str] = Field(None, description="Saved tissue configuration or preset id for this lab")


# --- Request / Response Payloads ---
class TissueRiskRequest(BaseModel):
    parameters: TensParameters
    tissue: TissueConfig


class LabEvaluationRequest(BaseModel):
    parameters: TensParameters = Field(default_factory=TensParameters)
    electrodes: ElectrodeConfig = Field(default_factory=ElectrodeConfig)
    selection: Optional[Selection] = Field(None, description="Defaults to the lab's tissue_config_id")
    lab_config: Optional[TensLabConfig] = None


class LabEvaluation(BaseModel):
    model_config = ConfigDict(frozen=True)

    parameters: TensParameters
    electrodes: ElectrodeConfig
    tissue: TissueConfig
    simulation: SimulationResult
    risk: RiskResult
    field: FieldResult
