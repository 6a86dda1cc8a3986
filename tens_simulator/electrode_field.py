# tens_simulator/electrode_field.py
import logging
from typing import List

from .api_models import (
    TensParameters, TissueConfig, ElectrodeConfig, ElectrodePlacement, FieldResult, PlacementEntry,
)
from .constants import (
    ELECTRODE_DISTANCE_RANGE_CM, ELECTRODE_SIZE_RANGE_CM, REFERENCE_ELECTRODE_DISTANCE_CM,
    FIELD_DEPTH_WEIGHTS, FIELD_DEPTH_DISTANCE_GAIN, FIELD_DEPTH_SCALE_MM, FIELD_FAT_PENALTY_MM,
    ACTIVATION_DEPTH_BOUNDS_MM, FIELD_AREA_DISTANCE_GAIN, FIELD_AREA_BASE_FRACTION,
    FIELD_SPREAD_WEIGHTS, IMPLANT_SPREAD_REDUCTION,
    FIBER_PROFILES, FIBER_DISTANCE_SPAN_CM, FIBER_DISTANCE_SHIFT,
    SHORT_DISTANCE_CM, LONG_DISTANCE_CM, DISTANCE_EXPLANATIONS,
    ELECTRODE_PLACEMENT_PRESETS,
)
from .normalization import normalize, clamp, clamp01

logger = logging.getLogger(__name__)

DEFAULT_ELECTRODE_CONFIG = ElectrodeConfig()


def placement_entries() -> List[PlacementEntry]:
    return [
        PlacementEntry(placement=ElectrodePlacement(name), **data)
        for name, data in ELECTRODE_PLACEMENT_PRESETS.items()
    ]


def apply_placement(electrodes: ElectrodeConfig, placement) -> ElectrodeConfig:
    """Move the pair to the distance of a placement preset, keeping the electrode size."""
    placement = ElectrodePlacement(placement)
    distance = ELECTRODE_PLACEMENT_PRESETS[placement.value]["distance_cm"]
    return electrodes.model_copy(update={"placement": placement, "distance_cm": distance})


def explain_distance(distance_cm: float, activation_depth_mm: float, activated_area_cm2: float) -> str:
    if distance_cm < SHORT_DISTANCE_CM:
        template = DISTANCE_EXPLANATIONS["short"]
    elif distance_cm < LONG_DISTANCE_CM:
        template = DISTANCE_EXPLANATIONS["medium"]
    else:
        template = DISTANCE_EXPLANATIONS["long"]
    return template.format(distance=distance_cm, depth=activation_depth_mm, area=activated_area_cm2)


def simulate_field(params: TensParameters, tissue: TissueConfig, electrodes: ElectrodeConfig) -> FieldResult:
    """
    Estimate where the current between an electrode pair recruits nerve fibers.

    Wider spacing drives the field deeper and over a larger area, and shifts recruitment
    from sensory toward motor fibers by (d - 4) / 8 of the shift weight. Fat attenuates the
    activation depth; a metal implant narrows the field spread. Sensory and motor activation
    both scale with intensity, so zero current activates nothing.

    Args:
        params: Stimulation parameters (out-of-range values are clamped)
        tissue: Tissue snapshot (never mutated)
        electrodes: Electrode pair; distance is clamped to 2-12 cm and size to 2-5 cm

    Returns:
        FieldResult with activation depth, area, spread, fiber split and a distance explanation
    """
    norm = normalize(params)
    distance = clamp(electrodes.distance_cm, *ELECTRODE_DISTANCE_RANGE_CM)
    size = clamp(electrodes.size_cm, *ELECTRODE_SIZE_RANGE_CM)
    offset = distance - REFERENCE_ELECTRODE_DISTANCE_CM
    fat = clamp01(tissue.fat_thickness)

    charge = FIELD_DEPTH_WEIGHTS["intensity"] * norm.intensity_norm + FIELD_DEPTH_WEIGHTS["pulse"] * norm.pulse_norm
    depth_mm = clamp(
        charge * (1.0 + FIELD_DEPTH_DISTANCE_GAIN * offset) * FIELD_DEPTH_SCALE_MM - FIELD_FAT_PENALTY_MM * fat,
        *ACTIVATION_DEPTH_BOUNDS_MM,
    )

    area_cm2 = (
        size ** 2
        * (1.0 + FIELD_AREA_DISTANCE_GAIN * offset)
        * (FIELD_AREA_BASE_FRACTION + (1.0 - FIELD_AREA_BASE_FRACTION) * norm.intensity_norm)
    )

    spread_cm = FIELD_SPREAD_WEIGHTS["distance"] * distance + FIELD_SPREAD_WEIGHTS["size"] * size
    if tissue.has_metal_implant and tissue.metal_implant_span is not None:
        spread_cm *= 1.0 - IMPLANT_SPREAD_REDUCTION * clamp01(tissue.metal_implant_span)

    profile = FIBER_PROFILES[params.mode.value]
    sensory = (
        profile["sensory_base"]
        + profile["sensory_frequency"] * norm.freq_norm
        - profile["sensory_distance"] * distance / ELECTRODE_DISTANCE_RANGE_CM[1]
    )
    motor = (
        profile["motor_base"]
        + profile["motor_intensity"] * norm.intensity_norm
        + profile["motor_pulse"] * norm.pulse_norm
    )
    shift = FIBER_DISTANCE_SHIFT * offset / FIBER_DISTANCE_SPAN_CM
    sensory_activation = int(round(clamp(sensory - shift, 0.0, 100.0) * norm.intensity_norm))
    motor_activation = int(round(clamp(motor + shift, 0.0, 100.0) * norm.intensity_norm))

    logger.debug(
        "Field at %.1f cm (%.1f cm pads): depth=%.1fmm area=%.1fcm2 sensory=%d motor=%d",
        distance, size, depth_mm, area_cm2, sensory_activation, motor_activation,
    )

    return FieldResult(
        activation_depth_mm=round(depth_mm, 2),
        activated_area_cm2=round(area_cm2, 2),
        field_spread_cm=round(spread_cm, 2),
        sensory_activation=sensory_activation,
        motor_activation=motor_activation,
        distance_explanation=explain_distance(distance, depth_mm, area_cm2),
    )
