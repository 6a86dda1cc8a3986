# tens_simulator/tissue_risk.py
import logging
from typing import List, Tuple

from .api_models import (
    TensParameters, TensMode, TissueConfig, TissueInclusion, InclusionType,
    TissueType, RiskLevel, RiskResult,
)
from .constants import (
    LOAD_WEIGHTS,
    METAL_IMPLANT_MULTIPLIER, METAL_IMPLANT_WEIGHT, DEFAULT_METAL_IMPLANT_SPAN, METAL_ALERT_INTENSITY,
    SHALLOW_BONE_DEPTH, BONE_INTENSITY_THRESHOLD, SHALLOW_BONE_WEIGHT,
    THIN_FAT_THICKNESS, FAT_INTENSITY_THRESHOLD, THIN_FAT_WEIGHT,
    THIN_SKIN_THICKNESS, SKIN_INTENSITY_THRESHOLD, THIN_SKIN_WEIGHT,
    OVERLOAD_FREQUENCY_THRESHOLD, OVERLOAD_PULSE_THRESHOLD, OVERLOAD_WEIGHT,
    BURST_SOFT_TISSUE_PENALTY,
    THICK_MUSCLE_THICKNESS, MUSCLE_RELIEF_MAX_INTENSITY, MUSCLE_RELIEF,
    THICK_FAT_THICKNESS, THICK_FAT_MAX_INTENSITY,
    ACUPUNCTURE_MUSCLE_THICKNESS, ACUPUNCTURE_MUSCLE_RELIEF,
    METAL_INCLUSION_WEIGHT, METAL_INCLUSION_SHALLOW_BONUS, BONE_INCLUSION_WEIGHT,
    PENETRATION_BASE, PENETRATION_INTENSITY_GAIN, PENETRATION_PULSE_GAIN,
    PENETRATION_FAT_ATTENUATION, PENETRATION_BOUNDS,
    ELECTRODE_MIDPOINT, LATERAL_SPREAD_BASE, LATERAL_SPREAD_INTENSITY_GAIN,
    MODERATE_RISK_THRESHOLD, HIGH_RISK_THRESHOLD, RISK_MESSAGES,
)
from .normalization import normalize, clamp, clamp01

logger = logging.getLogger(__name__)


def classify_risk_level(risk_score: int) -> RiskLevel:
    """Partition a 0-100 score into low (<40), moderate (40-69) and high (>=70)."""
    if risk_score >= HIGH_RISK_THRESHOLD:
        return RiskLevel.HIGH
    if risk_score >= MODERATE_RISK_THRESHOLD:
        return RiskLevel.MODERATE
    return RiskLevel.LOW


def penetration_zone(intensity_norm: float, pulse_norm: float, fat_thickness: float) -> Tuple[float, float]:
    """
    Effective stimulation zone between the electrodes.

    Returns:
        (depth_reach, lateral_half_width): maximum normalized depth reached by the current and
        half-width of the lateral zone centered on the electrode midpoint.
    """
    depth_reach = clamp(
        PENETRATION_BASE
        + PENETRATION_INTENSITY_GAIN * intensity_norm
        + PENETRATION_PULSE_GAIN * pulse_norm
        - PENETRATION_FAT_ATTENUATION * fat_thickness,
        *PENETRATION_BOUNDS,
    )
    lateral_half_width = LATERAL_SPREAD_BASE + LATERAL_SPREAD_INTENSITY_GAIN * intensity_norm
    return depth_reach, lateral_half_width


def inclusion_in_zone(inclusion: TissueInclusion, depth_reach: float, lateral_half_width: float) -> bool:
    depth = clamp01(inclusion.depth)
    half_span = clamp01(inclusion.span) / 2.0
    position = clamp01(inclusion.position)
    if depth > depth_reach:
        return False
    # Lateral extents overlap
    return abs(position - ELECTRODE_MIDPOINT) - half_span <= lateral_half_width


def _inclusion_risk(inclusion: TissueInclusion, intensity_norm: float) -> float:
    span = clamp01(inclusion.span)
    if inclusion.type == InclusionType.METAL_IMPLANT:
        shallow_bonus = 1.0 + METAL_INCLUSION_SHALLOW_BONUS * (1.0 - clamp01(inclusion.depth))
        return METAL_INCLUSION_WEIGHT * intensity_norm * span * shallow_bonus
    return BONE_INCLUSION_WEIGHT * intensity_norm * span


def _inclusion_message(inclusion: TissueInclusion) -> str:
    key = "metal_inclusion" if inclusion.type == InclusionType.METAL_IMPLANT else "bone_inclusion"
    return RISK_MESSAGES[key].format(
        depth=int(round(clamp01(inclusion.depth) * 100)),
        position=int(round(clamp01(inclusion.position) * 100)),
    )


def simulate_tissue_risk(params: TensParameters, tissue: TissueConfig) -> RiskResult:
    """
    Score the safety risk of applying the given parameters to a tissue configuration.

    The score is a weighted electrical/thermal load (intensity dominant, then pulse width,
    then frequency) plus additive tissue terms, multiplied by a fixed penalty when a metal
    implant is present, then clamped to [0, 100]. Every tissue term is non-negative and
    non-decreasing in each stimulation parameter, so the score never drops when intensity,
    pulse width or frequency rise.

    Messages are emitted in a fixed order: metal implant, shallow bone, thin fat, thick fat
    (informational, no weight), thin skin, frequency/pulse overload, burst on soft tissue,
    qualifying inclusions (insertion order), muscle cushioning, acupuncture on thick muscle.

    Args:
        params: Stimulation parameters
        tissue: Tissue snapshot (never mutated; out-of-range fractions are clamped)

    Returns:
        RiskResult. A tissue with risk simulation disabled yields (0, low, ()).
    """
    if not tissue.enable_risk_simulation:
        return RiskResult(risk_score=0, risk_level=RiskLevel.LOW, messages=())

    norm = normalize(params)
    intensity = norm.intensity_norm

    skin = clamp01(tissue.skin_thickness)
    fat = clamp01(tissue.fat_thickness)
    muscle = clamp01(tissue.muscle_thickness)
    bone_depth = clamp01(tissue.bone_depth)

    messages: List[str] = []

    load = (
        LOAD_WEIGHTS["intensity"] * intensity +
        LOAD_WEIGHTS["pulse"] * norm.pulse_norm +
        LOAD_WEIGHTS["frequency"] * norm.freq_norm
    )
    tissue_terms = 0.0

    if tissue.has_metal_implant:
        span = tissue.metal_implant_span
        span = DEFAULT_METAL_IMPLANT_SPAN if span is None else clamp01(span)
        tissue_terms += METAL_IMPLANT_WEIGHT * intensity * span
        messages.append(RISK_MESSAGES["metal_alert" if intensity > METAL_ALERT_INTENSITY else "metal_caution"])

    if bone_depth < SHALLOW_BONE_DEPTH and intensity > BONE_INTENSITY_THRESHOLD:
        excess = (intensity - BONE_INTENSITY_THRESHOLD) / (1.0 - BONE_INTENSITY_THRESHOLD)
        tissue_terms += SHALLOW_BONE_WEIGHT * (1.0 - bone_depth) * excess
        messages.append(RISK_MESSAGES["shallow_bone"])

    if fat < THIN_FAT_THICKNESS and intensity > FAT_INTENSITY_THRESHOLD:
        excess = (intensity - FAT_INTENSITY_THRESHOLD) / (1.0 - FAT_INTENSITY_THRESHOLD)
        tissue_terms += THIN_FAT_WEIGHT * (1.0 - fat) * excess
        messages.append(RISK_MESSAGES["thin_fat"])

    if fat > THICK_FAT_THICKNESS and intensity < THICK_FAT_MAX_INTENSITY:
        messages.append(RISK_MESSAGES["thick_fat"])

    if skin < THIN_SKIN_THICKNESS and intensity > SKIN_INTENSITY_THRESHOLD:
        tissue_terms += THIN_SKIN_WEIGHT * (1.0 - skin) * intensity
        messages.append(RISK_MESSAGES["thin_skin"])

    if norm.freq_norm > OVERLOAD_FREQUENCY_THRESHOLD and norm.pulse_norm > OVERLOAD_PULSE_THRESHOLD:
        tissue_terms += OVERLOAD_WEIGHT * norm.freq_norm * norm.pulse_norm
        messages.append(RISK_MESSAGES["overload"])

    if params.mode == TensMode.BURST and tissue.tissue_type == TissueType.SOFT:
        tissue_terms += BURST_SOFT_TISSUE_PENALTY
        messages.append(RISK_MESSAGES["burst_soft"])

    depth_reach, lateral_half_width = penetration_zone(intensity, norm.pulse_norm, fat)
    for inclusion in tissue.inclusions:
        if not inclusion_in_zone(inclusion, depth_reach, lateral_half_width):
            continue
        contribution = _inclusion_risk(inclusion, intensity)
        if contribution > 0:
            tissue_terms += contribution
            messages.append(_inclusion_message(inclusion))

    # Thick muscle spreads current at moderate intensity; the relief vanishes at high intensity
    relief = 0.0
    if muscle > THICK_MUSCLE_THICKNESS and intensity < MUSCLE_RELIEF_MAX_INTENSITY:
        relief += MUSCLE_RELIEF
        messages.append(RISK_MESSAGES["muscle_relief"])

    # Depends on mode and tissue only, so it is constant along every parameter sweep
    if params.mode == TensMode.ACUPUNCTURE and muscle > ACUPUNCTURE_MUSCLE_THICKNESS:
        relief += ACUPUNCTURE_MUSCLE_RELIEF
        messages.append(RISK_MESSAGES["acupuncture_muscle"])

    combined = load + tissue_terms - relief
    if tissue.has_metal_implant:
        combined *= METAL_IMPLANT_MULTIPLIER

    risk_score = int(round(clamp(combined, 0.0, 100.0)))
    risk_level = classify_risk_level(risk_score)

    if risk_level == RiskLevel.LOW and not messages:
        messages.append(RISK_MESSAGES["safe"])

    logger.debug(
        "Tissue risk for '%s': load=%.2f tissue_terms=%.2f relief=%.1f -> score=%d (%s)",
        tissue.id, load, tissue_terms, relief, risk_score, risk_level.value,
    )

    return RiskResult(risk_score=risk_score, risk_level=risk_level, messages=messages)
