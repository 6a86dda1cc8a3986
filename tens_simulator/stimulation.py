# tens_simulator/stimulation.py
import logging

from .api_models import TensParameters, SimulationResult
from .constants import (
    DISCOMFORT_WEIGHTS, ACTIVATION_WEIGHTS, MODE_PROFILES,
    COMFORTABLE_THRESHOLD, MODERATE_COMFORT_THRESHOLD, COMFORT_MESSAGES,
)
from .normalization import normalize, clamp01

logger = logging.getLogger(__name__)


def classify_comfort(comfort_level: int) -> str:
    """Map a 0-100 comfort level onto its UI message tier."""
    if comfort_level >= COMFORTABLE_THRESHOLD:
        return COMFORT_MESSAGES["comfortable"]
    if comfort_level >= MODERATE_COMFORT_THRESHOLD:
        return COMFORT_MESSAGES["moderate"]
    return COMFORT_MESSAGES["uncomfortable"]


def simulate_tens(params: TensParameters) -> SimulationResult:
    """
    Estimate perceived comfort and sensory/motor activation for a set of TENS parameters.

    Discomfort grows with intensity and pulse width (charge per pulse) and as frequency falls
    out of the high-frequency gating range. Activation grows with intensity, frequency and
    pulse width. Each mode then shifts the curves:
    - conventional: comfort bias at moderate intensity
    - acupuncture: lower comfort ceiling, more activation per unit intensity
    - burst: comfort and activation both above conventional
    - modulated: conventional plus a small comfort bonus

    Args:
        params: Stimulation parameters (out-of-range values are clamped)

    Returns:
        SimulationResult with integer comfort/activation levels in [0, 100]
    """
    norm = normalize(params)
    profile = MODE_PROFILES[params.mode.value]
    effective_intensity = norm.intensity_norm * profile["activation_gain"]

    raw_discomfort = (
        DISCOMFORT_WEIGHTS["intensity"] * effective_intensity +
        DISCOMFORT_WEIGHTS["pulse"] * norm.pulse_norm +
        DISCOMFORT_WEIGHTS["low_frequency"] * (1.0 - norm.freq_norm)
    )
    adjusted_discomfort = clamp01(raw_discomfort - profile["comfort_bias"])
    comfort_fraction = min(1.0 - adjusted_discomfort, profile["comfort_ceiling"])
    comfort_level = int(round(clamp01(comfort_fraction) * 100))

    raw_activation = (
        ACTIVATION_WEIGHTS["intensity"] * effective_intensity +
        ACTIVATION_WEIGHTS["frequency"] * norm.freq_norm +
        ACTIVATION_WEIGHTS["pulse"] * norm.pulse_norm
    )
    activation_level = int(round(clamp01(raw_activation + profile["activation_boost"]) * 100))

    logger.debug(
        "TENS %s: intensity=%.3f freq=%.3f pulse=%.3f -> comfort=%d activation=%d",
        params.mode.value, norm.intensity_norm, norm.freq_norm, norm.pulse_norm,
        comfort_level, activation_level,
    )

    return SimulationResult(
        comfort_level=comfort_level,
        activation_level=activation_level,
        comfort_message=classify_comfort(comfort_level),
    )
