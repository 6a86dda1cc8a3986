# tens_simulator/normalization.py
from typing import NamedTuple

import numpy as np

from .api_models import TensParameters
from .constants import MAX_INTENSITY_MA, MAX_FREQUENCY_HZ, MAX_PULSE_WIDTH_US


class NormalizedParameters(NamedTuple):
    intensity_norm: float
    freq_norm: float
    pulse_norm: float


def clamp(value: float, low: float, high: float) -> float:
    """
    Clamp a value into [low, high]. NaN collapses to `low` and infinities to the nearest bound,
    so the result is always a finite float.
    """
    value = np.nan_to_num(float(value), nan=low, posinf=high, neginf=low)
    return float(np.clip(value, low, high))


def clamp01(value: float) -> float:
    return clamp(value, 0.0, 1.0)


def normalize(params: TensParameters) -> NormalizedParameters:
    """
    Map clinical-unit parameters onto dimensionless [0, 1] factors using the fixed reference maxima.
    Both the comfort simulator and the risk assessor go through this function.
    """
    return NormalizedParameters(
        intensity_norm=clamp01(params.intensity_ma / MAX_INTENSITY_MA),
        freq_norm=clamp01(params.frequency_hz / MAX_FREQUENCY_HZ),
        pulse_norm=clamp01(params.pulse_width_us / MAX_PULSE_WIDTH_US),
    )
