"""
Pytest configuration and shared fixtures for the TENS simulation tests.
"""
import itertools

import pytest

from tens_simulator.api_models import TensParameters, TensMode, TissueConfig, TissueInclusion, InclusionType
from tens_simulator.tissue.presets import DEFAULT_TISSUE_CONFIG


@pytest.fixture
def reference_params():
    """Typical conventional TENS session (lab defaults)."""
    return TensParameters(
        frequency_hz=80,
        pulse_width_us=200,
        intensity_ma=20,
        mode=TensMode.CONVENTIONAL
    )

@pytest.fixture
def strong_params():
    """High-charge parameters near the top of every range."""
    return TensParameters(
        frequency_hz=180,
        pulse_width_us=350,
        intensity_ma=70,
        mode=TensMode.CONVENTIONAL
    )

@pytest.fixture
def default_tissue():
    return DEFAULT_TISSUE_CONFIG

@pytest.fixture
def implant_tissue():
    """Default forearm with a metal implant and shallow bone."""
    return DEFAULT_TISSUE_CONFIG.model_copy(update={
        "id": "implant_case",
        "has_metal_implant": True,
        "metal_implant_depth": 0.5,
        "metal_implant_span": 0.5,
        "bone_depth": 0.2,
    })

@pytest.fixture
def bony_tissue():
    """Thin skin, thin fat, shallow bone, little muscle."""
    return TissueConfig(
        id="custom",
        name="Bony test region",
        skin_thickness=0.10,
        fat_thickness=0.05,
        muscle_thickness=0.20,
        bone_depth=0.30,
        tissue_type="soft",
    )

@pytest.fixture
def inclusion_tissue():
    """Default forearm with a central shallow metal inclusion and a lateral deep bone inclusion."""
    return DEFAULT_TISSUE_CONFIG.model_copy(update={
        "id": "custom",
        "inclusions": (
            TissueInclusion(id="metal-1", type=InclusionType.METAL_IMPLANT, depth=0.3, span=0.4, position=0.5),
            TissueInclusion(id="bone-1", type=InclusionType.BONE, depth=0.85, span=0.2, position=0.9),
        ),
    })

@pytest.fixture
def sequential_ids():
    """Deterministic id factory for inclusion editing."""
    counter = itertools.count(1)
    return lambda: f"inclusion-{next(counter)}"
