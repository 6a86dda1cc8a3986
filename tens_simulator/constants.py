# tens_simulator/constants.py
# --- Parameter Normalization Constants ---
# Reference maxima of the clinical controls. Inputs are divided by these and clamped to [0, 1].
MAX_INTENSITY_MA = 80.0
MAX_FREQUENCY_HZ = 200.0
MAX_PULSE_WIDTH_US = 400.0

# Clinical control ranges (used as default lab ranges)
FREQUENCY_RANGE_HZ = (1.0, 200.0)
PULSE_WIDTH_RANGE_US = (50.0, 400.0)
INTENSITY_RANGE_MA = (0.0, 80.0)
ELECTRODE_DISTANCE_RANGE_CM = (2.0, 12.0)
ELECTRODE_SIZE_RANGE_CM = (2.0, 5.0)

# Default lab parameters
DEFAULT_FREQUENCY_HZ = 80.0
DEFAULT_PULSE_WIDTH_US = 200.0
DEFAULT_INTENSITY_MA = 20.0
DEFAULT_ELECTRODE_DISTANCE_CM = 6.0
DEFAULT_ELECTRODE_SIZE_CM = 4.0

# --- Stimulation (Comfort / Activation) Model ---
DISCOMFORT_WEIGHTS = {
    "intensity": 0.55,
    "pulse": 0.30,
    "low_frequency": 0.15,  # Penalty grows as frequency drops below the gating range
}
ACTIVATION_WEIGHTS = {
    "intensity": 0.60,
    "frequency": 0.25,
    "pulse": 0.15,
}

# Per-mode shaping of the base curves.
#   comfort_bias:      subtracted from discomfort (positive = more comfortable)
#   comfort_ceiling:   upper bound of the comfort fraction
#   activation_gain:   multiplier applied to the intensity term (discomfort and activation)
#   activation_boost:  offset added to the activation fraction
CONVENTIONAL_PROFILE = {
    "comfort_bias": 0.10, "comfort_ceiling": 1.0,
    "activation_gain": 1.0, "activation_boost": 0.05,
}
ACUPUNCTURE_PROFILE = {
    "comfort_bias": -0.05, "comfort_ceiling": 0.85,
    "activation_gain": 1.2, "activation_boost": 0.10,
}
BURST_PROFILE = {
    "comfort_bias": 0.12, "comfort_ceiling": 1.0,
    "activation_gain": 1.0, "activation_boost": 0.15,
}
MODULATED_COMFORT_BONUS = 0.05  # Amplitude modulation delays accommodation
MODULATED_PROFILE = CONVENTIONAL_PROFILE.copy()
MODULATED_PROFILE.update({"comfort_bias": CONVENTIONAL_PROFILE["comfort_bias"] + MODULATED_COMFORT_BONUS})

MODE_PROFILES = {
    "conventional": CONVENTIONAL_PROFILE,
    "acupuncture": ACUPUNCTURE_PROFILE,
    "burst": BURST_PROFILE,
    "modulated": MODULATED_PROFILE,
}

# Comfort tiers (UI-visible)
COMFORTABLE_THRESHOLD = 70
MODERATE_COMFORT_THRESHOLD = 40
COMFORT_MESSAGES = {
    "comfortable": "Comfortable stimulation",
    "moderate": "Intense stimulation (monitor patient comfort)",
    "uncomfortable": "Potentially uncomfortable parameters - adjust intensity or pulse width",
}

# --- Electrode Field Model ---
# Distances are measured against a 4 cm reference pair.
REFERENCE_ELECTRODE_DISTANCE_CM = 4.0

FIELD_DEPTH_WEIGHTS = {"intensity": 0.6, "pulse": 0.4}
FIELD_DEPTH_DISTANCE_GAIN = 0.15  # Per cm beyond the reference distance
FIELD_DEPTH_SCALE_MM = 30.0
FIELD_FAT_PENALTY_MM = 5.0
ACTIVATION_DEPTH_BOUNDS_MM = (2.0, 50.0)

FIELD_AREA_DISTANCE_GAIN = 0.2
FIELD_AREA_BASE_FRACTION = 0.3  # Share of the electrode footprint activated at zero intensity

FIELD_SPREAD_WEIGHTS = {"distance": 0.7, "size": 0.3}
IMPLANT_SPREAD_REDUCTION = 0.2  # Conductive implants pull the field together

# Sensory vs motor fiber recruitment per mode, before the distance shift.
#   sensory = sensory_base + sensory_frequency * f - sensory_distance * d / 12
#   motor   = motor_base + motor_intensity * i + motor_pulse * p
FIBER_PROFILES = {
    "conventional": {
        "sensory_base": 60.0, "sensory_frequency": 30.0, "sensory_distance": 20.0,
        "motor_base": 20.0, "motor_intensity": 30.0, "motor_pulse": 0.0,
    },
    "acupuncture": {
        "sensory_base": 60.0, "sensory_frequency": -20.0, "sensory_distance": 0.0,
        "motor_base": 50.0, "motor_intensity": 40.0, "motor_pulse": 20.0,
    },
    "burst": {
        "sensory_base": 50.0, "sensory_frequency": 20.0, "sensory_distance": 0.0,
        "motor_base": 60.0, "motor_intensity": 30.0, "motor_pulse": 0.0,
    },
    "modulated": {
        "sensory_base": 55.0, "sensory_frequency": 25.0, "sensory_distance": 0.0,
        "motor_base": 35.0, "motor_intensity": 25.0, "motor_pulse": 0.0,
    },
}
FIBER_DISTANCE_SPAN_CM = 8.0
FIBER_DISTANCE_SHIFT = 15.0  # Longer distances move recruitment from sensory to motor fibers

SHORT_DISTANCE_CM = 4.0
LONG_DISTANCE_CM = 8.0
DISTANCE_EXPLANATIONS = {
    "short": ("Short distance ({distance:g} cm): concentrated, superficial field. More cutaneous sensory "
              "activation over a smaller area ({area:.1f} cm2). Suited to localized analgesia."),
    "medium": ("Medium distance ({distance:g} cm): field balanced between surface and depth. Balanced "
               "sensory/motor activation, depth ~{depth:.0f} mm."),
    "long": ("Long distance ({distance:g} cm): wider and deeper field. Larger activated area ({area:.1f} cm2), "
             "may reach deeper motor fibers."),
}

ELECTRODE_PLACEMENT_PRESETS = {
    "default": {
        "label": "Default",
        "description": "Standard placement over the target region",
        "distance_cm": 6.0,
    },
    "muscle_target": {
        "label": "Over target muscle",
        "description": "Electrodes placed directly over the muscle belly",
        "distance_cm": 5.0,
    },
    "superficial": {
        "label": "Superficial",
        "description": "Electrodes close together for cutaneous/sensory activation",
        "distance_cm": 3.0,
    },
    "spread": {
        "label": "Spread",
        "description": "Wider distance for broad coverage and deep activation",
        "distance_cm": 10.0,
    },
}

# --- Tissue Risk Model ---
LOAD_WEIGHTS = {
    "intensity": 50.0,  # Charge per pulse and total charge dominate tissue heating
    "pulse": 25.0,
    "frequency": 10.0,
}

METAL_IMPLANT_MULTIPLIER = 1.5
METAL_IMPLANT_WEIGHT = 20.0
DEFAULT_METAL_IMPLANT_SPAN = 0.5
METAL_ALERT_INTENSITY = 0.6

SHALLOW_BONE_DEPTH = 0.4
BONE_INTENSITY_THRESHOLD = 0.5
SHALLOW_BONE_WEIGHT = 25.0

THIN_FAT_THICKNESS = 0.15
FAT_INTENSITY_THRESHOLD = 0.5
THIN_FAT_WEIGHT = 15.0

THIN_SKIN_THICKNESS = 0.2
SKIN_INTENSITY_THRESHOLD = 0.6
THIN_SKIN_WEIGHT = 15.0

OVERLOAD_FREQUENCY_THRESHOLD = 0.8
OVERLOAD_PULSE_THRESHOLD = 0.7
OVERLOAD_WEIGHT = 20.0

BURST_SOFT_TISSUE_PENALTY = 5.0

THICK_MUSCLE_THICKNESS = 0.5
MUSCLE_RELIEF_MAX_INTENSITY = 0.7
MUSCLE_RELIEF = 10.0

THICK_FAT_THICKNESS = 0.6
THICK_FAT_MAX_INTENSITY = 0.3  # Informational only; carries no score weight

ACUPUNCTURE_MUSCLE_THICKNESS = 0.6
ACUPUNCTURE_MUSCLE_RELIEF = 5.0

# Inclusion contributions and the effective penetration zone
METAL_INCLUSION_WEIGHT = 25.0
METAL_INCLUSION_SHALLOW_BONUS = 0.5  # Shallower metal concentrates more current
BONE_INCLUSION_WEIGHT = 8.0

PENETRATION_BASE = 0.2
PENETRATION_INTENSITY_GAIN = 0.6
PENETRATION_PULSE_GAIN = 0.2
PENETRATION_FAT_ATTENUATION = 0.3
PENETRATION_BOUNDS = (0.05, 1.0)
ELECTRODE_MIDPOINT = 0.5
LATERAL_SPREAD_BASE = 0.3
LATERAL_SPREAD_INTENSITY_GAIN = 0.2

# Risk bands: low < MODERATE_RISK_THRESHOLD <= moderate < HIGH_RISK_THRESHOLD <= high
MODERATE_RISK_THRESHOLD = 40
HIGH_RISK_THRESHOLD = 70

RISK_MESSAGES = {
    "metal_alert": "ALERT: metal implant detected. High intensity may cause localized heating and severe discomfort.",
    "metal_caution": "CAUTION: metal implant present. Current concentrates around the conductive implant; monitor heating or excessive tingling.",
    "shallow_bone": "WARNING: shallow bone + high intensity. Superficial bone may cause periosteal discomfort.",
    "thin_fat": "WARNING: thin fat layer + high intensity. Little attenuation before muscle and bone.",
    "thin_skin": "WARNING: thin skin + high intensity. Risk of skin irritation; use adequate conductive gel.",
    "overload": "CAUTION: high frequency combined with long pulses may cause muscle fatigue or discomfort.",
    "burst_soft": "TIP: burst mode on soft tissue can be uncomfortable. Consider conventional mode.",
    "metal_inclusion": "CAUTION: metal implant inclusion at {depth}% depth, position {position}% lies within the stimulation zone.",
    "bone_inclusion": "INFO: bone inclusion at {depth}% depth, position {position}% lies within the stimulation zone.",
    "thick_fat": "INFO: thick fat layer. Low intensity may only reach superficial tissue.",
    "muscle_relief": "GOOD: thick muscle layer allows safe stimulation depth at this intensity.",
    "acupuncture_muscle": "GOOD: acupuncture mode on thick muscle favors endorphin release.",
    "safe": "Safe configuration. Parameters within recommended limits.",
}

# --- Tissue Presets ---
CUSTOM_TISSUE_ID = "custom"

TISSUE_PRESET_DATA = {
    "forearm_slim": {
        "label": "Slim forearm",
        "description": "Little subcutaneous fat, moderate muscle, no implants.",
        "config": {
            "name": "Slim forearm",
            "skin_thickness": 0.15, "fat_thickness": 0.10, "muscle_thickness": 0.55,
            "bone_depth": 0.80, "has_metal_implant": False,
            "tissue_type": "soft", "enable_risk_simulation": True,
        },
    },
    "forearm_muscular": {
        "label": "Muscular forearm",
        "description": "Thick muscle layer, little fat, deeper bone.",
        "config": {
            "name": "Muscular forearm",
            "skin_thickness": 0.15, "fat_thickness": 0.05, "muscle_thickness": 0.70,
            "bone_depth": 0.90, "has_metal_implant": False,
            "tissue_type": "muscular", "enable_risk_simulation": True,
        },
    },
    "thigh_obese_implant": {
        "label": "Obese thigh with prosthesis",
        "description": "Thick fat and muscle, with a metal implant at intermediate depth.",
        "config": {
            "name": "Obese thigh with prosthesis",
            "skin_thickness": 0.20, "fat_thickness": 0.55, "muscle_thickness": 0.50,
            "bone_depth": 0.85, "has_metal_implant": True,
            "metal_implant_depth": 0.55, "metal_implant_span": 0.80,
            "tissue_type": "mixed", "enable_risk_simulation": True,
        },
    },
    "ankle_bony": {
        "label": "Bony ankle region",
        "description": "Little fat and muscle, very superficial bone, higher discomfort risk.",
        "config": {
            "name": "Bony ankle region",
            "skin_thickness": 0.10, "fat_thickness": 0.05, "muscle_thickness": 0.20,
            "bone_depth": 0.30, "has_metal_implant": False,
            "tissue_type": "soft", "enable_risk_simulation": True,
        },
    },
}

# Starting values of the editable custom slot (not part of the catalog)
CUSTOM_TISSUE_TEMPLATE = {
    "name": "Custom",
    "description": "Manually adjusted skin, fat, muscle, bone and inclusions.",
    "skin_thickness": 0.15, "fat_thickness": 0.25, "muscle_thickness": 0.45,
    "bone_depth": 0.75, "has_metal_implant": False,
    "tissue_type": "mixed", "enable_risk_simulation": True,
}

DEFAULT_TISSUE_DATA = {
    "id": "default",
    "name": "Standard forearm",
    "description": "Healthy adult forearm anatomy.",
    "skin_thickness": 0.15, "fat_thickness": 0.25, "muscle_thickness": 0.60,
    "bone_depth": 0.85, "has_metal_implant": False,
    "tissue_type": "muscular", "enable_risk_simulation": True,
}
DEFAULT_PRESET_ID = "forearm_slim"

# --- Inclusion Editing Bounds ---
INCLUSION_DEFAULTS = {"type": "bone", "depth": 0.5, "span": 0.3, "position": 0.5}
INCLUSION_DEPTH_BOUNDS = (0.1, 0.9)
INCLUSION_SPAN_BOUNDS = (0.1, 0.8)
INCLUSION_POSITION_BOUNDS = (0.0, 1.0)
INCLUSION_ID_PREFIX = "inclusion-"
