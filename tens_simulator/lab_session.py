# tens_simulator/lab_session.py
import logging
from typing import Optional, Tuple

from .api_models import (
    TensParameters, TensMode, TissueConfig, TensLabConfig, ParameterRange, ElectrodeConfig,
    PresetSelection, CustomSelection, Selection, LabEvaluation,
)
from .constants import (
    DEFAULT_FREQUENCY_HZ, DEFAULT_PULSE_WIDTH_US, DEFAULT_INTENSITY_MA, DEFAULT_PRESET_ID,
)
from .electrode_field import DEFAULT_ELECTRODE_CONFIG, apply_placement, simulate_field
from .normalization import clamp
from .stimulation import simulate_tens
from .tissue.presets import PresetCatalog, TISSUE_PRESETS, promote_to_custom, resolve_selection
from .tissue_config_service import TissueConfigService, resolve_tissue_config
from .tissue_risk import simulate_tissue_risk

logger = logging.getLogger(__name__)


def _clamp_to(value: float, bounds: ParameterRange) -> float:
    return clamp(value, bounds.min, bounds.max)


def clamp_parameters(params: TensParameters, lab_config: TensLabConfig) -> TensParameters:
    """Fit parameters into the ranges a lab exposes to students."""
    return params.model_copy(update={
        "frequency_hz": _clamp_to(params.frequency_hz, lab_config.frequency_range),
        "pulse_width_us": _clamp_to(params.pulse_width_us, lab_config.pulse_width_range),
        "intensity_ma": _clamp_to(params.intensity_ma, lab_config.intensity_range),
    })


def clamp_electrodes(electrodes: ElectrodeConfig, lab_config: TensLabConfig) -> ElectrodeConfig:
    return electrodes.model_copy(
        update={"distance_cm": _clamp_to(electrodes.distance_cm, lab_config.electrode_distance_range)})


def evaluate_lab(
    params: TensParameters,
    tissue: TissueConfig,
    electrodes: ElectrodeConfig = DEFAULT_ELECTRODE_CONFIG,
) -> LabEvaluation:
    return LabEvaluation(
        parameters=params,
        electrodes=electrodes,
        tissue=tissue,
        simulation=simulate_tens(params),
        risk=simulate_tissue_risk(params, tissue),
        field=simulate_field(params, tissue, electrodes),
    )


class TensLabSession:
    """
    Editing state of one TENS virtual lab: lab configuration, stimulation parameters,
    electrode pair and the current tissue selection. Setters keep values inside the lab
    ranges; evaluate() recomputes from a snapshot and memoizes the last evaluation by
    input equality. Evaluations are frozen, so the memoized one can be shared.
    """

    def __init__(self, lab_config: Optional[TensLabConfig] = None, catalog: PresetCatalog = TISSUE_PRESETS):
        self.catalog = catalog
        self.lab_config = lab_config or TensLabConfig()
        self.parameters = TensParameters()
        self.electrodes = DEFAULT_ELECTRODE_CONFIG
        self.selection: Selection = PresetSelection(preset_id=DEFAULT_PRESET_ID)
        self._tissue = catalog.select_preset(DEFAULT_PRESET_ID)
        self._memo: Optional[Tuple[tuple, LabEvaluation]] = None
        self.set_lab_config(self.lab_config)

    @classmethod
    async def load(
        cls,
        lab_config: TensLabConfig,
        service: TissueConfigService,
        catalog: PresetCatalog = TISSUE_PRESETS,
    ) -> "TensLabSession":
        """Build a session whose tissue comes from the lab's tissue_config_id."""
        session = cls(lab_config, catalog)
        if lab_config.tissue_config_id in catalog:
            session.select_preset(lab_config.tissue_config_id)
        elif lab_config.tissue_config_id:
            session.load_tissue_config(await resolve_tissue_config(lab_config.tissue_config_id, service, catalog))
        return session

    @property
    def tissue(self) -> TissueConfig:
        return self._tissue

    @property
    def preset_id(self) -> Optional[str]:
        return self.selection.preset_id if isinstance(self.selection, PresetSelection) else None

    @property
    def electrode_distance_cm(self) -> float:
        return self.electrodes.distance_cm

    # --- Lab configuration ---
    def set_lab_config(self, lab_config: TensLabConfig) -> None:
        self.lab_config = lab_config
        self.parameters = clamp_parameters(self.parameters, lab_config)
        self.set_electrode_distance(self.electrodes.distance_cm)
        if self.parameters.mode not in lab_config.allowed_modes:
            self.parameters = self.parameters.model_copy(update={"mode": lab_config.allowed_modes[0]})

    # --- Stimulation parameters ---
    def set_frequency(self, value: float) -> None:
        self.parameters = self.parameters.model_copy(
            update={"frequency_hz": _clamp_to(value, self.lab_config.frequency_range)})

    def set_pulse_width(self, value: float) -> None:
        self.parameters = self.parameters.model_copy(
            update={"pulse_width_us": _clamp_to(value, self.lab_config.pulse_width_range)})

    def set_intensity(self, value: float) -> None:
        self.parameters = self.parameters.model_copy(
            update={"intensity_ma": _clamp_to(value, self.lab_config.intensity_range)})

    def set_mode(self, mode) -> None:
        mode = TensMode(mode)
        if mode not in self.lab_config.allowed_modes:
            raise ValueError(f"Mode '{mode.value}' is not enabled for this lab")
        self.parameters = self.parameters.model_copy(update={"mode": mode})

    # --- Electrodes ---
    def set_electrode_distance(self, distance_cm: float) -> None:
        self.electrodes = clamp_electrodes(self.electrodes.model_copy(update={"distance_cm": distance_cm}), self.lab_config)

    def set_electrode_placement(self, placement) -> None:
        placed = apply_placement(self.electrodes, placement)
        self.electrodes = placed
        self.set_electrode_distance(placed.distance_cm)

    # --- Tissue selection ---
    def select_preset(self, preset_id: str) -> TissueConfig:
        self._tissue = self.catalog.select_preset(preset_id)
        self.selection = PresetSelection(preset_id=preset_id)
        return self._tissue

    def set_tissue_config(self, config: TissueConfig) -> TissueConfig:
        self._tissue = promote_to_custom(config)
        self.selection = CustomSelection(config=self._tissue)
        return self._tissue

    def load_tissue_config(self, config: TissueConfig) -> TissueConfig:
        """Use a saved config as-is, keeping its id."""
        self._tissue = config.model_copy(deep=True)
        self.selection = CustomSelection(config=self._tissue)
        return self._tissue

    def update_tissue(self, **changes) -> TissueConfig:
        """Edit fields of the current tissue; any edit turns the selection into a custom config."""
        return self.set_tissue_config(promote_to_custom(self._tissue, **changes))

    def apply_selection(self, selection: Selection) -> TissueConfig:
        self._tissue = resolve_selection(selection, self.catalog)
        self.selection = selection if isinstance(selection, PresetSelection) else CustomSelection(config=self._tissue)
        return self._tissue

    def reset_to_defaults(self) -> None:
        self.parameters = TensParameters(
            frequency_hz=DEFAULT_FREQUENCY_HZ,
            pulse_width_us=DEFAULT_PULSE_WIDTH_US,
            intensity_ma=DEFAULT_INTENSITY_MA,
            mode=TensMode.CONVENTIONAL,
        )
        self.electrodes = DEFAULT_ELECTRODE_CONFIG
        self.set_lab_config(self.lab_config)
        self.select_preset(DEFAULT_PRESET_ID)

    # --- Evaluation ---
    def evaluate(self) -> LabEvaluation:
        key = (self.parameters, self.electrodes, self._tissue)
        if self._memo is not None and self._memo[0] == key:
            return self._memo[1]
        evaluation = evaluate_lab(self.parameters, self._tissue, self.electrodes)
        logger.debug(
            "Lab evaluation: comfort=%d risk=%d (%s) depth=%.1fmm",
            evaluation.simulation.comfort_level, evaluation.risk.risk_score, evaluation.risk.risk_level.value,
            evaluation.field.activation_depth_mm,
        )
        self._memo = (key, evaluation)
        return evaluation
