# tens_simulator/api.py
from typing import List

from fastapi import Depends, FastAPI, HTTPException

from .api_models import (
    TensParameters, SimulationResult, RiskResult, TissueConfig, PresetEntry,
    TissueRiskRequest, LabEvaluationRequest, LabEvaluation, PlacementEntry,
)
from .electrode_field import placement_entries
from .lab_session import clamp_electrodes, clamp_parameters, evaluate_lab
from .stimulation import simulate_tens
from .tissue.presets import TISSUE_PRESETS, resolve_selection
from .tissue_config_service import InMemoryTissueConfigService, TissueConfigService, resolve_tissue_config
from .tissue_risk import simulate_tissue_risk

app = FastAPI(title="TENS Virtual Lab Simulation API")

_tissue_config_service = InMemoryTissueConfigService()


def get_tissue_config_service() -> TissueConfigService:
    return _tissue_config_service


@app.post("/simulate_tens", response_model=SimulationResult)
async def post_simulate_tens(params: TensParameters):
    return simulate_tens(params)


@app.post("/simulate_tissue_risk", response_model=RiskResult)
async def post_simulate_tissue_risk(request: TissueRiskRequest):
    return simulate_tissue_risk(request.parameters, request.tissue)


@app.get("/tissue_presets", response_model=List[PresetEntry])
async def get_tissue_presets():
    return TISSUE_PRESETS.entries()


@app.get("/tissue_presets/{preset_id}", response_model=TissueConfig)
async def get_tissue_preset(preset_id: str):
    if preset_id not in TISSUE_PRESETS:
        raise HTTPException(status_code=404, detail=f"Unknown tissue preset '{preset_id}'")
    return TISSUE_PRESETS.select_preset(preset_id)


@app.post("/tissue_configs", response_model=TissueConfig, status_code=201)
async def post_tissue_config(config: TissueConfig, service: TissueConfigService = Depends(get_tissue_config_service)):
    return await service.create(config)


@app.get("/tissue_configs/{config_id}", response_model=TissueConfig)
async def get_tissue_config(config_id: str, service: TissueConfigService = Depends(get_tissue_config_service)):
    return await resolve_tissue_config(config_id, service)


@app.get("/electrode_placements", response_model=List[PlacementEntry])
async def get_electrode_placements():
    return placement_entries()


@app.post("/evaluate_lab", response_model=LabEvaluation)
async def post_evaluate_lab(
    request: LabEvaluationRequest,
    service: TissueConfigService = Depends(get_tissue_config_service),
):
    params = request.parameters
    electrodes = request.electrodes
    lab_config = request.lab_config
    if lab_config is not None:
        if params.mode not in lab_config.allowed_modes:
            raise HTTPException(status_code=422, detail=f"Mode '{params.mode.value}' is not enabled for this lab")
        params = clamp_parameters(params, lab_config)
        electrodes = clamp_electrodes(electrodes, lab_config)

    if request.selection is None:
        config_id = lab_config.tissue_config_id if lab_config is not None else None
        tissue = await resolve_tissue_config(config_id, service)
    else:
        try:
            tissue = resolve_selection(request.selection, TISSUE_PRESETS)
        except KeyError:
            raise HTTPException(status_code=404, detail=f"Unknown tissue preset '{request.selection.preset_id}'")
    return evaluate_lab(params, tissue, electrodes)
