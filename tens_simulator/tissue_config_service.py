# tens_simulator/tissue_config_service.py
import logging
import uuid
from typing import Dict, List, Optional, Protocol

from .api_models import TissueConfig
from .tissue.presets import PresetCatalog, TISSUE_PRESETS, DEFAULT_TISSUE_CONFIG

logger = logging.getLogger(__name__)


class TissueConfigService(Protocol):
    """Persistence collaborator for saved tissue configurations."""

    async def get_by_id(self, config_id: str) -> Optional[TissueConfig]: ...

    async def get_all(self) -> List[TissueConfig]: ...

    async def create(self, config: TissueConfig) -> TissueConfig: ...

    async def update(self, config_id: str, **changes) -> TissueConfig: ...

    async def delete(self, config_id: str) -> None: ...


class InMemoryTissueConfigService:
    """Process-local store with the same contract as the hosted tissue_configs table."""

    def __init__(self):
        self._configs: Dict[str, TissueConfig] = {}

    async def get_by_id(self, config_id: str) -> Optional[TissueConfig]:
        return self._configs.get(config_id)

    async def get_all(self) -> List[TissueConfig]:
        return sorted(self._configs.values(), key=lambda config: config.name)

    async def create(self, config: TissueConfig) -> TissueConfig:
        stored = config.model_copy(update={"id": str(uuid.uuid4())})
        self._configs[stored.id] = stored
        logger.info("Stored tissue config '%s' (%s)", stored.name, stored.id)
        return stored

    async def update(self, config_id: str, **changes) -> TissueConfig:
        if config_id not in self._configs:
            raise KeyError(f"No tissue config with id '{config_id}'")
        changes.pop("id", None)
        updated = TissueConfig.model_validate({**self._configs[config_id].model_dump(), **changes})
        self._configs[config_id] = updated
        return updated

    async def delete(self, config_id: str) -> None:
        if self._configs.pop(config_id, None) is None:
            raise KeyError(f"No tissue config with id '{config_id}'")


async def resolve_tissue_config(
    config_id: Optional[str],
    service: TissueConfigService,
    catalog: PresetCatalog = TISSUE_PRESETS,
) -> TissueConfig:
    """
    Load the tissue config a lab points at.

    Preset ids resolve from the catalog; anything else (saved custom configs, retired presets)
    goes through the persistence service. A missing id, a null result or a service failure
    all fall back to DEFAULT_TISSUE_CONFIG.
    """
    if not config_id:
        return DEFAULT_TISSUE_CONFIG.model_copy(deep=True)
    if config_id in catalog:
        return catalog.select_preset(config_id)

    try:
        stored = await service.get_by_id(config_id)
    except Exception as exc:
        logger.warning("Tissue config lookup for '%s' failed, using default: %s", config_id, exc)
        return DEFAULT_TISSUE_CONFIG.model_copy(deep=True)

    if stored is None:
        logger.warning("Tissue config '%s' not found, using default", config_id)
        return DEFAULT_TISSUE_CONFIG.model_copy(deep=True)
    return stored
