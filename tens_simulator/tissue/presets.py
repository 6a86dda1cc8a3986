# tens_simulator/tissue/presets.py
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping

from ..api_models import TissueConfig, PresetEntry, PresetSelection, CustomSelection, Selection
from ..constants import (
    TISSUE_PRESET_DATA, CUSTOM_TISSUE_ID, CUSTOM_TISSUE_TEMPLATE, DEFAULT_TISSUE_DATA,
)


class PresetCatalog:
    """
    Immutable registry of named tissue templates keyed by preset id.

    Lookups always hand out deep copies, so callers can never reach the stored entries.
    The editable "custom" slot is not part of the catalog.
    """

    def __init__(self, entries: List[PresetEntry]):
        registry: Dict[str, PresetEntry] = {}
        for entry in entries:
            if entry.id == CUSTOM_TISSUE_ID:
                raise ValueError(f"'{CUSTOM_TISSUE_ID}' is reserved and cannot be a catalog preset")
            if entry.id in registry:
                raise ValueError(f"Duplicate preset id '{entry.id}'")
            registry[entry.id] = entry
        self._entries: Mapping[str, PresetEntry] = MappingProxyType(registry)

    def __contains__(self, preset_id: object) -> bool:
        return preset_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def ids(self) -> List[str]:
        return list(self._entries)

    def entries(self) -> List[PresetEntry]:
        return [entry.model_copy(deep=True) for entry in self._entries.values()]

    def get_entry(self, preset_id: str) -> PresetEntry:
        return self._entries[preset_id].model_copy(deep=True)

    def select_preset(self, preset_id: str) -> TissueConfig:
        """
        Return an independent copy of a preset's stored config, tagged with the preset id.

        Raises:
            KeyError: if the id is not in the catalog
        """
        entry = self._entries[preset_id]
        return entry.config.model_copy(deep=True)


def promote_to_custom(config: TissueConfig, **changes) -> TissueConfig:
    """Tag a config as custom, preserving all field values apart from the given changes."""
    unknown = set(changes) - set(TissueConfig.model_fields)
    if unknown:
        raise ValueError(f"Unknown tissue fields: {sorted(unknown)}")
    changes["id"] = CUSTOM_TISSUE_ID
    # model_validate re-runs field validation on the edited values
    return TissueConfig.model_validate({**config.model_dump(), **changes})


def resolve_selection(selection: Selection, catalog: PresetCatalog) -> TissueConfig:
    if isinstance(selection, PresetSelection):
        return catalog.select_preset(selection.preset_id)
    if isinstance(selection, CustomSelection):
        return promote_to_custom(selection.config)
    raise TypeError(f"Unsupported tissue selection: {selection!r}")


def _build_default_catalog() -> PresetCatalog:
    entries = []
    for preset_id, data in TISSUE_PRESET_DATA.items():
        config = TissueConfig(
            id=preset_id,
            description=data["description"],
            **data["config"],
        )
        entries.append(PresetEntry(
            id=preset_id,
            label=data["label"],
            description=data["description"],
            is_custom=False,
            config=config,
        ))
    return PresetCatalog(entries)


TISSUE_PRESETS = _build_default_catalog()
CUSTOM_TEMPLATE = TissueConfig(id=CUSTOM_TISSUE_ID, **CUSTOM_TISSUE_TEMPLATE)
DEFAULT_TISSUE_CONFIG = TissueConfig(**DEFAULT_TISSUE_DATA)
