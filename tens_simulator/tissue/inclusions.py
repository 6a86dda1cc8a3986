# tens_simulator/tissue/inclusions.py
import uuid
from typing import Callable, Iterable, List, Optional, Tuple

from ..api_models import TissueConfig, TissueInclusion, InclusionType
from ..constants import (
    INCLUSION_DEFAULTS, INCLUSION_DEPTH_BOUNDS, INCLUSION_SPAN_BOUNDS,
    INCLUSION_POSITION_BOUNDS, INCLUSION_ID_PREFIX,
)
from ..normalization import clamp
from .presets import promote_to_custom

EDITABLE_FIELDS = {
    "type": None,
    "depth": INCLUSION_DEPTH_BOUNDS,
    "span": INCLUSION_SPAN_BOUNDS,
    "position": INCLUSION_POSITION_BOUNDS,
}


def generate_inclusion_id() -> str:
    return f"{INCLUSION_ID_PREFIX}{uuid.uuid4().hex}"


class InclusionManager:
    """
    Editing boundary for the inclusions of a tissue config.

    Values are clamped to the editor bounds here (depth 0.1-0.9, span 0.1-0.8,
    position 0-1), both for loaded inclusions and for edits, so the risk assessor
    only ever sees what the editor allows.
    """

    def __init__(
        self,
        inclusions: Iterable[TissueInclusion] = (),
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self._inclusions: List[TissueInclusion] = [
            inclusion.model_copy(update=self._bounded(inclusion.model_dump(exclude={"id"})))
            for inclusion in inclusions
        ]
        self._id_factory = id_factory or generate_inclusion_id

    @classmethod
    def from_config(cls, config: TissueConfig, id_factory: Optional[Callable[[], str]] = None) -> "InclusionManager":
        return cls(config.inclusions, id_factory=id_factory)

    @property
    def inclusions(self) -> Tuple[TissueInclusion, ...]:
        return tuple(self._inclusions)

    def __len__(self) -> int:
        return len(self._inclusions)

    def _index_of(self, inclusion_id: str) -> int:
        for index, inclusion in enumerate(self._inclusions):
            if inclusion.id == inclusion_id:
                return index
        raise KeyError(f"No inclusion with id '{inclusion_id}'")

    @staticmethod
    def _bounded(fields: dict) -> dict:
        unknown = set(fields) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot edit inclusion fields: {sorted(unknown)}")
        bounded = {}
        for name, value in fields.items():
            bounds = EDITABLE_FIELDS[name]
            if bounds is None:
                bounded[name] = InclusionType(value)
            else:
                bounded[name] = clamp(value, *bounds)
        return bounded

    def add(self) -> TissueInclusion:
        inclusion_id = self._id_factory()
        if any(existing.id == inclusion_id for existing in self._inclusions):
            raise ValueError(f"Inclusion id '{inclusion_id}' already exists")
        inclusion = TissueInclusion(id=inclusion_id, **self._bounded(dict(INCLUSION_DEFAULTS)))
        self._inclusions.append(inclusion)
        return inclusion

    def remove(self, inclusion_id: str) -> TissueInclusion:
        return self._inclusions.pop(self._index_of(inclusion_id))

    def update(self, inclusion_id: str, **fields) -> TissueInclusion:
        index = self._index_of(inclusion_id)
        updated = self._inclusions[index].model_copy(update=self._bounded(fields))
        self._inclusions[index] = updated
        return updated

    def apply_to(self, config: TissueConfig) -> TissueConfig:
        """Return a custom copy of `config` carrying the edited inclusions."""
        return promote_to_custom(config, inclusions=self.inclusions)
