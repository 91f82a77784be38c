"""
Scene snapshot: the sources, probe and field mode handed to the kernel.

A Scene is immutable. Editing operations return a new Scene so that every
recompute works on a consistent snapshot and nothing is shared between calls.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Optional, Sequence, Tuple
import numpy as np
from numpy.typing import NDArray

from .primitives import VectorLike, as_vector3
from .sources import FieldMode, FieldSource, Probe


@dataclass(frozen=True)
class Scene:
    """
    Collection of point sources plus an optional probe.

    Attributes:
        name: Scene identifier
        mode: Active field mode
        sources: Point sources (order defines source indices)
        probe: Optional test charge/mass
        description: Optional scene description
    """

    name: str
    mode: FieldMode = FieldMode.ELECTRIC
    sources: Tuple[FieldSource, ...] = ()
    probe: Optional[Probe] = None
    description: str = ""

    def __post_init__(self):
        """Validate scene data."""
        object.__setattr__(self, "mode", FieldMode(self.mode))
        object.__setattr__(self, "sources", tuple(self.sources))

        # Check for duplicate ids
        ids = [src.id for src in self.sources]
        if len(ids) != len(set(ids)):
            duplicates = [sid for sid in ids if ids.count(sid) > 1]
            raise ValueError(f"Duplicate source ids: {set(duplicates)}")

    @property
    def num_sources(self) -> int:
        """Number of sources in scene."""
        return len(self.sources)

    @property
    def positions(self) -> NDArray[np.float64]:
        """Source positions in scene units, shape (N, 3)."""
        if not self.sources:
            return np.zeros((0, 3), dtype=np.float64)
        return np.vstack([src.position.to_array() for src in self.sources])

    @property
    def values(self) -> NDArray[np.float64]:
        """Signed source values, shape (N,)."""
        return np.array([src.value for src in self.sources], dtype=np.float64)

    # -------------------------------------------------------------------------
    # Editing (each returns a new Scene)
    # -------------------------------------------------------------------------

    def with_mode(self, mode: FieldMode | str) -> Scene:
        return replace(self, mode=FieldMode(mode))

    def add_source(self,
                   position: VectorLike,
                   value: float,
                   source_id: Optional[str] = None) -> Scene:
        """
        Append a source.

        Args:
            position: Position in scene units
            value: Signed charge or mass
            source_id: Identifier (generated as 'source-<n>' if omitted)
        """
        if source_id is None:
            source_id = self._next_source_id()
        source = FieldSource(id=source_id, position=as_vector3(position), value=value)
        return replace(self, sources=self.sources + (source,))

    def update_source(self,
                      source_id: str,
                      position: Optional[VectorLike] = None,
                      value: Optional[float] = None) -> Scene:
        """
        Move and/or re-value an existing source.

        Raises:
            KeyError: If the source id is unknown
        """
        self.get_source(source_id)

        updated = []
        for src in self.sources:
            if src.id == source_id:
                if position is not None:
                    src = src.moved_to(position)
                if value is not None:
                    src = src.with_value(value)
            updated.append(src)
        return replace(self, sources=tuple(updated))

    def remove_source(self, source_id: str) -> Scene:
        """
        Remove a source.

        Raises:
            KeyError: If the source id is unknown
        """
        self.get_source(source_id)
        return replace(self, sources=tuple(s for s in self.sources if s.id != source_id))

    def with_probe(self, position: VectorLike, value: float = 1.0) -> Scene:
        return replace(self, probe=Probe(position=as_vector3(position), value=value))

    def without_probe(self) -> Scene:
        return replace(self, probe=None)

    def with_sources(self, sources: Sequence[FieldSource]) -> Scene:
        return replace(self, sources=tuple(sources))

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get_source(self, source_id: str) -> FieldSource:
        """
        Get source by id.

        Raises:
            KeyError: If source not found
        """
        for src in self.sources:
            if src.id == source_id:
                return src
        raise KeyError(f"Source '{source_id}' not found in scene")

    def index_of(self, source_id: str) -> int:
        """Index of a source (as used for dominant-source attribution)."""
        for i, src in enumerate(self.sources):
            if src.id == source_id:
                return i
        raise KeyError(f"Source '{source_id}' not found in scene")

    def _next_source_id(self) -> str:
        existing = {src.id for src in self.sources}
        n = len(self.sources) + 1
        while f"source-{n}" in existing:
            n += 1
        return f"source-{n}"

    def __repr__(self) -> str:
        return (
            f"Scene(name='{self.name}', "
            f"mode={self.mode.value}, "
            f"sources={self.num_sources}, "
            f"probe={'yes' if self.probe is not None else 'no'})"
        )
