"""
HEPEVT-style flat particle record.

A record stores one row per particle in parallel arrays. Production
vertices are implicit: a row names the contiguous block of rows that are its
parents using 1-based (Fortran) indices.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

# Columns per row for each field; 0 means a 1-D array.
FIELD_WIDTHS = {
    "momentum": 4,
    "mass": 0,
    "vertex": 4,
    "status": 0,
    "pid": 0,
    "parents": 2,
    "children": 2,
}

REAL_FIELDS = ("momentum", "mass", "vertex")
INTEGER_FIELDS = ("status", "pid", "parents", "children")


def parent_key(p0: int, p1: int) -> Optional[tuple[int, int]]:
    """Normalize a 1-based parent range and apply the skip rule.

    Returns the 0-based ``(first, last)`` pair identifying the production
    vertex, or ``None`` when the row has no production vertex. Legacy index 1
    acts as the "no parent" marker: a normalized bound of 0 is skipped, as is
    an inverted range.
    """
    first, last = int(p0) - 1, int(p1) - 1
    if first == 0 or last == 0 or first > last:
        return None
    return first, last


@dataclass
class HepevtRecord:
    """Row-aligned arrays describing the particles of one event.

    Attributes:
        momentum: (N, 4) px, py, pz, E.
        mass: (N,) generated mass.
        vertex: (N, 4) x, y, z, t of the production vertex candidate.
        status: (N,) status code.
        pid: (N,) PDG particle ID.
        parents: (N, 2) 1-based first/last parent rows.
        children: (N, 2) 1-based first/last daughter rows. Carried along for
            interface compatibility; reconstruction does not read it.
        event_number: Identifier from the source, if it had one.
    """

    momentum: np.ndarray
    mass: np.ndarray
    vertex: np.ndarray
    status: np.ndarray
    pid: np.ndarray
    parents: np.ndarray
    children: Optional[np.ndarray] = None
    event_number: int = 0

    @classmethod
    def from_arrays(
        cls,
        momentum,
        mass,
        vertex,
        status,
        pid,
        parents,
        children=None,
        *,
        event_number: int = 0,
    ) -> HepevtRecord:
        return cls(
            momentum=np.asarray(momentum),
            mass=np.asarray(mass),
            vertex=np.asarray(vertex),
            status=np.asarray(status),
            pid=np.asarray(pid),
            parents=np.asarray(parents),
            children=None if children is None else np.asarray(children),
            event_number=event_number,
        )

    def arrays(self) -> dict[str, Optional[np.ndarray]]:
        return {name: getattr(self, name) for name in FIELD_WIDTHS}

    def __len__(self) -> int:
        return int(self.momentum.shape[0]) if self.momentum.ndim else 0
