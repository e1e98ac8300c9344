"""Build a linked GenEvent graph from a flat HEPEVT record."""

from __future__ import annotations

from typing import Optional

from .hepevt import HepevtRecord, parent_key
from .models import FourVector, GenEvent, GenParticle, GenVertex
from .validation import require_valid


def _add_particles(
    event: GenEvent,
    record: HepevtRecord,
    momentum_scaling: float,
) -> None:
    # Pass 1: one particle per row, in row order. Later passes look particles
    # up by row index, so the insertion order must not change.
    n = len(record)
    event.event_number = n
    for i in range(n):
        px, py, pz, e = (float(c) for c in record.momentum[i])
        event.add_particle(GenParticle(
            momentum=FourVector(px, py, pz, e).scaled(momentum_scaling),
            generated_mass=float(record.mass[i]) * momentum_scaling,
            status=int(record.status[i]),
            pid=int(record.pid[i]),
        ))


def _add_vertices(
    event: GenEvent,
    record: HepevtRecord,
    length_scaling: float,
) -> None:
    """Pass 2: create production vertices and connect the topology.

    HEPEVT repeats the production vertex once per outgoing particle; rows
    sharing the same parent range are siblings from one vertex. Rows without
    parents get no production vertex. The children column is redundant and
    not read.
    """
    vertex_map: dict[tuple[int, int], int] = {}
    for i in range(len(record)):
        key = parent_key(record.parents[i, 0], record.parents[i, 1])
        if key is None:
            continue

        handle = vertex_map.get(key)
        if handle is None:
            x, y, z, t = (float(c) for c in record.vertex[i])
            handle = event.add_vertex(GenVertex(position=FourVector(x, y, z, t).scaled(length_scaling)))
            first, last = key
            for j in range(first, last + 1):
                event.add_particle_in(handle, j)
            vertex_map[key] = handle

        event.add_particle_out(handle, i)


def fill_genevent_from_record(
    event: GenEvent,
    record: HepevtRecord,
    *,
    momentum_scaling: float = 1.0,
    length_scaling: float = 1.0,
) -> bool:
    """Populate an empty ``event`` from ``record``.

    All preconditions are checked before ``event`` is touched, so on error
    the event is left exactly as it was.

    Args:
        event: Target event; must not contain particles or vertices.
        record: Row-aligned input arrays.
        momentum_scaling: Multiplies every momentum component and the mass.
        length_scaling: Multiplies every vertex position component.

    Returns:
        True once the graph is built.

    Raises:
        HepevtPreconditionError: If the record is malformed.
        ValueError: If ``event`` is not empty.
    """
    require_valid(
        record,
        momentum_scaling=momentum_scaling,
        length_scaling=length_scaling,
    )
    if not event.is_empty():
        raise ValueError(
            f"Target event already holds {len(event.particles)} particles and "
            f"{len(event.vertices)} vertices; reconstruction needs an empty event"
        )

    _add_particles(event, record, momentum_scaling)
    _add_vertices(event, record, length_scaling)
    return True


def fill_genevent_from_hepevt(
    event: GenEvent,
    momentum,
    mass,
    vertex,
    status,
    pid,
    parents,
    children=None,
    momentum_scaling: float = 1.0,
    length_scaling: float = 1.0,
) -> bool:
    """Array-level entry point; see fill_genevent_from_record."""
    record = HepevtRecord.from_arrays(momentum, mass, vertex, status, pid, parents, children)
    return fill_genevent_from_record(
        event,
        record,
        momentum_scaling=momentum_scaling,
        length_scaling=length_scaling,
    )


def genevent_from_record(
    record: HepevtRecord,
    *,
    momentum_scaling: float = 1.0,
    length_scaling: float = 1.0,
    event_number: Optional[int] = None,
) -> GenEvent:
    """Return a freshly built GenEvent for ``record``.

    ``event_number`` overrides the default identifier (the particle count).
    """
    event = GenEvent()
    fill_genevent_from_record(
        event,
        record,
        momentum_scaling=momentum_scaling,
        length_scaling=length_scaling,
    )
    if event_number is not None:
        event.event_number = event_number
    return event
