"""High-level read/reconstruct/convert/info API."""

from __future__ import annotations

import itertools
import sys
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from .hepevt import HepevtRecord
from .models import GenEvent
from .reconstruct import genevent_from_record
from .validation import ValidationReport, check_record

from .io.registry import detect_format, get_reader, get_writer, register
from .plugins import load_plugins

# Ensure default handlers are registered
from .io.hepmc3 import HepMC3Writer
from .io.npz import NpzReader
from .io.parquet import ParquetReader

register("npz", reader=lambda: NpzReader())
register("parquet", reader=lambda: ParquetReader())
register("hepmc3", writer=lambda: HepMC3Writer())

# Third-party formats (entry points) after the built-ins.
load_plugins()


def iter_records(filepath: Union[str, Path], format: Optional[str] = None) -> Iterator[HepevtRecord]:
    if format is None:
        format = detect_format(filepath)
    return get_reader(format).iter_records(str(filepath))


def read(filepath: Union[str, Path], format: Optional[str] = None) -> list[HepevtRecord]:
    if format is None:
        format = detect_format(filepath)
    return get_reader(format).read(str(filepath))


def reconstruct(
    records: Iterable[HepevtRecord],
    *,
    momentum_scaling: float = 1.0,
    length_scaling: float = 1.0,
    keep_event_numbers: bool = False,
) -> Iterator[GenEvent]:
    """Yield one independently built GenEvent per record.

    By default each event number is the particle count of its record; with
    ``keep_event_numbers`` the record's own identifier is used instead.
    """
    for rec in records:
        yield genevent_from_record(
            rec,
            momentum_scaling=momentum_scaling,
            length_scaling=length_scaling,
            event_number=rec.event_number if keep_event_numbers else None,
        )


def write(
    filepath: Union[str, Path],
    events: Iterable[GenEvent],
    format: Optional[str] = None,
    **kwargs,
) -> int:
    if format is None:
        format = detect_format(filepath)
    return get_writer(format).write(str(filepath), events, **kwargs)


def convert(
    input_path: Union[str, Path],
    output_path: Union[str, Path],
    *,
    input_format: Optional[str] = None,
    output_format: Optional[str] = None,
    momentum_scaling: float = 1.0,
    length_scaling: float = 1.0,
    keep_event_numbers: bool = False,
    max_events: int = -1,
    quiet: bool = False,
    **writer_kwargs,
) -> dict:
    """Reconstruct every record in ``input_path`` and write the graphs.

    Records are streamed: each one is checked, reconstructed and written
    before the next is read. A record failing its precondition checks aborts
    the conversion with HepevtPreconditionError.
    """

    if input_format is None:
        input_format = detect_format(input_path)
    if output_format is None:
        output_format = detect_format(output_path)

    reader = get_reader(input_format)
    writer = get_writer(output_format)

    if not quiet:
        print(f"Reading {input_format}: {input_path}", file=sys.stderr)

    rec_iter = reader.iter_records(str(input_path))
    if max_events >= 0:
        rec_iter = itertools.islice(rec_iter, max_events)

    n_particles = 0
    n_vertices = 0

    def _counting(it):
        nonlocal n_particles, n_vertices
        for ev in it:
            n_particles += len(ev.particles)
            n_vertices += len(ev.vertices)
            yield ev

    events = reconstruct(
        rec_iter,
        momentum_scaling=momentum_scaling,
        length_scaling=length_scaling,
        keep_event_numbers=keep_event_numbers,
    )

    if not quiet:
        print(f"Writing {output_format}: {output_path}", file=sys.stderr)

    n_events = writer.write(str(output_path), _counting(events), **writer_kwargs)

    if not quiet:
        print(f"  Wrote {n_events} events", file=sys.stderr)
        print(f"  {n_particles} particles, {n_vertices} vertices", file=sys.stderr)

    return {
        "n_events": n_events,
        "n_particles": n_particles,
        "n_vertices": n_vertices,
    }


def check(
    filepath: Union[str, Path],
    format: Optional[str] = None,
    *,
    momentum_scaling: float = 1.0,
    length_scaling: float = 1.0,
) -> ValidationReport:
    """Run the precondition checks over every record of a file."""
    report = ValidationReport()
    for rec in iter_records(filepath, format=format):
        sub = check_record(rec, momentum_scaling=momentum_scaling, length_scaling=length_scaling)
        report.issues.extend(sub.issues)
    return report


def info(filepath: Union[str, Path], format: Optional[str] = None) -> dict:
    if format is None:
        format = detect_format(filepath)

    n_events = 0
    total_particles = 0
    total_vertices = 0
    total_beams = 0
    pdg_counts: dict[int, int] = {}
    status_counts: dict[int, int] = {}

    for ev in reconstruct(iter_records(filepath, format=format)):
        n_events += 1
        total_particles += len(ev.particles)
        total_vertices += len(ev.vertices)
        total_beams += len(ev.beam_particles())
        for p in ev.particles:
            pdg_counts[p.pid] = pdg_counts.get(p.pid, 0) + 1
            status_counts[p.status] = status_counts.get(p.status, 0) + 1

    from .pdg import name as pdg_name

    top_pdg = sorted(pdg_counts.items(), key=lambda x: -x[1])[:20]
    top_named = [(pdg_name(pid), count) for pid, count in top_pdg]

    return {
        "format": format,
        "n_events": n_events,
        "total_particles": total_particles,
        "total_vertices": total_vertices,
        "total_beam_particles": total_beams,
        "avg_particles_per_event": total_particles / max(1, n_events),
        "top_particles": top_named,
        "status_counts": dict(sorted(status_counts.items())),
    }
