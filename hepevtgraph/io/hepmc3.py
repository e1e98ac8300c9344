from __future__ import annotations

import gzip
import io
import os
from pathlib import Path
from typing import Iterable, TextIO

from ..models import GenEvent, GenVertex
from .writer_base import Writer


# --- HepMC3 Asciiv3 output -------------------------------------------------------------
#
# Record types written per event:
#   E <evtno> <nvertices> <nparticles>
#   U <mom_unit> <len_unit>
#   V <vtxid> <status> [<in1>,<in2>,...] [@ <x> <y> <z> <t>]
#   P <id> <parent> <pdg> <px> <py> <pz> <e> <m> <status>
#
# <parent> is 0 for particles without a production vertex, the id of the single
# incoming particle when the vertex is implicit, or the (negative) vertex id.
# A vertex is implicit when it has exactly one incoming particle, no position and
# that particle ends there.


def _is_implicit(ev: GenEvent, handle: int, v: GenVertex) -> bool:
    return (
        len(v.particles_in) == 1
        and v.position.is_zero()
        and ev.particles[v.particles_in[0]].end_vertex == handle
    )


def _format_vertex(ev: GenEvent, v: GenVertex) -> str:
    ins = ",".join(str(ev.particles[i].id) for i in v.particles_in)
    line = f"V {v.id} {v.status} [{ins}]"
    if not v.position.is_zero():
        x, y, z, t = v.position
        line += f" @ {x:.17g} {y:.17g} {z:.17g} {t:.17g}"
    return line


def write_event(f: TextIO, ev: GenEvent, *, momentum_unit: str = "GEV", length_unit: str = "MM") -> None:
    f.write(f"E {ev.event_number} {len(ev.vertices)} {len(ev.particles)}\n")
    f.write(f"U {momentum_unit} {length_unit}\n")

    written: set[int] = set()
    for part in ev.particles:
        parent = 0
        if part.production_vertex is not None:
            v = ev.vertices[part.production_vertex]
            if _is_implicit(ev, part.production_vertex, v):
                parent = ev.particles[v.particles_in[0]].id
            else:
                if part.production_vertex not in written:
                    f.write(_format_vertex(ev, v) + "\n")
                    written.add(part.production_vertex)
                parent = v.id

        px, py, pz, e = part.momentum
        f.write(
            "P {id} {parent} {pid} {px:.17g} {py:.17g} {pz:.17g} {e:.17g} {m:.17g} {st}\n".format(
                id=part.id,
                parent=parent,
                pid=part.pid,
                px=px,
                py=py,
                pz=pz,
                e=e,
                m=part.generated_mass,
                st=part.status,
            )
        )


class HepMC3Writer(Writer):
    def write(self, path: str, events: Iterable[GenEvent], **kwargs) -> int:
        momentum_unit = str(kwargs.get("momentum_unit") or "GEV").upper()
        length_unit = str(kwargs.get("length_unit") or "MM").upper()

        # Events are built lazily, so a bad record can fail mid-file; write to
        # a sibling and move it into place only once the listing is complete.
        p = Path(path)
        tmp = p.with_name(p.name + ".tmp")
        if p.suffix == ".gz":
            raw = gzip.open(tmp, "wb")
            f = io.TextIOWrapper(raw, encoding="utf-8")
        else:
            f = open(tmp, "w", encoding="utf-8")

        n = 0
        try:
            with f:
                f.write("HepMC::Version 3.02.05\n")
                f.write("HepMC::Asciiv3-START_EVENT_LISTING\n")
                for ev in events:
                    write_event(f, ev, momentum_unit=momentum_unit, length_unit=length_unit)
                    n += 1
                f.write("HepMC::Asciiv3-END_EVENT_LISTING\n")
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise
        os.replace(tmp, p)
        return n
