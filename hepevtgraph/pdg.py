"""PDG particle names for summaries.

Uses scikit-hep ``particle`` when installed; otherwise a short table of the
particles most often found in generator records.
"""

from __future__ import annotations

_FALLBACK_NAMES = {
    1: "d",
    2: "u",
    3: "s",
    4: "c",
    5: "b",
    6: "t",
    11: "e-",
    12: "nu(e)",
    13: "mu-",
    14: "nu(mu)",
    15: "tau-",
    16: "nu(tau)",
    21: "g",
    22: "gamma",
    23: "Z0",
    24: "W+",
    25: "H",
    111: "pi0",
    211: "pi+",
    130: "K(L)0",
    321: "K+",
    2112: "n",
    2212: "p",
}

try:
    from particle import Particle as _Particle  # type: ignore
except Exception:  # pragma: no cover
    _Particle = None


def _fallback_name(pdg_id: int) -> str:
    base = _FALLBACK_NAMES.get(abs(pdg_id))
    if base is None:
        return str(pdg_id)
    if pdg_id > 0:
        return base
    if base.endswith("+"):
        return base[:-1] + "-"
    if base.endswith("-"):
        return base[:-1] + "+"
    return base + "~"


def name(pdg_id: int) -> str:
    if _Particle is not None:
        try:
            return _Particle.from_pdgid(pdg_id).name
        except Exception:
            pass
    return _fallback_name(pdg_id)


def has_particle_table() -> bool:
    return _Particle is not None
