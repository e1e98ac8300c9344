from __future__ import annotations

from typing import Any, Dict, List


def doctor_report() -> Dict[str, Any]:
    checks: List[Dict[str, Any]] = []

    try:
        import numpy

        checks.append({"name": "numpy (arrays)", "ok": True, "detail": f"version {numpy.__version__}"})
    except Exception as e:
        checks.append({"name": "numpy (arrays)", "ok": False, "detail": str(e)})

    try:
        from .io.registry import registered_formats
        from . import convert  # noqa: F401

        checks.append({"name": "formats", "ok": True, "detail": ", ".join(registered_formats())})
    except Exception as e:
        checks.append({"name": "formats", "ok": False, "detail": str(e)})

    # Optional deps
    try:
        import pyarrow  # noqa: F401
        checks.append({"name": "pyarrow (parquet)", "ok": True, "detail": "installed"})
    except Exception:
        checks.append({"name": "pyarrow (parquet)", "ok": True, "detail": "not installed (optional)"})

    from .pdg import has_particle_table

    if has_particle_table():
        checks.append({"name": "particle (pdg)", "ok": True, "detail": "installed"})
    else:
        checks.append({"name": "particle (pdg)", "ok": True, "detail": "not installed (optional), built-in names"})

    ok_all = all(c["ok"] for c in checks)
    summary = "hepevtgraph doctor: OK" if ok_all else "hepevtgraph doctor: FAIL"

    return {"summary": summary, "checks": checks}
