from __future__ import annotations

from importlib import metadata

from .io.registry import register


ENTRY_POINT_GROUP = "hepevtgraph.formats"

_LOADED = False


def load_plugins() -> list[str]:
    """Register extra formats from Python entry points.

    Each entry point in the ``hepevtgraph.formats`` group is a callable
    returning ``(fmt, reader_factory, writer_factory)``; either factory may
    be None. Returns the names of the formats that were registered.
    """

    global _LOADED
    if _LOADED:
        return []
    _LOADED = True

    try:
        eps = metadata.entry_points()
        # Python 3.9 returns a dict keyed by group; 3.10+ has select().
        if hasattr(eps, "select"):
            group = eps.select(group=ENTRY_POINT_GROUP)
        else:
            group = eps.get(ENTRY_POINT_GROUP, [])
    except Exception:
        return []

    loaded = []
    for ep in group:
        try:
            fmt, reader_factory, writer_factory = ep.load()()
            register(fmt, reader_factory, writer_factory)
            loaded.append(fmt)
        except Exception:
            # Plugin failures must not break the built-in formats.
            continue
    return loaded
