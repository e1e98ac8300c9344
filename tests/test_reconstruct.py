from __future__ import annotations

import numpy as np
import pytest

from hepevtgraph import (
    FourVector,
    GenEvent,
    HepevtPreconditionError,
    fill_genevent_from_hepevt,
    genevent_from_record,
    parent_key,
)


@pytest.mark.parametrize(
    "raw, key",
    [
        ((1, 1), None),
        ((1, 3), None),
        ((3, 1), None),
        ((2, 1), None),
        ((4, 2), None),
        ((2, 2), (1, 1)),
        ((2, 3), (1, 2)),
        ((5, 9), (4, 8)),
        ((0, 0), (-1, -1)),
    ],
)
def test_parent_key_normalizes_and_skips(raw, key):
    assert parent_key(*raw) == key


def test_siblings_of_row_zero_have_no_vertex(make_record):
    ev = genevent_from_record(make_record([(1, 1), (1, 1), (2, 2)]))

    assert len(ev.particles) == 3
    assert len(ev.vertices) == 1
    assert ev.particles[0].production_vertex is None
    assert ev.particles[1].production_vertex is None

    v = ev.vertices[0]
    assert v.particles_in == [1]
    assert v.particles_out == [2]
    assert ev.particles[2].production_vertex == 0
    assert ev.particles[1].end_vertex == 0


def test_shared_parent_range_gives_one_vertex(make_record):
    ev = genevent_from_record(make_record([(1, 1), (1, 1), (1, 2), (1, 2)]))

    # (1, 2) normalizes to (0, 1), which is skipped: first == 0
    assert ev.vertices == []

    ev = genevent_from_record(make_record([(1, 1), (1, 1), (1, 1), (2, 3), (2, 3)]))
    assert len(ev.vertices) == 1
    v = ev.vertices[0]
    assert v.particles_in == [1, 2]
    assert v.particles_out == [3, 4]
    assert ev.vertex(ev.particles[3].production_vertex) is ev.vertex(ev.particles[4].production_vertex)


def test_momentum_and_mass_scaling():
    ev = GenEvent()
    ok = fill_genevent_from_hepevt(
        ev,
        [[1.0, 2.0, 3.0, 4.0]],
        [0.5],
        [[1.0, 1.0, 1.0, 1.0]],
        [1],
        [22],
        [[1, 1]],
        [[0, 0]],
        momentum_scaling=2.0,
    )
    assert ok is True
    p = ev.particles[0]
    assert p.momentum == FourVector(2.0, 4.0, 6.0, 8.0)
    assert p.generated_mass == pytest.approx(1.0)
    assert p.status == 1
    assert p.pid == 22


def test_length_scaling_applies_to_vertex_position(make_record):
    vertex = np.zeros((3, 4))
    vertex[2] = [1.0, 2.0, 3.0, 4.0]
    rec = make_record([(1, 1), (1, 1), (2, 2)], vertex=vertex)

    ev = genevent_from_record(rec, length_scaling=10.0)

    assert ev.vertices[0].position == FourVector(10.0, 20.0, 30.0, 40.0)
    # Momenta are untouched by length scaling
    assert ev.particles[2].momentum == FourVector(8.0, 9.0, 10.0, 11.0)


def test_vertex_position_comes_from_first_row_with_key(make_record):
    vertex = np.zeros((4, 4))
    vertex[2] = [1.0, 1.0, 1.0, 1.0]
    vertex[3] = [9.0, 9.0, 9.0, 9.0]
    ev = genevent_from_record(make_record([(1, 1), (1, 1), (2, 2), (2, 2)], vertex=vertex))

    assert len(ev.vertices) == 1
    assert ev.vertices[0].position == FourVector(1.0, 1.0, 1.0, 1.0)
    assert ev.vertices[0].particles_in == [1]


def test_overlapping_ranges_get_distinct_vertices(make_record):
    parents = [(1, 1), (1, 1), (1, 1), (1, 1), (2, 3), (3, 4), (2, 3), (4, 3)]
    ev = genevent_from_record(make_record(parents))

    assert len(ev.vertices) == 2
    assert ev.vertices[0].particles_in == [1, 2]
    assert ev.vertices[0].particles_out == [4, 6]
    assert ev.vertices[1].particles_in == [2, 3]
    assert ev.vertices[1].particles_out == [5]
    # Row 2 feeds both vertices; its end vertex is the first one it joined
    assert ev.particles[2].end_vertex == 0
    # Inverted range (4, 3) is skipped
    assert ev.particles[7].production_vertex is None


def test_particles_preserve_row_order_and_values(ee_record):
    ev = genevent_from_record(ee_record)

    assert ev.event_number == len(ee_record) == 7
    assert [p.pid for p in ev.particles] == [90, 11, -11, 23, 13, -13, 22]
    assert [p.id for p in ev.particles] == [1, 2, 3, 4, 5, 6, 7]
    for i, p in enumerate(ev.particles):
        assert tuple(p.momentum) == tuple(ee_record.momentum[i])
        assert p.generated_mass == ee_record.mass[i]
        assert p.status == ee_record.status[i]


def test_every_parented_row_is_outgoing_of_exactly_one_vertex(ee_record):
    ev = genevent_from_record(ee_record)

    assert len(ev.vertices) == 3
    assert [v.id for v in ev.vertices] == [-1, -2, -3]

    for i in range(len(ee_record)):
        key = parent_key(*ee_record.parents[i])
        owners = [h for h, v in enumerate(ev.vertices) if i in v.particles_out]
        if key is None:
            assert owners == []
            assert ev.particles[i].production_vertex is None
            continue
        assert len(owners) == 1
        first, last = key
        assert ev.vertices[owners[0]].particles_in == list(range(first, last + 1))
        assert ev.particles[i].production_vertex == owners[0]

    assert [p.pid for p in ev.beam_particles()] == [90, 11, -11]
    assert [p.pid for p in ev.outgoing(1)] == [13, -13]
    assert [p.pid for p in ev.incoming(0)] == [11, -11]


def test_reconstruction_is_repeatable(ee_record):
    a = genevent_from_record(ee_record)
    b = genevent_from_record(ee_record)
    assert a == b
    assert a.particles[0] is not b.particles[0]


def test_children_column_is_ignored(ee_arrays):
    ev_a = GenEvent()
    fill_genevent_from_hepevt(ev_a, **ee_arrays)

    arrays = dict(ee_arrays)
    arrays["children"] = np.full((7, 2), 42)
    ev_b = GenEvent()
    fill_genevent_from_hepevt(ev_b, **arrays)

    arrays.pop("children")
    ev_c = GenEvent()
    fill_genevent_from_hepevt(ev_c, **arrays)

    assert ev_a == ev_b == ev_c


def test_empty_record(make_record):
    ev = genevent_from_record(make_record([]))
    assert ev.event_number == 0
    assert ev.particles == []
    assert ev.vertices == []


def test_event_number_override(ee_record):
    ev = genevent_from_record(ee_record, event_number=123)
    assert ev.event_number == 123


def test_non_empty_target_event_is_rejected(ee_arrays):
    ev = GenEvent()
    fill_genevent_from_hepevt(ev, **ee_arrays)
    before = GenEvent(ev.event_number, list(ev.particles), list(ev.vertices))

    with pytest.raises(ValueError, match="empty event"):
        fill_genevent_from_hepevt(ev, **ee_arrays)
    assert ev == before


def test_precondition_failure_leaves_event_untouched(ee_arrays):
    arrays = dict(ee_arrays)
    arrays["mass"] = arrays["mass"][:-1]

    ev = GenEvent()
    with pytest.raises(HepevtPreconditionError):
        fill_genevent_from_hepevt(ev, **arrays)
    assert ev.is_empty()
    assert ev.event_number == 0


def test_float32_input_is_accepted(ee_arrays):
    arrays = {k: (v.astype(np.float32) if v.dtype.kind == "f" else v) for k, v in ee_arrays.items()}
    ev = GenEvent()
    assert fill_genevent_from_hepevt(ev, **arrays)
    assert isinstance(ev.particles[1].momentum.pz, float)
    assert ev.particles[1].momentum.pz == pytest.approx(45.6, rel=1e-6)
