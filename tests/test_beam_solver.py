"""
TEST: CONTINUOUS BEAM SOLVER
============================

Textbook beams with known answers. End moments are anticlockwise
positive, so hogging shows up as +M at a member's start and -M at its end.

    Simply supported UDL:       R = wL/2, M_mid = wL²/8
    Propped cantilever UDL:     M_fixed = wL²/8, R = 5wL/8 and 3wL/8
    Two equal spans UDL:        M_B = wL²/8, R = 3wL/8, 10wL/8, 3wL/8
    Cantilever point load:      M = P·a, R = P
    Fixed-fixed settlement δ:   M = 6EIδ/L² at both ends
"""

import numpy as np
import pytest

from beamcraft import (
    AnalysisOptions,
    MechanismError,
    Member,
    MemberKind,
    ModelValidationError,
    NodalAction,
    Node,
    PointLoad,
    StructureModel,
    Support,
    SupportKind,
    UDL,
    VDL,
    solve_beam,
)
from beamcraft.post import applied_load_totals


def support(kind, settlement=0.0):
    return Support(SupportKind(kind), settlement)


def beam(start, end, loads=(), E=1.0, I=1.0):
    return Member(MemberKind.BEAM, start, end, loads=loads, E=E, I=I)


def test_simply_supported_udl():
    w, L = 10.0, 6.0
    a = Node("A", 0.0, 0.0, support("pinned"))
    b = Node("B", L, 0.0, support("roller"))
    result = solve_beam(StructureModel.create([beam(a, b, [UDL(0.0, L, w)])]))

    assert np.isclose(result.reaction("A").y, w * L / 2)
    assert np.isclose(result.reaction("B").y, w * L / 2)
    assert result.reaction("A").x is None
    assert result.sidesway is None

    ends = result.end_moment("AB")
    assert abs(ends.left) < 1e-9 and abs(ends.right) < 1e-9

    peak = max(p.moment for p in result.diagrams["AB"])
    assert np.isclose(peak, w * L**2 / 8)
    print(f"✓ Simply supported: R = {result.reaction('A').y:.2f}, M_max = {peak:.2f}")


def test_propped_cantilever_udl():
    w, L = 10.0, 6.0
    a = Node("A", 0.0, 0.0, support("fixed"))
    b = Node("B", L, 0.0, support("roller"))
    result = solve_beam(StructureModel.create([beam(a, b, [UDL(0.0, L, w)])]))

    ends = result.end_moment("AB")
    assert np.isclose(ends.left, w * L**2 / 8)
    assert abs(ends.right) < 1e-9
    assert np.isclose(result.reaction("A").y, 5 * w * L / 8)
    assert np.isclose(result.reaction("B").y, 3 * w * L / 8)
    assert np.isclose(result.reaction("A").m, w * L**2 / 8)
    assert result.reaction("B").m is None


def test_two_equal_spans_udl():
    w, L = 10.0, 6.0
    a = Node("A", 0.0, 0.0, support("pinned"))
    b = Node("B", L, 0.0, support("roller"))
    c = Node("C", 2 * L, 0.0, support("roller"))
    model = StructureModel.create([
        beam(a, b, [UDL(0.0, L, w)]),
        beam(b, c, [UDL(0.0, L, w)]),
    ])
    result = solve_beam(model)

    assert np.isclose(result.end_moment("AB").right, -w * L**2 / 8)
    assert np.isclose(result.end_moment("BC").left, w * L**2 / 8)
    np.testing.assert_allclose(
        [result.reaction(n).y for n in "ABC"],
        [3 * w * L / 8, 10 * w * L / 8, 3 * w * L / 8],
    )
    fems = {f.member_id: (f.start, f.end) for f in result.fems}
    np.testing.assert_allclose(fems["AB"], (w * L**2 / 12, -w * L**2 / 12))


def test_cantilever_point_load():
    """Fixed at A, free at B (L = 5), P = 12 at 3 m: M_A = 36, R_A = 12."""
    a = Node("A", 0.0, 0.0, support("fixed"))
    b = Node("B", 5.0, 0.0)
    result = solve_beam(StructureModel.create([beam(a, b, [PointLoad(3.0, 12.0)])]))

    ends = result.end_moment("AB")
    assert np.isclose(ends.left, 36.0)
    assert abs(ends.right) < 1e-9
    assert np.isclose(result.reaction("A").y, 12.0)
    assert np.isclose(result.reaction("A").m, 36.0)
    assert [r.node_id for r in result.reactions] == ["A"]

    shear = result.diagrams["AB"][0].shear
    assert np.isclose(shear, 12.0)


def test_overhang_with_nodal_tip_load():
    """
    Pinned A (0), roller B (4), free tip C (6) with 10 kN down at C:
    R_A = -5, R_B = 15, hogging 20 over B.
    """
    a = Node("A", 0.0, 0.0, support("pinned"))
    b = Node("B", 4.0, 0.0, support("roller"))
    c = Node("C", 6.0, 0.0)
    model = StructureModel.create(
        [beam(a, b), beam(b, c)],
        [NodalAction("C", fy=-10.0)],
    )
    result = solve_beam(model)

    assert np.isclose(result.reaction("A").y, -5.0)
    assert np.isclose(result.reaction("B").y, 15.0)
    assert np.isclose(result.end_moment("AB").right, -20.0)
    assert np.isclose(result.end_moment("BC").left, 20.0)


def test_overhang_member_load_matches_nodal_load():
    a = Node("A", 0.0, 0.0, support("pinned"))
    b = Node("B", 4.0, 0.0, support("roller"))
    c = Node("C", 6.0, 0.0)
    result = solve_beam(StructureModel.create([beam(a, b), beam(b, c, [PointLoad(2.0, 10.0)])]))

    assert np.isclose(result.reaction("A").y, -5.0)
    assert np.isclose(result.reaction("B").y, 15.0)
    assert np.isclose(result.end_moment("BC").left, 20.0)


def test_fixed_fixed_settlement():
    """EI = 2e4, L = 4, B settles 10 mm: both end moments 6EIδ/L² = 75."""
    a = Node("A", 0.0, 0.0, support("fixed"))
    b = Node("B", 4.0, 0.0, support("fixed", 0.01))
    result = solve_beam(StructureModel.create([beam(a, b, E=200e6, I=1e-4)]))

    ends = result.end_moment("AB")
    assert np.isclose(ends.left, 75.0)
    assert np.isclose(ends.right, 75.0)
    assert np.isclose(result.reaction("A").y, 37.5)
    assert np.isclose(result.reaction("B").y, -37.5)

    diffs = result.settlement_differentials
    assert len(diffs) == 1 and np.isclose(diffs[0].delta, 0.01)


def test_middle_support_settlement_on_two_spans():
    """Symmetric settlement δ at B: M_B = 3EIδ/L² (sagging)."""
    EI, L, delta = 2e4, 6.0, 0.01
    a = Node("A", 0.0, 0.0, support("pinned"))
    b = Node("B", L, 0.0, support("roller", delta))
    c = Node("C", 2 * L, 0.0, support("roller"))
    result = solve_beam(StructureModel.create([
        beam(a, b, E=EI, I=1.0),
        beam(b, c, E=EI, I=1.0),
    ]))

    expected = 3 * EI * delta / L**2
    assert np.isclose(result.end_moment("AB").right, expected)
    assert np.isclose(result.end_moment("BC").left, -expected)
    assert np.isclose(result.reaction("B").y, -2 * expected / L)
    assert np.isclose(sum(r.y for r in result.reactions), 0.0, atol=1e-9)


def test_vertical_equilibrium_with_mixed_loads():
    """Σ reactions balances every load shape on a three-span beam with an overhang."""
    a = Node("A", 0.0, 0.0, support("fixed"))
    b = Node("B", 5.0, 0.0, support("roller"))
    c = Node("C", 9.0, 0.0, support("pinned"))
    d = Node("D", 15.0, 0.0, support("roller"))
    e = Node("E", 17.0, 0.0)
    model = StructureModel.create(
        [
            beam(a, b, [PointLoad(2.0, 30.0), UDL(0.0, 5.0, 4.0)]),
            beam(b, c, [VDL(high_value=12.0, high_position=4.0, low_value=2.0, low_position=0.0)]),
            beam(c, d, [UDL(1.0, 3.0, 8.0)], I=2.0),
            beam(d, e, [PointLoad(2.0, 5.0)]),
        ],
        [NodalAction("C", fy=-7.0, mz=3.0)],
    )
    result = solve_beam(model)

    _, fy = applied_load_totals(model)
    total_reaction = sum(r.y for r in result.reactions)
    assert np.isclose(total_reaction + fy, 0.0, rtol=1e-6, atol=1e-9), \
        f"Vertical equilibrium: {total_reaction} vs {-fy}"


def test_point_load_produces_shear_jump_in_diagram():
    a = Node("A", 0.0, 0.0, support("pinned"))
    b = Node("B", 4.0, 0.0, support("roller"))
    result = solve_beam(StructureModel.create([beam(a, b, [PointLoad(2.0, 10.0)])]))

    at_load = [p for p in result.diagrams["AB"] if np.isclose(p.x, 2.0)]
    assert len(at_load) == 2
    assert np.isclose(at_load[0].shear, 5.0)
    assert np.isclose(at_load[1].shear, -5.0)
    assert np.isclose(at_load[0].moment, 10.0)


def test_diagram_resolution_option():
    a = Node("A", 0.0, 0.0, support("pinned"))
    b = Node("B", 6.0, 0.0, support("roller"))
    model = StructureModel.create([beam(a, b, [UDL(0.0, 6.0, 1.0)])])
    result = solve_beam(model, AnalysisOptions(n_points=7))
    assert len(result.diagrams["AB"]) == 7


def test_single_roller_is_a_mechanism():
    a = Node("A", 0.0, 0.0, support("roller"))
    b = Node("B", 4.0, 0.0)
    with pytest.raises(MechanismError):
        solve_beam(StructureModel.create([beam(a, b, [UDL(0.0, 4.0, 1.0)])]))


def test_columns_are_rejected_in_beam_mode():
    a = Node("A", 0.0, 0.0, support("fixed"))
    b = Node("B", 0.0, 3.0)
    model = StructureModel.create([Member(MemberKind.COLUMN, a, b)])
    with pytest.raises(ModelValidationError):
        solve_beam(model)


def test_disconnected_beams_are_rejected():
    m1 = beam(Node("A", 0.0, 0.0, support("pinned")), Node("B", 4.0, 0.0, support("roller")))
    m2 = beam(Node("C", 5.0, 0.0, support("pinned")), Node("D", 8.0, 0.0, support("roller")))
    with pytest.raises(ModelValidationError):
        solve_beam(StructureModel.create([m1, m2]))


def test_solving_twice_gives_identical_output():
    a = Node("A", 0.0, 0.0, support("pinned"))
    b = Node("B", 5.0, 0.0, support("roller", 0.005))
    c = Node("C", 9.0, 0.0, support("fixed"))
    model = StructureModel.create([
        beam(a, b, [PointLoad(1.5, 20.0)]),
        beam(b, c, [UDL(0.0, 4.0, 6.0)]),
    ])
    assert solve_beam(model).to_dict() == solve_beam(model).to_dict()
