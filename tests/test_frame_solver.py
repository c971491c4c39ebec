"""
TEST: Portal Frame Analysis and Sidesway Classification
=======================================================

Fixed-base portal, columns 4 m, beam 6 m:

        B ───────── C
        │           │
        │           │
        A           D        (A, D fixed)

This test validates that the frame solver:
1. Classifies symmetric gravity loading as braced and lateral load as sway
2. Satisfies global equilibrium (forces and moments balance)
3. Recovers textbook column moments when the beam is very stiff
4. Rejects inclined members, disconnected frames and mechanisms
"""

import numpy as np
import pytest

from beamcraft import (
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
    solve_frame,
)
from beamcraft.loads import resultant
from beamcraft.post import applied_load_totals

H, L = 4.0, 6.0


def portal(beam_loads=(), actions=(), base="fixed", beam_I=1.0):
    a = Node("A", 0.0, 0.0, Support(SupportKind(base)))
    b = Node("B", 0.0, H)
    c = Node("C", L, H)
    d = Node("D", L, 0.0, Support(SupportKind(base)))
    members = [
        Member(MemberKind.COLUMN, a, b),
        Member(MemberKind.BEAM, b, c, loads=beam_loads, I=beam_I),
        Member(MemberKind.COLUMN, d, c),
    ]
    return StructureModel.create(members, actions)


def assert_global_equilibrium(model, result):
    fx, fy = applied_load_totals(model)
    rx = sum(r.x or 0.0 for r in result.reactions)
    ry = sum(r.y for r in result.reactions)
    assert np.isclose(rx + fx, 0.0, atol=1e-8), f"Horizontal: {rx} + {fx} != 0"
    assert np.isclose(ry + fy, 0.0, atol=1e-8), f"Vertical: {ry} + {fy} != 0"

    # moments about the origin, anticlockwise positive
    moment = sum(r.m or 0.0 for r in result.reactions)
    for r in result.reactions:
        node = model.nodes[r.node_id]
        moment += node.x * r.y - node.y * (r.x or 0.0)
    for action in model.nodal_actions.values():
        node = model.nodes[action.node_id]
        moment += node.x * action.fy - node.y * action.fx + action.mz
    for member in model.members:
        L_m = member.length
        c, s = member.dx / L_m, member.dy / L_m
        for load in member.loads:
            W, pos = resultant(load)
            x = member.start.x + c * pos
            y = member.start.y + s * pos
            moment += x * (-W * c) - y * (W * s)
    assert np.isclose(moment, 0.0, atol=1e-7), f"Moment equilibrium residual {moment}"


def test_symmetric_gravity_is_braced():
    w = 10.0
    model = portal(beam_loads=[UDL(0.0, L, w)])
    result = solve_frame(model)

    assert result.sidesway is False
    ra, rd = result.reaction("A"), result.reaction("D")
    assert np.isclose(ra.y, w * L / 2)
    assert np.isclose(rd.y, w * L / 2)
    assert np.isclose(ra.x, -rd.x)
    assert np.isclose(ra.m, -rd.m)
    assert ra.x > 0.0, "Base thrust should point inward"

    ends = result.end_moment("BC")
    assert np.isclose(ends.left, -ends.right)
    assert_global_equilibrium(model, result)


def test_axial_forces_from_chain_equilibrium():
    w = 10.0
    result = solve_frame(portal(beam_loads=[UDL(0.0, L, w)]))

    assert np.isclose(result.forces("AB").axial, -w * L / 2)
    assert np.isclose(result.forces("DC").axial, -w * L / 2)
    # beam compressed by the column tops, equal to the base thrust
    assert np.isclose(result.forces("BC").axial, -result.reaction("A").x)
    assert all(np.isclose(p.axial, -w * L / 2) for p in result.diagrams["AB"])


def test_lateral_load_sways():
    P = 10.0
    model = portal(actions=[NodalAction("B", fx=P)])
    result = solve_frame(model)

    assert result.sidesway is True
    ra, rd = result.reaction("A"), result.reaction("D")
    assert np.isclose(ra.x, -P / 2)
    assert np.isclose(rd.x, -P / 2)
    assert np.isclose(ra.y, -rd.y)
    assert_global_equilibrium(model, result)
    print(f"✓ Sway portal: Rx = {ra.x:.3f}, {rd.x:.3f}")


def test_stiff_beam_gives_fixed_fixed_column_moments():
    """Rigid beam: each column bends in double curvature, M = (P/2)·(H/2)."""
    P = 10.0
    result = solve_frame(portal(actions=[NodalAction("B", fx=P)], beam_I=1e6))

    expected = P / 2 * H / 2
    np.testing.assert_allclose(
        [result.reaction("A").m, result.reaction("D").m], [expected, expected], rtol=1e-4
    )
    np.testing.assert_allclose(result.reaction("D").y, P * H / L - 2 * expected / L, rtol=1e-4)


def test_asymmetric_gravity_sways():
    model = portal(beam_loads=[PointLoad(2.0, 20.0)])
    result = solve_frame(model)

    assert result.sidesway is True
    assert np.isclose(sum(r.y for r in result.reactions), 20.0)
    assert_global_equilibrium(model, result)


def test_beam_level_pin_braces_the_floor():
    """A pinned support on the floor holds it, so lateral load causes no sidesway."""
    a = Node("A", 0.0, 0.0, Support(SupportKind.FIXED))
    b = Node("B", 0.0, H)
    c = Node("C", L, H)
    d = Node("D", L, 0.0, Support(SupportKind.FIXED))
    e = Node("E", L + 4.0, H, Support(SupportKind.PINNED))
    model = StructureModel.create(
        [
            Member(MemberKind.COLUMN, a, b),
            Member(MemberKind.BEAM, b, c),
            Member(MemberKind.COLUMN, d, c),
            Member(MemberKind.BEAM, c, e, loads=[UDL(0.0, 4.0, 5.0)]),
        ],
        [NodalAction("B", fx=10.0)],
    )
    result = solve_frame(model)

    assert result.sidesway is False
    assert result.reaction("E").m is None
    assert_global_equilibrium(model, result)


def test_pinned_bases_report_no_moment():
    model = portal(beam_loads=[UDL(0.0, L, 10.0)], actions=[NodalAction("B", fx=5.0)], base="pinned")
    result = solve_frame(model)

    assert result.sidesway is True
    assert result.reaction("A").m is None
    assert abs(result.end_moment("AB").left) < 1e-9
    assert_global_equilibrium(model, result)


def test_roller_bases_with_lateral_load_are_a_mechanism():
    model = portal(actions=[NodalAction("B", fx=5.0)], base="roller")
    with pytest.raises(MechanismError):
        solve_frame(model)


def test_inclined_member_is_rejected():
    a = Node("A", 0.0, 0.0, Support(SupportKind.FIXED))
    b = Node("B", 3.0, 4.0)
    model = StructureModel.create([Member(MemberKind.INCLINED, a, b)])
    with pytest.raises(ModelValidationError, match="inclined"):
        solve_frame(model)


def test_disconnected_frame_is_rejected():
    m1 = Member(MemberKind.COLUMN, Node("A", 0.0, 0.0, Support(SupportKind.FIXED)), Node("B", 0.0, 3.0))
    m2 = Member(MemberKind.COLUMN, Node("C", 5.0, 0.0, Support(SupportKind.FIXED)), Node("D", 5.0, 3.0))
    with pytest.raises(ModelValidationError):
        solve_frame(StructureModel.create([m1, m2]))


def test_frame_ignores_settlement():
    a = Node("A", 0.0, 0.0, Support(SupportKind.FIXED, settlement=0.05))
    b = Node("B", 0.0, H)
    c = Node("C", L, H)
    d = Node("D", L, 0.0, Support(SupportKind.FIXED))
    members = [
        Member(MemberKind.COLUMN, a, b),
        Member(MemberKind.BEAM, b, c, loads=[UDL(0.0, L, 10.0)]),
        Member(MemberKind.COLUMN, d, c),
    ]
    settled = solve_frame(StructureModel.create(members))
    plain = solve_frame(portal(beam_loads=[UDL(0.0, L, 10.0)]))
    assert settled.to_dict()["end_moments"] == plain.to_dict()["end_moments"]


def test_result_dict_shape():
    result = solve_frame(portal(beam_loads=[UDL(0.0, L, 10.0)]))
    out = result.to_dict()

    assert out["mode"] == "frame"
    assert out["sidesway"] is False
    assert {"member_id", "left", "right"} <= set(out["end_moments"][0])
    assert set(out["diagrams"]["BC"]) == {"x", "shear", "moment", "axial"}
    reaction = next(r for r in out["reactions"] if r["node_id"] == "A")
    assert {"x", "y", "m"} <= set(reaction)


def test_two_storey_frame_has_one_sway_per_floor():
    """
    Pinned-base two-storey frame, storeys 4 m, bay 6 m:

        E ───── F      5 kN at E
        │       │
        B ───── C      10 kN at B
        │       │
        A       D      (A, D pinned)

    Each floor (B-C, E-F) gets its own sway unknown.
    """
    a = Node("A", 0.0, 0.0, Support(SupportKind.PINNED))
    b = Node("B", 0.0, H)
    c = Node("C", L, H)
    d = Node("D", L, 0.0, Support(SupportKind.PINNED))
    e = Node("E", 0.0, 2 * H)
    f = Node("F", L, 2 * H)
    model = StructureModel.create(
        [
            Member(MemberKind.COLUMN, a, b),
            Member(MemberKind.BEAM, b, c, loads=[UDL(0.0, L, 10.0)]),
            Member(MemberKind.COLUMN, d, c),
            Member(MemberKind.COLUMN, b, e),
            Member(MemberKind.BEAM, e, f, loads=[PointLoad(3.0, 20.0)]),
            Member(MemberKind.COLUMN, c, f),
        ],
        [NodalAction("B", fx=10.0), NodalAction("E", fx=5.0)],
    )
    result = solve_frame(model)

    assert result.sidesway is True
    sway_labels = [label for label in result.dof_labels if label.startswith("ux:")]
    assert sway_labels == ["ux:[B,C]", "ux:[E,F]"]

    assert np.isclose(sum(r.x for r in result.reactions), -15.0)
    assert np.isclose(sum(r.y for r in result.reactions), 80.0)
    assert all(r.m is None for r in result.reactions)
    assert_global_equilibrium(model, result)
    print(f"✓ Two-storey frame: {len(sway_labels)} sway DOFs")


def test_frame_solve_is_repeatable():
    model = portal(beam_loads=[PointLoad(2.0, 20.0)], actions=[NodalAction("B", fx=4.0)])
    assert solve_frame(model).to_dict() == solve_frame(model).to_dict()
