"""
TEST: LOAD RESULTANTS AND STATIC EFFECTS
========================================

The diagrams and reactions rely on three facts per load:
- its resultant and centroid
- how much of it lies left of a section, and its moment about that section
- the simply supported reactions it produces
"""

import numpy as np
import pytest

from beamcraft.loads import (
    UDL,
    VDL,
    PointLoad,
    discontinuities,
    resultant,
    simple_support_reactions,
    static_effect,
)


def test_resultants():
    assert resultant(PointLoad(1.5, 10.0)) == (10.0, 1.5)

    W, c = resultant(UDL(1.0, 4.0, 5.0))
    assert np.isclose(W, 20.0)
    assert np.isclose(c, 3.0)

    # triangle 0 → 6 over [0, 3]: W = 9, centroid at 2/3 of the length
    W, c = resultant(VDL(high_value=6.0, high_position=3.0))
    assert np.isclose(W, 9.0)
    assert np.isclose(c, 2.0)


def test_static_effect_of_partial_udl():
    """UDL 10 kN/m on [1, 3]; section at x = 2 sees 10 kN acting 0.5 m to its left."""
    force, moment = static_effect(UDL(1.0, 2.0, 10.0), 2.0)
    assert np.isclose(force, 10.0)
    assert np.isclose(moment, 5.0)

    force, moment = static_effect(UDL(1.0, 2.0, 10.0), 5.0)
    assert np.isclose(force, 20.0)
    assert np.isclose(moment, 20.0 * 3.0)

    assert static_effect(UDL(1.0, 2.0, 10.0), 0.5) == (0.0, 0.0)


def test_point_load_at_section_respects_include_flag():
    load = PointLoad(2.0, 8.0)
    assert static_effect(load, 2.0, include_at=True) == (8.0, 0.0)
    assert static_effect(load, 2.0, include_at=False) == (0.0, 0.0)


def test_simple_support_reactions_balance_the_load():
    loads = [PointLoad(1.0, 12.0), UDL(0.0, 4.0, 5.0)]
    r_start, r_end = simple_support_reactions(loads, 4.0)
    assert np.isclose(r_start + r_end, 32.0)
    assert np.isclose(r_start, 12.0 * 3.0 / 4.0 + 10.0)


def test_discontinuities_collect_load_boundaries():
    positions = discontinuities([PointLoad(1.5, 1.0), UDL(2.0, 1.0, 1.0)])
    np.testing.assert_allclose(positions, [1.5, 2.0, 3.0])


def test_zero_span_udl_is_invalid():
    with pytest.raises(ValueError):
        resultant(UDL(0.0, 0.0, 5.0))
