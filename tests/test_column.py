"""
TEST: SHORT BRACED COLUMN DESIGN
================================

300 × 300 column, fcu = 30, fy = 460, clear height 3 m (le/b = 10):

    Asc = (N - 0.4·fcu·Ag) / (0.75·fy - 0.4·fcu)

    N = 1200 kN → Asc = 120000/333 ≈ 360.4 mm² → 4 Y12 (452 mm²)
    N = 2000 kN → Asc = 920000/333 ≈ 2763 mm² → 6 Y25 (2945 mm²)
"""

import pytest

from beamcraft.checks import ColumnDesignEngine, ColumnStatus, DesignConfig


@pytest.fixture
def engine():
    return ColumnDesignEngine(DesignConfig(fcu=30.0, fy=460.0))


def test_light_load_uses_minimum_bars(engine):
    result = engine.design(1200.0, b=300.0, h=300.0, clear_height=3000.0)

    assert result.status is ColumnStatus.SUCCESS
    assert result.slenderness_ratio == pytest.approx(10.0)
    assert result.steel_required_area == 361
    assert result.provided_steel == "4 Y12"
    assert result.provided_area == 453
    assert result.links == "R6 @ 144mm c/c"
    assert result.utilization_ratio == pytest.approx(0.80)
    print(f"✓ {result.provided_steel}, {result.links}, utilisation {result.utilization_ratio}")


def test_heavier_load_steps_up_bar_size(engine):
    result = engine.design(2000.0, b=300.0, h=300.0, clear_height=3000.0)

    assert result.status is ColumnStatus.SUCCESS
    assert result.steel_required_area == 2763
    assert (result.bar_count, result.bar_diameter) == (6, 25)
    assert result.provided_area == 2946
    # Y25 needs links of at least 25/4 mm
    assert (result.link_diameter, result.link_spacing) == (8, 300)
    assert result.utilization_ratio == pytest.approx(0.94)


def test_concrete_alone_still_gets_minimum_steel(engine):
    result = engine.design(100.0, b=300.0, h=300.0, clear_height=3000.0)
    assert result.status is ColumnStatus.SUCCESS
    assert result.steel_required_area == 360
    assert result.provided_steel == "4 Y12"


def test_over_reinforced_section_terminates(engine):
    result = engine.design(5000.0, b=300.0, h=300.0, clear_height=3000.0)
    assert result.status is ColumnStatus.TERMINATED
    assert "Resize" in result.message
    assert result.provided_steel is None


def test_slender_column_terminates(engine):
    result = engine.design(500.0, b=225.0, h=225.0, clear_height=3000.0)
    assert result.status is ColumnStatus.TERMINATED
    assert result.slenderness_ratio == pytest.approx(13.33, abs=0.01)
    assert "slender" in result.message


def test_bar_and_link_selection(engine):
    assert engine.select_bars(100.0) == (4, 12)
    # 10 × Y12 is too many; 5 × Y16 rounds up to an even 6
    assert engine.select_bars(1000.0) == (6, 16)
    assert engine.select_links(32, 400.0, 400.0) == (8, 300)
    assert engine.select_links(16, 250.0, 400.0) == (6, 192)
    assert engine.select_links(20, 200.0, 400.0) == (6, 200)


def test_invalid_dimensions_raise(engine):
    with pytest.raises(ValueError):
        engine.design(1000.0, b=0.0, h=300.0, clear_height=3000.0)
    with pytest.raises(ValueError):
        engine.design(float("nan"), b=300.0, h=300.0, clear_height=3000.0)


def test_tensile_or_zero_load_is_rejected(engine):
    with pytest.raises(ValueError, match="compressive"):
        engine.design(-50.0, b=300.0, h=300.0, clear_height=3000.0)
    with pytest.raises(ValueError):
        engine.design(0.0, b=300.0, h=300.0, clear_height=3000.0)


def test_design_is_repeatable(engine):
    first = engine.design(2000.0, b=300.0, h=300.0, clear_height=3000.0)
    second = engine.design(2000.0, b=300.0, h=300.0, clear_height=3000.0)
    assert first == second
