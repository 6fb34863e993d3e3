import pytest
import numpy as np
from launch_sim import stages, constants as C

STAGES = stages.create_default_stages()
WET_TOTAL = C.PAYLOAD_MASS + sum(s.wet_mass for s in STAGES)


def test_stage_properties():
    s1 = STAGES[0]
    assert s1.wet_mass == pytest.approx(C.STAGE1_DRY_MASS + C.STAGE1_PROPELLANT_MASS)
    assert s1.mass_flow_rate == pytest.approx(C.STAGE1_PROPELLANT_MASS / C.STAGE1_BURN_TIME)


def test_zero_burn_time_has_no_flow():
    s = stages.RocketStage("x", 100.0, 50.0, 1000.0, 300.0, 0.0)
    assert s.mass_flow_rate == 0.0
    assert stages.get_burn_progress(1.0, 0.0, s) == 1.0


def test_stage_start_times():
    assert stages.get_stage_start_time(0, STAGES) == 0.0
    assert stages.get_stage_start_time(1, STAGES) == pytest.approx(167.0)
    assert stages.get_stage_start_time(2, STAGES) == pytest.approx(569.0)


@pytest.mark.parametrize("t,expected", [
    (0.0, 0), (100.0, 0), (162.0, 0), (166.9, 0),
    (167.0, 1), (168.0, 1), (400.0, 1), (10000.0, 1),
])
def test_get_current_stage(t, expected):
    assert stages.get_current_stage(t, STAGES) == expected


def test_stage_index_non_decreasing():
    indices = [stages.get_current_stage(t, STAGES) for t in np.arange(0.0, 700.0, 0.5)]
    assert all(b >= a for a, b in zip(indices, indices[1:]))


def test_burn_progress_clamped():
    s1 = STAGES[0]
    assert stages.get_burn_progress(-10.0, 0.0, s1) == 0.0
    assert stages.get_burn_progress(81.0, 0.0, s1) == pytest.approx(0.5)
    assert stages.get_burn_progress(500.0, 0.0, s1) == 1.0


def test_mass_at_liftoff():
    m = stages.compute_total_mass(0.0, STAGES, C.PAYLOAD_MASS)
    assert m == pytest.approx(WET_TOTAL)


def test_mass_strictly_decreasing_while_burning():
    times = np.arange(0.0, 162.0, 1.0)
    masses = [stages.compute_total_mass(t, STAGES, C.PAYLOAD_MASS) for t in times]
    assert all(b < a for a, b in zip(masses, masses[1:]))


def test_mass_constant_during_separation_margin():
    m1 = stages.compute_total_mass(162.5, STAGES, C.PAYLOAD_MASS)
    m2 = stages.compute_total_mass(166.5, STAGES, C.PAYLOAD_MASS)
    assert m1 == pytest.approx(m2)
    # Stage 1 dry mass still attached
    assert m1 == pytest.approx(C.PAYLOAD_MASS + C.STAGE1_DRY_MASS + STAGES[1].wet_mass)


def test_stage_one_dropped_at_next_ignition():
    m = stages.compute_total_mass(167.0, STAGES, C.PAYLOAD_MASS)
    assert m == pytest.approx(C.PAYLOAD_MASS + STAGES[1].wet_mass)


def test_final_stage_keeps_dry_mass():
    m = stages.compute_total_mass(1000.0, STAGES, C.PAYLOAD_MASS)
    assert m == pytest.approx(C.PAYLOAD_MASS + C.STAGE2_DRY_MASS)


def test_separated_stages_excluded():
    m = stages.compute_total_mass(100.0, STAGES, C.PAYLOAD_MASS, separated={0})
    assert m == pytest.approx(C.PAYLOAD_MASS + STAGES[1].wet_mass)


def test_start_time_override():
    m = stages.compute_total_mass(150.0, STAGES, C.PAYLOAD_MASS,
                                  separated={0}, start_times={1: 100.0})
    expected_s2 = C.STAGE2_DRY_MASS + C.STAGE2_PROPELLANT_MASS * (1.0 - 50.0 / C.STAGE2_BURN_TIME)
    assert m == pytest.approx(C.PAYLOAD_MASS + expected_s2)


def test_pre_separated_stage_contributes_nothing():
    s = stages.RocketStage("jettisoned", 100.0, 50.0, 1000.0, 300.0, 10.0, separated=True)
    assert stages.compute_stage_mass(0.0, s, 0.0) == 0.0
