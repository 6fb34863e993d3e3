import pytest
from launch_sim.state import EngineMode, SimulationState, create_initial_state


def test_initial_state():
    state = create_initial_state()
    assert state.current_time == 0.0
    assert state.speed == 1.0
    assert state.running is False
    assert state.trajectory_history == []
    assert state.engine_mode is EngineMode.NOMINAL
    assert state.aborted is False
    assert state.thrust_scale == 1.0


def test_thrust_scale_combines_multiplier_and_throttle():
    state = SimulationState(thrust_multiplier=0.8, throttle=0.5)
    assert state.thrust_scale == pytest.approx(0.4)


def test_thrust_scale_zero_when_shut_down_or_aborted():
    assert SimulationState(engine_mode=EngineMode.SHUTDOWN).thrust_scale == 0.0
    assert SimulationState(aborted=True).thrust_scale == 0.0


def test_copy_is_independent():
    state = SimulationState(current_time=5.0, trajectory_history=[{'x': 0.0, 'y': 1.0, 'z': 0.0}])
    state.separated_stages.add(0)
    state.stage_start_overrides[1] = 4.0
    clone = state.copy()

    clone.trajectory_history.append({'x': 0.0, 'y': 2.0, 'z': 0.0})
    clone.trajectory_history[0]['y'] = 99.0
    clone.separated_stages.add(1)
    clone.stage_start_overrides[1] = 9.0

    assert len(state.trajectory_history) == 1
    assert state.trajectory_history[0]['y'] == 1.0
    assert state.separated_stages == {0}
    assert state.stage_start_overrides == {1: 4.0}


def test_separate_instances_do_not_share_containers():
    a = create_initial_state()
    b = create_initial_state()
    a.trajectory_history.append({})
    assert b.trajectory_history == []


def test_str_summary():
    text = str(SimulationState(current_time=12.5, speed=2.0))
    assert "t=12.50s" in text
    assert "speed=2x" in text
    assert "engine=nominal" in text
