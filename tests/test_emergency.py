import pytest
from launch_sim import emergency


def make_snapshot(altitude=0.0, velocity=0.0, fuel=1000.0, status='RUNNING'):
    return {
        'position': {'y': altitude},
        'velocity': {'total': velocity},
        'engine': {'fuel': fuel, 'status': status},
    }


def test_catalog_ids():
    ids = [s.id for s in emergency.EMERGENCY_SCENARIOS]
    assert ids == ['engine_failure', 'fuel_leak', 'guidance_failure',
                   'structural_stress', 'weather_abort', 'range_safety']


def test_get_scenario():
    assert emergency.get_scenario('fuel_leak').name == 'Fuel System Leak'
    assert emergency.get_scenario('nope') is None


def test_auto_trigger_flags():
    assert emergency.get_scenario('range_safety').auto_trigger
    assert not emergency.get_scenario('guidance_failure').auto_trigger
    assert not emergency.get_scenario('weather_abort').auto_trigger


def test_nominal_snapshot_triggers_nothing():
    assert emergency.check_auto_triggers(make_snapshot()) == []


@pytest.mark.parametrize("kwargs,scenario_id", [
    ({'altitude': 60000.0}, 'range_safety'),
    ({'velocity': 2500.0}, 'structural_stress'),
    ({'fuel': 5.0}, 'fuel_leak'),
    ({'status': 'FAILED'}, 'engine_failure'),
])
def test_single_trigger(kwargs, scenario_id):
    triggered = emergency.check_auto_triggers(make_snapshot(**kwargs))
    assert [s.id for s in triggered] == [scenario_id]


def test_thresholds_are_strict():
    snapshot = make_snapshot(altitude=50000.0, velocity=2000.0, fuel=10.0)
    assert emergency.check_auto_triggers(snapshot) == []


def test_abort_actions():
    assert emergency.is_abort_action('Abort Mission')
    assert emergency.is_abort_action('Immediate Abort')
    assert emergency.is_abort_action('Flight Termination System')
    assert not emergency.is_abort_action('Reduce Thrust')


def test_resolving_actions():
    assert emergency.resolves_scenario('Switch to Backup Engine')
    assert emergency.resolves_scenario('Isolate Fuel Lines')
    assert not emergency.resolves_scenario('Monitor Closely')


def test_format_emergency_command():
    token = emergency.format_emergency_command('fuel_leak', 'Isolate Fuel Lines')
    assert token == 'emergency:fuel_leak: Isolate Fuel Lines'
