"""
Launch Telemetry Simulation - Snapshot Validation

Invariant checks on emitted telemetry:
- Timestamp inside [0, maxSimulationTime]
- Propellant never negative
- Normalized readings (stress, vibration, CPU, memory) inside [0, 1]
- Altitude never below ground
- Stage counter inside [1, totalStages]

Raise ValidationError on violation.
"""

from typing import Optional, Tuple

from .types import EngineData, TelemetryData


class ValidationError(Exception):
    """Raised when a telemetry snapshot breaks an invariant."""
    pass


def check_timestamp_in_range(snapshot: TelemetryData) -> bool:
    """
    Verify the snapshot time lies on the simulation clock.

    Returns:
        True if valid, raises ValidationError otherwise
    """
    t = snapshot['timestamp']
    t_max = snapshot['maxSimulationTime']
    if not 0.0 <= t <= t_max:
        raise ValidationError(f"Timestamp out of range: t = {t:.3f} s, max = {t_max:.3f} s")
    return True


def check_propellant_non_negative(engine: EngineData) -> bool:
    """
    Check that remaining fuel and oxidizer are not negative.

    Returns:
        True if valid, raises ValidationError otherwise
    """
    for key in ('fuel', 'oxidizer'):
        if engine[key] < 0.0:
            raise ValidationError(f"Negative {key}: {engine[key]:.3f} kg")
    return True


def check_fraction(name: str, value: float) -> bool:
    """Check that a normalized reading lies in [0, 1]."""
    if not 0.0 <= value <= 1.0:
        raise ValidationError(f"{name} outside [0, 1]: {value:.4f}")
    return True


def check_altitude_non_negative(snapshot: TelemetryData) -> bool:
    altitude = snapshot['position']['y']
    if altitude < 0.0:
        raise ValidationError(f"Altitude below ground: h = {altitude:.2f} m")
    return True


def check_stage_index(snapshot: TelemetryData) -> bool:
    staging = snapshot['staging']
    if not 1 <= staging['currentStage'] <= staging['totalStages']:
        raise ValidationError(
            f"Stage counter out of range: {staging['currentStage']} "
            f"of {staging['totalStages']}"
        )
    return True


def _checks(snapshot: TelemetryData):
    return [
        ('timestamp_in_range', lambda: check_timestamp_in_range(snapshot)),
        ('propellant_non_negative', lambda: check_propellant_non_negative(snapshot['engine'])),
        ('stress_fraction', lambda: check_fraction('stress', snapshot['structural']['stress'])),
        ('vibration_fraction',
         lambda: check_fraction('vibration', snapshot['structural']['vibration'])),
        ('cpu_fraction', lambda: check_fraction('cpuLoad', snapshot['avionics']['cpuLoad'])),
        ('memory_fraction',
         lambda: check_fraction('memoryUsage', snapshot['avionics']['memoryUsage'])),
        ('altitude_non_negative', lambda: check_altitude_non_negative(snapshot)),
        ('stage_index', lambda: check_stage_index(snapshot)),
    ]


def check_snapshot(snapshot: TelemetryData,
                   raise_on_error: bool = True) -> Tuple[bool, Optional[str]]:
    """
    Perform all validation checks on a snapshot.

    Args:
        snapshot: Telemetry snapshot to validate
        raise_on_error: If True, raise on the first violation
    """
    try:
        for _, check in _checks(snapshot):
            check()
        return True, None
    except ValidationError as e:
        if raise_on_error:
            raise
        return False, str(e)


def run_validation_suite(snapshot: TelemetryData) -> dict:
    """
    Run every check and collect the results.

    Returns:
        Dictionary of check name -> 'PASS' / 'FAIL: ...', plus 'all_passed'
    """
    results = {'all_passed': True}
    for name, check in _checks(snapshot):
        try:
            check()
            results[name] = 'PASS'
        except ValidationError as e:
            results[name] = f'FAIL: {e}'
            results['all_passed'] = False
    return results
