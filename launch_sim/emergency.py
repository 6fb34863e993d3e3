"""
Launch Telemetry Simulation - Emergency Scenario Catalog

Scenarios the mission-control console can raise, the operator actions each
one offers, and the telemetry conditions that raise them automatically.
Chosen actions reach the engine as ``emergency:<id>: <action>`` tokens.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .types import TelemetryData

EMERGENCY_PREFIX = "emergency"


@dataclass(frozen=True)
class TriggerConditions:
    """Auto-trigger thresholds; any satisfied condition raises the scenario."""
    altitude: Optional[float] = None  # m, raise above
    velocity: Optional[float] = None  # m/s, raise above
    fuel: Optional[float] = None  # kg, raise below
    # Raise on engine status FAILED. Reserved for snapshots from external
    # feeds; generated telemetry only reports RUNNING or OFF.
    engine_failure: bool = False

    def is_met(self, snapshot: TelemetryData) -> bool:
        if self.altitude is not None and snapshot['position']['y'] > self.altitude:
            return True
        if self.velocity is not None and snapshot['velocity']['total'] > self.velocity:
            return True
        if self.fuel is not None and snapshot['engine']['fuel'] < self.fuel:
            return True
        if self.engine_failure and snapshot['engine']['status'] == 'FAILED':
            return True
        return False


@dataclass(frozen=True)
class EmergencyScenario:
    id: str
    name: str
    severity: str  # critical, warning, caution
    description: str
    actions: Tuple[str, ...]
    triggers: Optional[TriggerConditions] = None

    @property
    def auto_trigger(self) -> bool:
        return self.triggers is not None


EMERGENCY_SCENARIOS: Tuple[EmergencyScenario, ...] = (
    EmergencyScenario(
        id='engine_failure',
        name='Engine Failure',
        severity='critical',
        description='Primary engine has experienced an anomaly',
        actions=('Abort Mission', 'Switch to Backup Engine', 'Emergency Landing'),
        triggers=TriggerConditions(engine_failure=True),
    ),
    EmergencyScenario(
        id='fuel_leak',
        name='Fuel System Leak',
        severity='critical',
        description='Propellant leak detected in fuel system',
        actions=('Immediate Abort', 'Isolate Fuel Lines', 'Emergency Shutdown'),
        triggers=TriggerConditions(fuel=10.0),
    ),
    EmergencyScenario(
        id='guidance_failure',
        name='Guidance System Failure',
        severity='warning',
        description='Navigation computer has lost primary guidance',
        actions=('Switch to Backup Guidance', 'Manual Control', 'Abort if Critical'),
    ),
    EmergencyScenario(
        id='structural_stress',
        name='Structural Overstress',
        severity='warning',
        description='Vehicle experiencing excessive structural loads',
        actions=('Reduce Thrust', 'Adjust Trajectory', 'Monitor Closely'),
        triggers=TriggerConditions(velocity=2000.0),
    ),
    EmergencyScenario(
        id='weather_abort',
        name='Weather Violation',
        severity='caution',
        description='Weather conditions outside launch criteria',
        actions=('Hold Launch', 'Monitor Weather', 'Scrub Mission'),
    ),
    EmergencyScenario(
        id='range_safety',
        name='Range Safety Violation',
        severity='critical',
        description='Vehicle has deviated from approved flight path',
        actions=('Flight Termination System', 'Immediate Abort', 'Range Clear'),
        triggers=TriggerConditions(altitude=50000.0),
    ),
)

_SCENARIOS_BY_ID: Dict[str, EmergencyScenario] = {s.id: s for s in EMERGENCY_SCENARIOS}


def get_scenario(scenario_id: str) -> Optional[EmergencyScenario]:
    return _SCENARIOS_BY_ID.get(scenario_id)


def check_auto_triggers(snapshot: TelemetryData,
                        scenarios: Sequence[EmergencyScenario] = EMERGENCY_SCENARIOS
                        ) -> List[EmergencyScenario]:
    """Scenarios whose auto-trigger conditions the snapshot satisfies."""
    return [s for s in scenarios if s.triggers is not None and s.triggers.is_met(snapshot)]


def is_abort_action(action: str) -> bool:
    """Actions that escalate to a full abort rather than an emergency command."""
    lowered = action.lower()
    return 'abort' in lowered or 'termination' in lowered


def resolves_scenario(action: str) -> bool:
    """Actions that clear the scenario from the console once sent."""
    lowered = action.lower()
    return 'switch' in lowered or 'isolate' in lowered


def format_emergency_command(scenario_id: str, action: str) -> str:
    """Legacy token: ``emergency:<id>: <action>`` (colon-space before the action)."""
    return f"{EMERGENCY_PREFIX}:{scenario_id}: {action}"
