"""
Launch Telemetry Simulation - Alert Evaluation

Threshold alerts raised from telemetry snapshots, as shown on the operator
console. Each rule has a fixed id; an id already in the list is not added
again until the list is cleared.
"""

from dataclasses import dataclass
import logging
from typing import Callable, List, NamedTuple, Optional

from .types import TelemetryData

logger = logging.getLogger(__name__)

MAX_ALERTS = 20


@dataclass
class Alert:
    """One raised alert."""
    id: str
    level: str
    message: str
    timestamp: float
    category: str
    acknowledged: bool = False


class AlertRule(NamedTuple):
    id: str
    level: str
    category: str
    message: str
    condition: Callable[[TelemetryData], bool]


# =============================================================================
# RULES
# =============================================================================

ALERT_RULES = (
    # Critical
    AlertRule('critical-gforce', 'critical', 'flight',
              'CRITICAL: Excessive G-force detected - Vehicle stress limit exceeded',
              lambda s: s['acceleration']['total'] > 8.0),
    AlertRule('critical-pressure', 'critical', 'engine',
              'CRITICAL: Engine chamber pressure at dangerous levels',
              lambda s: s['engine']['chamberPressure'] > 18.0),
    AlertRule('critical-stress', 'critical', 'flight',
              'CRITICAL: Structural stress approaching failure threshold',
              lambda s: s['structural']['stress'] > 0.9),

    # Warning
    AlertRule('warning-velocity', 'warning', 'flight',
              'WARNING: High velocity - Approaching design limits',
              lambda s: s['velocity']['total'] > 7500.0),
    AlertRule('warning-altitude', 'warning', 'navigation',
              'WARNING: Approaching maximum operational altitude',
              lambda s: s['position']['y'] > 180000.0),
    AlertRule('warning-fuel', 'warning', 'engine',
              'WARNING: Low fuel reserves - Mission parameters may be affected',
              lambda s: s['engine']['fuel'] < s['engine']['initialFuel'] * 0.15),
    AlertRule('warning-trajectory', 'warning', 'navigation',
              'WARNING: Trajectory deviation exceeds nominal parameters',
              lambda s: s['trajectory']['deviation'] > 0.03),

    # Caution
    AlertRule('caution-vibration', 'caution', 'flight',
              'CAUTION: Elevated vibration levels detected',
              lambda s: s['structural']['vibration'] > 0.7),
    AlertRule('caution-cpu', 'caution', 'system',
              'CAUTION: High avionics CPU load',
              lambda s: s['avionics']['cpuLoad'] > 0.8),

    # System status
    AlertRule('system-avionics-degraded', 'warning', 'system',
              'WARNING: Avionics system operating in degraded mode',
              lambda s: s['avionics']['status'] == 'DEGRADED'),
    AlertRule('critical-avionics-failed', 'critical', 'system',
              'CRITICAL: Avionics system failure - Backup systems engaged',
              lambda s: s['avionics']['status'] == 'FAILED'),
    AlertRule('caution-telemetry', 'caution', 'system',
              'CAUTION: Telemetry link degraded - Data may be intermittent',
              lambda s: s['telemetry']['status'] == 'DEGRADED'),

    # Mission phase
    AlertRule('info-stage-ready', 'info', 'mission',
              'INFO: Stage separation sequence ready for execution',
              lambda s: s['staging']['readyForSeparation']),
    AlertRule('info-payload-ready', 'info', 'mission',
              'INFO: Payload deployment sequence ready for execution',
              lambda s: s['payload']['readyForDeployment']),
)


def evaluate_rules(snapshot: TelemetryData) -> List[AlertRule]:
    """Rules whose condition holds for ``snapshot``."""
    return [rule for rule in ALERT_RULES if rule.condition(snapshot)]


# =============================================================================
# MONITOR
# =============================================================================

class AlertMonitor:
    """Accumulates alerts across a stream of snapshots."""

    def __init__(self, max_alerts: int = MAX_ALERTS):
        self.max_alerts = max_alerts
        self.alerts: List[Alert] = []
        self.last_update: Optional[float] = None

    def check(self, snapshot: TelemetryData) -> List[Alert]:
        """
        Evaluate a snapshot and record any new alerts.

        Snapshots not newer than the last one checked are ignored (a backward
        seek raises nothing until time passes the previous high-water mark).

        Returns:
            The alerts added by this snapshot
        """
        t = snapshot['timestamp']
        if self.last_update is not None and t <= self.last_update:
            return []
        self.last_update = t

        existing = {alert.id for alert in self.alerts}
        added = [
            Alert(id=rule.id, level=rule.level, message=rule.message,
                  timestamp=t, category=rule.category)
            for rule in evaluate_rules(snapshot)
            if rule.id not in existing
        ]
        for alert in added:
            log = logger.warning if alert.level in ('critical', 'warning') else logger.info
            log(f"[t={t:.1f}s] {alert.message}")

        self.alerts = (self.alerts + added)[-self.max_alerts:]
        return added

    def acknowledge(self, alert_id: str) -> bool:
        """Mark an alert acknowledged. Returns False if no such alert."""
        found = False
        for alert in self.alerts:
            if alert.id == alert_id:
                alert.acknowledged = True
                found = True
        return found

    def clear(self) -> None:
        self.alerts = []

    @property
    def unacknowledged(self) -> List[Alert]:
        return [alert for alert in self.alerts if not alert.acknowledged]

    @property
    def critical(self) -> List[Alert]:
        """Unacknowledged critical alerts."""
        return [alert for alert in self.unacknowledged if alert.level == 'critical']
