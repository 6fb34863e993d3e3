"""Tests for threshold alert evaluation."""

import copy
import unittest

import numpy as np

from launch_sim.alerts import ALERT_RULES, AlertMonitor, evaluate_rules
from launch_sim.config import create_test_config
from launch_sim.state import SimulationState
from launch_sim.telemetry import generate_telemetry


def quiet_snapshot(t=10.0):
    """Nominal snapshot with the random deviation pinned below its threshold."""
    state = SimulationState(current_time=t)
    snap = generate_telemetry(state, create_test_config(), np.random.default_rng(0))
    snap['trajectory']['deviation'] = 0.0
    return snap


class TestRules(unittest.TestCase):

    def test_rule_ids_unique(self):
        ids = [rule.id for rule in ALERT_RULES]
        self.assertEqual(len(ids), len(set(ids)))
        self.assertEqual(len(ids), 14)

    def test_nominal_snapshot_raises_nothing(self):
        self.assertEqual(evaluate_rules(quiet_snapshot()), [])

    def test_thresholds(self):
        cases = [
            (('acceleration', 'total'), 9.0, 'critical-gforce'),
            (('engine', 'chamberPressure'), 19.0, 'critical-pressure'),
            (('structural', 'stress'), 0.95, 'critical-stress'),
            (('velocity', 'total'), 8000.0, 'warning-velocity'),
            (('position', 'y'), 190000.0, 'warning-altitude'),
            (('engine', 'fuel'), 1.0, 'warning-fuel'),
            (('trajectory', 'deviation'), 0.04, 'warning-trajectory'),
            (('structural', 'vibration'), 0.8, 'caution-vibration'),
            (('avionics', 'cpuLoad'), 0.9, 'caution-cpu'),
            (('avionics', 'status'), 'DEGRADED', 'system-avionics-degraded'),
            (('avionics', 'status'), 'FAILED', 'critical-avionics-failed'),
            (('telemetry', 'status'), 'DEGRADED', 'caution-telemetry'),
            (('staging', 'readyForSeparation'), True, 'info-stage-ready'),
            (('payload', 'readyForDeployment'), True, 'info-payload-ready'),
        ]
        for (block, key), value, alert_id in cases:
            snap = quiet_snapshot()
            snap[block][key] = value
            ids = [rule.id for rule in evaluate_rules(snap)]
            self.assertEqual(ids, [alert_id], msg=f"{block}.{key}={value}")


class TestAlertMonitor(unittest.TestCase):

    def setUp(self):
        self.monitor = AlertMonitor()

    def test_new_alert_recorded(self):
        snap = quiet_snapshot()
        snap['acceleration']['total'] = 9.0
        added = self.monitor.check(snap)
        self.assertEqual([a.id for a in added], ['critical-gforce'])
        self.assertEqual(added[0].level, 'critical')
        self.assertEqual(added[0].timestamp, 10.0)
        self.assertEqual(len(self.monitor.critical), 1)

    def test_stale_snapshot_ignored(self):
        self.monitor.check(quiet_snapshot(10.0))
        snap = quiet_snapshot(10.0)
        snap['acceleration']['total'] = 9.0
        self.assertEqual(self.monitor.check(snap), [])

        older = copy.deepcopy(snap)
        older['timestamp'] = 5.0
        self.assertEqual(self.monitor.check(older), [])

    def test_duplicates_suppressed(self):
        for t in (10.0, 11.0, 12.0):
            snap = quiet_snapshot(t)
            snap['structural']['vibration'] = 0.8
            self.monitor.check(snap)
        self.assertEqual([a.id for a in self.monitor.alerts], ['caution-vibration'])

    def test_keeps_most_recent(self):
        monitor = AlertMonitor(max_alerts=3)
        snap = quiet_snapshot()
        snap['acceleration']['total'] = 9.0
        snap['engine']['chamberPressure'] = 19.0
        snap['structural']['stress'] = 0.95
        snap['velocity']['total'] = 8000.0
        snap['position']['y'] = 190000.0
        monitor.check(snap)
        self.assertEqual([a.id for a in monitor.alerts],
                         ['critical-stress', 'warning-velocity', 'warning-altitude'])

    def test_acknowledge(self):
        snap = quiet_snapshot()
        snap['acceleration']['total'] = 9.0
        self.monitor.check(snap)
        self.assertTrue(self.monitor.acknowledge('critical-gforce'))
        self.assertFalse(self.monitor.acknowledge('no-such-alert'))
        self.assertEqual(self.monitor.unacknowledged, [])
        self.assertEqual(self.monitor.critical, [])
        self.assertEqual(len(self.monitor.alerts), 1)

    def test_clear(self):
        snap = quiet_snapshot()
        snap['acceleration']['total'] = 9.0
        self.monitor.check(snap)
        self.monitor.clear()
        self.assertEqual(self.monitor.alerts, [])

        again = quiet_snapshot(11.0)
        again['acceleration']['total'] = 9.0
        self.assertEqual(len(self.monitor.check(again)), 1)


if __name__ == '__main__':
    unittest.main()
