"""Tests for the RocketSimulation clock and emission."""

import threading
import time
import unittest

import numpy as np
import pytest

from launch_sim.config import create_test_config
from launch_sim.simulation import RocketSimulation
from launch_sim.timer import ManualTimer, RepeatingTimer


def make_sim(**overrides):
    received = []
    sim = RocketSimulation(received.append, config=create_test_config(**overrides),
                           timer_factory=ManualTimer)
    return sim, received


class TestClock(unittest.TestCase):
    """Start/pause/tick behaviour driven by ManualTimer."""

    def setUp(self):
        self.sim, self.received = make_sim()

    def test_initial_state(self):
        self.assertFalse(self.sim.running)
        self.assertEqual(self.sim.current_time, 0.0)
        self.assertEqual(self.sim.speed, 1.0)
        self.assertIsNone(self.sim.timer)
        self.assertEqual(self.received, [])

    def test_start_creates_timer(self):
        self.sim.start()
        self.assertTrue(self.sim.running)
        self.assertIsInstance(self.sim.timer, ManualTimer)
        self.assertTrue(self.sim.timer.active)

    def test_start_twice_keeps_timer(self):
        self.sim.start()
        timer = self.sim.timer
        self.sim.start()
        self.assertIs(self.sim.timer, timer)

    def test_each_tick_emits_one_snapshot(self):
        self.sim.start()
        self.sim.timer.fire(10)
        self.assertEqual(len(self.received), 10)
        self.assertAlmostEqual(self.received[0]['timestamp'], 0.1)
        self.assertAlmostEqual(self.received[-1]['timestamp'], 1.0)

    def test_speed_multiplies_advance(self):
        self.sim.set_speed(10.0)
        self.sim.start()
        self.sim.timer.fire()
        self.assertAlmostEqual(self.sim.current_time, 1.0)

    def test_pause_stops_ticks(self):
        self.sim.start()
        timer = self.sim.timer
        timer.fire(3)
        self.sim.pause()
        self.assertFalse(self.sim.running)
        self.assertIsNone(self.sim.timer)
        self.assertEqual(timer.fire(5), 0)
        self.assertEqual(len(self.received), 3)

    def test_pause_twice_is_harmless(self):
        self.sim.pause()
        self.sim.start()
        self.sim.pause()
        self.sim.pause()
        self.assertFalse(self.sim.running)

    def test_update_while_paused_is_noop(self):
        self.assertIsNone(self.sim.update())
        self.assertEqual(self.received, [])

    def test_cleanup_stops_callbacks(self):
        self.sim.start()
        timer = self.sim.timer
        self.sim.cleanup()
        timer.fire(5)
        self.assertEqual(self.received, [])
        self.sim.cleanup()


class TestSeek(unittest.TestCase):

    def setUp(self):
        self.sim, self.received = make_sim()

    def test_set_time_emits_synchronously(self):
        snap = self.sim.set_time(42.0)
        self.assertEqual(snap['timestamp'], 42.0)
        self.assertEqual(len(self.received), 1)
        self.assertIs(self.received[0], snap)
        self.assertFalse(self.sim.running)

    def test_set_time_clamps(self):
        self.assertEqual(self.sim.set_time(-5.0)['timestamp'], 0.0)
        self.assertEqual(self.sim.set_time(1e6)['timestamp'], self.sim.max_time)

    def test_set_time_non_finite(self):
        self.assertEqual(self.sim.set_time(float('nan'))['timestamp'], 0.0)
        self.assertEqual(self.sim.set_time(float('inf'))['timestamp'], self.sim.max_time)
        self.assertEqual(self.sim.set_time(float('-inf'))['timestamp'], 0.0)

    def test_non_finite_speed_ignored(self):
        self.sim.set_speed(2.0)
        self.sim.set_speed(float('nan'))
        self.sim.set_speed(float('inf'))
        self.assertEqual(self.sim.speed, 2.0)
        self.sim.start()
        self.sim.timer.fire()
        self.assertAlmostEqual(self.received[-1]['timestamp'], 0.2)

    def test_seek_while_running_continues_from_new_time(self):
        self.sim.start()
        self.sim.set_time(100.0)
        self.sim.timer.fire()
        self.assertAlmostEqual(self.received[-1]['timestamp'], 100.1)


class TestClockLimits(unittest.TestCase):

    def test_auto_pause_at_max_time(self):
        sim, received = make_sim(max_time=1.0)
        sim.start()
        timer = sim.timer
        fired = timer.fire(100)
        self.assertLessEqual(fired, 11)
        self.assertFalse(sim.running)
        self.assertEqual(received[-1]['timestamp'], 1.0)

    def test_start_at_max_time_pauses_after_one_tick(self):
        sim, received = make_sim(max_time=1.0)
        sim.set_time(1.0)
        sim.start()
        sim.timer.fire(5)
        self.assertFalse(sim.running)
        self.assertEqual([s['timestamp'] for s in received], [1.0, 1.0])

    def test_zero_speed_freezes_time(self):
        sim, received = make_sim()
        sim.set_speed(0.0)
        sim.start()
        sim.timer.fire(5)
        self.assertEqual([s['timestamp'] for s in received], [0.0] * 5)
        self.assertTrue(sim.running)

    def test_negative_speed_rewinds_and_stops_at_zero(self):
        sim, received = make_sim()
        sim.set_time(0.25)
        sim.set_speed(-1.0)
        sim.start()
        sim.timer.fire(10)
        times = [s['timestamp'] for s in received[1:]]
        self.assertEqual(len(times), 3)
        self.assertEqual(times[-1], 0.0)
        self.assertTrue(all(b < a for a, b in zip(times, times[1:])))
        self.assertFalse(sim.running)


class TestTrajectoryHistory(unittest.TestCase):

    def test_one_sample_per_second(self):
        sim, received = make_sim()
        sim.start()
        sim.timer.fire(55)
        lengths = [len(s['trajectoryHistory']) for s in received]
        self.assertTrue(all(0 <= b - a <= 1 for a, b in zip(lengths, lengths[1:])))
        self.assertEqual(lengths[-1], int(np.floor(received[-1]['timestamp'])))

    def test_emitted_history_fixed_at_emission(self):
        sim, received = make_sim()
        sim.set_time(3.0)
        sim.set_time(6.0)
        self.assertEqual(len(received[0]['trajectoryHistory']), 1)
        self.assertEqual(len(received[1]['trajectoryHistory']), 2)
        self.assertEqual(list(received[0]['trajectoryHistory']),
                         received[1]['trajectoryHistory'][:1])

    def test_history_not_reset_by_backward_seek(self):
        sim, received = make_sim()
        sim.set_time(5.0)
        sim.set_time(2.0)
        self.assertEqual(len(received[-1]['trajectoryHistory']), 2)


class TestSnapshotAccess(unittest.TestCase):

    def test_preview_before_first_emission(self):
        sim, received = make_sim()
        snap = sim.snapshot()
        self.assertEqual(snap['timestamp'], 0.0)
        self.assertEqual(received, [])
        self.assertEqual(sim.state.trajectory_history, [])

    def test_snapshot_returns_copy_of_last(self):
        sim, received = make_sim()
        sim.set_time(3.5)
        snap = sim.snapshot()
        self.assertEqual(snap, received[-1])
        snap['engine']['thrust'] = -1.0
        self.assertNotEqual(sim.snapshot()['engine']['thrust'], -1.0)

    def test_reset(self):
        sim, received = make_sim()
        sim.start()
        sim.timer.fire(20)
        sim.send_command("abort")
        sim.reset()
        self.assertEqual(sim.current_time, 0.0)
        self.assertFalse(sim.state.aborted)
        self.assertFalse(sim.running)
        self.assertEqual(sim.snapshot()['missionPhase'], "Pre-Launch")


def test_same_seed_reproduces_run():
    runs = []
    for _ in range(2):
        sim, received = make_sim(seed=11)
        sim.start()
        sim.timer.fire(30)
        runs.append([s['engine']['thrust'] for s in received])
    assert runs[0] == runs[1]


def test_injected_rng_is_used():
    received = []
    rng = np.random.default_rng(3)
    sim = RocketSimulation(received.append, config=create_test_config(), rng=rng,
                           timer_factory=ManualTimer)
    assert sim.rng is rng


def test_callback_can_pause_engine():
    holder = {}

    def on_update(snapshot):
        if snapshot['timestamp'] >= 0.5 - 1e-9:
            holder['sim'].pause()

    sim = RocketSimulation(on_update, config=create_test_config(), timer_factory=ManualTimer)
    holder['sim'] = sim
    sim.start()
    timer = sim.timer
    assert timer.fire(20) == 5
    assert not sim.running


def test_callback_error_goes_to_on_error():
    errors = []

    def on_update(snapshot):
        raise RuntimeError("display crashed")

    sim = RocketSimulation(on_update, on_error=errors.append,
                           config=create_test_config(), timer_factory=ManualTimer)
    sim.start()
    sim.timer.fire()
    assert len(errors) == 1
    assert isinstance(errors[0], RuntimeError)
    assert not sim.running


def test_callback_error_without_handler_propagates():
    def on_update(snapshot):
        raise RuntimeError("display crashed")

    sim = RocketSimulation(on_update, config=create_test_config(), timer_factory=ManualTimer)
    sim.start()
    with pytest.raises(RuntimeError):
        sim.timer.fire()
    assert not sim.running


def test_repeating_timer_drives_engine():
    received = []
    enough = threading.Event()

    def on_update(snapshot):
        received.append(snapshot)
        if len(received) >= 5:
            enough.set()

    sim = RocketSimulation(on_update, config=create_test_config(tick_interval=0.01))
    sim.start()
    assert isinstance(sim.timer, RepeatingTimer)
    assert enough.wait(timeout=5.0)
    sim.cleanup()

    count = len(received)
    time.sleep(0.05)
    assert len(received) == count
    times = [s['timestamp'] for s in received]
    assert times == sorted(times)
