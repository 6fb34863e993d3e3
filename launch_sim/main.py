"""
Launch Telemetry Simulation - Headless Runner

Drives a RocketSimulation without an operator console:
- Deterministic stepping through ManualTimer (or wall-clock ticks)
- Scheduled (time, command) pairs applied as mission time passes them
- Alert and emergency-trigger monitoring on every snapshot
- Per-snapshot logging and CSV export
"""

import csv
from dataclasses import dataclass, field
import logging
import os
import threading
import time
from typing import Any, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .alerts import Alert, AlertMonitor
from .config import SimulationConfig, create_default_config
from .emergency import check_auto_triggers
from .simulation import RocketSimulation
from .timer import ManualTimer, RepeatingTimer
from .types import TelemetryData

# Configure module logger
logger = logging.getLogger(__name__)

ScheduledCommand = Tuple[float, Any]


@dataclass
class SimulationLog:
    """Container for logged telemetry series, one entry per snapshot."""
    time: List[float] = field(default_factory=list)
    altitude: List[float] = field(default_factory=list)  # km
    downrange: List[float] = field(default_factory=list)  # km
    velocity: List[float] = field(default_factory=list)
    velocity_vertical: List[float] = field(default_factory=list)
    acceleration: List[float] = field(default_factory=list)
    pitch_deg: List[float] = field(default_factory=list)
    thrust: List[float] = field(default_factory=list)  # kN
    chamber_pressure: List[float] = field(default_factory=list)  # MPa
    turbine_speed: List[float] = field(default_factory=list)  # RPM
    fuel: List[float] = field(default_factory=list)  # kg
    oxidizer: List[float] = field(default_factory=list)  # kg
    engine_status: List[str] = field(default_factory=list)
    stage: List[int] = field(default_factory=list)
    stress: List[float] = field(default_factory=list)
    vibration: List[float] = field(default_factory=list)
    latitude_deg: List[float] = field(default_factory=list)
    longitude_deg: List[float] = field(default_factory=list)
    external_temperature: List[float] = field(default_factory=list)  # K
    external_pressure: List[float] = field(default_factory=list)  # Pa
    apogee: List[float] = field(default_factory=list)  # km
    perigee: List[float] = field(default_factory=list)  # km
    eccentricity: List[float] = field(default_factory=list)
    phase_name: List[str] = field(default_factory=list)
    # Events
    alerts: List[Alert] = field(default_factory=list)
    emergencies: List[Tuple[float, str]] = field(default_factory=list)

    def append(self, snapshot: TelemetryData):
        """Log data from one snapshot."""
        engine = snapshot['engine']
        orbit = snapshot['orbitalParameters']
        self.time.append(snapshot['timestamp'])
        self.altitude.append(snapshot['position']['y'] / 1000)
        self.downrange.append(snapshot['position']['x'] / 1000)
        self.velocity.append(snapshot['velocity']['total'])
        self.velocity_vertical.append(snapshot['velocity']['y'])
        self.acceleration.append(snapshot['acceleration']['y'])
        self.pitch_deg.append(float(np.degrees(snapshot['orientation']['pitch'])))
        self.thrust.append(engine['thrust'] / 1000)
        self.chamber_pressure.append(engine['chamberPressure'])
        self.turbine_speed.append(engine['turbineSpeed'])
        self.fuel.append(engine['fuel'])
        self.oxidizer.append(engine['oxidizer'])
        self.engine_status.append(engine['status'])
        self.stage.append(snapshot['staging']['currentStage'])
        self.stress.append(snapshot['structural']['stress'])
        self.vibration.append(snapshot['structural']['vibration'])
        self.latitude_deg.append(snapshot['position']['lat'])
        self.longitude_deg.append(snapshot['position']['lon'])
        self.external_temperature.append(snapshot['environment']['externalTemperature'])
        self.external_pressure.append(snapshot['environment']['externalPressure'])
        self.apogee.append(orbit['currentApogee'] / 1000)
        self.perigee.append(orbit['perigee'] / 1000)
        self.eccentricity.append(orbit['eccentricity'])
        self.phase_name.append(snapshot['missionPhase'])

    def __len__(self) -> int:
        return len(self.time)

    def to_csv(self, filename: str):
        """Write logged series to CSV for offline analysis."""
        os.makedirs(os.path.dirname(filename) or '.', exist_ok=True)
        header = [
            'time', 'altitude_km', 'downrange_km', 'velocity', 'vel_vert', 'accel_vert',
            'pitch_deg', 'thrust_kN', 'chamber_pressure_MPa', 'turbine_speed_rpm',
            'fuel_kg', 'oxidizer_kg', 'engine_status', 'stage',
            'stress', 'vibration', 'latitude_deg', 'longitude_deg',
            'external_temperature_K', 'external_pressure_Pa',
            'apogee_km', 'perigee_km', 'eccentricity', 'phase'
        ]

        with open(filename, 'w', newline='') as fh:
            writer = csv.writer(fh)
            writer.writerow(header)
            for i in range(len(self.time)):
                row = [
                    self.time[i], self.altitude[i], self.downrange[i],
                    self.velocity[i], self.velocity_vertical[i], self.acceleration[i],
                    self.pitch_deg[i], self.thrust[i], self.chamber_pressure[i],
                    self.turbine_speed[i], self.fuel[i], self.oxidizer[i],
                    self.engine_status[i], self.stage[i],
                    self.stress[i], self.vibration[i],
                    self.latitude_deg[i], self.longitude_deg[i],
                    self.external_temperature[i], self.external_pressure[i],
                    self.apogee[i], self.perigee[i], self.eccentricity[i],
                    self.phase_name[i]
                ]
                writer.writerow(row)


class _MissionRecorder:
    """Telemetry consumer: logs snapshots, raises alerts, fires scheduled commands."""

    def __init__(self, commands: Sequence[ScheduledCommand], verbose: bool):
        self.log = SimulationLog()
        self.alerts = AlertMonitor()
        self.pending = sorted(commands, key=lambda item: item[0])
        self.verbose = verbose
        self.sim: Optional[RocketSimulation] = None
        self.last_print_time = -np.inf
        self.seen_emergencies = set()

    def apply_due_commands(self, t: float):
        while self.pending and self.pending[0][0] <= t + 1e-9:
            at, command = self.pending.pop(0)
            applied = self.sim.send_command(command)
            logger.info(f"Scheduled command {command!r} (t={at:g}s) "
                        f"{'applied' if applied else 'rejected'} at t={t:.1f}s")

    def __call__(self, snapshot: TelemetryData):
        t = snapshot['timestamp']
        self.log.append(snapshot)
        self.log.alerts.extend(self.alerts.check(snapshot))

        for scenario in check_auto_triggers(snapshot):
            if scenario.id not in self.seen_emergencies:
                self.seen_emergencies.add(scenario.id)
                self.log.emergencies.append((t, scenario.id))
                logger.warning(f"Emergency condition at t={t:.1f}s: {scenario.name}")

        if self.verbose and t - self.last_print_time >= 10.0:
            _print_status(snapshot)
            self.last_print_time = t

        self.apply_due_commands(t)


def _print_status(snapshot: TelemetryData):
    """Print a formatted status row."""
    # Format: Time | Alt | Vel | Stage | Phase
    msg = (f"{snapshot['timestamp']:10.1f} | {snapshot['position']['y']/1000:10.2f} | "
           f"{snapshot['velocity']['total']:10.1f} | {snapshot['staging']['currentStage']:^7d} | "
           f"{snapshot['missionPhase']:<22}")
    print(msg)
    logger.debug(msg)


def run_mission(duration: Optional[float] = None, speed: float = 1.0,
                config: Optional[SimulationConfig] = None,
                commands: Optional[Iterable[ScheduledCommand]] = None,
                verbose: Optional[bool] = None,
                realtime: bool = False) -> tuple:
    """
    Run the telemetry engine from launch to ``duration``.

    Args:
        duration: Mission time to stop at (default: config.max_time)
        speed: Playback multiplier, must be positive
        config: SimulationConfig instance. If None a default is created.
        commands: (mission_time, command) pairs; command is a Command,
            token string or {"type": ...} mapping
        verbose: Print progress rows. Defaults to config.verbose.
        realtime: Tick on the wall clock instead of stepping manually

    Returns:
        (final_snapshot, log, termination_reason) tuple
    """
    if config is None:
        config = create_default_config()
    if verbose is None:
        verbose = config.verbose
    if not speed > 0:
        raise ValueError(f"Headless runs need a positive speed, got {speed}")
    end_time = config.max_time if duration is None else min(duration, config.max_time)

    recorder = _MissionRecorder(list(commands or []), verbose)
    finished = threading.Event()
    errors: List[Exception] = []

    def on_error(exc: Exception):
        errors.append(exc)
        finished.set()

    def on_telemetry(snapshot: TelemetryData):
        recorder(snapshot)
        if snapshot['timestamp'] >= end_time - 1e-9 or not sim.running:
            finished.set()

    timer_factory = RepeatingTimer if realtime else ManualTimer
    sim = RocketSimulation(on_telemetry, on_error=on_error, config=config,
                           timer_factory=timer_factory)
    recorder.sim = sim
    sim.set_speed(speed)

    logger.info(f"Starting mission: duration={end_time}s, speed={speed}x, "
                f"tick={config.tick_interval}s, realtime={realtime}")
    if verbose:
        print("\n" + "=" * 80)
        print(f"LAUNCH TELEMETRY SIMULATION | T_max={end_time:g}s | speed={speed:g}x")
        print("=" * 80)
        print(f"{'Time (s)':^10} | {'Alt (km)':^10} | {'Vel (m/s)':^10} | {'Stage':^7} | {'Phase':<22}")
        print("-" * 80)

    wall_start = time.time()
    sim.set_time(0.0)
    if not sim.state.aborted:
        sim.start()

    try:
        if realtime:
            while sim.running and not finished.wait(timeout=0.5):
                pass
        else:
            while sim.running and sim.current_time < end_time - 1e-9:
                sim.timer.fire()
    finally:
        sim.cleanup()

    if errors:
        raise errors[0]

    final = sim.snapshot()
    if sim.state.aborted:
        reason = f"Mission aborted at t={final['timestamp']:.1f}s"
    elif final['timestamp'] >= config.max_time - 1e-9:
        reason = f"Reached max simulation time ({config.max_time:g}s)"
    else:
        reason = f"Reached requested duration ({end_time:g}s)"

    _log_completion(final, recorder.log, time.time() - wall_start, reason, verbose)
    return final, recorder.log, reason


def _log_completion(final: TelemetryData, log: SimulationLog, elapsed: float,
                    reason: str, verbose: bool):
    """Log and print summary statistics."""
    logger.info(f"Simulation complete: {reason}; {len(log)} snapshots in {elapsed:.2f}s")
    logger.info(f"Final state: alt={final['position']['y']/1000:.2f}km, "
                f"v={final['velocity']['total']:.1f}m/s, phase={final['missionPhase']}")

    if verbose:
        print("-" * 80)
        print("SIMULATION COMPLETED")
        print("-" * 80)
        print(f"Termination:    {reason}")
        print(f"Final Time:     {final['timestamp']:.2f} s")
        print(f"Final Altitude: {final['position']['y']/1000:.2f} km")
        print(f"Final Velocity: {final['velocity']['total']:.2f} m/s")
        print(f"Mission Phase:  {final['missionPhase']}")
        print(f"Alerts Raised:  {len(log.alerts)}")
        print("-" * 80)
        print(f"Snapshots:   {len(log):,}")
        print(f"Wall Time:   {elapsed:.2f} s")
        print("=" * 80)
