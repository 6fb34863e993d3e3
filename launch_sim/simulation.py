"""
Launch Telemetry Simulation - Engine

RocketSimulation owns one SimulationState and drives it:

- Simulation clock: start/pause/set_speed/set_time/cleanup and the per-tick
  update() that advances mission time by ``tick_interval * speed``
- Emission: every tick and every seek produces one complete snapshot and
  hands it to ``on_telemetry_update``
- Command handler: operator commands mutate the overrides in the state;
  the next snapshot reflects them

Ticks, seeks and commands are serialized by one re-entrant lock, so a command
issued between ticks is applied atomically before the next tick sees it.
"""

import copy
import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np

from . import constants as C
from .commands import Command, CommandType, parse_command
from .config import SimulationConfig, create_default_config
from .stages import get_stage_start_time
from .state import EngineMode, SimulationState, create_initial_state
from .telemetry import generate_telemetry, get_active_stage, get_current_fuel
from .timer import RepeatingTimer
from .types import TelemetryData
from .validation import check_snapshot

logger = logging.getLogger(__name__)

TelemetryCallback = Callable[[TelemetryData], None]
ErrorCallback = Callable[[Exception], None]


class RocketSimulation:
    """
    Time-stepped telemetry engine for a multi-stage launch.

    Args:
        on_telemetry_update: Called with every emitted snapshot
        on_error: Receives exceptions raised during timer-driven ticks
        config: Vehicle/mission configuration (defaults if None)
        rng: Random source; seeded from ``config.seed`` if None
        timer_factory: ``(interval, callback) -> timer`` tick source
    """

    def __init__(self, on_telemetry_update: TelemetryCallback,
                 on_error: Optional[ErrorCallback] = None,
                 config: Optional[SimulationConfig] = None,
                 rng: Optional[np.random.Generator] = None,
                 timer_factory: Optional[Callable[..., Any]] = None):
        self.config = config or create_default_config()
        self.on_telemetry_update = on_telemetry_update
        self.on_error = on_error
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self._timer_factory = timer_factory or RepeatingTimer
        self._timer = None
        self._retired_timers: List[Any] = []
        self._lock = threading.RLock()
        self.state: SimulationState = create_initial_state()
        self._last_snapshot: Optional[TelemetryData] = None

        self._handlers: Dict[CommandType, Callable[[Command], bool]] = {
            CommandType.ENGINE_START: self._engine_start,
            CommandType.ENGINE_STOP: self._engine_stop,
            CommandType.THROTTLE_SET: self._throttle_set,
            CommandType.STAGE_SEPARATE: self._stage_separate,
            CommandType.PAYLOAD_DEPLOY: self._payload_deploy,
            CommandType.ABORT: self._abort,
            CommandType.EMERGENCY: self._emergency,
        }
        # (scenario id, lower-cased action) -> handler
        self._emergency_handlers: Dict[Tuple[str, str], Callable[[], None]] = {
            ('engine_failure', 'switch to backup engine'): self._switch_to_backup_engine,
            ('engine_failure', 'emergency landing'): self._emergency_landing,
            ('fuel_leak', 'isolate fuel lines'): self._isolate_fuel_lines,
            ('guidance_failure', 'switch to backup guidance'): self._switch_to_backup_guidance,
            ('structural_stress', 'reduce thrust'): self._reduce_thrust,
        }

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def running(self) -> bool:
        return self.state.running

    @property
    def current_time(self) -> float:
        return self.state.current_time

    @property
    def speed(self) -> float:
        return self.state.speed

    @property
    def max_time(self) -> float:
        return self.config.max_time

    @property
    def timer(self):
        """The active tick source, None while paused."""
        return self._timer

    # =========================================================================
    # SIMULATION CLOCK
    # =========================================================================

    def start(self) -> None:
        """Begin ticking every ``tick_interval`` seconds. No-op while running."""
        with self._lock:
            if self.state.running:
                return
            self.state.running = True
            self._timer = self._timer_factory(self.config.tick_interval, self._tick)
            self._timer.start()
        logger.info(f"Simulation started at t={self.state.current_time:.1f}s, "
                    f"speed={self.state.speed:g}x")

    def pause(self) -> None:
        """Stop ticking. No-op while paused; safe from inside the telemetry callback."""
        with self._lock:
            was_running = self.state.running
            self._stop_clock()
        self._cancel_retired_timers()
        if was_running:
            logger.info(f"Simulation paused at t={self.state.current_time:.1f}s")

    def cleanup(self) -> None:
        """Release the tick source. After this returns no callback fires."""
        self.pause()

    def set_speed(self, multiplier: float) -> None:
        """Scale simulated-time advance per tick; applies from the next tick."""
        multiplier = float(multiplier)
        if not np.isfinite(multiplier):
            logger.warning(f"Non-finite playback speed ignored: {multiplier}")
            return
        with self._lock:
            self.state.speed = multiplier
        logger.info(f"Playback speed set to {multiplier:g}x")

    def set_time(self, t: float) -> TelemetryData:
        """
        Seek to ``t`` (clamped to [0, max_time]) and emit a snapshot synchronously.

        NaN seeks to 0.
        """
        t = float(t)
        if np.isnan(t):
            logger.warning("Seek to NaN treated as t=0s")
            t = 0.0
        with self._lock:
            self.state.current_time = float(np.clip(t, 0.0, self.config.max_time))
            logger.debug(f"Seek to t={self.state.current_time:.2f}s")
            return self._emit()

    def update(self) -> Optional[TelemetryData]:
        """
        One tick: advance time, clamp, auto-pause at the ends, emit.

        Returns the emitted snapshot, or None when the clock is not running.
        """
        with self._lock:
            if not self.state.running:
                return None
            state = self.state
            state.current_time += self.config.tick_interval * state.speed
            if state.current_time >= self.config.max_time:
                state.current_time = self.config.max_time
                self._stop_clock()
                logger.info(f"Reached max simulation time {self.config.max_time:.0f}s")
            elif state.current_time <= 0.0 and state.speed < 0.0:
                state.current_time = 0.0
                self._stop_clock()
                logger.info("Rewound to t=0s")
            snapshot = self._emit()
        self._cancel_retired_timers()
        return snapshot

    def reset(self) -> None:
        """Pause and discard all progress and command overrides."""
        self.pause()
        with self._lock:
            self.state = create_initial_state()
            self._last_snapshot = None
        logger.info("Simulation reset")

    def snapshot(self) -> TelemetryData:
        """Copy of the last emitted snapshot, or a preview of the current time."""
        with self._lock:
            if self._last_snapshot is not None:
                return copy.deepcopy(self._last_snapshot)
            return generate_telemetry(self.state.copy(), self.config, self.rng)

    def _tick(self) -> None:
        """Timer callback. Failures pause the clock and go to on_error."""
        try:
            self.update()
        except Exception as e:
            logger.exception(f"Telemetry tick failed at t={self.state.current_time:.2f}s")
            self.pause()
            if self.on_error is None:
                raise
            self.on_error(e)

    def _emit(self) -> TelemetryData:
        snapshot = generate_telemetry(self.state, self.config, self.rng)
        if self.config.validate_snapshots:
            check_snapshot(snapshot)
        self._last_snapshot = snapshot
        self.on_telemetry_update(snapshot)
        return snapshot

    def _stop_clock(self) -> None:
        # Caller holds the lock; the timer is cancelled once it is released
        self.state.running = False
        if self._timer is not None:
            self._retired_timers.append(self._timer)
            self._timer = None

    def _cancel_retired_timers(self) -> None:
        with self._lock:
            timers, self._retired_timers = self._retired_timers, []
        for timer in timers:
            timer.cancel()

    # =========================================================================
    # COMMAND HANDLER
    # =========================================================================

    def send_command(self, raw: Any) -> bool:
        """
        Apply an operator command.

        Args:
            raw: ``Command``, legacy string token or ``{"type": ...}`` mapping

        Returns:
            True if the command changed engine state
        """
        command = parse_command(raw)
        if command is None:
            logger.warning(f"Unrecognized command ignored: {raw!r}")
            return False

        with self._lock:
            if self.state.aborted:
                logger.warning(f"Command '{command}' ignored: mission aborted")
                return False
            applied = self._handlers[command.type](command)
        self._cancel_retired_timers()

        if applied:
            logger.info(f"Command '{command}' applied at t={self.state.current_time:.1f}s")
        return applied

    def _engine_start(self, command: Command) -> bool:
        self.state.engine_mode = EngineMode.NOMINAL
        return True

    def _engine_stop(self, command: Command) -> bool:
        self.state.engine_mode = EngineMode.SHUTDOWN
        return True

    def _throttle_set(self, command: Command) -> bool:
        if command.value is None:
            logger.warning("Throttle command without a value ignored")
            return False
        self.state.throttle = float(np.clip(command.value / 100.0, 0.0, 1.0))
        return True

    def _stage_separate(self, command: Command) -> bool:
        stages = self.config.stages
        index, _ = get_active_stage(self.state, self.config)
        if index != 0 or len(stages) < 2:
            logger.warning(f"Stage separation rejected: active stage is {index + 1}")
            return False

        t = self.state.current_time
        margin = self.config.separation_margin
        # Later stages ignite now instead of at their scheduled time
        shift = get_stage_start_time(1, stages, margin) - t
        for j in range(1, len(stages)):
            self.state.stage_start_overrides[j] = get_stage_start_time(j, stages, margin) - shift
        self.state.separated_stages.add(0)
        self.state.forced_stage = 1
        return True

    def _payload_deploy(self, command: Command) -> bool:
        if self.state.payload_deployed:
            logger.warning("Payload already deployed")
            return False
        self.state.payload_deployed = True
        return True

    def _abort(self, command: Command) -> bool:
        state = self.state
        state.aborted = True
        state.engine_mode = EngineMode.SHUTDOWN
        state.thrust_multiplier = 0.0
        state.phase_override = C.ABORT_PHASE
        self._stop_clock()
        logger.warning(f"MISSION ABORT at t={state.current_time:.1f}s")
        return True

    def _emergency(self, command: Command) -> bool:
        key = (command.scenario, (command.action or '').lower())
        handler = self._emergency_handlers.get(key)
        if handler is None:
            logger.warning(f"Unrecognized emergency action ignored: '{command}'")
            return False
        handler()
        return True

    def _switch_to_backup_engine(self) -> None:
        self.state.engine_mode = EngineMode.BACKUP
        self.state.thrust_multiplier *= C.BACKUP_ENGINE_THRUST_FACTOR

    def _emergency_landing(self) -> None:
        self.state.phase_override = C.EMERGENCY_LANDING_PHASE
        self.state.thrust_multiplier *= C.EMERGENCY_LANDING_THRUST_FACTOR

    def _isolate_fuel_lines(self) -> None:
        index, fuel = get_current_fuel(self.state, self.config)
        self.state.fuel_cap = max(C.FUEL_ISOLATION_RETAINED * fuel, C.FUEL_ISOLATION_FLOOR)
        self.state.fuel_cap_stage = index

    def _switch_to_backup_guidance(self) -> None:
        self.state.pitch_offset += self.rng.uniform(-C.GUIDANCE_PERTURBATION,
                                                    C.GUIDANCE_PERTURBATION)

    def _reduce_thrust(self) -> None:
        self.state.thrust_multiplier *= C.REDUCED_THRUST_FACTOR
