"""
Launch Telemetry Simulation - Mutable Engine State

This module defines the single state dataclass owned by one RocketSimulation:
the mission clock plus every operator override that commands can apply.
Snapshots are derived from it; nothing else holds mutable engine state.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set


class EngineMode(Enum):
    """Operator-selected engine mode."""
    NOMINAL = "nominal"
    SHUTDOWN = "shutdown"
    BACKUP = "backup"


@dataclass
class SimulationState:
    """
    Mutable state of one telemetry engine.

    Attributes:
        current_time: Mission elapsed time (s)
        speed: Playback multiplier on simulated-time advance
        running: True while the repeating tick is active
        trajectory_history: Sampled positions, append-only
        engine_mode: Operator engine mode
        thrust_multiplier: Product of all thrust-scaling commands
        throttle: Operator throttle setting (0-1)
        fuel_cap: Upper bound on reported fuel after line isolation (kg)
        fuel_cap_stage: Stage index the fuel cap applies to
        pitch_offset: Guidance perturbation added to the pitch program (rad)
        phase_override: Mission phase label forcing (abort, emergency landing)
        forced_stage: Minimum stage index after manual separation
        separated_stages: Stage indices jettisoned by command
        stage_start_overrides: Ignition times rescheduled by manual separation (s)
        payload_deployed: Payload released by command
        aborted: Abort commanded; irreversible until reset
    """

    current_time: float = 0.0
    speed: float = 1.0
    running: bool = False
    trajectory_history: List[Dict[str, float]] = field(default_factory=list)

    engine_mode: EngineMode = EngineMode.NOMINAL
    thrust_multiplier: float = 1.0
    throttle: float = 1.0
    fuel_cap: Optional[float] = None
    fuel_cap_stage: int = 0
    pitch_offset: float = 0.0
    phase_override: Optional[str] = None
    forced_stage: int = 0
    separated_stages: Set[int] = field(default_factory=set)
    stage_start_overrides: Dict[int, float] = field(default_factory=dict)
    payload_deployed: bool = False
    aborted: bool = False

    @property
    def thrust_scale(self) -> float:
        """Combined scale on nominal thrust from commands and throttle."""
        if self.aborted or self.engine_mode is EngineMode.SHUTDOWN:
            return 0.0
        return self.thrust_multiplier * self.throttle

    def copy(self) -> 'SimulationState':
        """Create a deep copy of the state."""
        return SimulationState(
            current_time=self.current_time,
            speed=self.speed,
            running=self.running,
            trajectory_history=[dict(p) for p in self.trajectory_history],
            engine_mode=self.engine_mode,
            thrust_multiplier=self.thrust_multiplier,
            throttle=self.throttle,
            fuel_cap=self.fuel_cap,
            fuel_cap_stage=self.fuel_cap_stage,
            pitch_offset=self.pitch_offset,
            phase_override=self.phase_override,
            forced_stage=self.forced_stage,
            separated_stages=set(self.separated_stages),
            stage_start_overrides=dict(self.stage_start_overrides),
            payload_deployed=self.payload_deployed,
            aborted=self.aborted,
        )

    def __str__(self) -> str:
        """Human-readable state summary."""
        return (
            f"SimulationState(t={self.current_time:.2f}s, "
            f"speed={self.speed:g}x, "
            f"running={self.running}, "
            f"engine={self.engine_mode.value}, "
            f"samples={len(self.trajectory_history)})"
        )


def create_initial_state() -> SimulationState:
    """State at construction: t = 0, paused, no overrides."""
    return SimulationState()
