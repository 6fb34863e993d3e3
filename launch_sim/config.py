"""
Launch Telemetry Simulation - Configuration

This module provides a SimulationConfig dataclass for dependency injection,
allowing different vehicles, clocks and telemetry parameters to be passed to
the engine without modifying global constants.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from . import constants as C
from .stages import RocketStage, create_default_stages


@dataclass(frozen=True)
class SimulationConfig:
    """
    Immutable configuration for the telemetry engine.

    Using frozen=True ensures configs cannot be accidentally modified.
    Create new configs via dataclass replace() if needed.

    Section grouping:
      1. Simulation clock
      2. Vehicle
      3. Mission
      4. Engine bands
      5. Avionics / comms
      6. Random source
      7. Validation
      8. Misc
    """

    # ── 1. Simulation clock ──────────────────────────────────────────────
    tick_interval: float = C.TICK_INTERVAL
    max_time: float = C.MAX_TIME

    # ── 2. Vehicle ───────────────────────────────────────────────────────
    stages: Tuple[RocketStage, ...] = field(default_factory=create_default_stages)
    payload_mass: float = C.PAYLOAD_MASS
    separation_margin: float = C.SEPARATION_MARGIN
    drag_coefficient: float = C.DRAG_COEFFICIENT
    reference_area: float = C.REFERENCE_AREA

    # ── 3. Mission ───────────────────────────────────────────────────────
    launch_latitude: float = C.LAUNCH_LATITUDE
    launch_longitude: float = C.LAUNCH_LONGITUDE
    target_apogee: float = C.TARGET_APOGEE
    payload_deploy_time: float = C.PAYLOAD_DEPLOY_TIME

    # ── 4. Engine bands ──────────────────────────────────────────────────
    thrust_jitter_min: float = C.THRUST_JITTER_MIN
    thrust_jitter_max: float = C.THRUST_JITTER_MAX
    max_chamber_pressure: float = C.MAX_CHAMBER_PRESSURE  # MPa
    max_turbine_speed: float = C.MAX_TURBINE_SPEED  # RPM

    # ── 5. Avionics / comms ──────────────────────────────────────────────
    avionics_degrade_probability: float = C.AVIONICS_DEGRADE_PROBABILITY
    link_degrade_probability: float = C.LINK_DEGRADE_PROBABILITY
    uplink_rate: float = C.UPLINK_RATE  # bps
    downlink_rate: float = C.DOWNLINK_RATE  # bps

    # ── 6. Random source ─────────────────────────────────────────────────
    # None -> fresh OS entropy on every engine construction
    seed: Optional[int] = None

    # ── 7. Validation ────────────────────────────────────────────────────
    validate_snapshots: bool = False

    # ── 8. Misc ──────────────────────────────────────────────────────────
    verbose: bool = True

    @property
    def total_stages(self) -> int:
        return len(self.stages)


def create_default_config() -> SimulationConfig:
    """Create a SimulationConfig with default values from constants."""
    return SimulationConfig()


def create_test_config(seed: int = 42, max_time: float = C.MAX_TIME,
                       **overrides) -> SimulationConfig:
    """Create a seeded, quiet config suitable for testing.

    Any keyword arg accepted by SimulationConfig can be passed as an override.
    """
    defaults = dict(seed=seed, max_time=max_time, verbose=False,
                    validate_snapshots=True)
    defaults.update(overrides)
    return SimulationConfig(**defaults)
