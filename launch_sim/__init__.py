"""
Launch Telemetry Simulation Package

A time-stepped telemetry generator for a two-stage launch vehicle, with an
operator command interface, alerting and a headless runner.

Modules:
    - constants: Physical constants and vehicle parameters
    - config: SimulationConfig dataclass
    - types: Telemetry snapshot schema
    - stages: Stage table, staging schedule and vehicle mass
    - forces: Atmosphere, gravity, drag and vertical motion
    - orbital: Apogee/perigee/eccentricity estimates
    - mission_manager: Mission phase timeline
    - state: Mutable engine state
    - telemetry: Snapshot generation
    - commands: Operator command parsing
    - emergency: Emergency scenario catalog
    - alerts: Threshold alerts
    - timer: Tick sources
    - simulation: RocketSimulation engine
    - validation: Snapshot invariant checks
    - main: Headless runner and CSV log
    - plotting: Telemetry plots
"""

from .commands import Command, CommandType, parse_command
from .config import SimulationConfig, create_default_config, create_test_config
from .main import SimulationLog, run_mission
from .simulation import RocketSimulation
from .state import EngineMode, SimulationState, create_initial_state
from .timer import ManualTimer, RepeatingTimer

__version__ = "1.0.0"
__author__ = "Launch Simulation Team"

__all__ = [
    'Command',
    'CommandType',
    'parse_command',
    'SimulationConfig',
    'create_default_config',
    'create_test_config',
    'SimulationLog',
    'run_mission',
    'RocketSimulation',
    'EngineMode',
    'SimulationState',
    'create_initial_state',
    'ManualTimer',
    'RepeatingTimer',
]
