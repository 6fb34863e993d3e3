"""
Launch Telemetry Simulation - Physics State Generator

Derives a complete TelemetryData snapshot from the mission time and the
operator overrides held in SimulationState. Apart from appending to the
trajectory history, generation never mutates the state.

Per-snapshot execution order:
1. Active stage and ignition time
2. Vehicle mass
3. Engine block (thrust, pressures, propellant)
4. Vertical motion (two-pass gravity/drag, constant-acceleration kinematics)
5. Pitch program and cosmetic horizontal drift
6. Geography, atmosphere, structure, orbit, avionics, link
7. Trajectory history sampling
"""

from collections.abc import Sequence
from typing import Dict, List, Optional, Tuple

import numpy as np

from . import constants as C
from .config import SimulationConfig
from .forces import calculate_atmosphere, compute_dynamic_pressure, solve_vertical_motion
from .mission_manager import get_mission_phase_name
from .orbital import compute_orbital_parameters
from .stages import (
    RocketStage, compute_total_mass, get_burn_progress, get_current_stage,
    get_stage_start_time,
)
from .state import SimulationState
from .types import (
    Acceleration, AvionicsData, EngineData, EnvironmentData, LinkData,
    Orientation, PayloadData, Position, StagingData, StructuralData,
    TelemetryData, TrajectoryData, Velocity,
)


# =============================================================================
# STAGE / TIME BOOKKEEPING
# =============================================================================

def get_active_stage(state: SimulationState, config: SimulationConfig) -> Tuple[int, float]:
    """
    Active stage index and its ignition time, honouring manual separation.

    Returns:
        (stage_index, ignition_time)
    """
    stages = config.stages
    index = get_current_stage(state.current_time, stages, config.separation_margin)
    index = min(max(index, state.forced_stage), len(stages) - 1)
    start = state.stage_start_overrides.get(
        index, get_stage_start_time(index, stages, config.separation_margin))
    return index, start


# =============================================================================
# PROPELLANT
# =============================================================================

def compute_remaining_propellant(t: float, stage: RocketStage, start_time: float,
                                 stage_index: int, state: SimulationState) -> Tuple[float, float]:
    """
    Fuel and oxidizer left in a stage (kg), depleting linearly over the burn.

    A fuel-line isolation cap applies only to the stage it was set on.
    """
    progress = get_burn_progress(t, start_time, stage)
    fuel = max(0.0, stage.propellant_mass * C.FUEL_FRACTION * (1.0 - progress))
    oxidizer = max(0.0, stage.propellant_mass * C.OXIDIZER_FRACTION * (1.0 - progress))
    if state.fuel_cap is not None and state.fuel_cap_stage == stage_index:
        fuel = min(fuel, state.fuel_cap)
    return fuel, oxidizer


def get_current_fuel(state: SimulationState, config: SimulationConfig) -> Tuple[int, float]:
    """Active stage index and its remaining fuel at ``state.current_time``."""
    index, start = get_active_stage(state, config)
    fuel, _ = compute_remaining_propellant(state.current_time, config.stages[index],
                                           start, index, state)
    return index, fuel


# =============================================================================
# ENGINE
# =============================================================================

def compute_engine_data(t: float, stage: RocketStage, start_time: float, stage_index: int,
                        state: SimulationState, config: SimulationConfig,
                        rng: np.random.Generator) -> EngineData:
    """
    Engine block for the active stage.

    RUNNING inside the burn window unless commands removed all thrust; OFF
    otherwise with zero thrust, pressure and turbine speed.
    """
    elapsed = t - start_time
    progress = get_burn_progress(t, start_time, stage)
    in_burn = 0.0 <= elapsed < stage.burn_time
    scale = state.thrust_scale
    running = in_burn and scale > 0.0

    initial_fuel = stage.propellant_mass * C.FUEL_FRACTION
    initial_oxidizer = stage.propellant_mass * C.OXIDIZER_FRACTION
    fuel, oxidizer = compute_remaining_propellant(t, stage, start_time, stage_index, state)

    if running:
        jitter = rng.uniform(config.thrust_jitter_min, config.thrust_jitter_max)
        thrust = stage.thrust * jitter * scale
        chamber_pressure = C.CHAMBER_PRESSURE_MIN + rng.random() * C.CHAMBER_PRESSURE_SPREAD
        turbine_speed = C.TURBINE_SPEED_MIN + rng.random() * C.TURBINE_SPEED_SPREAD
        flow_rate = stage.mass_flow_rate * scale
        temperature = C.ENGINE_AMBIENT_TEMPERATURE + C.ENGINE_TEMPERATURE_RISE * progress
    else:
        thrust = 0.0
        chamber_pressure = 0.0
        turbine_speed = 0.0
        flow_rate = 0.0
        temperature = C.ENGINE_AMBIENT_TEMPERATURE

    return EngineData(
        status='RUNNING' if running else 'OFF',
        thrust=float(thrust),
        maxThrust=float(stage.thrust),
        chamberPressure=float(chamber_pressure),
        maxChamberPressure=float(config.max_chamber_pressure),
        turbineSpeed=float(turbine_speed),
        maxTurbineSpeed=float(config.max_turbine_speed),
        fuel=float(fuel),
        initialFuel=float(initial_fuel),
        oxidizer=float(oxidizer),
        initialOxidizer=float(initial_oxidizer),
        fuelFlowRate=float(flow_rate),
        temperature=float(temperature),
    )


# =============================================================================
# ATTITUDE / GEOGRAPHY
# =============================================================================

def compute_pitch_program(t: float) -> float:
    """Pitch from vertical (rad): 0 until 10 s, linear to 30 deg at 60 s, then held."""
    if t < C.PITCH_START_TIME:
        return 0.0
    if t < C.PITCH_END_TIME:
        fraction = (t - C.PITCH_START_TIME) / (C.PITCH_END_TIME - C.PITCH_START_TIME)
        return float(C.PITCH_FINAL_ANGLE * fraction)
    return float(C.PITCH_FINAL_ANGLE)


def compute_geographic_position(t: float, altitude: float, downrange: float,
                                config: SimulationConfig) -> Tuple[float, float]:
    """
    Approximate latitude/longitude (deg).

    Latitude grows with altitude over Earth radius; longitude picks up Earth
    rotation and the cosmetic downrange drift.
    """
    lat = config.launch_latitude + np.degrees(altitude / C.R_EARTH)
    lon = (config.launch_longitude
           + np.degrees(C.EARTH_ROTATION_RATE * t)
           + np.degrees(downrange / C.R_EARTH))
    return float(lat), float(lon)


# =============================================================================
# STRUCTURE / AVIONICS / LINK
# =============================================================================

def compute_structural_data(dynamic_pressure: float, altitude: float, engine_running: bool,
                            rng: np.random.Generator) -> StructuralData:
    """Stress from dynamic pressure, vibration from engine state and altitude; both in [0, 1]."""
    stress = float(np.clip(dynamic_pressure / C.STRESS_REFERENCE_Q, 0.0, 1.0))
    base = C.VIBRATION_BASE_RUNNING if engine_running else C.VIBRATION_BASE_IDLE
    vibration = (base
                 + C.VIBRATION_ALTITUDE_GAIN * np.exp(-altitude / C.VIBRATION_ALTITUDE_SCALE)
                 + rng.random() * C.VIBRATION_JITTER)
    return StructuralData(stress=stress, vibration=float(np.clip(vibration, 0.0, 1.0)))


def compute_avionics_data(altitude: float, config: SimulationConfig,
                          rng: np.random.Generator) -> AvionicsData:
    degraded = (altitude > C.AVIONICS_DEGRADE_ALTITUDE
                and rng.random() < config.avionics_degrade_probability)
    return AvionicsData(
        status='DEGRADED' if degraded else 'NOMINAL',
        cpuLoad=float(C.CPU_LOAD_BASE + rng.random() * C.CPU_LOAD_SPREAD),
        memoryUsage=float(C.MEMORY_USAGE_BASE + rng.random() * C.MEMORY_USAGE_SPREAD),
    )


def compute_link_rate_scale(altitude: float) -> float:
    """Linear falloff from 1.0 on the pad to the floor at 500 km, held below the floor."""
    fraction = max(0.0, altitude) / C.LINK_FLOOR_ALTITUDE
    return max(C.LINK_RATE_FLOOR, 1.0 - (1.0 - C.LINK_RATE_FLOOR) * fraction)


def compute_link_data(altitude: float, config: SimulationConfig,
                      rng: np.random.Generator) -> LinkData:
    degraded = (altitude > C.LINK_DEGRADE_ALTITUDE
                and rng.random() < config.link_degrade_probability)
    scale = compute_link_rate_scale(altitude)
    return LinkData(
        status='DEGRADED' if degraded else 'NOMINAL',
        uplinkRate=float(config.uplink_rate * scale),
        downlinkRate=float(config.downlink_rate * scale),
    )


# =============================================================================
# TRAJECTORY HISTORY
# =============================================================================

class HistoryView(Sequence):
    """
    Read-only view of the first ``length`` samples of an append-only history.

    Later appends to the underlying list are not visible, so a snapshot's
    view stays fixed without copying the history on every tick. Items are
    returned as copies.
    """

    def __init__(self, samples: List[Dict[str, float]], length: Optional[int] = None):
        self._samples = samples
        self._length = len(samples) if length is None else length

    def __len__(self) -> int:
        return self._length

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [dict(p) for p in self._samples[:self._length][index]]
        if index < 0:
            index += self._length
        if not 0 <= index < self._length:
            raise IndexError("history index out of range")
        return dict(self._samples[index])

    def __eq__(self, other) -> bool:
        if not isinstance(other, Sequence) or isinstance(other, str):
            return NotImplemented
        return len(self) == len(other) and all(a == b for a, b in zip(self, other))

    __hash__ = None

    def __repr__(self) -> str:
        return f"HistoryView({list(self)!r})"


def sample_trajectory(state: SimulationState, point: Dict[str, float]) -> bool:
    """
    Append ``point`` once per whole elapsed second.

    Sampling fires whenever floor(t) differs from the history length, so a
    backward seek (history never shrinks) makes every later tick sample.
    """
    if int(np.floor(state.current_time)) != len(state.trajectory_history):
        state.trajectory_history.append(dict(point))
        return True
    return False


# =============================================================================
# SNAPSHOT
# =============================================================================

def generate_telemetry(state: SimulationState, config: SimulationConfig,
                       rng: np.random.Generator) -> TelemetryData:
    """
    Build the full snapshot for ``state.current_time``.

    Args:
        state: Engine state (trajectory history is appended to)
        config: Vehicle and mission configuration
        rng: The engine's single random source

    Returns:
        TelemetryData with a read-only view of the trajectory history
    """
    t = state.current_time
    stages = config.stages

    # 1. Stage
    stage_index, start_time = get_active_stage(state, config)
    stage = stages[stage_index]

    # 2. Mass
    mass = compute_total_mass(t, stages, config.payload_mass, config.separation_margin,
                              separated=state.separated_stages,
                              start_times=state.stage_start_overrides)

    # 3. Engine
    engine = compute_engine_data(t, stage, start_time, stage_index, state, config, rng)
    engine_running = engine['status'] == 'RUNNING'

    # 4. Vertical motion
    accel_y, vel_y, altitude = solve_vertical_motion(
        engine['thrust'], mass, t,
        drag_coefficient=config.drag_coefficient,
        reference_area=config.reference_area,
        thrust_free=state.aborted,
    )

    # 5. Pitch and cosmetic horizontal drift
    pitch = compute_pitch_program(t) + state.pitch_offset
    drift = float(np.sin(pitch)) * C.HORIZONTAL_SCALE
    pos_x = drift * altitude
    vel_x = drift * vel_y
    speed = float(np.hypot(vel_x, vel_y))

    # 6. Derived blocks
    lat, lon = compute_geographic_position(t, altitude, pos_x, config)
    atmosphere = calculate_atmosphere(altitude)
    q_dyn = compute_dynamic_pressure(atmosphere['density'], speed)
    structural = compute_structural_data(q_dyn, altitude, engine_running, rng)
    orbit = compute_orbital_parameters(altitude, speed, config.target_apogee,
                                       config.launch_latitude)

    last_stage = len(stages) - 1
    burn_elapsed = t - start_time
    ready_for_separation = (
        stage_index < last_stage
        and stage_index not in state.separated_stages
        and stage.burn_time <= burn_elapsed < stage.burn_time + config.separation_margin
    )

    # 7. History
    sample_trajectory(state, {'x': pos_x, 'y': altitude, 'z': 0.0})

    return TelemetryData(
        timestamp=float(t),
        maxSimulationTime=float(config.max_time),
        position=Position(x=pos_x, y=altitude, z=0.0, lat=lat, lon=lon),
        velocity=Velocity(x=vel_x, y=vel_y, z=0.0, total=speed),
        acceleration=Acceleration(x=0.0, y=accel_y, z=0.0, total=abs(accel_y)),
        orientation=Orientation(pitch=float(pitch), yaw=0.0, roll=0.0),
        engine=engine,
        staging=StagingData(
            currentStage=stage_index + 1,
            totalStages=len(stages),
            readyForSeparation=bool(ready_for_separation),
        ),
        payload=PayloadData(
            status='DEPLOYED' if state.payload_deployed else 'SECURED',
            readyForDeployment=(not state.payload_deployed
                                and t >= config.payload_deploy_time),
        ),
        structural=structural,
        trajectory=TrajectoryData(
            deviation=float(rng.random() * C.TRAJECTORY_DEVIATION_MAX),
            targetApogee=float(config.target_apogee),
            currentApogee=altitude,
        ),
        avionics=compute_avionics_data(altitude, config, rng),
        telemetry=compute_link_data(altitude, config, rng),
        environment=EnvironmentData(
            externalTemperature=atmosphere['temperature'],
            externalPressure=atmosphere['pressure'],
        ),
        trajectoryHistory=HistoryView(state.trajectory_history),
        missionPhase=get_mission_phase_name(t, state.phase_override),
        orbitalParameters=orbit,
    )
