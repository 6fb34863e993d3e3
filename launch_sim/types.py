"""
Launch Telemetry Simulation - Type Definitions

TypedDict definitions for the telemetry snapshot emitted on every tick.
Key names are camelCase because dashboard consumers key off them verbatim.
"""

from typing import Sequence, TypedDict


class Vector3D(TypedDict):
    x: float
    y: float
    z: float


class Position(TypedDict):
    x: float  # Downrange cosmetic drift (m)
    y: float  # Altitude (m)
    z: float  # (m)
    lat: float  # deg
    lon: float  # deg


class Velocity(TypedDict):
    x: float  # m/s
    y: float  # m/s
    z: float  # m/s
    total: float  # m/s


class Acceleration(TypedDict):
    x: float  # m/s^2
    y: float  # m/s^2
    z: float  # m/s^2
    total: float  # m/s^2


class Orientation(TypedDict):
    pitch: float  # radians
    yaw: float  # radians
    roll: float  # radians


class EngineData(TypedDict):
    status: str  # OFF, STARTING, RUNNING, SHUTTING_DOWN, FAILED
    thrust: float  # N
    maxThrust: float  # N
    chamberPressure: float  # MPa
    maxChamberPressure: float  # MPa
    turbineSpeed: float  # RPM
    maxTurbineSpeed: float  # RPM
    fuel: float  # kg
    initialFuel: float  # kg
    oxidizer: float  # kg
    initialOxidizer: float  # kg
    fuelFlowRate: float  # kg/s
    temperature: float  # K


class StagingData(TypedDict):
    currentStage: int  # 1-based
    totalStages: int
    readyForSeparation: bool


class PayloadData(TypedDict):
    status: str  # SECURED, DEPLOYING, DEPLOYED
    readyForDeployment: bool


class StructuralData(TypedDict):
    stress: float  # 0-1
    vibration: float  # 0-1


class TrajectoryData(TypedDict):
    deviation: float  # 0-1
    targetApogee: float  # m
    currentApogee: float  # m


class AvionicsData(TypedDict):
    status: str  # NOMINAL, DEGRADED, FAILED
    cpuLoad: float  # 0-1
    memoryUsage: float  # 0-1


class LinkData(TypedDict):
    status: str  # NOMINAL, DEGRADED, FAILED
    uplinkRate: float  # bps
    downlinkRate: float  # bps


class EnvironmentData(TypedDict):
    externalTemperature: float  # K
    externalPressure: float  # Pa


class OrbitalParameters(TypedDict):
    targetApogee: float  # m
    currentApogee: float  # m
    perigee: float  # m
    inclination: float  # deg
    eccentricity: float


class TelemetryData(TypedDict):
    """Complete per-tick snapshot. Every field is recomputed on each emission."""
    timestamp: float  # s since launch
    maxSimulationTime: float  # s
    position: Position
    velocity: Velocity
    acceleration: Acceleration
    orientation: Orientation
    engine: EngineData
    staging: StagingData
    payload: PayloadData
    structural: StructuralData
    trajectory: TrajectoryData
    avionics: AvionicsData
    telemetry: LinkData
    environment: EnvironmentData
    trajectoryHistory: Sequence[Vector3D]  # read-only, fixed at emission
    missionPhase: str
    orbitalParameters: OrbitalParameters


class AtmosphereProperties(TypedDict):
    """Return type for atmosphere model output."""
    temperature: float  # Temperature (K)
    pressure: float  # Pressure (Pa)
    density: float  # Density (kg/m^3)
