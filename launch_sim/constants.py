"""
Launch Telemetry Simulation - Physical Constants and Vehicle Parameters

This module defines the physical constants, launch site, default two-stage
vehicle, nominal engine bands and clock parameters used throughout the
telemetry simulation.

VEHICLE VALUES: loosely modelled on a Falcon 9 Full Thrust ascent timeline
(S1 burn 162 s, S2 burn 397 s).
"""

import numpy as np

# =============================================================================
# EARTH PARAMETERS
# =============================================================================

# Gravitational constant (m^3 kg^-1 s^-2)
G = 6.674e-11

# Earth mass (kg)
M_EARTH = 5.972e24

# Gravitational parameter (m^3/s^2)
MU_EARTH = G * M_EARTH

# Earth mean radius (m)
R_EARTH = 6.371e6

# Standard gravitational acceleration at sea level (m/s^2)
G0 = 9.80665

# Sidereal rotation rate (rad/s)
EARTH_ROTATION_RATE = 7.2921159e-5

# =============================================================================
# ATMOSPHERE (exponential pressure, linear troposphere lapse)
# =============================================================================

SEA_LEVEL_PRESSURE = 101325.0  # Pa
SEA_LEVEL_TEMPERATURE = 288.15  # K
SCALE_HEIGHT = 8500.0  # m
LAPSE_RATE = -0.0065  # K/m
TROPOPAUSE_ALTITUDE = 11000.0  # m (lapse applied up to here only)
R_GAS = 287.05  # Specific gas constant for dry air (J/(kg*K))

# =============================================================================
# LAUNCH SITE (LC-39A, Kennedy Space Center)
# =============================================================================

LAUNCH_LATITUDE = 28.5619  # deg N
LAUNCH_LONGITUDE = -80.5774  # deg E

# =============================================================================
# VEHICLE PARAMETERS
# =============================================================================

# Stage 1
STAGE1_NAME = "Stage 1"
STAGE1_DRY_MASS = 25600.0  # kg
STAGE1_PROPELLANT_MASS = 395700.0  # kg
STAGE1_THRUST = 7.607e6  # N (9 engines, sea level)
STAGE1_ISP = 282.0  # s
STAGE1_BURN_TIME = 162.0  # s

# Stage 2
STAGE2_NAME = "Stage 2"
STAGE2_DRY_MASS = 3900.0  # kg
STAGE2_PROPELLANT_MASS = 92670.0  # kg
STAGE2_THRUST = 1.2e6  # N (uprated so nominal T/W > 1 at ignition)
STAGE2_ISP = 348.0  # s
STAGE2_BURN_TIME = 397.0  # s

PAYLOAD_MASS = 5000.0  # kg

# Coast between burnout and the next stage taking over (s)
SEPARATION_MARGIN = 5.0

# Aerodynamics
DRAG_COEFFICIENT = 0.3  # Cd
VEHICLE_DIAMETER = 3.66  # m
REFERENCE_AREA = np.pi * (VEHICLE_DIAMETER / 2.0) ** 2  # m^2

# =============================================================================
# PITCH PROGRAM
# =============================================================================

PITCH_START_TIME = 10.0  # s (vertical ascent before this)
PITCH_END_TIME = 60.0  # s
PITCH_FINAL_ANGLE = np.radians(30.0)  # rad

# Horizontal drift is a cosmetic fraction of the vertical solution
HORIZONTAL_SCALE = 0.1

# =============================================================================
# ENGINE NOMINAL BANDS
# =============================================================================

THRUST_JITTER_MIN = 0.9  # fraction of nominal thrust
THRUST_JITTER_MAX = 1.0

CHAMBER_PRESSURE_MIN = 10.0  # MPa
CHAMBER_PRESSURE_SPREAD = 2.0  # MPa
MAX_CHAMBER_PRESSURE = 15.0  # MPa

TURBINE_SPEED_MIN = 30000.0  # RPM
TURBINE_SPEED_SPREAD = 5000.0  # RPM
MAX_TURBINE_SPEED = 40000.0  # RPM

FUEL_FRACTION = 0.7
OXIDIZER_FRACTION = 0.3

ENGINE_AMBIENT_TEMPERATURE = 300.0  # K
ENGINE_TEMPERATURE_RISE = 2000.0  # K at burnout

# =============================================================================
# STRUCTURE
# =============================================================================

STRESS_REFERENCE_Q = 35000.0  # Pa (dynamic pressure mapped to stress 1.0)
VIBRATION_BASE_RUNNING = 0.3
VIBRATION_BASE_IDLE = 0.05
VIBRATION_ALTITUDE_GAIN = 0.2
VIBRATION_ALTITUDE_SCALE = 50000.0  # m
VIBRATION_JITTER = 0.1

# =============================================================================
# MISSION
# =============================================================================

TARGET_APOGEE = 200000.0  # m
TRAJECTORY_DEVIATION_MAX = 0.05
PAYLOAD_DEPLOY_TIME = 590.0  # s

# =============================================================================
# AVIONICS & COMMS
# =============================================================================

AVIONICS_DEGRADE_ALTITUDE = 100000.0  # m
AVIONICS_DEGRADE_PROBABILITY = 0.01
CPU_LOAD_BASE = 0.3
CPU_LOAD_SPREAD = 0.2
MEMORY_USAGE_BASE = 0.4
MEMORY_USAGE_SPREAD = 0.1

LINK_DEGRADE_ALTITUDE = 200000.0  # m
LINK_DEGRADE_PROBABILITY = 0.005
UPLINK_RATE = 1000.0  # bps
DOWNLINK_RATE = 10000.0  # bps
LINK_RATE_FLOOR = 0.1  # fraction of nominal
LINK_FLOOR_ALTITUDE = 500000.0  # m

# =============================================================================
# SIMULATION CLOCK
# =============================================================================

TICK_INTERVAL = 0.1  # s (wall period and nominal simulated step)
MAX_TIME = 600.0  # s

# =============================================================================
# COMMAND EFFECTS
# =============================================================================

BACKUP_ENGINE_THRUST_FACTOR = 0.8
EMERGENCY_LANDING_THRUST_FACTOR = 0.3
REDUCED_THRUST_FACTOR = 0.7
FUEL_ISOLATION_RETAINED = 0.9
FUEL_ISOLATION_FLOOR = 5.0  # kg
GUIDANCE_PERTURBATION = 1.0  # rad (uniform +/-)

ABORT_PHASE = "abort"
EMERGENCY_LANDING_PHASE = "emergency_landing"
