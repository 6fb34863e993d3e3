"""
Launch Telemetry Simulation - Atmosphere and Force Computations

This module implements the single-axis force model:
- Exponential-pressure standard atmosphere
- Central gravity at altitude
- Quadratic drag
- Vertical acceleration with the constant-acceleration kinematics
  used by the telemetry generator
"""

from typing import Tuple

import numpy as np

from . import constants as C
from .types import AtmosphereProperties


# =============================================================================
# ATMOSPHERE MODEL
# =============================================================================

def calculate_atmosphere(altitude: float) -> AtmosphereProperties:
    """
    Compute atmospheric properties at a geometric altitude.

    Pressure decays exponentially with an 8.5 km scale height. Temperature
    follows the troposphere lapse rate up to 11 km and stays constant above.

    Args:
        altitude: Altitude above sea level (m); negative values clamp to 0

    Returns:
        AtmosphereProperties with temperature (K), pressure (Pa), density (kg/m^3)
    """
    h = max(0.0, float(altitude))
    temperature = C.SEA_LEVEL_TEMPERATURE + C.LAPSE_RATE * min(h, C.TROPOPAUSE_ALTITUDE)
    pressure = C.SEA_LEVEL_PRESSURE * np.exp(-h / C.SCALE_HEIGHT)
    density = pressure / (C.R_GAS * temperature)
    return AtmosphereProperties(
        temperature=float(temperature),
        pressure=float(pressure),
        density=float(density),
    )


# =============================================================================
# FORCE MODELS
# =============================================================================

def compute_gravity(altitude: float) -> float:
    """
    Local gravitational acceleration magnitude (m/s^2).

        g = G * M_earth / (R_earth + h)^2
    """
    r = C.R_EARTH + max(0.0, float(altitude))
    return C.MU_EARTH / (r * r)


def compute_dynamic_pressure(density: float, velocity: float) -> float:
    """q = 0.5 * rho * v^2 (Pa)."""
    return 0.5 * density * velocity * velocity


def compute_drag_force(density: float, velocity: float,
                       drag_coefficient: float = C.DRAG_COEFFICIENT,
                       reference_area: float = C.REFERENCE_AREA) -> float:
    """
    Drag force magnitude (N).

        D = 0.5 * rho * v^2 * Cd * A
    """
    return compute_dynamic_pressure(density, velocity) * drag_coefficient * reference_area


def compute_vertical_acceleration(thrust: float, mass: float, altitude: float,
                                  velocity: float,
                                  drag_coefficient: float = C.DRAG_COEFFICIENT,
                                  reference_area: float = C.REFERENCE_AREA) -> float:
    """
    Net vertical acceleration (m/s^2).

        a_y = T/m - g(h) - D/m

    Args:
        thrust: Thrust (N)
        mass: Vehicle mass (kg), must be > 0
        altitude: Altitude at which gravity and drag are evaluated (m)
        velocity: Speed at which drag is evaluated (m/s)
    """
    rho = calculate_atmosphere(altitude)['density']
    drag = compute_drag_force(rho, velocity, drag_coefficient, reference_area)
    return thrust / mass - compute_gravity(altitude) - drag / mass


def constant_acceleration_kinematics(acceleration: float, t: float) -> Tuple[float, float]:
    """
    Velocity and altitude treating ``acceleration`` as constant since t=0.

    Returns:
        (velocity, altitude); altitude clamps at ground level
    """
    velocity = acceleration * t
    altitude = max(0.0, 0.5 * acceleration * t * t)
    return velocity, altitude


def solve_vertical_motion(thrust: float, mass: float, t: float,
                          drag_coefficient: float = C.DRAG_COEFFICIENT,
                          reference_area: float = C.REFERENCE_AREA,
                          thrust_free: bool = False) -> Tuple[float, float, float]:
    """
    Two-pass vertical solution at mission time ``t``.

    Pass 1 predicts altitude and velocity with sea-level gravity and no drag.
    Pass 2 evaluates gravity and drag at the predicted point. With
    ``thrust_free`` the acceleration is pure gravity (no thrust, no drag).

    Returns:
        (acceleration, velocity, altitude)
    """
    if thrust_free:
        g_surface = compute_gravity(0.0)
        _, h_pred = constant_acceleration_kinematics(-g_surface, t)
        a = -compute_gravity(h_pred)
    else:
        a_pred = thrust / mass - compute_gravity(0.0)
        v_pred, h_pred = constant_acceleration_kinematics(a_pred, t)
        a = compute_vertical_acceleration(thrust, mass, h_pred, v_pred,
                                          drag_coefficient, reference_area)
    v, h = constant_acceleration_kinematics(a, t)
    return float(a), float(v), float(h)
