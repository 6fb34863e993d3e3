"""
Launch Telemetry Simulation - Orbital parameter estimate.

A vis-viva style estimate from the scalar altitude and speed of the
telemetry solution. It is a display aid, not orbital mechanics.
"""

import numpy as np

from . import constants as C
from .types import OrbitalParameters


def compute_specific_energy(speed: float, r: float) -> float:
    """eps = v^2/2 - mu/r (J/kg)."""
    return 0.5 * speed * speed - C.MU_EARTH / r


def compute_orbital_parameters(altitude: float, speed: float,
                               target_apogee: float = C.TARGET_APOGEE,
                               inclination: float = C.LAUNCH_LATITUDE) -> OrbitalParameters:
    """
    Estimate apogee, perigee and eccentricity.

    Args:
        altitude: Altitude above the surface (m)
        speed: Speed magnitude (m/s)
        target_apogee: Reported target apogee (m)
        inclination: Reported inclination (deg)

    Returns:
        OrbitalParameters; apogee and perigee clamp at 0, eccentricity is
        sqrt(max(0, 1 + 2*eps*r^2/mu)) and may exceed 1
    """
    r = C.R_EARTH + max(0.0, altitude)
    energy = compute_specific_energy(speed, r)

    if energy == 0.0:
        apogee = float('inf')
    else:
        sma = -C.MU_EARTH / (2.0 * energy)
        apogee = max(0.0, 2.0 * sma - r - C.R_EARTH)

    perigee = max(0.0, r - C.R_EARTH)
    radicand = 1.0 + 2.0 * energy * r * r / C.MU_EARTH
    eccentricity = float(np.sqrt(max(0.0, radicand)))

    return OrbitalParameters(
        targetApogee=float(target_apogee),
        currentApogee=float(apogee),
        perigee=float(perigee),
        inclination=float(inclination),
        eccentricity=eccentricity,
    )
