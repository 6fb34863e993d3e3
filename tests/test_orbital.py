import pytest
import numpy as np
from launch_sim import orbital, constants as C


def test_specific_energy():
    r = C.R_EARTH
    assert orbital.compute_specific_energy(0.0, r) == pytest.approx(-C.MU_EARTH / r)


def test_pad_state():
    orbit = orbital.compute_orbital_parameters(0.0, 0.0)
    assert orbit['currentApogee'] == 0.0
    assert orbit['perigee'] == 0.0
    assert orbit['eccentricity'] == 0.0
    assert orbit['targetApogee'] == C.TARGET_APOGEE
    assert orbit['inclination'] == C.LAUNCH_LATITUDE


def test_perigee_tracks_altitude():
    orbit = orbital.compute_orbital_parameters(150000.0, 3000.0)
    assert orbit['perigee'] == pytest.approx(150000.0)


def test_apogee_grows_with_speed():
    slow = orbital.compute_orbital_parameters(100000.0, 8000.0)
    fast = orbital.compute_orbital_parameters(100000.0, 9000.0)
    assert slow['currentApogee'] > 0.0
    assert fast['currentApogee'] > slow['currentApogee']


def test_hyperbolic_speed_clamps_apogee():
    escape = np.sqrt(2.0 * C.MU_EARTH / C.R_EARTH)
    orbit = orbital.compute_orbital_parameters(0.0, escape * 1.5)
    assert orbit['currentApogee'] == 0.0
    assert orbit['eccentricity'] > 1.0


def test_eccentricity_never_nan():
    for h in (0.0, 50e3, 200e3):
        for v in (0.0, 500.0, 7800.0, 12000.0):
            e = orbital.compute_orbital_parameters(h, v)['eccentricity']
            assert np.isfinite(e)
            assert e >= 0.0


def test_negative_altitude_treated_as_ground():
    below = orbital.compute_orbital_parameters(-100.0, 10.0)
    ground = orbital.compute_orbital_parameters(0.0, 10.0)
    assert below == ground


def test_custom_target_and_inclination():
    orbit = orbital.compute_orbital_parameters(1000.0, 100.0, target_apogee=400000.0,
                                               inclination=51.6)
    assert orbit['targetApogee'] == 400000.0
    assert orbit['inclination'] == 51.6
