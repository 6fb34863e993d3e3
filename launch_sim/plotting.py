"""
Launch Telemetry Simulation - Plotting

Static telemetry plots from a SimulationLog, rendered with the
non-interactive Agg backend so they work in batch runs and CI.
"""

from dataclasses import dataclass
import logging
import os
from typing import List

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend for batch processing
import matplotlib.pyplot as plt
import numpy as np

logger = logging.getLogger(__name__)


# =============================================================================
# Data Structures
# =============================================================================

@dataclass
class TelemetrySeries:
    """Log series as numpy arrays.

    Attributes:
        time: Mission time (s)
        altitude: Altitude (km)
        downrange: Cosmetic downrange drift (km)
        velocity: Speed (m/s)
        velocity_vertical: Vertical velocity (m/s)
        acceleration: Vertical acceleration (m/s^2)
        thrust: Thrust (kN)
        chamber_pressure: Chamber pressure (MPa)
        fuel: Remaining fuel (kg)
        oxidizer: Remaining oxidizer (kg)
        stage: 1-based stage number
        stress: Structural stress (0-1)
        vibration: Vibration level (0-1)
        latitude: Latitude (deg)
        longitude: Longitude (deg)
        apogee: Apogee altitude (km)
        perigee: Perigee altitude (km)
    """
    time: np.ndarray
    altitude: np.ndarray
    downrange: np.ndarray
    velocity: np.ndarray
    velocity_vertical: np.ndarray
    acceleration: np.ndarray
    thrust: np.ndarray
    chamber_pressure: np.ndarray
    fuel: np.ndarray
    oxidizer: np.ndarray
    stage: np.ndarray
    stress: np.ndarray
    vibration: np.ndarray
    latitude: np.ndarray
    longitude: np.ndarray
    apogee: np.ndarray
    perigee: np.ndarray


# =============================================================================
# Configuration
# =============================================================================

def configure_plot_style() -> None:
    """Configure matplotlib defaults for telemetry plots."""
    plt.rcParams.update({
        'figure.figsize': (10, 6),
        'figure.dpi': 100,
        'savefig.dpi': 150,
        'axes.grid': True,
        'axes.axisbelow': True,
        'grid.alpha': 0.3,
        'grid.linestyle': '-',
        'grid.linewidth': 0.5,
        'font.size': 11,
        'axes.titlesize': 13,
        'axes.labelsize': 12,
        'legend.fontsize': 10,
        'legend.framealpha': 0.95,
        'lines.linewidth': 1.8,
        'xtick.direction': 'in',
        'ytick.direction': 'in',
    })


# =============================================================================
# Data Processing
# =============================================================================

def extract_log_data(log) -> TelemetrySeries:
    """Convert a SimulationLog (lists) into numpy arrays for plotting."""
    return TelemetrySeries(
        time=np.asarray(log.time, dtype=float),
        altitude=np.asarray(log.altitude, dtype=float),
        downrange=np.asarray(log.downrange, dtype=float),
        velocity=np.asarray(log.velocity, dtype=float),
        velocity_vertical=np.asarray(log.velocity_vertical, dtype=float),
        acceleration=np.asarray(log.acceleration, dtype=float),
        thrust=np.asarray(log.thrust, dtype=float),
        chamber_pressure=np.asarray(log.chamber_pressure, dtype=float),
        fuel=np.asarray(log.fuel, dtype=float),
        oxidizer=np.asarray(log.oxidizer, dtype=float),
        stage=np.asarray(log.stage, dtype=int),
        stress=np.asarray(log.stress, dtype=float),
        vibration=np.asarray(log.vibration, dtype=float),
        latitude=np.asarray(log.latitude_deg, dtype=float),
        longitude=np.asarray(log.longitude_deg, dtype=float),
        apogee=np.asarray(log.apogee, dtype=float),
        perigee=np.asarray(log.perigee, dtype=float),
    )


def _find_staging_times(data: TelemetrySeries) -> List[float]:
    """Times at which the stage counter increments."""
    if len(data.stage) < 2:
        return []
    idx = np.flatnonzero(np.diff(data.stage) > 0) + 1
    return [float(data.time[i]) for i in idx]


def _mark_staging(ax, data: TelemetrySeries) -> None:
    for i, t_sep in enumerate(_find_staging_times(data)):
        ax.axvline(t_sep, color='gray', linestyle='--', linewidth=1.0,
                   label='Stage separation' if i == 0 else None)


def _save(fig, output_dir: str, name: str) -> str:
    plt.tight_layout()
    path = os.path.join(output_dir, name)
    fig.savefig(path, bbox_inches='tight')
    plt.close(fig)
    return path


# =============================================================================
# Plots
# =============================================================================

def plot_altitude_profile(data: TelemetrySeries, output_dir: str) -> str:
    """Generate altitude vs time profile plot.

    Args:
        data: TelemetrySeries object
        output_dir: Directory to save the plot

    Returns:
        Path to saved plot file
    """
    fig, ax = plt.subplots()

    ax.fill_between(data.time, 0, data.altitude, alpha=0.25, color='#1f77b4')
    ax.plot(data.time, data.altitude, 'b-', linewidth=2, label='Altitude')
    _mark_staging(ax, data)
    ax.scatter([data.time[-1]], [data.altitude[-1]],
               c='darkorange', s=90, marker='*', zorder=5,
               label=f'Final ({data.altitude[-1]:.1f} km)')

    ax.set_xlabel('Time (s)')
    ax.set_ylabel('Altitude (km)')
    ax.set_title('Altitude Profile', fontweight='bold')
    ax.legend(loc='upper left')
    ax.set_ylim(0, None)

    return _save(fig, output_dir, '01_altitude_profile.png')


def plot_velocity_profile(data: TelemetrySeries, output_dir: str) -> str:
    """Speed and vertical velocity vs time."""
    fig, ax = plt.subplots()

    ax.plot(data.time, data.velocity, 'r-', linewidth=2, label='Speed')
    ax.plot(data.time, data.velocity_vertical, 'k--', linewidth=1.2, label='Vertical')
    _mark_staging(ax, data)

    ax.set_xlabel('Time (s)')
    ax.set_ylabel('Velocity (m/s)')
    ax.set_title('Velocity Profile', fontweight='bold')
    ax.legend(loc='upper left')

    return _save(fig, output_dir, '02_velocity_profile.png')


def plot_engine_performance(data: TelemetrySeries, output_dir: str) -> str:
    """Thrust with chamber pressure on a secondary axis."""
    fig, ax = plt.subplots()

    ax.plot(data.time, data.thrust, color='#d62728', linewidth=1.5, label='Thrust')
    ax.set_xlabel('Time (s)')
    ax.set_ylabel('Thrust (kN)', color='#d62728')

    ax2 = ax.twinx()
    ax2.plot(data.time, data.chamber_pressure, color='#2ca02c', linewidth=1.0,
             alpha=0.7, label='Chamber pressure')
    ax2.set_ylabel('Chamber Pressure (MPa)', color='#2ca02c')
    ax2.grid(False)

    _mark_staging(ax, data)
    ax.set_title('Engine Performance', fontweight='bold')

    return _save(fig, output_dir, '03_engine_performance.png')


def plot_propellant(data: TelemetrySeries, output_dir: str) -> str:
    """Remaining fuel and oxidizer of the active stage."""
    fig, ax = plt.subplots()

    ax.plot(data.time, data.fuel / 1000, 'b-', label='Fuel')
    ax.plot(data.time, data.oxidizer / 1000, 'm-', label='Oxidizer')
    _mark_staging(ax, data)

    ax.set_xlabel('Time (s)')
    ax.set_ylabel('Propellant (t)')
    ax.set_title('Active Stage Propellant', fontweight='bold')
    ax.legend(loc='upper right')
    ax.set_ylim(0, None)

    return _save(fig, output_dir, '04_propellant.png')


def plot_structural_loads(data: TelemetrySeries, output_dir: str) -> str:
    fig, ax = plt.subplots()

    ax.plot(data.time, data.stress, color='#9467bd', label='Stress')
    ax.plot(data.time, data.vibration, color='#8c564b', alpha=0.7, label='Vibration')
    ax.axhline(0.9, color='red', linestyle=':', linewidth=1.0, label='Stress alert (0.9)')
    ax.axhline(0.7, color='orange', linestyle=':', linewidth=1.0, label='Vibration alert (0.7)')

    ax.set_xlabel('Time (s)')
    ax.set_ylabel('Normalized Load')
    ax.set_title('Structural Loads', fontweight='bold')
    ax.legend(loc='upper right')
    ax.set_ylim(0, 1.05)

    return _save(fig, output_dir, '05_structural_loads.png')


def plot_orbital_parameters(data: TelemetrySeries, output_dir: str) -> str:
    """Apogee and perigee estimates vs time."""
    fig, ax = plt.subplots()

    finite = np.isfinite(data.apogee)
    ax.plot(data.time[finite], data.apogee[finite], 'b-', label='Apogee')
    ax.plot(data.time, data.perigee, 'g-', label='Perigee')
    ax.plot(data.time, data.altitude, 'k:', linewidth=1.0, label='Altitude')

    ax.set_xlabel('Time (s)')
    ax.set_ylabel('Altitude (km)')
    ax.set_title('Orbital Parameters', fontweight='bold')
    ax.legend(loc='upper left')

    return _save(fig, output_dir, '06_orbital_parameters.png')


def plot_ground_track(data: TelemetrySeries, output_dir: str) -> str:
    """Latitude/longitude track from the launch site."""
    fig, ax = plt.subplots()

    ax.plot(data.longitude, data.latitude, 'b-', linewidth=2)
    ax.scatter([data.longitude[0]], [data.latitude[0]],
               c='green', s=80, marker='o', zorder=5, label='Launch site')
    ax.scatter([data.longitude[-1]], [data.latitude[-1]],
               c='red', s=80, marker='x', zorder=5, label='Final')

    ax.set_xlabel('Longitude (deg)')
    ax.set_ylabel('Latitude (deg)')
    ax.set_title('Ground Track', fontweight='bold')
    ax.legend(loc='best')

    return _save(fig, output_dir, '07_ground_track.png')


def generate_all_plots(log, output_dir: str = "plots") -> List[str]:
    """Generate all telemetry plots.

    Args:
        log: SimulationLog from run_mission
        output_dir: Directory to save plots (created if doesn't exist)

    Returns:
        List of paths to saved plot files

    Example:
        >>> from launch_sim.main import run_mission
        >>> snapshot, log, reason = run_mission(duration=200.0, verbose=False)
        >>> plot_files = generate_all_plots(log, "output/plots")
    """
    if len(log.time) == 0:
        logger.warning("Empty simulation log, no plots generated")
        return []

    os.makedirs(output_dir, exist_ok=True)
    configure_plot_style()
    data = extract_log_data(log)

    plot_functions = [
        plot_altitude_profile,
        plot_velocity_profile,
        plot_engine_performance,
        plot_propellant,
        plot_structural_loads,
        plot_orbital_parameters,
        plot_ground_track,
    ]

    saved_files = []
    for plot_func in plot_functions:
        try:
            saved_files.append(plot_func(data, output_dir))
        except Exception as e:
            logger.warning(f"Failed to generate {plot_func.__name__}: {e}")

    logger.info(f"Generated {len(saved_files)} plots in '{output_dir}'")
    return saved_files
