"""
Launch Telemetry Mission Phase Table

This module defines the static, ordered table of named mission phases and
the lookup used to label telemetry snapshots.

Phases are for display and classification only: windows may overlap or leave
gaps, the first window containing t wins, and the first entry is the fallback
when nothing matches. Phase labels never gate any physics.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple


@dataclass(frozen=True)
class MissionPhase:
    """One named window of the flight timeline (mission elapsed seconds)."""
    name: str
    start_time: float
    end_time: float
    description: str

    def contains(self, t: float) -> bool:
        return self.start_time <= t <= self.end_time


MISSION_PHASES: Tuple[MissionPhase, ...] = (
    MissionPhase("Pre-Launch", 0.0, 0.0,
                 "Final countdown, propellant load complete, vehicle on internal power"),
    MissionPhase("Liftoff", 0.0, 10.0,
                 "Engines at full thrust, vehicle clears the tower in vertical ascent"),
    MissionPhase("Pitch Program", 10.0, 60.0,
                 "Vehicle pitches downrange towards the ascent azimuth"),
    MissionPhase("Max-Q", 60.0, 90.0,
                 "Peak aerodynamic pressure on the vehicle structure"),
    MissionPhase("First Stage Ascent", 90.0, 155.0,
                 "First stage continues the powered climb out of the dense atmosphere"),
    MissionPhase("MECO", 155.0, 162.0,
                 "Main engine cut-off, first stage propellant depleted"),
    MissionPhase("Stage Separation", 162.0, 167.0,
                 "First stage separates from the upper stage"),
    MissionPhase("Second Stage Ignition", 167.0, 180.0,
                 "Upper stage engine ignites"),
    MissionPhase("Fairing Separation", 180.0, 200.0,
                 "Payload fairing halves jettisoned above the sensible atmosphere"),
    MissionPhase("Second Stage Ascent", 200.0, 560.0,
                 "Upper stage burn towards the target orbit"),
    MissionPhase("SECO-1", 560.0, 566.0,
                 "Second engine cut-off, parking orbit reached"),
    MissionPhase("Coast Phase", 566.0, 590.0,
                 "Unpowered coast before payload release"),
    MissionPhase("Payload Deployment", 590.0, 600.0,
                 "Payload separation sequence"),
)


def get_mission_phase(t: float,
                      phases: Sequence[MissionPhase] = MISSION_PHASES) -> MissionPhase:
    """First phase whose [start_time, end_time] window contains ``t``; else entry 0."""
    for phase in phases:
        if phase.contains(t):
            return phase
    return phases[0]


def get_mission_phase_name(t: float, override: Optional[str] = None,
                           phases: Sequence[MissionPhase] = MISSION_PHASES) -> str:
    """Phase label for a snapshot; an operator override (abort, emergency landing) wins."""
    if override:
        return override
    return get_mission_phase(t, phases).name

