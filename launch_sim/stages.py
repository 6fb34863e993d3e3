"""
Launch Telemetry Simulation - Stage bookkeeping and mass model.

Each stage occupies a window of ``burn_time + separation_margin`` seconds on
the mission clock. Stages are consumed strictly in order.
"""

from dataclasses import dataclass
from typing import Collection, Mapping, Optional, Sequence, Tuple

from . import constants as C


@dataclass(frozen=True)
class RocketStage:
    """
    Static configuration of one vehicle stage.

    Attributes:
        name: Display name
        dry_mass: Structure mass (kg)
        propellant_mass: Loaded propellant (kg)
        thrust: Nominal thrust (N)
        isp: Specific impulse (s)
        burn_time: Burn duration (s)
        separated: Stage starts out already jettisoned
    """
    name: str
    dry_mass: float
    propellant_mass: float
    thrust: float
    isp: float
    burn_time: float
    separated: bool = False

    @property
    def wet_mass(self) -> float:
        return self.dry_mass + self.propellant_mass

    @property
    def mass_flow_rate(self) -> float:
        """Average propellant flow over the burn (kg/s)."""
        if self.burn_time <= 0.0:
            return 0.0
        return self.propellant_mass / self.burn_time


def create_default_stages() -> Tuple[RocketStage, ...]:
    """Two-stage default vehicle."""
    return (
        RocketStage(
            name=C.STAGE1_NAME,
            dry_mass=C.STAGE1_DRY_MASS,
            propellant_mass=C.STAGE1_PROPELLANT_MASS,
            thrust=C.STAGE1_THRUST,
            isp=C.STAGE1_ISP,
            burn_time=C.STAGE1_BURN_TIME,
        ),
        RocketStage(
            name=C.STAGE2_NAME,
            dry_mass=C.STAGE2_DRY_MASS,
            propellant_mass=C.STAGE2_PROPELLANT_MASS,
            thrust=C.STAGE2_THRUST,
            isp=C.STAGE2_ISP,
            burn_time=C.STAGE2_BURN_TIME,
        ),
    )


def get_stage_start_time(index: int, stages: Sequence[RocketStage],
                         margin: float = C.SEPARATION_MARGIN) -> float:
    """Mission time at which stage ``index`` ignites (sum of prior windows)."""
    return float(sum(s.burn_time + margin for s in stages[:index]))


def get_current_stage(t: float, stages: Sequence[RocketStage],
                      margin: float = C.SEPARATION_MARGIN) -> int:
    """
    Index of the stage owning mission time ``t``.

    The separation margin after burnout still belongs to the burned-out
    stage. Past every window the last stage is returned.
    """
    window_end = 0.0
    for i, stage in enumerate(stages):
        window_end += stage.burn_time + margin
        if t < window_end:
            return i
    return len(stages) - 1


def get_burn_progress(t: float, start_time: float, stage: RocketStage) -> float:
    """Fraction of the stage burn completed at ``t``, in [0, 1]."""
    if stage.burn_time <= 0.0:
        return 1.0 if t >= start_time else 0.0
    return min(1.0, max(0.0, (t - start_time) / stage.burn_time))


def compute_stage_mass(t: float, stage: RocketStage, start_time: float,
                       margin: float = C.SEPARATION_MARGIN,
                       is_last: bool = False) -> float:
    """
    Mass a single stage contributes at time ``t``.

    Full wet mass before ignition, dry + remaining propellant while burning,
    dry only during the separation margin, zero once separated. The last
    stage is never separated by the clock.
    """
    if stage.separated:
        return 0.0

    elapsed = t - start_time
    if elapsed < 0.0:
        return stage.wet_mass
    if elapsed < stage.burn_time:
        remaining = stage.propellant_mass * (1.0 - elapsed / stage.burn_time)
        return stage.dry_mass + max(0.0, remaining)
    if is_last or elapsed < stage.burn_time + margin:
        return stage.dry_mass
    return 0.0


def compute_total_mass(t: float, stages: Sequence[RocketStage], payload_mass: float,
                       margin: float = C.SEPARATION_MARGIN,
                       separated: Collection[int] = (),
                       start_times: Optional[Mapping[int, float]] = None) -> float:
    """
    Total vehicle mass (kg) at mission time ``t``.

    Args:
        t: Mission elapsed time (s)
        stages: Vehicle stages in firing order
        payload_mass: Payload (kg)
        margin: Separation margin (s)
        separated: Indices jettisoned by operator command
        start_times: Per-stage ignition overrides (index -> s)
    """
    total = payload_mass
    last = len(stages) - 1
    for i, stage in enumerate(stages):
        if i in separated:
            continue
        start = get_stage_start_time(i, stages, margin)
        if start_times and i in start_times:
            start = start_times[i]
        total += compute_stage_mass(t, stage, start, margin, is_last=(i == last))
    return max(0.0, total)
