"""
Launch Telemetry Simulation - Operator Commands

Commands are a tagged variant (``Command`` + ``CommandType``). The console
still speaks plain string tokens (``"abort"``,
``"emergency:fuel_leak: Isolate Fuel Lines"``) and ``{"type": ...}`` dicts;
``parse_command`` converts all of those into a ``Command``.
"""

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Any, Optional

from .emergency import EMERGENCY_PREFIX, format_emergency_command

logger = logging.getLogger(__name__)


class CommandType(Enum):
    ENGINE_START = "engine_start"
    ENGINE_STOP = "engine_stop"
    THROTTLE_SET = "throttle_set"
    STAGE_SEPARATE = "stage_separate"
    PAYLOAD_DEPLOY = "payload_deploy"
    ABORT = "abort"
    EMERGENCY = "emergency"


# Accepted spellings of the plain tokens, after normalization
_ALIASES = {
    'engine_start': CommandType.ENGINE_START,
    'start_engine': CommandType.ENGINE_START,
    'engine_stop': CommandType.ENGINE_STOP,
    'stop_engine': CommandType.ENGINE_STOP,
    'throttle_set': CommandType.THROTTLE_SET,
    'throttle': CommandType.THROTTLE_SET,
    'stage_separate': CommandType.STAGE_SEPARATE,
    'separate_stage': CommandType.STAGE_SEPARATE,
    'stage_separation': CommandType.STAGE_SEPARATE,
    'payload_deploy': CommandType.PAYLOAD_DEPLOY,
    'deploy_payload': CommandType.PAYLOAD_DEPLOY,
    'abort': CommandType.ABORT,
}


@dataclass(frozen=True)
class Command:
    """
    One operator command.

    Attributes:
        type: Command tag
        value: Throttle percentage (0-100) for THROTTLE_SET
        scenario: Emergency scenario id for EMERGENCY
        action: Emergency action text for EMERGENCY
    """
    type: CommandType
    value: Optional[float] = None
    scenario: Optional[str] = None
    action: Optional[str] = None

    @classmethod
    def emergency(cls, scenario: str, action: str) -> 'Command':
        return cls(CommandType.EMERGENCY, scenario=scenario, action=action)

    @classmethod
    def throttle(cls, percent: float) -> 'Command':
        return cls(CommandType.THROTTLE_SET, value=float(percent))

    def to_token(self) -> str:
        """Legacy string form understood by ``parse_command``."""
        if self.type is CommandType.EMERGENCY:
            return format_emergency_command(self.scenario, self.action)
        if self.type is CommandType.THROTTLE_SET:
            return f"{self.type.value}:{self.value:g}"
        return self.type.value

    def __str__(self) -> str:
        return self.to_token()


def _normalize(token: str) -> str:
    return token.strip().lower().replace('-', '_').replace(' ', '_')


def _parse_emergency(rest: str) -> Optional[Command]:
    # rest is "<id>: <action>"
    scenario, sep, action = rest.partition(': ')
    scenario = scenario.strip()
    action = action.strip()
    if not sep or not scenario or not action:
        return None
    return Command.emergency(scenario, action)


def _parse_value(raw: Any) -> Optional[float]:
    try:
        return float(raw)
    except (TypeError, ValueError):
        return None


def _parse_string(token: str) -> Optional[Command]:
    head, sep, rest = token.strip().partition(':')
    if sep and _normalize(head) == EMERGENCY_PREFIX:
        return _parse_emergency(rest)

    command_type = _ALIASES.get(_normalize(head))
    if command_type is None:
        return None
    if command_type is CommandType.THROTTLE_SET:
        value = _parse_value(rest) if sep else None
        return Command.throttle(value) if value is not None else None
    if sep:
        return None
    return Command(command_type)


def _parse_mapping(payload: dict) -> Optional[Command]:
    raw_type = payload.get('type')
    if not isinstance(raw_type, str):
        return None
    command_type = _ALIASES.get(_normalize(raw_type))
    if command_type is None and _normalize(raw_type) == EMERGENCY_PREFIX:
        command_type = CommandType.EMERGENCY

    if command_type is CommandType.THROTTLE_SET:
        value = _parse_value(payload.get('value'))
        return Command.throttle(value) if value is not None else None
    if command_type is CommandType.EMERGENCY:
        scenario = payload.get('scenario')
        action = payload.get('action')
        if not scenario or not action:
            return None
        return Command.emergency(str(scenario), str(action))
    if command_type is None:
        return None
    return Command(command_type)


def parse_command(raw: Any) -> Optional[Command]:
    """
    Convert a console command into a ``Command``.

    Accepts a ``Command``, a legacy string token, or a ``{"type": ...}``
    mapping. Returns None for anything unrecognized or malformed.
    """
    if isinstance(raw, Command):
        return raw
    if isinstance(raw, str):
        return _parse_string(raw)
    if isinstance(raw, dict):
        return _parse_mapping(raw)
    logger.debug(f"Unsupported command payload type: {type(raw).__name__}")
    return None
