"""Conversion of client queries into actions."""

from __future__ import annotations

import json
from typing import Any

from aworld.actions import (
    Action,
    CharacterBackwardPayload,
    CharacterCommand,
    CharacterForwardPayload,
    CharacterTurnLeftPayload,
    CharacterTurnRightPayload,
    CharacterUsePayload,
    SystemLoginPayload,
)
from aworld.query import Query, QueryKind

_SPEED_EXPECTATION = '{"speed": float}'
_ANGLE_EXPECTATION = '{"angle": float}'
_LOGIN_EXPECTATION = '{"character_id": integer | null, "password": string | null}'
_USE_ITEM_EXPECTATION = '{"item_index": integer}'

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1


class MappingError(ValueError):
    """Raised when a query payload does not have the expected shape."""


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _number(payload: Any, key: str, expectation: str) -> float:
    if not isinstance(payload, dict) or key not in payload:
        raise MappingError(expectation)
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MappingError(expectation)
    return float(value)


def parse_forward(payload: Any) -> CharacterForwardPayload:
    return CharacterForwardPayload(_number(payload, "speed", _SPEED_EXPECTATION))


def parse_backward(payload: Any) -> CharacterBackwardPayload:
    return CharacterBackwardPayload(_number(payload, "speed", _SPEED_EXPECTATION))


def parse_turn_left(payload: Any) -> CharacterTurnLeftPayload:
    return CharacterTurnLeftPayload(_number(payload, "angle", _ANGLE_EXPECTATION))


def parse_turn_right(payload: Any) -> CharacterTurnRightPayload:
    return CharacterTurnRightPayload(_number(payload, "angle", _ANGLE_EXPECTATION))


def parse_login(payload: Any) -> SystemLoginPayload:
    """Read an optional character id and password; other value types are ignored."""
    if not isinstance(payload, dict):
        raise MappingError(_LOGIN_EXPECTATION)
    character_id = None
    cid = payload.get("character_id")
    if _is_integer(cid) and _I64_MIN <= cid <= _I64_MAX:
        if cid < 0:
            raise MappingError(_LOGIN_EXPECTATION)
        character_id = cid
    secret = payload.get("password")
    return SystemLoginPayload(
        character_id=character_id,
        password=secret if isinstance(secret, str) else None,
    )


def parse_use_item(payload: Any) -> CharacterUsePayload:
    if not isinstance(payload, dict) or "item_index" not in payload:
        raise MappingError(_USE_ITEM_EXPECTATION)
    index = payload["item_index"]
    if not _is_integer(index) or not _I64_MIN <= index <= _I64_MAX:
        raise MappingError(_USE_ITEM_EXPECTATION)
    return CharacterUsePayload(index)


_PARSERS = {
    QueryKind.LOGIN: parse_login,
    QueryKind.FORWARD: parse_forward,
    QueryKind.BACKWARD: parse_backward,
    QueryKind.TURN_LEFT: parse_turn_left,
    QueryKind.TURN_RIGHT: parse_turn_right,
    QueryKind.USE_ITEM: parse_use_item,
}

_COMMANDS = {
    QueryKind.ATTACK: CharacterCommand.ATTACK,
    QueryKind.PICKUP: CharacterCommand.PICKUP,
}


def query_to_action(query: Query) -> Action:
    """Turn a query into the action it asks for."""
    parser = _PARSERS.get(query.kind)
    if parser is not None:
        return parser(query.payload)
    command = _COMMANDS.get(query.kind)
    if command is not None:
        return command
    raise MappingError(
        f"Cannot convert query Unknown({json.dumps(query.raw_kind, ensure_ascii=False)}) to action"
    )