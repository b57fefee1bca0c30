"""Actions clients request and effects applied to world objects."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Union


class CharacterCommand(enum.Enum):
    """Character actions that carry no payload."""

    ATTACK = "attack"
    PICKUP = "pickup"
    DEFENCE = "defence"
    AVOID = "avoid"
    SLEEP = "sleep"
    REST = "rest"
    IDLE = "idle"
    GET_UP = "get_up"


@dataclass(frozen=True)
class CharacterForwardPayload:
    speed: float


@dataclass(frozen=True)
class CharacterBackwardPayload:
    speed: float


@dataclass(frozen=True)
class CharacterTurnLeftPayload:
    angle: float


@dataclass(frozen=True)
class CharacterTurnRightPayload:
    angle: float


@dataclass(frozen=True)
class CharacterUsePayload:
    item_index: int


@dataclass(frozen=True)
class CharacterPushedPayload:
    angle: float
    speed: float


@dataclass(frozen=True)
class CharacterDamagedPayload:
    amount: int


@dataclass(frozen=True)
class CharacterRecoveryPayload:
    depth: int


@dataclass(frozen=True)
class CharacterGetFullPayload:
    amount: int


@dataclass(frozen=True)
class ItemBreakPayload:
    durability: int


@dataclass(frozen=True)
class RelationIncreasePayload:
    amount: float


@dataclass(frozen=True)
class RelationDecreasePayload:
    amount: float


@dataclass(frozen=True)
class SystemLoginPayload:
    character_id: int | None = None
    password: str | None = None


CharacterAction = Union[
    CharacterCommand,
    CharacterForwardPayload,
    CharacterBackwardPayload,
    CharacterTurnLeftPayload,
    CharacterTurnRightPayload,
    CharacterUsePayload,
]

Action = Union[CharacterAction, SystemLoginPayload]