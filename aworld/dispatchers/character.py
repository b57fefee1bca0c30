"""Actions and effects applied to characters."""

from __future__ import annotations

import math

from aworld.actions import (
    CharacterBackwardPayload,
    CharacterDamagedPayload,
    CharacterForwardPayload,
    CharacterGetFullPayload,
    CharacterPushedPayload,
    CharacterRecoveryPayload,
    CharacterTurnLeftPayload,
    CharacterTurnRightPayload,
)
from aworld.models import (
    MAX_SLEEP_AMOUNT,
    MIN_SLEEP_AMOUNT,
    CharacterLocal,
    Sleeping,
    SleepingState,
)

_FULL_TURN = 2.0 * math.pi


def _move(character: CharacterLocal, angle: float, distance: float) -> None:
    character.x.write(character.x.read() + math.sin(angle) * distance)
    character.y.write(character.y.read() + math.cos(angle) * distance)


def action_forward(character: CharacterLocal, payload: CharacterForwardPayload) -> None:
    _move(character, character.angle.read(), payload.speed)


def action_backward(character: CharacterLocal, payload: CharacterBackwardPayload) -> None:
    _move(character, character.angle.read(), -payload.speed)


def action_turn_left(character: CharacterLocal, payload: CharacterTurnLeftPayload) -> None:
    angle = character.angle.read() - payload.angle
    if angle < 0.0:
        angle = _FULL_TURN - angle
    character.angle.write(angle)


def action_turn_right(character: CharacterLocal, payload: CharacterTurnRightPayload) -> None:
    angle = character.angle.read() + payload.angle
    if angle >= _FULL_TURN:
        angle %= _FULL_TURN
    character.angle.write(angle)


def effect_pushed(character: CharacterLocal, payload: CharacterPushedPayload) -> None:
    _move(character, payload.angle, payload.speed)


def _set_sleep(character: CharacterLocal, state: SleepingState, depth: int) -> None:
    character.sleep_state.write(Sleeping(state, depth))


def action_sleep(character: CharacterLocal) -> None:
    _set_sleep(character, SleepingState.SLEEPING, MAX_SLEEP_AMOUNT)


def action_rest(character: CharacterLocal) -> None:
    _set_sleep(character, SleepingState.SLEEPING, MIN_SLEEP_AMOUNT)


def action_idle(character: CharacterLocal) -> None:
    _set_sleep(character, SleepingState.IDLE, MIN_SLEEP_AMOUNT)


def action_get_up(character: CharacterLocal) -> None:
    _set_sleep(character, SleepingState.GETTING_UP, MIN_SLEEP_AMOUNT)


def effect_damage(character: CharacterLocal, payload: CharacterDamagedPayload) -> None:
    """Take damage; the character dies once its hp reaches zero."""
    hp = character.hp.read() - payload.amount
    character.hp.write(hp)
    if hp <= 0:
        character.is_dead.write(True)


def effect_dead(character: CharacterLocal) -> None:
    character.is_dead.write(True)


def effect_recovery(character: CharacterLocal, payload: CharacterRecoveryPayload) -> None:
    hp = max(character.model.max_hp, character.hp.read() + payload.depth)
    character.hp.write(hp)


def effect_wakeup(character: CharacterLocal) -> None:
    """Start getting up, with sleep depth halved."""
    depth = int(character.sleep_state.read().depth / 2)
    _set_sleep(character, SleepingState.GETTING_UP, depth)


def effect_disturb(character: CharacterLocal) -> None:
    """Start getting up, keeping the current sleep depth."""
    _set_sleep(character, SleepingState.GETTING_UP, character.sleep_state.read().depth)


def effect_get_full(character: CharacterLocal, payload: CharacterGetFullPayload) -> None:
    character.appetite.write(character.appetite.read() + payload.amount)