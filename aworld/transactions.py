"""Transactions: the effect on the world of each action a client sends."""

from __future__ import annotations

import json
import math
import time

from aworld.actions import (
    Action,
    CharacterCommand,
    CharacterDamagedPayload,
    CharacterForwardPayload,
    CharacterGetFullPayload,
    CharacterPushedPayload,
    CharacterTurnLeftPayload,
    CharacterTurnRightPayload,
    CharacterUsePayload,
    SystemLoginPayload,
)
from aworld.connection import Connection
from aworld.context import Context, WorldError
from aworld.dispatchers import character as character_dispatcher
from aworld.dispatchers import item as item_dispatcher
from aworld.environment import generate_meat
from aworld.models import Character, CharacterLocal, EntityKind, ItemType, ObjectId
from aworld.terrain import TerrainInfo
from aworld.utils import debug, generate_random_name

ATTACK_FULL_CHARGE = 50.0
ITEM_FULL_CHARGE = 25.0
ATTACK_DAMAGE = 10
REACH = 1.0


def attack(connection: Connection, context: Context) -> list[int]:
    """Charge an attack; once fully charged, damage the character in front."""
    updated: list[int] = []
    character = context.character_for(connection)
    x = character.x.read()
    y = character.y.read()
    angle = character.angle.read()
    attack_charge = character.attack_charge.read() + 1.0
    if attack_charge < ATTACK_FULL_CHARGE:
        character.attack_charge.write(attack_charge)
        updated.append(character.entity_id)
        return updated

    obstacle = context.raycast(x, y, angle, REACH)
    if isinstance(obstacle, ObjectId) and obstacle.kind is EntityKind.CHARACTER:
        target = context.characters[obstacle.id]
        character_dispatcher.effect_damage(
            target, CharacterDamagedPayload(amount=ATTACK_DAMAGE)
        )
        if target.is_dead.read():
            updated.append(generate_meat(context, target.x.read(), target.y.read()))
        character.attack_charge.write(0.0)
        updated.append(obstacle.id)
    return updated


def _push_off_wall(character: CharacterLocal, x: float, y: float, angle: float) -> None:
    if math.pi <= angle <= 1.5 * math.pi:
        fixed_x, fixed_y = math.ceil(x), math.ceil(y)
    else:
        fixed_x, fixed_y = math.floor(x), math.floor(y)
    speed = math.hypot(fixed_x - x, fixed_y - y) / 2.0
    push_angle = math.atan2(fixed_y - y, fixed_x - x)
    character_dispatcher.effect_pushed(
        character, CharacterPushedPayload(angle=push_angle, speed=speed)
    )


def forward(
    connection: Connection, context: Context, payload: CharacterForwardPayload
) -> list[int]:
    """Move forward, pushing a character in the way or bouncing off a wall."""
    updated: list[int] = []
    character = context.character_for(connection)
    x = character.x.read()
    y = character.y.read()
    angle = character.angle.read()
    speed = payload.speed
    moves_freely = True

    obstacle = context.raycast(x, y, angle, speed)
    if isinstance(obstacle, ObjectId):
        if obstacle.kind is EntityKind.CHARACTER:
            pushee = context.characters[obstacle.id]
            moves_freely = False
            character_dispatcher.effect_pushed(
                pushee, CharacterPushedPayload(angle=angle, speed=speed)
            )
            updated.append(pushee.entity_id)
        else:
            debug(f"{character.model.name} moved over an item<{obstacle.id}>")
    elif obstacle is TerrainInfo.WALL:
        moves_freely = False
        _push_off_wall(character, x, y, angle)
        updated.append(character.entity_id)
        debug(f"{character.model.name} tackled to {obstacle.name.title()}")

    if moves_freely:
        character_dispatcher.action_forward(character, payload)
        updated.append(character.entity_id)
    return updated


def _associated_character(
    connection: Connection, context: Context
) -> CharacterLocal | None:
    try:
        return context.character_for(connection)
    except WorldError:
        return None


def login(
    connection: Connection, context: Context, payload: SystemLoginPayload
) -> list[int]:
    """Bind a connection to an existing character, or to a newly created one.

    Returns the ids of every entity present before the login, so that the
    client receives the whole world.
    """
    existing = _associated_character(connection, context)
    if existing is not None:
        raise WorldError(
            f"{json.dumps(connection.addr, ensure_ascii=False)} has already been "
            f"associated to character {existing!r}"
        )

    character_id = payload.character_id
    if character_id is not None:
        if character_id in context.connection_to_character_id.values():
            raise WorldError(
                f"Character ID:{character_id} has already been associated to someone"
            )
        if not any(
            local.entity_id == character_id for local in context.characters.values()
        ):
            raise WorldError(f"Character ID:{character_id} is not found")
        context.connection_to_character_id[connection] = character_id
        return context.get_entity_ids()

    model = Character(
        id=int(time.time()),
        name=generate_random_name(7),
        max_hp=100,
        max_appetite=8000,
    )
    local = CharacterLocal.from_model(model)
    x, y = context.terrain.randpos()
    local.x.write(x)
    local.y.write(y)
    local.angle.write(0.0)
    updated = context.get_entity_ids()
    context.connection_to_character_id[connection] = local.entity_id
    context.insert_entity(local)
    return updated


def pickup(connection: Connection, context: Context) -> list[int]:
    """Pick up the dropped item right in front of the character, if any."""
    updated: list[int] = []
    character = context.character_for(connection)
    x = character.x.read()
    y = character.y.read()
    angle = character.angle.read()
    items = character.items.read()
    obstacle = context.raycast(x, y, angle, REACH)
    if isinstance(obstacle, ObjectId) and obstacle.kind is EntityKind.ITEM:
        item = context.items[obstacle.id]
        item.is_dropped.write(False)
        items.append(obstacle.id)
        character.items.write(items)
        updated.extend((character.entity_id, obstacle.id))
    return updated


def turn_left(
    connection: Connection, context: Context, payload: CharacterTurnLeftPayload
) -> list[int]:
    character = context.character_for(connection)
    character_dispatcher.action_turn_left(character, payload)
    return [character.entity_id]


def turn_right(
    connection: Connection, context: Context, payload: CharacterTurnRightPayload
) -> list[int]:
    character = context.character_for(connection)
    character_dispatcher.action_turn_right(character, payload)
    return [character.entity_id]


def use_item(
    connection: Connection, context: Context, payload: CharacterUsePayload
) -> list[int]:
    """Charge item use; once fully charged, consume the carried item at an index."""
    character = context.character_for(connection)
    items = character.items.read()
    item_charge = character.item_charge.read() + 1.0
    if item_charge < ITEM_FULL_CHARGE:
        character.item_charge.write(item_charge)
        return [character.entity_id]

    index = payload.item_index
    if not 0 <= index < len(items):
        raise WorldError(f"item_index {index} is out of length {len(items)}")
    item_id = items[index]
    local = context.items.get(item_id)
    if local is None:
        raise WorldError(f"Not found item<{item_id}>")

    item_type = local.model.item_type
    if item_type is ItemType.UNKNOWN:
        raise WorldError(f"Item {local.model.name} is not able to use")
    if item_type is ItemType.WEAPON:
        raise WorldError(f"Weapon {local.model.name} cannot be used")

    updated: list[int] = []
    character_dispatcher.effect_get_full(
        character, CharacterGetFullPayload(amount=local.model.amount)
    )
    remaining = character.items.read()
    del remaining[index]
    character.items.write(remaining)
    updated.append(character.entity_id)
    item_dispatcher.effect_spend(local)
    updated.append(local.entity_id)
    character.item_charge.write(0.0)
    return updated


def _run(connection: Connection, context: Context, action: Action) -> list[int]:
    match action:
        case CharacterCommand.ATTACK:
            return attack(connection, context)
        case CharacterCommand.PICKUP:
            return pickup(connection, context)
        case CharacterForwardPayload():
            return forward(connection, context, action)
        case CharacterTurnLeftPayload():
            return turn_left(connection, context, action)
        case CharacterTurnRightPayload():
            return turn_right(connection, context, action)
        case CharacterUsePayload():
            return use_item(connection, context, action)
        case SystemLoginPayload():
            return login(connection, context, action)
        case _:
            raise WorldError(f"Action {action!r} is not supported")


def call_transaction_with(connection: Connection, context: Context, action: Action) -> None:
    """Carry out an action for a connection and mark what it changed."""
    context.mark_mutations(_run(connection, context, action))