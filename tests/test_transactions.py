import base64

import pytest

from aworld.actions import (
    CharacterBackwardPayload,
    CharacterCommand,
    CharacterForwardPayload,
    CharacterTurnLeftPayload,
    CharacterTurnRightPayload,
    CharacterUsePayload,
    SystemLoginPayload,
)
from aworld.connection import Connection
from aworld.context import Context, WorldError
from aworld.models import Character, CharacterLocal, Item, ItemLocal, ItemType
from aworld.terrain import Terrain, TerrainLocal
from aworld.transactions import (
    attack,
    call_transaction_with,
    forward,
    login,
    pickup,
    turn_left,
    turn_right,
    use_item,
)

SIZE = 20


def make_world() -> Context:
    content = base64.b64encode(bytes(SIZE * SIZE)).decode("ascii")
    terrain = Terrain(id=0, content=content, width=SIZE, height=SIZE)
    return Context(TerrainLocal.from_model(terrain))


def add_character(context, x, y, angle=0.0, connection=None, max_hp=100):
    local = CharacterLocal.from_model(
        Character(id=0, name="tester", max_hp=max_hp, max_appetite=200)
    )
    local.x.write(x)
    local.y.write(y)
    local.angle.write(angle)
    context.insert_entity(local)
    if connection is not None:
        context.connection_to_character_id[connection] = local.entity_id
    return local


def add_item(context, item_type=ItemType.FOOD, amount=30, x=0.0, y=0.0):
    local = ItemLocal.from_model(Item(id=1, name="meat", item_type=item_type, amount=amount))
    local.x.write(x)
    local.y.write(y)
    context.insert_entity(local)
    return local


@pytest.fixture
def conn():
    return Connection(addr="127.0.0.1:5000", salt=1)


def test_unassociated_connection_is_rejected(conn):
    context = make_world()
    with pytest.raises(WorldError, match="has not been associated"):
        forward(conn, context, CharacterForwardPayload(speed=1.0))


def test_attack_below_full_charge_only_charges(conn):
    context = make_world()
    me = add_character(context, 10.0, 10.0, connection=conn)
    assert attack(conn, context) == [me.entity_id]
    assert me.attack_charge.read() == 1.0


def test_attack_at_full_charge_damages_target(conn):
    context = make_world()
    me = add_character(context, 10.0, 10.0, connection=conn)
    target = add_character(context, 10.5, 10.5)
    me.attack_charge.write(49.0)
    assert attack(conn, context) == [target.entity_id]
    assert target.hp.read() == 90
    assert me.attack_charge.read() == 0.0
    assert not target.is_dead.read()


def test_attack_killing_target_drops_meat(conn):
    context = make_world()
    me = add_character(context, 10.0, 10.0, connection=conn)
    target = add_character(context, 10.5, 10.5, max_hp=10)
    me.attack_charge.write(49.0)
    result = attack(conn, context)
    assert target.is_dead.read()
    assert len(result) == 2
    meat_id, hit_id = result
    assert hit_id == target.entity_id
    meat = context.items[meat_id]
    assert meat.model.item_type is ItemType.FOOD
    assert (meat.x.read(), meat.y.read()) == (10.5, 10.5)


def test_forward_without_obstacle_moves(conn):
    context = make_world()
    me = add_character(context, 10.0, 10.0, connection=conn)
    assert forward(conn, context, CharacterForwardPayload(speed=1.0)) == [me.entity_id]
    assert me.x.read() == pytest.approx(10.0)
    assert me.y.read() == pytest.approx(11.0)


def test_forward_pushes_character_in_the_way(conn):
    context = make_world()
    me = add_character(context, 10.0, 10.0, connection=conn)
    other = add_character(context, 10.5, 10.5)
    assert forward(conn, context, CharacterForwardPayload(speed=1.0)) == [other.entity_id]
    assert (me.x.read(), me.y.read()) == (10.0, 10.0)
    assert other.x.read() == pytest.approx(10.5)
    assert other.y.read() == pytest.approx(11.5)


def test_forward_into_world_edge_bounces(conn):
    context = make_world()
    me = add_character(context, 19.5, 10.2, connection=conn)
    assert forward(conn, context, CharacterForwardPayload(speed=1.0)) == [me.entity_id]
    assert me.x.read() == pytest.approx(19.4)
    assert me.y.read() == pytest.approx(9.95)


def test_login_creates_new_character(conn):
    context = make_world()
    before = context.get_entity_ids()
    result = login(conn, context, SystemLoginPayload())
    assert result == before
    character = context.character_for(conn)
    assert character.entity_id not in result
    assert len(character.model.name) == 7
    assert character.model.max_hp == 100
    assert character.model.max_appetite == 8000
    assert character.angle.read() == 0.0


def test_login_twice_is_rejected(conn):
    context = make_world()
    login(conn, context, SystemLoginPayload())
    with pytest.raises(WorldError, match="has already been associated to character"):
        login(conn, context, SystemLoginPayload())


def test_login_with_existing_character(conn):
    context = make_world()
    existing = add_character(context, 5.0, 5.0)
    result = login(conn, context, SystemLoginPayload(character_id=existing.entity_id))
    assert sorted(result) == sorted(context.get_entity_ids())
    assert context.character_for(conn) is existing


def test_login_with_unknown_character(conn):
    context = make_world()
    with pytest.raises(WorldError, match="is not found"):
        login(conn, context, SystemLoginPayload(character_id=987654321))


def test_login_with_taken_character(conn):
    context = make_world()
    other = Connection(addr="127.0.0.1:6000", salt=2)
    taken = add_character(context, 5.0, 5.0, connection=other)
    with pytest.raises(WorldError, match="already been associated to someone"):
        login(conn, context, SystemLoginPayload(character_id=taken.entity_id))


def test_pickup_item_in_front(conn):
    context = make_world()
    me = add_character(context, 10.0, 10.0, connection=conn)
    item = add_item(context, x=10.5, y=10.2)
    assert pickup(conn, context) == [me.entity_id, item.entity_id]
    assert me.items.read() == [item.entity_id]
    assert item.is_dropped.read() is False


def test_pickup_nothing_in_front(conn):
    context = make_world()
    me = add_character(context, 10.0, 10.0, connection=conn)
    assert pickup(conn, context) == []
    assert me.items.read() == []


def test_turn_left_and_right(conn):
    context = make_world()
    me = add_character(context, 10.0, 10.0, angle=0.3, connection=conn)
    assert turn_left(conn, context, CharacterTurnLeftPayload(angle=0.1)) == [me.entity_id]
    assert me.angle.read() == pytest.approx(0.2)
    assert turn_right(conn, context, CharacterTurnRightPayload(angle=0.2)) == [me.entity_id]
    assert me.angle.read() == pytest.approx(0.4)


def test_use_item_below_full_charge_only_charges(conn):
    context = make_world()
    me = add_character(context, 10.0, 10.0, connection=conn)
    assert use_item(conn, context, CharacterUsePayload(item_index=0)) == [me.entity_id]
    assert me.item_charge.read() == 1.0


def test_use_food_item(conn):
    context = make_world()
    me = add_character(context, 10.0, 10.0, connection=conn)
    food = add_item(context, amount=30)
    me.items.write([food.entity_id])
    me.item_charge.write(24.0)
    appetite = me.appetite.read()
    result = use_item(conn, context, CharacterUsePayload(item_index=0))
    assert result == [me.entity_id, food.entity_id]
    assert me.appetite.read() == appetite + 30
    assert me.items.read() == []
    assert food.is_used.read() is True
    assert me.item_charge.read() == 0.0


def test_use_item_index_out_of_range(conn):
    context = make_world()
    me = add_character(context, 10.0, 10.0, connection=conn)
    me.item_charge.write(24.0)
    with pytest.raises(WorldError, match="item_index 3 is out of length 0"):
        use_item(conn, context, CharacterUsePayload(item_index=3))


def test_use_unknown_item_type(conn):
    context = make_world()
    me = add_character(context, 10.0, 10.0, connection=conn)
    thing = add_item(context, item_type=ItemType.UNKNOWN)
    me.items.write([thing.entity_id])
    me.item_charge.write(24.0)
    with pytest.raises(WorldError, match="is not able to use"):
        use_item(conn, context, CharacterUsePayload(item_index=0))


def test_use_missing_item(conn):
    context = make_world()
    me = add_character(context, 10.0, 10.0, connection=conn)
    me.items.write([424242])
    me.item_charge.write(24.0)
    with pytest.raises(WorldError, match="Not found item<424242>"):
        use_item(conn, context, CharacterUsePayload(item_index=0))


def test_call_transaction_marks_mutations(conn):
    context = make_world()
    me = add_character(context, 10.0, 10.0, angle=0.3, connection=conn)
    call_transaction_with(conn, context, CharacterTurnRightPayload(angle=0.1))
    assert context.take_mutated_entities() == [me]
    assert me.angle.read() == pytest.approx(0.4)


def test_call_transaction_login_marks_world(conn):
    context = make_world()
    call_transaction_with(conn, context, SystemLoginPayload())
    mutated = context.take_mutated_entities()
    assert mutated == [context.terrain]


@pytest.mark.parametrize(
    "action",
    [CharacterBackwardPayload(speed=1.0), CharacterCommand.SLEEP, CharacterCommand.IDLE],
)
def test_call_transaction_rejects_unsupported_actions(conn, action):
    context = make_world()
    add_character(context, 10.0, 10.0, connection=conn)
    with pytest.raises(WorldError, match="is not supported"):
        call_transaction_with(conn, context, action)
    assert context.take_mutated_entities() == []