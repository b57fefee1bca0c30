import math

import pytest

from aworld.models import (
    Character,
    CharacterLocal,
    EntityId,
    EntityKind,
    Item,
    ItemLocal,
    ItemType,
    NewCharacter,
    NewItem,
    NewRelation,
    ObjectId,
    Relation,
    RelationLocal,
    SleepingState,
)


def test_create_character():
    new_character = NewCharacter.random()
    assert len(new_character.name) > 0
    assert new_character.max_hp > 0
    assert new_character.max_appetite > 0
    assert 8000 <= new_character.max_hp < 12000


def test_create_item():
    new_item = NewItem.random()
    assert len(new_item.name) > 0
    assert int(new_item.item_type) <= 2
    assert new_item.amount >= 0


def test_create_relation():
    new_relation = NewRelation.new_random(0, 1)
    assert new_relation.character_id >= 0
    assert new_relation.target_id >= 0
    assert -1.0 <= new_relation.factor <= 1.0


def test_character_local_starts_from_model():
    local = CharacterLocal.from_model(Character(1, "tset", 100, 200))
    assert local.hp.read() == 100
    assert local.appetite.read() == 200
    assert local.is_dead.read() is False
    assert local.items.read() == []
    assert local.sleep_state.read().state is SleepingState.GETTING_UP
    assert local.sleep_state.read().depth == 0
    assert 0.0 <= local.angle.read() <= 2 * math.pi


def test_character_locals_get_increasing_entity_ids():
    first = CharacterLocal.from_model(Character(1, "a", 1, 1))
    second = CharacterLocal.from_model(Character(1, "a", 1, 1))
    assert first.entity_id < second.entity_id


def test_character_locals_do_not_share_item_lists():
    first = CharacterLocal.from_model(Character(1, "a", 1, 1))
    second = CharacterLocal.from_model(Character(2, "b", 1, 1))
    first.items.write([5])
    assert second.items.read() == []


def test_item_local_starts_dropped_with_full_durability():
    local = ItemLocal.from_model(Item(0, "meat", ItemType.FOOD, 10))
    assert local.is_dropped.read() is True
    assert local.is_used.read() is False
    assert local.durability.read() == local.max_durability.read()
    assert 10 <= local.durability.read() < 1000


def test_relation_local_copies_factor():
    local = RelationLocal.from_model(Relation(0, 0, 1, 0.5))
    assert local.factor.read() == 0.5


def test_invalid_item_type_is_rejected():
    with pytest.raises(ValueError):
        ItemType(5)


def test_object_id_accepts_only_objects():
    assert ObjectId(EntityKind.ITEM, 3).id == 3
    with pytest.raises(ValueError):
        ObjectId(EntityKind.TERRAIN, 3)


def test_entity_ids_compare_by_value():
    assert EntityId(EntityKind.RELATION, 2) == EntityId(EntityKind.RELATION, 2)
    assert not EntityId(EntityKind.ITEM, 2) == EntityId(EntityKind.CHARACTER, 2)