"""Creation of a fresh world and of the items spawned into it."""

from __future__ import annotations

import random

from aworld.context import Context
from aworld.counter import get_count
from aworld.models import Item, ItemLocal, ItemType, NewItem
from aworld.terrain import NewTerrain, Terrain, TerrainLocal

_WORLD_SIZE = 50
_MAX_FOOD = 20


def create_world() -> Context:
    """Build a 50x50 world scattered with up to 19 pieces of meat."""
    new_terrain = NewTerrain.with_size(_WORLD_SIZE, _WORLD_SIZE)
    terrain = Terrain(
        id=0,
        content=new_terrain.content,
        width=new_terrain.width,
        height=new_terrain.height,
    )
    context = Context(TerrainLocal.from_model(terrain))
    for _ in range(int(random.uniform(0.0, _MAX_FOOD))):
        x, y = context.terrain.randpos()
        generate_meat(context, x, y)
    return context


def _spawn(context: Context, item_type: ItemType, x: float, y: float) -> int:
    new_item = NewItem.random()
    item = Item(
        id=get_count(),
        name=new_item.name,
        item_type=item_type,
        amount=new_item.amount,
    )
    local = ItemLocal.from_model(item)
    local.x.write(x)
    local.y.write(y)
    context.insert_entity(local)
    return local.entity_id


def generate_weapon(context: Context, x: float, y: float) -> int:
    """Drop a new weapon at (x, y) and return its entity id."""
    return _spawn(context, ItemType.WEAPON, x, y)


def generate_meat(context: Context, x: float, y: float) -> int:
    """Drop a new piece of food at (x, y) and return its entity id."""
    return _spawn(context, ItemType.FOOD, x, y)