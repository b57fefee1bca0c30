"""The shared state of a running world and queries over it."""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator
from typing import Union

from aworld.connection import Connection
from aworld.models import (
    CharacterLocal,
    EntityId,
    EntityKind,
    ItemLocal,
    ObjectId,
    RelationLocal,
)
from aworld.terrain import Obstacle, TerrainInfo, TerrainLocal
from aworld.utils import intersects_circle_with_line, log

Entity = Union[CharacterLocal, ItemLocal, TerrainLocal, RelationLocal]
WorldObject = Union[CharacterLocal, ItemLocal]

_OBJECT_RADIUS = 1.0


class WorldError(Exception):
    """Raised when a request cannot be carried out on the world."""


class Context:
    """Every entity of the world, indexed by id, plus pending mutations."""

    def __init__(self, terrain: TerrainLocal) -> None:
        self.terrain = terrain
        self._entities: dict[int, Entity] = {terrain.entity_id: terrain}
        self._mutated: set[int] = set()
        self.connection_to_character_id: dict[Connection, int] = {}
        self.characters: dict[int, CharacterLocal] = {}
        self.items: dict[int, ItemLocal] = {}
        self.relations: dict[int, RelationLocal] = {}

    def character_for(self, connection: Connection) -> CharacterLocal:
        """Return the character a connection controls."""
        character_id = self.connection_to_character_id.get(connection)
        character = None if character_id is None else self.characters.get(character_id)
        if character is None:
            raise WorldError(f"{connection!r} has not been associated to any character")
        return character

    def insert_entity(self, entity: Entity) -> None:
        """Register a new entity; its id must not be in use yet."""
        entity_id = entity.entity_id
        if entity_id in self._entities:
            log("BUG", f"Same entity id {entity_id} has been found")
            raise WorldError(f"same entity id {entity_id} has been found")
        if isinstance(entity, CharacterLocal):
            self.characters[entity_id] = entity
        elif isinstance(entity, ItemLocal):
            self.items[entity_id] = entity
        elif isinstance(entity, TerrainLocal):
            self.terrain = entity
        elif isinstance(entity, RelationLocal):
            self.relations[entity_id] = entity
        else:
            raise TypeError(f"not an entity: {entity!r}")
        self._entities[entity_id] = entity

    def get_objects(self) -> list[WorldObject]:
        """Return all characters followed by all items."""
        return [*self.characters.values(), *self.items.values()]

    def mark_mutations(self, entity_ids: Iterable[int]) -> None:
        self._mutated.update(entity_ids)

    def take_mutated_entities(self) -> list[Entity]:
        """Return the entities marked as mutated and clear the marks."""
        mutated, self._mutated = self._mutated, set()
        return [self._entities[entity_id] for entity_id in mutated]

    def get_entity_ids(self) -> list[int]:
        return list(self._entities)

    def fetch_entity(self, entity_id: EntityId) -> Entity:
        if entity_id.kind is EntityKind.TERRAIN:
            return self.terrain
        repository = {
            EntityKind.CHARACTER: self.characters,
            EntityKind.ITEM: self.items,
            EntityKind.RELATION: self.relations,
        }[entity_id.kind]
        try:
            return repository[entity_id.id]
        except KeyError:
            raise WorldError(f"no {entity_id.kind.value} with id {entity_id.id}") from None

    def fetch_entities(self, entity_ids: Iterable[EntityId]) -> list[Entity]:
        return [self.fetch_entity(entity_id) for entity_id in entity_ids]

    def fetch_object(self, object_id: ObjectId) -> WorldObject:
        repository = self.characters if object_id.kind is EntityKind.CHARACTER else self.items
        try:
            return repository[object_id.id]
        except KeyError:
            raise WorldError(f"no {object_id.kind.value} with id {object_id.id}") from None

    def fetch_objects(self, object_ids: Iterable[ObjectId]) -> list[WorldObject]:
        return [self.fetch_object(object_id) for object_id in object_ids]

    def raycast(
        self, x0: float, y0: float, angle: float, distance: float
    ) -> Obstacle | None:
        """Return the nearest obstacle along a ray, if any.

        Objects touched by the ray and the first wall or world edge met are
        candidates; the one closest to the origin wins.
        """
        x1 = x0 + distance * math.cos(angle)
        y1 = y0 + distance * math.sin(angle)

        obstacles: list[tuple[float, Obstacle]] = []
        nearest = min(
            self._object_hits(x0, y0, x1, y1), key=lambda hit: hit[0], default=None
        )
        if nearest is not None:
            obstacles.append(nearest)
        wall = self._terrain_hit(x0, y0, x1, y1, distance)
        if wall is not None:
            obstacles.append((wall, TerrainInfo.WALL))
        obstacles.sort(key=lambda hit: hit[0])
        return obstacles[0][1] if obstacles else None

    def _object_hits(
        self, x0: float, y0: float, x1: float, y1: float
    ) -> Iterator[tuple[float, ObjectId]]:
        for character in self.characters.values():
            d = intersects_circle_with_line(
                character.x.read(), character.y.read(), _OBJECT_RADIUS, x0, y0, x1, y1
            )
            if d is not None and d < 1.0:
                yield d, ObjectId(EntityKind.CHARACTER, character.entity_id)
        for item in self.items.values():
            if not item.is_dropped.read():
                continue
            d = intersects_circle_with_line(
                item.x.read(), item.y.read(), _OBJECT_RADIUS, x0, y0, x1, y1
            )
            if d is not None:
                yield d, ObjectId(EntityKind.ITEM, item.entity_id)

    def _terrain_hit(
        self, x0: float, y0: float, x1: float, y1: float, distance: float
    ) -> float | None:
        """Walk the ray in small steps; return the distance to the first wall."""
        steps = distance * 100.0 + 10.0
        delta_x = (x1 - x0) / steps
        delta_y = (y1 - y0) / steps
        width = self.terrain.model.width
        height = self.terrain.model.height
        raw = self.terrain.raw.read()
        cur_x, cur_y = x0, y0
        for _ in range(max(int(steps), 0) + 1):
            if cur_x < 0.0 or width <= cur_x or cur_y < 0.0 or height <= cur_y:
                return math.hypot(x0 - cur_x, y0 - cur_y)
            ix = math.floor(cur_x)
            iy = math.floor(cur_y)
            if raw[ix + iy * width] == TerrainInfo.WALL:
                return math.hypot(x0 - ix, y0 - iy)
            cur_x += delta_x
            cur_y += delta_y
        return None