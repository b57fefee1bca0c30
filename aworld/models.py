"""World entities: characters, items and relations."""

from __future__ import annotations

import enum
import math
import random
from dataclasses import dataclass, field

from aworld.counter import get_count
from aworld.field import Field
from aworld.utils import generate_random_name


class EntityKind(enum.Enum):
    CHARACTER = "character"
    ITEM = "item"
    TERRAIN = "terrain"
    RELATION = "relation"


@dataclass(frozen=True)
class EntityId:
    """Reference to any entity of the world."""

    kind: EntityKind
    id: int


@dataclass(frozen=True)
class ObjectId:
    """Reference to a placed object: a character or an item."""

    kind: EntityKind
    id: int

    def __post_init__(self) -> None:
        if self.kind not in (EntityKind.CHARACTER, EntityKind.ITEM):
            raise ValueError(f"{self.kind} is not an object kind")


class SleepingState(enum.Enum):
    GETTING_UP = "getting_up"
    SLEEPING = "sleeping"
    IDLE = "idle"


@dataclass(frozen=True)
class Sleeping:
    state: SleepingState
    depth: int


MAX_SLEEP_AMOUNT = 60 * 90
MIN_SLEEP_AMOUNT = 0


@dataclass
class Character:
    id: int
    name: str
    max_hp: int
    max_appetite: int


@dataclass
class NewCharacter:
    name: str
    max_hp: int
    max_appetite: int

    @classmethod
    def random(cls) -> NewCharacter:
        return cls(
            name=generate_random_name(0),
            max_hp=8000 + random.randrange(4000),
            max_appetite=8000 + random.randrange(4000),
        )


@dataclass(eq=False)
class CharacterLocal:
    """A character living in the world, with its mutable state."""

    entity_id: int
    model: Character
    hp: Field[int]
    appetite: Field[int]
    x: Field[float]
    y: Field[float]
    angle: Field[float]
    is_dead: Field[bool]
    sleep_state: Field[Sleeping]
    items: Field[list] = field(default_factory=lambda: Field([]))
    attack_charge: Field[float] = field(default_factory=lambda: Field(0.0))
    item_charge: Field[float] = field(default_factory=lambda: Field(0.0))

    @classmethod
    def from_model(cls, model: Character) -> CharacterLocal:
        return cls(
            entity_id=get_count(),
            model=model,
            hp=Field(model.max_hp),
            appetite=Field(model.max_appetite),
            x=Field(0.0),
            y=Field(0.0),
            angle=Field(random.uniform(0.0, 2.0 * math.pi)),
            is_dead=Field(False),
            sleep_state=Field(Sleeping(SleepingState.GETTING_UP, 0)),
        )


class ItemType(enum.IntEnum):
    UNKNOWN = 0
    FOOD = 1
    WEAPON = 2


@dataclass
class Item:
    id: int
    name: str
    item_type: ItemType
    amount: int


@dataclass
class NewItem:
    name: str
    item_type: ItemType
    amount: int

    @classmethod
    def random(cls) -> NewItem:
        return cls(
            name=generate_random_name(0),
            item_type=ItemType(random.randint(0, 2)),
            amount=random.randrange(1000),
        )


@dataclass(eq=False)
class ItemLocal:
    """An item in the world, dropped or carried."""

    entity_id: int
    model: Item
    is_used: Field[bool]
    max_durability: Field[int]
    durability: Field[int]
    is_dropped: Field[bool]
    x: Field[float]
    y: Field[float]

    @classmethod
    def from_model(cls, model: Item) -> ItemLocal:
        max_durability = random.randrange(10, 1000)
        return cls(
            entity_id=get_count(),
            model=model,
            is_used=Field(False),
            max_durability=Field(max_durability),
            durability=Field(max_durability),
            is_dropped=Field(True),
            x=Field(0.0),
            y=Field(0.0),
        )


@dataclass
class Relation:
    id: int
    character_id: int
    target_id: int
    factor: float


@dataclass
class NewRelation:
    character_id: int
    target_id: int
    factor: float

    @classmethod
    def new_random(cls, character_id: int, target_id: int) -> NewRelation:
        return cls(character_id, target_id, random.uniform(-1.0, 1.0))


@dataclass(eq=False)
class RelationLocal:
    """How one character feels about another."""

    entity_id: int
    model: Relation
    factor: Field[float]

    @classmethod
    def from_model(cls, model: Relation) -> RelationLocal:
        return cls(entity_id=get_count(), model=model, factor=Field(model.factor))