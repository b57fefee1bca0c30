"""Effects applied to relations between characters."""

from __future__ import annotations

from aworld.actions import RelationDecreasePayload, RelationIncreasePayload
from aworld.models import RelationLocal


def effect_increase(relation: RelationLocal, payload: RelationIncreasePayload) -> None:
    relation.factor.write(relation.factor.read() + payload.amount)


def effect_decrease(relation: RelationLocal, payload: RelationDecreasePayload) -> None:
    relation.factor.write(relation.factor.read() - payload.amount)