"""Effects applied to items."""

from __future__ import annotations

from aworld.actions import ItemBreakPayload
from aworld.models import ItemLocal


def effect_spend(item: ItemLocal) -> None:
    """Mark the item as used up."""
    item.is_used.write(True)


def effect_break(item: ItemLocal, payload: ItemBreakPayload) -> None:
    """Wear the item down; it is used up once durability reaches zero."""
    durability = item.durability.read() - payload.durability
    item.durability.write(durability)
    if durability <= 0:
        item.is_used.write(True)