"""Periodic jobs run over every character of the world."""

from __future__ import annotations

from aworld.context import Context


def charge_down(context: Context) -> list[int]:
    """Drain attack and item charges by one; return ids of changed characters."""
    updated: list[int] = []
    for entity_id, character in context.characters.items():
        attack_charge = character.attack_charge.read() - 1.0
        if attack_charge >= 0.0:
            character.attack_charge.write(attack_charge)
            updated.append(entity_id)
        item_charge = character.item_charge.read() - 1.0
        if item_charge >= 0.0:
            character.item_charge.write(item_charge)
            updated.append(entity_id)
    return updated


def delete_character(context: Context) -> list[int]:
    """Remove dead characters from the world."""
    dead = [
        entity_id
        for entity_id, character in context.characters.items()
        if character.is_dead.read()
    ]
    for entity_id in dead:
        del context.characters[entity_id]
    return []


def hunger(context: Context) -> list[int]:
    """Make every character hungrier; starving ones lose hp."""
    updated: list[int] = []
    for entity_id, character in context.characters.items():
        appetite = character.appetite.read() - 1
        character.appetite.write(appetite)
        if appetite <= 0:
            character.hp.write(character.hp.read() - 1)
            updated.append(entity_id)
    return updated