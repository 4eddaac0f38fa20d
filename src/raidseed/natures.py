from __future__ import annotations

from enum import IntEnum

from .xoroshiro import Xoroshiro128Plus

__all__ = [
    "NATURE_COUNT",
    "Nature",
    "SPECIES_TOXTRICITY",
    "TOXTRICITY_AMPED_NATURES",
    "TOXTRICITY_LOW_KEY_NATURES",
    "nature_table_for",
    "roll_nature",
]

NATURE_COUNT = 25
SPECIES_TOXTRICITY = 849


class Nature(IntEnum):
    HARDY = 0
    LONELY = 1
    BRAVE = 2
    ADAMANT = 3
    NAUGHTY = 4
    BOLD = 5
    DOCILE = 6
    RELAXED = 7
    IMPISH = 8
    LAX = 9
    TIMID = 10
    HASTY = 11
    SERIOUS = 12
    JOLLY = 13
    NAIVE = 14
    MODEST = 15
    MILD = 16
    QUIET = 17
    BASHFUL = 18
    RASH = 19
    CALM = 20
    GENTLE = 21
    SASSY = 22
    CAREFUL = 23
    QUIRKY = 24


# Draw order matters: the game indexes these tables with next_int(len(table)).
TOXTRICITY_AMPED_NATURES: tuple[int, ...] = (3, 4, 2, 8, 9, 19, 22, 11, 13, 14, 0, 6, 24)
TOXTRICITY_LOW_KEY_NATURES: tuple[int, ...] = (1, 5, 7, 10, 12, 15, 16, 17, 18, 20, 21, 23)


def nature_table_for(species: int, form: int) -> tuple[int, ...] | None:
    """Species-restricted nature table, or `None` for the uniform 0..24 draw."""
    if int(species) != SPECIES_TOXTRICITY:
        return None
    return TOXTRICITY_AMPED_NATURES if int(form) == 0 else TOXTRICITY_LOW_KEY_NATURES


def roll_nature(rand: Xoroshiro128Plus, table: tuple[int, ...] | None) -> int:
    if table is None:
        return rand.next_int(NATURE_COUNT)
    return table[rand.next_int(len(table))]
