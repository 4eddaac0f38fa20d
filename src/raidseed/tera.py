from __future__ import annotations

"""Tera type resolution and star-tier acceptance.

Both are pluggable: search drivers take any callable matching the
protocols below. The defaults here cover templates whose data is fully
described by `GenerateParam` plus an optional species type table.
"""

from typing import Literal, Mapping, Protocol

from .types import TERA_TYPE_COUNT, GemType, GenerateParam
from .xoroshiro import Xoroshiro128Plus

__all__ = [
    "Game",
    "PersonalTypes",
    "StarChoice",
    "TeraTypeResolver",
    "accept_all",
    "rate_window",
    "resolve_tera_type",
    "tera_resolver",
]

Game = Literal["scarlet", "violet"]

# (species, form) -> (type1, type2)
PersonalTypes = Mapping[tuple[int, int], tuple[int, int]]


class TeraTypeResolver(Protocol):
    def __call__(self, seed: int, gem: GemType, species: int, form: int) -> int: ...


class StarChoice(Protocol):
    """Star-tier acceptance; receives the whole template, `stars` included."""

    def __call__(self, seed: int, param: GenerateParam) -> bool: ...


def resolve_tera_type(
    seed: int,
    gem: GemType,
    species: int,
    form: int,
    personal: PersonalTypes | None = None,
) -> int:
    gem = GemType(gem)
    if gem == GemType.RANDOM:
        return Xoroshiro128Plus(seed).next_int(TERA_TYPE_COUNT)
    if gem != GemType.DEFAULT:
        return int(gem) - 2

    if personal is None:
        raise LookupError("default tera type needs a species type table")
    try:
        type1, type2 = personal[(int(species), int(form))]
    except KeyError:
        raise LookupError(f"no types for species {species} form {form}") from None
    if type1 == type2:
        return int(type1)
    return int(type1) if Xoroshiro128Plus(seed).next_int(2) == 0 else int(type2)


def tera_resolver(personal: PersonalTypes | None = None) -> TeraTypeResolver:
    """Bind a species type table to `resolve_tera_type`."""

    def _resolve(seed: int, gem: GemType, species: int, form: int) -> int:
        return resolve_tera_type(seed, gem, species, form, personal)

    return _resolve


def accept_all(seed: int, param: GenerateParam) -> bool:
    return True


def rate_window(game: Game) -> StarChoice:
    """Accept seeds whose rate roll lands in the template's window for `game`.

    A negative window start marks the template as unavailable in that game.
    """

    if game not in ("scarlet", "violet"):
        raise ValueError(f"unknown game: {game!r}")

    def _choice(seed: int, param: GenerateParam) -> bool:
        low = param.rand_rate_min_scarlet if game == "scarlet" else param.rand_rate_min_violet
        if low < 0:
            return False
        roll = Xoroshiro128Plus(seed).next_int(param.rand_rate_total)
        return low <= roll < low + param.rand_rate

    return _choice
