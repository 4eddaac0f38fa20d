from __future__ import annotations

"""Bounded brute-force seed search.

Each driver turns an outer `Xoroshiro128Plus` into a capped stream of
per-attempt seeds and hands it to `find_first`, which stops at the first
seed whose synthesis passes the criteria.
"""

from dataclasses import dataclass
import logging
from typing import Callable, Iterable, Iterator, TypeVar

from .generate import generate_data
from .tera import StarChoice, TeraTypeResolver, accept_all, resolve_tera_type
from .types import EncounterCriteria, GenerateParam, RaidEntity, TrainerId
from .xoroshiro import MASK32, Xoroshiro128Plus

__all__ = [
    "MAX_ATTEMPTS",
    "SearchResult",
    "find_first",
    "iter_seeds_32",
    "iter_seeds_64",
    "try_apply_32",
    "try_apply_64",
]

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 100_000

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class SearchResult:
    entity: RaidEntity
    tera_type: int
    seed: int
    attempts: int


def iter_seeds_32(rand: Xoroshiro128Plus, limit: int = MAX_ATTEMPTS) -> Iterator[int]:
    for _ in range(int(limit)):
        yield rand.next_int(MASK32)


def iter_seeds_64(rand: Xoroshiro128Plus, limit: int = MAX_ATTEMPTS) -> Iterator[int]:
    for _ in range(int(limit)):
        yield rand.next()


def find_first(seeds: Iterable[int], attempt: Callable[[int], T | None]) -> tuple[T, int, int] | None:
    """Return `(value, seed, attempts)` for the first accepted seed."""
    for count, seed in enumerate(seeds, start=1):
        value = attempt(seed)
        if value is not None:
            return value, seed, count
    return None


def _apply_tera(
    entity: RaidEntity,
    param: GenerateParam,
    criteria: EncounterCriteria,
    seed: int,
    resolve_tera: TeraTypeResolver,
) -> int:
    tera = int(resolve_tera(seed, param.tera_type, param.species, param.form))
    entity.tera_type_original = tera
    entity.tera_type_override = None
    if criteria.tera_type is not None and tera != criteria.tera_type:
        entity.tera_type_override = int(criteria.tera_type)
    return tera


def _search(
    seeds: Iterable[int],
    param: GenerateParam,
    criteria: EncounterCriteria,
    trainer: TrainerId,
    *,
    accept: Callable[[int], bool],
    resolve_tera: TeraTypeResolver,
    ignore_ivs: bool,
) -> SearchResult | None:
    def _attempt(seed: int) -> RaidEntity | None:
        if not accept(seed):
            return None
        entity = RaidEntity(trainer=trainer)
        if not generate_data(entity, param, criteria, seed, ignore_ivs=ignore_ivs):
            return None
        return entity

    found = find_first(seeds, _attempt)
    if found is None:
        logger.debug("no seed matched species=%d form=%d", param.species, param.form)
        return None

    entity, seed, attempts = found
    tera = _apply_tera(entity, param, criteria, seed, resolve_tera)
    logger.debug("seed 0x%016X matched after %d attempts", seed, attempts)
    return SearchResult(entity=entity, tera_type=tera, seed=seed, attempts=attempts)


def try_apply_32(
    param: GenerateParam,
    criteria: EncounterCriteria,
    init: int,
    trainer: TrainerId,
    *,
    star_choice: StarChoice = accept_all,
    resolve_tera: TeraTypeResolver = resolve_tera_type,
    max_attempts: int = MAX_ATTEMPTS,
) -> SearchResult | None:
    """Search 32-bit raid seeds, pre-filtered by the star-tier roll."""
    rand = Xoroshiro128Plus(init)
    return _search(
        iter_seeds_32(rand, max_attempts),
        param,
        criteria,
        trainer,
        accept=lambda seed: star_choice(seed, param),
        resolve_tera=resolve_tera,
        ignore_ivs=False,
    )


def try_apply_64(
    param: GenerateParam,
    criteria: EncounterCriteria,
    init: int,
    trainer: TrainerId,
    *,
    ignore_ivs: bool = False,
    resolve_tera: TeraTypeResolver = resolve_tera_type,
    max_attempts: int = MAX_ATTEMPTS,
) -> SearchResult | None:
    """Search raw 64-bit seeds drawn straight from the outer stream."""
    rand = Xoroshiro128Plus(init)
    return _search(
        iter_seeds_64(rand, max_attempts),
        param,
        criteria,
        trainer,
        accept=lambda seed: True,
        resolve_tera=resolve_tera,
        ignore_ivs=ignore_ivs,
    )
