from __future__ import annotations

"""Seeded attribute synthesis and its verification replay.

Draw order (one `Xoroshiro128Plus(seed)` per attempt):
  EC, fake TID, PID, flawless IV slots, remaining IVs, ability, gender,
  nature, height, weight, scale.

Any deviation in order or bound breaks parity with real encounter data.
"""

from .gender import fixed_gender, get_gender
from .natures import nature_table_for, roll_nature
from .shiny import SHINY_XOR_LIMIT, force_shiny_state, get_shiny_xor
from .types import (
    IV_COUNT,
    IV_MAX,
    AbilityPermission,
    EncounterCriteria,
    GenerateParam,
    RaidEntity,
    Shiny,
    TrainerId,
)
from .xoroshiro import MASK32, Xoroshiro128Plus

__all__ = [
    "generate",
    "generate_data",
    "is_match",
    "roll_ivs",
]

_UNSET = -1


def _shiny_tag(xor: int) -> int:
    # Star shinies collapse to tag 1; square shinies keep 0.
    return 0 if xor == 0 else 1


def _roll_pid(rand: Xoroshiro128Plus, param: GenerateParam, trainer: TrainerId, *, rolls: int) -> int:
    fake_tid = rand.next_int()
    pid = rand.next_int()
    if param.shiny != Shiny.RANDOM:
        shiny = param.shiny == Shiny.ALWAYS
        return force_shiny_state(shiny, pid, 0, trainer)

    # Extra rolls replay the shiny retries verification allows; with the
    # default roll_count of 1 the PID is drawn once, as in the game.
    attempt = 1
    while True:
        xor = get_shiny_xor(pid, fake_tid)
        if xor < SHINY_XOR_LIMIT:
            return force_shiny_state(True, pid, _shiny_tag(xor), trainer)
        if attempt >= rolls:
            return force_shiny_state(False, pid, 0, trainer)
        pid = rand.next_int()
        attempt += 1


def roll_ivs(rand: Xoroshiro128Plus, flawless: int) -> list[int]:
    """Force `flawless` distinct slots to 31, then roll the rest in slot order."""
    ivs = [_UNSET] * IV_COUNT
    for _ in range(int(flawless)):
        index = rand.next_int(IV_COUNT)
        while ivs[index] != _UNSET:
            index = rand.next_int(IV_COUNT)
        ivs[index] = IV_MAX
    for i in range(IV_COUNT):
        if ivs[i] == _UNSET:
            ivs[i] = rand.next_int(IV_MAX + 1)
    return ivs


def _roll_ability_number(rand: Xoroshiro128Plus, permission: AbilityPermission) -> int:
    if permission == AbilityPermission.ANY_12H:
        abil = rand.next_int(3) << 1
    elif permission == AbilityPermission.ANY_12:
        abil = rand.next_int(2) << 1
    else:
        abil = int(permission)
    return 1 << (abil >> 1)


def _roll_gender(rand: Xoroshiro128Plus, ratio: int) -> int:
    gender = fixed_gender(ratio)
    if gender is not None:
        return gender
    return get_gender(ratio, rand.next_int(100))


def _roll_scalar(rand: Xoroshiro128Plus) -> int:
    return (rand.next_int(0x81) + rand.next_int(0x80)) & 0xFF


def _nature_table(param: GenerateParam) -> tuple[int, ...] | None:
    if param.nature_table is not None:
        return param.nature_table
    return nature_table_for(param.species, param.form)


def generate_data(
    entity: RaidEntity,
    param: GenerateParam,
    criteria: EncounterCriteria,
    seed: int,
    *,
    ignore_ivs: bool = False,
) -> bool:
    """Fill `entity` from `seed`.

    Returns False when the seed produces values the criteria reject; the
    entity is only written once every check has passed.
    """

    rand = Xoroshiro128Plus(seed)
    ec = rand.next_int(MASK32)
    pid = _roll_pid(rand, param, entity.trainer, rolls=param.roll_count)

    ivs = roll_ivs(rand, param.flawless_ivs)
    if not ignore_ivs and not criteria.is_ivs_compatible(ivs):
        return False

    ability_number = _roll_ability_number(rand, param.ability)

    gender = _roll_gender(rand, param.gender_ratio)
    if criteria.gender is not None and gender != criteria.gender:
        return False

    nature = roll_nature(rand, _nature_table(param))
    if criteria.nature is not None and nature != criteria.nature:
        return False

    height = param.height if param.height != 0 else _roll_scalar(rand)
    weight = param.weight if param.weight != 0 else _roll_scalar(rand)
    scale = param.scale if param.scale != 0 else _roll_scalar(rand)

    entity.species = param.species
    entity.form = param.form
    entity.encryption_constant = ec
    entity.pid = pid
    entity.ivs = ivs
    entity.ability_number = ability_number
    entity.gender = gender
    entity.nature = nature
    entity.stat_nature = nature
    entity.height = height
    entity.weight = weight
    entity.scale = scale
    return True


def generate(
    param: GenerateParam,
    criteria: EncounterCriteria,
    seed: int,
    *,
    trainer: TrainerId | None = None,
    ignore_ivs: bool = False,
) -> RaidEntity | None:
    entity = RaidEntity(trainer=trainer if trainer is not None else TrainerId())
    if not generate_data(entity, param, criteria, seed, ignore_ivs=ignore_ivs):
        return None
    return entity


def is_match(entity: RaidEntity, param: GenerateParam, seed: int) -> bool:
    """Check that `seed` reproduces every rolled value stored on `entity`.

    Random-shiny templates may have re-rolled the PID up to `roll_count`
    times looking for a shiny; the replay walks the same retries.
    """

    rand = Xoroshiro128Plus(seed)
    if entity.encryption_constant != rand.next_int(MASK32):
        return False

    if entity.pid != _roll_pid(rand, param, entity.trainer, rolls=param.roll_count):
        return False

    ivs = roll_ivs(rand, param.flawless_ivs)
    if list(entity.ivs) != ivs:
        return False

    if entity.ability_number != _roll_ability_number(rand, param.ability):
        return False

    if entity.gender != _roll_gender(rand, param.gender_ratio):
        return False

    if entity.nature != roll_nature(rand, _nature_table(param)):
        return False

    if param.height == 0 and entity.height != _roll_scalar(rand):
        return False
    if param.weight == 0 and entity.weight != _roll_scalar(rand):
        return False
    if param.scale == 0 and entity.scale != _roll_scalar(rand):
        return False
    return True
