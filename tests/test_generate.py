from __future__ import annotations

import pytest

from raidseed.errors import InvalidTemplateError
from raidseed.gender import GENDER_FEMALE, GENDER_MALE
from raidseed.generate import generate, generate_data, is_match
from raidseed.natures import SPECIES_TOXTRICITY, TOXTRICITY_AMPED_NATURES, TOXTRICITY_LOW_KEY_NATURES
from raidseed.shiny import get_shiny_pid, is_shiny
from raidseed.types import (
    UNRESTRICTED,
    AbilityPermission,
    EncounterCriteria,
    GenerateParam,
    RaidEntity,
    Shiny,
    TrainerId,
)
from raidseed.xoroshiro import MASK32

TRAINER = TrainerId(tid=12345, sid=54321)
PLAIN_PID = 0x0000_4321  # not shiny for TRAINER

_SCALAR_BOUNDS = [0x81, 0x80] * 3


class _SequenceRng:
    def __init__(self, values: list[int]) -> None:
        self._values = [int(value) for value in values]
        self.bounds: list[int] = []

    def next_int(self, bound: int = MASK32) -> int:
        self.bounds.append(int(bound))
        if self._values:
            return self._values.pop(0)
        return 0


def _patch_rng(monkeypatch: pytest.MonkeyPatch, values: list[int]) -> _SequenceRng:
    rng = _SequenceRng(values)
    monkeypatch.setattr("raidseed.generate.Xoroshiro128Plus", lambda seed: rng)
    return rng


def _param(**kwargs) -> GenerateParam:  # noqa: ANN003
    defaults = dict(species=25, shiny=Shiny.NEVER, gender_ratio=0x7F, ability=AbilityPermission.ANY_12)
    defaults.update(kwargs)
    return GenerateParam(**defaults)


def test_draw_order_and_bounds(monkeypatch: pytest.MonkeyPatch) -> None:
    values = [0x1111_1111, 0, PLAIN_PID, 1, 2, 3, 4, 5, 6, 1, 49, 7, 10, 20, 30, 40, 50, 60]
    rng = _patch_rng(monkeypatch, values)
    entity = RaidEntity(trainer=TRAINER)

    assert generate_data(entity, _param(), UNRESTRICTED, 0)

    assert rng.bounds == [MASK32, MASK32, MASK32] + [32] * 6 + [2, 100, 25] + _SCALAR_BOUNDS
    assert entity.encryption_constant == 0x1111_1111
    assert entity.pid == PLAIN_PID
    assert entity.ivs == [1, 2, 3, 4, 5, 6]
    assert entity.ability_number == 2
    assert entity.gender == GENDER_FEMALE
    assert entity.nature == entity.stat_nature == 7
    assert (entity.height, entity.weight, entity.scale) == (30, 70, 110)


def test_gender_boundary_at_half_ratio(monkeypatch: pytest.MonkeyPatch) -> None:
    head = [0, 0, PLAIN_PID, 0, 0, 0, 0, 0, 0, 0]
    for draw, expected in ((49, GENDER_FEMALE), (50, GENDER_MALE)):
        _patch_rng(monkeypatch, head + [draw])
        entity = generate(_param(), UNRESTRICTED, 0, trainer=TRAINER)
        assert entity is not None
        assert entity.gender == expected


def test_flawless_slots_resample_on_collision(monkeypatch: pytest.MonkeyPatch) -> None:
    rng = _patch_rng(monkeypatch, [0, 0, PLAIN_PID, 3, 3, 0, 9, 8, 7, 6])
    entity = generate(_param(flawless_ivs=2), UNRESTRICTED, 0, trainer=TRAINER)
    assert entity is not None
    assert entity.ivs == [31, 9, 8, 31, 7, 6]
    assert rng.bounds[3:10] == [6, 6, 6, 32, 32, 32, 32]


def test_random_shiny_uses_fake_tid_then_forces_for_owner(monkeypatch: pytest.MonkeyPatch) -> None:
    raw_pid = 0x0005_0000  # fold against fake tid 0 is 5
    _patch_rng(monkeypatch, [0, 0, raw_pid])
    entity = generate(_param(shiny=Shiny.RANDOM), UNRESTRICTED, 0, trainer=TRAINER)
    assert entity is not None
    assert entity.pid == get_shiny_pid(TRAINER, raw_pid, 1)
    assert is_shiny(TRAINER, entity.pid)


def test_square_shiny_keeps_zero_tag(monkeypatch: pytest.MonkeyPatch) -> None:
    raw_pid = 0x0007_0007  # fold against fake tid 0 is 0
    _patch_rng(monkeypatch, [0, 0, raw_pid])
    entity = generate(_param(shiny=Shiny.RANDOM), UNRESTRICTED, 0, trainer=TRAINER)
    assert entity is not None
    assert entity.pid == get_shiny_pid(TRAINER, raw_pid, 0)


def test_ability_modes(monkeypatch: pytest.MonkeyPatch) -> None:
    head = [0, 0, PLAIN_PID, 0, 0, 0, 0, 0, 0]
    rng = _patch_rng(monkeypatch, head + [2])
    entity = generate(_param(ability=AbilityPermission.ANY_12H), UNRESTRICTED, 0, trainer=TRAINER)
    assert entity is not None
    assert entity.ability_number == 4
    assert rng.bounds[9] == 3

    rng = _patch_rng(monkeypatch, head + [60])
    entity = generate(_param(ability=AbilityPermission.ONLY_HIDDEN), UNRESTRICTED, 0, trainer=TRAINER)
    assert entity is not None
    assert entity.ability_number == 4
    # no ability draw: the next draw is gender
    assert rng.bounds[9] == 100
    assert entity.gender == GENDER_MALE


def test_rejection_leaves_entity_untouched(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_rng(monkeypatch, [0xAAAA_AAAA, 0, PLAIN_PID, 0, 0, 0, 0, 0, 0, 0, 10])
    entity = RaidEntity(trainer=TRAINER)
    criteria = EncounterCriteria(gender=GENDER_MALE)
    assert not generate_data(entity, _param(), criteria, 0)
    assert entity == RaidEntity(trainer=TRAINER)


def test_iv_criteria_can_be_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    criteria = EncounterCriteria(iv_min=(31, 0, 0, 0, 0, 0))
    _patch_rng(monkeypatch, [0, 0, PLAIN_PID, 5])
    assert generate(_param(), criteria, 0, trainer=TRAINER) is None
    _patch_rng(monkeypatch, [0, 0, PLAIN_PID, 5])
    entity = generate(_param(), criteria, 0, trainer=TRAINER, ignore_ivs=True)
    assert entity is not None
    assert entity.ivs[0] == 5


def test_golden_vector() -> None:
    param = _param(flawless_ivs=3)
    entity = generate(param, UNRESTRICTED, 0x0123_4567_89AB_CDEF, trainer=TRAINER)
    assert entity is not None
    assert entity.encryption_constant == 0x83C5_F6DC
    assert entity.pid == 0x14F4_E6CF
    assert entity.ivs == [31, 31, 23, 27, 3, 31]
    assert entity.ability_number == 1
    assert entity.gender == GENDER_MALE
    assert entity.nature == 20
    assert (entity.height, entity.weight, entity.scale) == (90, 71, 15)


def test_generation_is_deterministic() -> None:
    param = _param(flawless_ivs=2, shiny=Shiny.RANDOM)
    for seed in (0, 1, 0xFFFF_FFFF_FFFF_FFFF, 0x0123_4567_89AB_CDEF):
        assert generate(param, UNRESTRICTED, seed, trainer=TRAINER) == generate(
            param, UNRESTRICTED, seed, trainer=TRAINER
        )


@pytest.mark.parametrize(
    "param",
    [
        _param(),
        _param(flawless_ivs=6, shiny=Shiny.ALWAYS, ability=AbilityPermission.ANY_12H),
        _param(flawless_ivs=4, shiny=Shiny.RANDOM, roll_count=3, gender_ratio=0xE1),
        _param(flawless_ivs=1, gender_ratio=0xFF, height=128, scale=1),
        _param(species=SPECIES_TOXTRICITY, form=1, ability=AbilityPermission.ONLY_SECOND),
    ],
)
def test_generated_entities_verify(param: GenerateParam) -> None:
    for seed in range(150):
        entity = generate(param, UNRESTRICTED, seed * 0x9E37_79B9_7F4A_7C15, trainer=TRAINER)
        assert entity is not None
        assert is_match(entity, param, seed * 0x9E37_79B9_7F4A_7C15)


@pytest.mark.parametrize("flawless", range(7))
def test_flawless_count_is_a_lower_bound(flawless: int) -> None:
    param = _param(flawless_ivs=flawless)
    for seed in range(100):
        entity = generate(param, UNRESTRICTED, seed, trainer=TRAINER)
        assert entity is not None
        assert entity.ivs.count(31) >= flawless
        assert all(0 <= iv <= 31 for iv in entity.ivs)


def test_forced_shiny_states() -> None:
    for seed in range(200):
        shiny = generate(_param(shiny=Shiny.ALWAYS), UNRESTRICTED, seed, trainer=TRAINER)
        plain = generate(_param(shiny=Shiny.NEVER), UNRESTRICTED, seed, trainer=TRAINER)
        assert shiny is not None and plain is not None
        assert is_shiny(TRAINER, shiny.pid)
        assert not is_shiny(TRAINER, plain.pid)
        assert shiny.pid & 0xFFFF == plain.pid & 0xFFFF


def test_toxtricity_natures_follow_form_table() -> None:
    amped = _param(species=SPECIES_TOXTRICITY, form=0)
    low_key = _param(species=SPECIES_TOXTRICITY, form=1)
    for seed in range(100):
        a = generate(amped, UNRESTRICTED, seed, trainer=TRAINER)
        b = generate(low_key, UNRESTRICTED, seed, trainer=TRAINER)
        assert a is not None and b is not None
        assert a.nature in TOXTRICITY_AMPED_NATURES
        assert b.nature in TOXTRICITY_LOW_KEY_NATURES


def test_fixed_scalars_skip_draws(monkeypatch: pytest.MonkeyPatch) -> None:
    rng = _patch_rng(monkeypatch, [])
    entity = generate(_param(height=200, weight=1, scale=255), UNRESTRICTED, 0, trainer=TRAINER)
    assert entity is not None
    assert (entity.height, entity.weight, entity.scale) == (200, 1, 255)
    assert rng.bounds[-1] == 25


def test_criteria_nature_rejects() -> None:
    param = _param()
    entity = generate(param, UNRESTRICTED, 42, trainer=TRAINER)
    assert entity is not None
    other = (entity.nature + 1) % 25
    assert generate(param, EncounterCriteria(nature=other), 42, trainer=TRAINER) is None
    assert generate(param, EncounterCriteria(nature=entity.nature), 42, trainer=TRAINER) == entity


@pytest.mark.parametrize(
    "kwargs",
    [
        {"flawless_ivs": 7},
        {"flawless_ivs": -1},
        {"gender_ratio": 0x80},
        {"height": 256},
        {"roll_count": 0},
        {"shiny": 5},
        {"ability": 3},
        {"nature_table": ()},
        {"nature_table": (25,)},
    ],
)
def test_invalid_template_fails_loudly(kwargs: dict) -> None:
    with pytest.raises(InvalidTemplateError):
        _param(**kwargs)
