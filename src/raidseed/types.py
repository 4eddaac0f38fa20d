from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable, Sequence

from .errors import InvalidTemplateError
from .gender import VALID_GENDER_RATIOS

__all__ = [
    "IV_COUNT",
    "IV_MAX",
    "AbilityPermission",
    "EncounterCriteria",
    "GemType",
    "GenerateParam",
    "InvalidTemplateError",
    "RaidEntity",
    "Shiny",
    "TERA_TYPE_COUNT",
    "TeraType",
    "TrainerId",
    "UNRESTRICTED",
]

IV_COUNT = 6
IV_MAX = 31


class Shiny(IntEnum):
    RANDOM = 0
    ALWAYS = 1
    NEVER = 2


class AbilityPermission(IntEnum):
    """Ability selection mode; fixed modes carry the ability number (1/2/4)."""

    ANY_12H = -1
    ANY_12 = 0
    ONLY_FIRST = 1
    ONLY_SECOND = 2
    ONLY_HIDDEN = 4


class TeraType(IntEnum):
    NORMAL = 0
    FIGHTING = 1
    FLYING = 2
    POISON = 3
    GROUND = 4
    ROCK = 5
    BUG = 6
    GHOST = 7
    STEEL = 8
    FIRE = 9
    WATER = 10
    GRASS = 11
    ELECTRIC = 12
    PSYCHIC = 13
    ICE = 14
    DRAGON = 15
    DARK = 16
    FAIRY = 17


TERA_TYPE_COUNT = len(TeraType)


class GemType(IntEnum):
    """Template tera gem; specific gems are `TeraType + 2`."""

    DEFAULT = 0
    RANDOM = 1
    NORMAL = 2
    FIGHTING = 3
    FLYING = 4
    POISON = 5
    GROUND = 6
    ROCK = 7
    BUG = 8
    GHOST = 9
    STEEL = 10
    FIRE = 11
    WATER = 12
    GRASS = 13
    ELECTRIC = 14
    PSYCHIC = 15
    ICE = 16
    DRAGON = 17
    DARK = 18
    FAIRY = 19


@dataclass(frozen=True, slots=True)
class TrainerId:
    """Owner id pair; only the 16-bit halves take part in shiny checks."""

    tid: int = 0
    sid: int = 0

    def __post_init__(self) -> None:
        for name in ("tid", "sid"):
            value = getattr(self, name)
            if not 0 <= int(value) <= 0xFFFF:
                raise ValueError(f"{name} must be a 16-bit value: {value}")

    @classmethod
    def from_oid(cls, oid: int) -> TrainerId:
        oid = int(oid) & 0xFFFFFFFF
        return cls(tid=oid & 0xFFFF, sid=oid >> 16)

    @property
    def oid(self) -> int:
        return (int(self.sid) << 16) | int(self.tid)


def _require_byte(name: str, value: int) -> None:
    if not 0 <= int(value) <= 0xFF:
        raise InvalidTemplateError(f"{name} must fit in a byte: {value}")


@dataclass(frozen=True, slots=True)
class GenerateParam:
    """Generation template for one encounter slot.

    `height`/`weight`/`scale` of 0 mean "roll it". `roll_count` is the number
    of PID draws verification may consume while looking for a shiny hit.
    `nature_table` overrides the species default temperament table. `stars`
    is carried for custom `StarChoice` collaborators; the default
    `rate_window` only reads the `rand_rate*` fields.
    """

    species: int
    form: int = 0
    stars: int = 1
    rand_rate: int = 0
    rand_rate_min_scarlet: int = -1
    rand_rate_min_violet: int = -1
    rand_rate_total: int = 100
    tera_type: GemType = GemType.DEFAULT
    shiny: Shiny = Shiny.RANDOM
    flawless_ivs: int = 0
    ability: AbilityPermission = AbilityPermission.ANY_12
    gender_ratio: int = 0x7F
    height: int = 0
    weight: int = 0
    scale: int = 0
    roll_count: int = 1
    nature_table: tuple[int, ...] | None = None

    def __post_init__(self) -> None:
        if not 0 <= int(self.species) <= 0xFFFF:
            raise InvalidTemplateError(f"species out of range: {self.species}")
        _require_byte("form", self.form)
        if not 0 <= int(self.flawless_ivs) <= IV_COUNT:
            raise InvalidTemplateError(f"flawless_ivs must be 0..{IV_COUNT}: {self.flawless_ivs}")
        try:
            object.__setattr__(self, "shiny", Shiny(self.shiny))
            object.__setattr__(self, "ability", AbilityPermission(self.ability))
            object.__setattr__(self, "tera_type", GemType(self.tera_type))
        except ValueError as exc:
            raise InvalidTemplateError(str(exc)) from exc
        if int(self.gender_ratio) not in VALID_GENDER_RATIOS:
            raise InvalidTemplateError(f"unknown gender ratio: 0x{int(self.gender_ratio):02X}")
        for name in ("height", "weight", "scale"):
            _require_byte(name, getattr(self, name))
        if int(self.roll_count) < 1:
            raise InvalidTemplateError(f"roll_count must be >= 1: {self.roll_count}")
        if int(self.rand_rate) < 0 or int(self.rand_rate_total) < 1:
            raise InvalidTemplateError("rand_rate must be >= 0 and rand_rate_total >= 1")
        if self.nature_table is not None:
            table = tuple(int(v) for v in self.nature_table)
            if not table or any(not 0 <= v < 25 for v in table):
                raise InvalidTemplateError(f"invalid nature table: {self.nature_table!r}")
            object.__setattr__(self, "nature_table", table)


@dataclass(frozen=True, slots=True)
class EncounterCriteria:
    """Caller constraints checked mid-synthesis; `None` means "any"."""

    gender: int | None = None
    nature: int | None = None
    tera_type: int | None = None
    iv_min: tuple[int, ...] = (0,) * IV_COUNT
    iv_max: tuple[int, ...] = (IV_MAX,) * IV_COUNT
    iv_filter: Callable[[Sequence[int]], bool] | None = None

    def __post_init__(self) -> None:
        if len(self.iv_min) != IV_COUNT or len(self.iv_max) != IV_COUNT:
            raise ValueError("iv ranges need six entries")
        if self.gender is not None and self.gender not in (0, 1, 2):
            raise ValueError(f"gender must be 0, 1 or 2: {self.gender}")
        if self.nature is not None and not 0 <= int(self.nature) < 25:
            raise ValueError(f"nature must be 0..24: {self.nature}")
        if self.tera_type is not None and not 0 <= int(self.tera_type) < TERA_TYPE_COUNT:
            raise ValueError(f"tera_type must be 0..{TERA_TYPE_COUNT - 1}: {self.tera_type}")

    def is_ivs_compatible(self, ivs: Sequence[int]) -> bool:
        for value, low, high in zip(ivs, self.iv_min, self.iv_max):
            if not low <= value <= high:
                return False
        if self.iv_filter is not None:
            return bool(self.iv_filter(ivs))
        return True


UNRESTRICTED = EncounterCriteria()


@dataclass(slots=True)
class RaidEntity:
    """Attribute set filled by synthesis or checked by verification.

    IV order: HP, Atk, Def, SpA, SpD, Spe.
    """

    trainer: TrainerId = field(default_factory=TrainerId)
    species: int = 0
    form: int = 0
    encryption_constant: int = 0
    pid: int = 0
    ivs: list[int] = field(default_factory=lambda: [0] * IV_COUNT)
    ability_number: int = 1
    gender: int = 0
    nature: int = 0
    stat_nature: int = 0
    height: int = 0
    weight: int = 0
    scale: int = 0
    tera_type_original: int = 0
    tera_type_override: int | None = None

    @property
    def tera_type(self) -> int:
        if self.tera_type_override is not None:
            return self.tera_type_override
        return self.tera_type_original
