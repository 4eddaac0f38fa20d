from __future__ import annotations

"""Gender ratio sentinels and the threshold table used by the 0..99 draw."""

from .errors import InvalidTemplateError

__all__ = [
    "GENDER_FEMALE",
    "GENDER_GENDERLESS",
    "GENDER_MALE",
    "GENDER_THRESHOLDS",
    "RATIO_MAGIC_FEMALE",
    "RATIO_MAGIC_GENDERLESS",
    "RATIO_MAGIC_MALE",
    "VALID_GENDER_RATIOS",
    "fixed_gender",
    "get_gender",
]

GENDER_MALE = 0
GENDER_FEMALE = 1
GENDER_GENDERLESS = 2

RATIO_MAGIC_MALE = 0x00
RATIO_MAGIC_FEMALE = 0xFE
RATIO_MAGIC_GENDERLESS = 0xFF

# ratio byte -> female when draw < threshold
GENDER_THRESHOLDS: dict[int, int] = {
    0x1F: 12,  # 12.5%
    0x3F: 25,
    0x7F: 50,
    0xBF: 75,
    0xE1: 89,  # 87.5%
}

_FIXED_GENDERS: dict[int, int] = {
    RATIO_MAGIC_GENDERLESS: GENDER_GENDERLESS,
    RATIO_MAGIC_FEMALE: GENDER_FEMALE,
    RATIO_MAGIC_MALE: GENDER_MALE,
}

VALID_GENDER_RATIOS = frozenset(GENDER_THRESHOLDS) | frozenset(_FIXED_GENDERS)


def fixed_gender(ratio: int) -> int | None:
    """Return the gender for single-gender ratios, `None` when a draw is needed."""
    return _FIXED_GENDERS.get(int(ratio))


def get_gender(ratio: int, rand100: int) -> int:
    threshold = GENDER_THRESHOLDS.get(int(ratio))
    if threshold is None:
        raise InvalidTemplateError(f"unknown gender ratio: 0x{int(ratio):02X}")
    return GENDER_FEMALE if rand100 < threshold else GENDER_MALE
