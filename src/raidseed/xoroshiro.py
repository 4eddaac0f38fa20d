from __future__ import annotations

__all__ = [
    "MASK32",
    "MASK64",
    "XOROSHIRO_CONST",
    "Xoroshiro128Plus",
]

MASK32 = 0xFFFFFFFF
MASK64 = 0xFFFFFFFFFFFFFFFF

# Second state word used when the game seeds the generator from a single u64.
XOROSHIRO_CONST = 0x82A2B175229D6A5B


def _rotl(value: int, shift: int) -> int:
    return ((value << shift) | (value >> (64 - shift))) & MASK64


class Xoroshiro128Plus:
    """xoroshiro128+ stream used by the game's encounter generation.

    Matches:
      result = s0 + s1
      s1 ^= s0
      s0 = rotl(s0, 24) ^ s1 ^ (s1 << 16)
      s1 = rotl(s1, 37)

    Bounded draws use multiply-high reduction, `(next() * bound) >> 64`,
    with no rejection step, so the native bias is reproduced as-is.
    """

    __slots__ = ("_s0", "_s1")

    def __init__(self, seed: int, seed1: int = XOROSHIRO_CONST) -> None:
        self._s0 = int(seed) & MASK64
        self._s1 = int(seed1) & MASK64

    @property
    def state(self) -> tuple[int, int]:
        return self._s0, self._s1

    def clone(self) -> Xoroshiro128Plus:
        s0, s1 = self.state
        return Xoroshiro128Plus(s0, s1)

    def next(self) -> int:
        s0 = self._s0
        s1 = self._s1
        result = (s0 + s1) & MASK64
        s1 ^= s0
        self._s0 = _rotl(s0, 24) ^ s1 ^ ((s1 << 16) & MASK64)
        self._s1 = _rotl(s1, 37)
        return result

    def next_int(self, bound: int = MASK32) -> int:
        bound = int(bound)
        if bound <= 0 or bound > MASK64:
            raise ValueError(f"bound out of range: {bound}")
        return (self.next() * bound) >> 64
