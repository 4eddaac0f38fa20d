from __future__ import annotations

"""PID/owner-id shiny math.

The shiny xor folds `pid ^ oid` onto 16 bits; below 16 is shiny, exactly 0
is the rarer "square" variant. Synthesis only keeps the shiny bool plus a
0/1 tag that feeds back into `force_shiny_state`.
"""

from enum import IntEnum

from .types import TrainerId

__all__ = [
    "SHINY_XOR_LIMIT",
    "ShinyType",
    "force_shiny_state",
    "get_shiny_pid",
    "get_shiny_xor",
    "is_shiny",
    "shiny_type",
]

SHINY_XOR_LIMIT = 16
ANTI_SHINY_FLIP = 0x1000_0000


class ShinyType(IntEnum):
    NONE = 0
    STAR = 1
    SQUARE = 2


def get_shiny_xor(pid: int, oid: int) -> int:
    xor = (int(pid) ^ int(oid)) & 0xFFFFFFFF
    return (xor ^ (xor >> 16)) & 0xFFFF


def is_shiny(trainer: TrainerId, pid: int) -> bool:
    return get_shiny_xor(pid, trainer.oid) < SHINY_XOR_LIMIT


def shiny_type(trainer: TrainerId, pid: int) -> ShinyType:
    xor = get_shiny_xor(pid, trainer.oid)
    if xor == 0:
        return ShinyType.SQUARE
    if xor < SHINY_XOR_LIMIT:
        return ShinyType.STAR
    return ShinyType.NONE


def get_shiny_pid(trainer: TrainerId, pid: int, xor_tag: int) -> int:
    low = int(pid) & 0xFFFF
    high = (int(trainer.tid) ^ int(trainer.sid) ^ low ^ int(xor_tag)) & 0xFFFF
    return (high << 16) | low


def force_shiny_state(shiny: bool, pid: int, xor_tag: int, trainer: TrainerId) -> int:
    """Patch `pid` so its shininess under `trainer` matches `shiny`."""
    pid = int(pid) & 0xFFFFFFFF
    currently_shiny = is_shiny(trainer, pid)
    if shiny:
        if not currently_shiny:
            return get_shiny_pid(trainer, pid, xor_tag)
        return pid
    if currently_shiny:
        return pid ^ ANTI_SHINY_FLIP
    return pid
