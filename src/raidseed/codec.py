from __future__ import annotations

"""JSON documents for the command-line front end.

The core never reads or writes files; these helpers only translate between
user-authored JSON and the in-memory template/criteria/entity values.
"""

from typing import Literal

import msgspec

from .natures import Nature
from .search import SearchResult
from .types import (
    IV_COUNT,
    IV_MAX,
    AbilityPermission,
    EncounterCriteria,
    GemType,
    GenerateParam,
    RaidEntity,
    Shiny,
    TeraType,
    TrainerId,
)

__all__ = [
    "CodecError",
    "CriteriaDoc",
    "EntityDoc",
    "ResultDoc",
    "TemplateDoc",
    "criteria_from_doc",
    "decode_criteria",
    "decode_entity",
    "decode_template",
    "encode_entity",
    "encode_result",
    "entity_from_doc",
    "entity_to_doc",
    "template_from_doc",
]

ShinyName = Literal["random", "always", "never"]
AbilityName = Literal["any12h", "any12", "first", "second", "hidden"]

_SHINY = {"random": Shiny.RANDOM, "always": Shiny.ALWAYS, "never": Shiny.NEVER}
_ABILITY = {
    "any12h": AbilityPermission.ANY_12H,
    "any12": AbilityPermission.ANY_12,
    "first": AbilityPermission.ONLY_FIRST,
    "second": AbilityPermission.ONLY_SECOND,
    "hidden": AbilityPermission.ONLY_HIDDEN,
}


class CodecError(ValueError):
    pass


class TemplateDoc(msgspec.Struct, forbid_unknown_fields=True):
    species: int
    form: int = 0
    stars: int = 1
    rand_rate: int = 0
    rand_rate_min_scarlet: int = -1
    rand_rate_min_violet: int = -1
    rand_rate_total: int = 100
    tera_type: str = "default"
    shiny: ShinyName = "random"
    flawless_ivs: int = 0
    ability: AbilityName = "any12"
    gender_ratio: int = 0x7F
    height: int = 0
    weight: int = 0
    scale: int = 0
    roll_count: int = 1
    nature_table: list[int] | None = None


class CriteriaDoc(msgspec.Struct, forbid_unknown_fields=True):
    gender: int | None = None
    nature: str | None = None
    tera_type: str | None = None
    iv_min: list[int] = msgspec.field(default_factory=lambda: [0] * IV_COUNT)
    iv_max: list[int] = msgspec.field(default_factory=lambda: [IV_MAX] * IV_COUNT)


class EntityDoc(msgspec.Struct, forbid_unknown_fields=True):
    tid: int
    sid: int
    species: int
    form: int
    encryption_constant: int
    pid: int
    ivs: list[int]
    ability_number: int
    gender: int
    nature: str
    height: int
    weight: int
    scale: int
    tera_type: str | None = None
    tera_type_override: str | None = None


class ResultDoc(msgspec.Struct):
    seed: int
    attempts: int
    tera_type: str
    entity: EntityDoc


_TEMPLATE_DECODER = msgspec.json.Decoder(type=TemplateDoc)
_CRITERIA_DECODER = msgspec.json.Decoder(type=CriteriaDoc)
_ENTITY_DECODER = msgspec.json.Decoder(type=EntityDoc)


def _enum_from_name(enum_cls, name: str, what: str):  # noqa: ANN001, ANN202
    try:
        return enum_cls[str(name).strip().upper()]
    except KeyError:
        raise CodecError(f"unknown {what}: {name!r}") from None


def _tera_name(value: int) -> str:
    return TeraType(int(value)).name.lower()


def _decode(decoder: msgspec.json.Decoder, data: bytes | str, what: str):  # noqa: ANN202
    try:
        return decoder.decode(data)
    except (msgspec.DecodeError, msgspec.ValidationError) as exc:
        raise CodecError(f"invalid {what} document: {exc}") from exc


def template_from_doc(doc: TemplateDoc) -> GenerateParam:
    return GenerateParam(
        species=doc.species,
        form=doc.form,
        stars=doc.stars,
        rand_rate=doc.rand_rate,
        rand_rate_min_scarlet=doc.rand_rate_min_scarlet,
        rand_rate_min_violet=doc.rand_rate_min_violet,
        rand_rate_total=doc.rand_rate_total,
        tera_type=_enum_from_name(GemType, doc.tera_type, "tera gem"),
        shiny=_SHINY[doc.shiny],
        flawless_ivs=doc.flawless_ivs,
        ability=_ABILITY[doc.ability],
        gender_ratio=doc.gender_ratio,
        height=doc.height,
        weight=doc.weight,
        scale=doc.scale,
        roll_count=doc.roll_count,
        nature_table=tuple(doc.nature_table) if doc.nature_table is not None else None,
    )


def criteria_from_doc(doc: CriteriaDoc) -> EncounterCriteria:
    nature = None if doc.nature is None else int(_enum_from_name(Nature, doc.nature, "nature"))
    tera = None if doc.tera_type is None else int(_enum_from_name(TeraType, doc.tera_type, "tera type"))
    try:
        return EncounterCriteria(
            gender=doc.gender,
            nature=nature,
            tera_type=tera,
            iv_min=tuple(doc.iv_min),
            iv_max=tuple(doc.iv_max),
        )
    except ValueError as exc:
        raise CodecError(str(exc)) from exc


def entity_to_doc(entity: RaidEntity) -> EntityDoc:
    override = entity.tera_type_override
    return EntityDoc(
        tid=entity.trainer.tid,
        sid=entity.trainer.sid,
        species=entity.species,
        form=entity.form,
        encryption_constant=entity.encryption_constant,
        pid=entity.pid,
        ivs=list(entity.ivs),
        ability_number=entity.ability_number,
        gender=entity.gender,
        nature=Nature(entity.nature).name.lower(),
        height=entity.height,
        weight=entity.weight,
        scale=entity.scale,
        tera_type=_tera_name(entity.tera_type_original),
        tera_type_override=None if override is None else _tera_name(override),
    )


def entity_from_doc(doc: EntityDoc) -> RaidEntity:
    if len(doc.ivs) != IV_COUNT:
        raise CodecError(f"entity needs {IV_COUNT} ivs, got {len(doc.ivs)}")
    try:
        trainer = TrainerId(tid=doc.tid, sid=doc.sid)
    except ValueError as exc:
        raise CodecError(str(exc)) from exc
    nature = int(_enum_from_name(Nature, doc.nature, "nature"))
    tera = 0 if doc.tera_type is None else int(_enum_from_name(TeraType, doc.tera_type, "tera type"))
    override = None
    if doc.tera_type_override is not None:
        override = int(_enum_from_name(TeraType, doc.tera_type_override, "tera type"))
    return RaidEntity(
        trainer=trainer,
        species=doc.species,
        form=doc.form,
        encryption_constant=doc.encryption_constant,
        pid=doc.pid,
        ivs=list(doc.ivs),
        ability_number=doc.ability_number,
        gender=doc.gender,
        nature=nature,
        stat_nature=nature,
        height=doc.height,
        weight=doc.weight,
        scale=doc.scale,
        tera_type_original=tera,
        tera_type_override=override,
    )


def decode_template(data: bytes | str) -> GenerateParam:
    return template_from_doc(_decode(_TEMPLATE_DECODER, data, "template"))


def decode_criteria(data: bytes | str) -> EncounterCriteria:
    return criteria_from_doc(_decode(_CRITERIA_DECODER, data, "criteria"))


def decode_entity(data: bytes | str) -> RaidEntity:
    return entity_from_doc(_decode(_ENTITY_DECODER, data, "entity"))


def encode_entity(entity: RaidEntity) -> bytes:
    return msgspec.json.encode(entity_to_doc(entity))


def encode_result(result: SearchResult) -> bytes:
    doc = ResultDoc(
        seed=result.seed,
        attempts=result.attempts,
        tera_type=_tera_name(result.tera_type),
        entity=entity_to_doc(result.entity),
    )
    return msgspec.json.encode(doc)
