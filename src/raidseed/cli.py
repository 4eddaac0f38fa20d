from __future__ import annotations

import logging
from pathlib import Path

import typer

from .codec import decode_criteria, decode_entity, decode_template, encode_entity, encode_result
from .generate import generate, is_match
from .search import MAX_ATTEMPTS, try_apply_32, try_apply_64
from .tera import accept_all, rate_window, tera_resolver
from .types import UNRESTRICTED, EncounterCriteria, GenerateParam, TeraType, TrainerId

app = typer.Typer(add_completion=False)

EXIT_NOT_FOUND = 2

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _parse_int(text: str) -> int:
    try:
        return int(str(text).strip(), 0)
    except ValueError:
        raise typer.BadParameter(f"not an integer: {text!r}") from None


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=_LOG_FORMAT,
        datefmt=_LOG_DATEFMT,
    )


def _load_template(path: Path) -> GenerateParam:
    try:
        return decode_template(path.read_bytes())
    except (OSError, ValueError) as exc:
        typer.echo(f"template: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _load_criteria(path: Path | None) -> EncounterCriteria:
    if path is None:
        return UNRESTRICTED
    try:
        return decode_criteria(path.read_bytes())
    except (OSError, ValueError) as exc:
        typer.echo(f"criteria: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _trainer(tid: int, sid: int) -> TrainerId:
    try:
        return TrainerId(tid=tid, sid=sid)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _personal_types(param: GenerateParam, text: str | None) -> dict[tuple[int, int], tuple[int, int]] | None:
    if text is None:
        return None
    names = [part.strip() for part in text.split(",") if part.strip()]
    if len(names) not in (1, 2):
        raise typer.BadParameter("expected one or two type names", param_hint="--types")
    try:
        values = [int(TeraType[name.upper()]) for name in names]
    except KeyError as exc:
        raise typer.BadParameter(f"unknown type: {exc.args[0]}", param_hint="--types") from None
    return {(param.species, param.form): (values[0], values[-1])}


@app.callback()
def cmd_root(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="log search progress to stderr"),
) -> None:
    """Generate, verify and search seeded raid encounters."""
    _configure_logging(verbose)


@app.command("generate")
def cmd_generate(
    template: Path = typer.Argument(..., help="template JSON file"),
    seed: str = typer.Option(..., help="encounter seed (decimal or 0x hex)"),
    criteria: Path | None = typer.Option(None, help="criteria JSON file"),
    tid: int = typer.Option(0, help="owner TID (16-bit)"),
    sid: int = typer.Option(0, help="owner SID (16-bit)"),
    ignore_ivs: bool = typer.Option(False, help="skip the IV criteria check"),
) -> None:
    """Generate one entity from a single seed."""
    param = _load_template(template)
    crit = _load_criteria(criteria)
    entity = generate(param, crit, _parse_int(seed), trainer=_trainer(tid, sid), ignore_ivs=ignore_ivs)
    if entity is None:
        typer.echo("seed rejected by criteria", err=True)
        raise typer.Exit(code=EXIT_NOT_FOUND)
    typer.echo(encode_entity(entity).decode("utf-8"))


@app.command("verify")
def cmd_verify(
    template: Path = typer.Argument(..., help="template JSON file"),
    entity: Path = typer.Argument(..., help="entity JSON file"),
    seed: str = typer.Option(..., help="candidate seed (decimal or 0x hex)"),
) -> None:
    """Check whether an entity was produced by a seed."""
    param = _load_template(template)
    try:
        pk = decode_entity(entity.read_bytes())
    except (OSError, ValueError) as exc:
        typer.echo(f"entity: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    if not is_match(pk, param, _parse_int(seed)):
        typer.echo("mismatch")
        raise typer.Exit(code=1)
    typer.echo("match")


@app.command("search")
def cmd_search(
    template: Path = typer.Argument(..., help="template JSON file"),
    init: str = typer.Option(..., help="outer generator seed (decimal or 0x hex)"),
    mode: int = typer.Option(64, help="seed width: 32 (star-filtered) or 64"),
    criteria: Path | None = typer.Option(None, help="criteria JSON file"),
    tid: int = typer.Option(0, help="owner TID (16-bit)"),
    sid: int = typer.Option(0, help="owner SID (16-bit)"),
    game: str | None = typer.Option(None, help="scarlet or violet rate window (32-bit mode)"),
    ignore_ivs: bool = typer.Option(False, help="skip the IV criteria check (64-bit mode)"),
    types: str | None = typer.Option(None, help="species types for default gems, e.g. fire,flying"),
    max_attempts: int = typer.Option(MAX_ATTEMPTS, help="attempt cap"),
) -> None:
    """Search for the first seed that satisfies the criteria."""
    if mode not in (32, 64):
        raise typer.BadParameter("mode must be 32 or 64", param_hint="--mode")
    if mode == 32 and ignore_ivs:
        raise typer.BadParameter("only supported in 64-bit mode", param_hint="--ignore-ivs")
    if max_attempts < 1:
        raise typer.BadParameter("must be >= 1", param_hint="--max-attempts")
    param = _load_template(template)
    crit = _load_criteria(criteria)
    trainer = _trainer(tid, sid)
    outer = _parse_int(init)
    resolve_tera = tera_resolver(_personal_types(param, types))

    try:
        if mode == 32:
            star_choice = accept_all if game is None else rate_window(game)  # type: ignore[arg-type]
            result = try_apply_32(
                param,
                crit,
                outer,
                trainer,
                star_choice=star_choice,
                resolve_tera=resolve_tera,
                max_attempts=max_attempts,
            )
        else:
            result = try_apply_64(
                param,
                crit,
                outer,
                trainer,
                ignore_ivs=ignore_ivs,
                resolve_tera=resolve_tera,
                max_attempts=max_attempts,
            )
    except (LookupError, ValueError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    if result is None:
        typer.echo(f"no match within {max_attempts} attempts", err=True)
        raise typer.Exit(code=EXIT_NOT_FOUND)
    typer.echo(encode_result(result).decode("utf-8"))


def main(argv: list[str] | None = None) -> None:
    app(prog_name="raidseed", args=argv)


if __name__ == "__main__":
    main()
