from __future__ import annotations

import getpass
import json
import logging
from pathlib import Path
from typing import Optional

import typer

from ..core.config import Configuration
from ..core.environment import Environment
from ..core.errors import ConfigError
from ..core.flatten import iter_paths
from ..core.types import LoadTarget, ROOT_NAME

app = typer.Typer(help="dotconf CLI")

ENV_OPTION = typer.Option("development", "--env", envvar="DOTCONF_ENV")
MANIFEST_OPTION = typer.Option(None, "--config", help="Path to dotconf.yaml")


def _current_user() -> Optional[str]:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return None


def _env(name: str, manifest: Optional[Path]) -> Environment:
    return Environment(name, config_path=manifest)


def _file_config(file: Path, root: str) -> Configuration:
    cfg = Configuration(identity=_current_user)
    cfg.load(file, LoadTarget.USE, root)
    cfg.load(file, LoadTarget.SAVE, root)
    return cfg


def _fail(error: ConfigError) -> None:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(code=1)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def sources(env: str = ENV_OPTION, config: Optional[Path] = MANIFEST_OPTION):
    try:
        e = _env(env, config)
    except ConfigError as err:
        _fail(err)
    typer.echo(json.dumps([
        {
            "id": rs.source.id,
            "name": rs.source.name,
            "target": rs.target.value,
            "root": rs.root_name,
        }
        for rs in e.registered_sources
    ], indent=2))


@app.command()
def show(
    env: str = ENV_OPTION,
    config: Optional[Path] = MANIFEST_OPTION,
    depth: Optional[int] = typer.Option(None, "--depth"),
):
    try:
        cfg = _env(env, config).get_config()
    except ConfigError as e:
        _fail(e)
    for path, value in iter_paths(cfg.values(), depth=depth):
        typer.echo(f"{path} = {json.dumps(value)}")


@app.command()
def get(
    key: str,
    env: str = ENV_OPTION,
    config: Optional[Path] = MANIFEST_OPTION,
    file: Optional[Path] = typer.Option(None, "--file", help="Read a single settings file instead"),
):
    try:
        if file is not None:
            cfg = Configuration()
            cfg.load(file)
        else:
            cfg = _env(env, config).get_config()
        value = cfg.get(key, None)
    except ConfigError as e:
        _fail(e)
    typer.echo(json.dumps({"key": key, "value": value}, indent=2))


@app.command("set")
def set_(
    key: str,
    value: str,
    file: Path = typer.Option(..., "--file"),
    root: str = typer.Option(ROOT_NAME, "--root"),
    keep: bool = typer.Option(False, "--keep", help="Do not overwrite an existing value"),
):
    try:
        cfg = _file_config(file, root)
        cfg.set(key, value, overwrite=not keep)
        cfg.save(group=root)
    except ConfigError as e:
        _fail(e)
    typer.echo("OK")


@app.command()
def remove(
    key: str,
    file: Path = typer.Option(..., "--file"),
    root: str = typer.Option(ROOT_NAME, "--root"),
):
    try:
        cfg = _file_config(file, root)
        found = cfg.remove(key)
        if not found:
            typer.echo(f"{key} not found", err=True)
            raise typer.Exit(code=1)
        cfg.save(group=root, require_source_file=False)
    except ConfigError as e:
        _fail(e)
    typer.echo("OK")


@app.command()
def dump(
    file: Path = typer.Option(..., "--file"),
    root: str = typer.Option(ROOT_NAME, "--root"),
):
    try:
        cfg = _file_config(file, root)
        typer.echo(cfg.render(root), nl=False)
    except ConfigError as e:
        _fail(e)


if __name__ == "__main__":
    app()
