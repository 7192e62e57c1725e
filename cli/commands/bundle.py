"""Bundle command."""

import shlex
from pathlib import Path
from typing import Optional, Tuple

import click
from pydantic import ValidationError

from cli.config import build_config, load_config_file, parse_eol
from dtsbundle_engine import generate
from dtsbundle_engine.errors import BundleError, EmitterError


@click.command()
@click.argument("files", nargs=-1)
@click.option("--name", help="Namespace the bundled modules are declared under")
@click.option("--out", type=click.Path(dir_okay=False), help="Output declaration file")
@click.option(
    "--base-dir",
    type=click.Path(exists=True, file_okay=False, dir_okay=True),
    help="Root directory of the sources (defaults to the current directory)",
)
@click.option("--main", help="Module re-exported as the namespace itself, e.g. ./index")
@click.option("--exclude", "excludes", multiple=True, help="File to leave out of the bundle")
@click.option("--extern", "externs", multiple=True, help="Declaration file to reference from the bundle")
@click.option("--eol", help="End of line: lf, crlf or a literal string (defaults to the platform)")
@click.option("--indent", help="Indentation inside module blocks (defaults to a tab)")
@click.option("--target", help="tsc --target value (defaults to ESNext)")
@click.option("--compiler", help="Command used to run tsc, e.g. 'npx tsc'")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file with bundle options; command-line values take precedence",
)
def bundle(
    files: Tuple[str, ...],
    name: Optional[str],
    out: Optional[str],
    base_dir: Optional[str],
    main: Optional[str],
    excludes: Tuple[str, ...],
    externs: Tuple[str, ...],
    eol: Optional[str],
    indent: Optional[str],
    target: Optional[str],
    compiler: Optional[str],
    config_path: Optional[Path],
):
    """Bundle the declarations of FILES into a single file."""
    try:
        config = build_config(
            load_config_file(config_path),
            {
                "files": list(files),
                "name": name,
                "out": out,
                "base_dir": base_dir,
                "main": main,
                "excludes": list(excludes),
                "externs": list(externs),
                "eol": parse_eol(eol),
                "indent": indent,
                "target": target,
                "compiler": shlex.split(compiler) if compiler else None,
            },
        )
    except (ValidationError, ValueError, OSError) as e:
        click.echo(f"❌ Invalid configuration: {e}", err=True)
        raise click.Abort()

    click.echo(f"📦 Bundling {config.name} into {config.out}")

    try:
        result = generate(config, send_message=lambda message: click.echo(f"  {message}"))
    except EmitterError as e:
        click.echo(f"❌ {e}", err=True)
        click.echo(f"   {config.out} is incomplete and should be discarded.", err=True)
        raise click.Abort()
    except BundleError as e:
        click.echo(f"❌ Bundling failed: {e}", err=True)
        raise click.Abort()

    click.echo(f"✅ Bundle written: {result.out}")
    click.echo(f"   Modules: {len(result.modules)}")
    click.echo(f"   Declaration files: {len(result.passthrough)}")
    click.echo(f"   Global scripts: {len(result.ambient)}")
