"""Command-line interface for the script interpreter."""

import logging
from typing import Optional

import click

from stackscript import __version__
from stackscript.config import InterpreterConfig
from stackscript.errors import ScriptError
from stackscript.interpreter import ExecutionStep, ScriptInterpreter
from stackscript.script import Script


def _setup_logging(config: InterpreterConfig) -> None:
    fmt = "%(levelname)s %(name)s: %(message)s"
    if config.getboolean('logtimestamps'):
        fmt = "%(asctime)s " + fmt
    logging.basicConfig(
        level=logging.DEBUG if config.getboolean('debug') else logging.WARNING,
        format=fmt,
    )


def _parse(interpreter: ScriptInterpreter, text: str) -> Script:
    try:
        return interpreter.parse(text)
    except ScriptError as e:
        raise click.ClickException(f"Cannot parse script: {e}")


def _show_step(step: ExecutionStep) -> None:
    """Clear the screen, show the machine state and wait for Enter"""
    click.clear()
    click.echo(f"Executed: {step.token}")
    click.echo(f"Remaining script: {' '.join(step.remaining) or '<empty>'}\n")
    click.echo("Stack (top -> bottom):")
    if not step.stack:
        click.echo("  <empty>")
    for item in reversed(step.stack):
        click.echo(f"  {item.hex()}")
    click.pause("\nPress Enter for next step...")


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Configuration file (default: ~/.stackscript/stackscript.conf)",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str]) -> None:
    """Stackscript - decode, classify and run transaction scripts."""
    config = InterpreterConfig(config_path)
    _setup_logging(config)
    ctx.obj = ScriptInterpreter.from_config(config)


@cli.command()
@click.argument("script")
@click.pass_obj
def decode(interpreter: ScriptInterpreter, script: str) -> None:
    """Show the hex, ASM and template of SCRIPT (hex or ASM)."""
    parsed = _parse(interpreter, script)
    click.echo(f"Hex : {parsed.hex}")
    click.echo(f"ASM : {parsed}")
    click.echo(f"Type: {parsed.script_type.value}")


@cli.command()
@click.argument("script")
@click.pass_obj
def classify(interpreter: ScriptInterpreter, script: str) -> None:
    """Print the template of SCRIPT (hex or ASM)."""
    click.echo(_parse(interpreter, script).script_type.value)


@cli.command()
@click.option("--locking", help="Locking script (hex or asm)")
@click.option("--unlocking", help="Unlocking script (hex or asm)")
@click.option("--step", is_flag=True, help="Pause after every opcode")
@click.pass_obj
def run(
    interpreter: ScriptInterpreter,
    locking: Optional[str],
    unlocking: Optional[str],
    step: bool,
) -> None:
    """Run an unlocking script against a locking script.

    Exits with status 0 if the scripts are valid, 1 if they evaluate to
    false, and 2 if execution fails.
    """
    if locking is None:
        locking = click.prompt("Locking script (hex or asm)")
    locking_script = _parse(interpreter, locking)
    click.echo(f"Type: {locking_script.script_type.value}\n")

    if unlocking is None:
        unlocking = click.prompt("Unlocking script (hex or asm)")
    unlocking_script = _parse(interpreter, unlocking)

    click.echo("=== Scripts ===")
    click.echo(f"Locking  : {locking_script}")
    click.echo(f"Unlocking: {unlocking_script}")
    if step:
        click.pause("\nPress Enter to start execution...")

    try:
        result = interpreter.verify(
            locking_script,
            unlocking_script,
            observer=_show_step if step else None,
        )
    except ScriptError as e:
        raise click.ClickException(str(e))

    click.echo("\n=== Final stack ===")
    for item in reversed(result.stack):
        click.echo(f"  {item}")

    if result.error is not None:
        click.echo(f"\nERROR ({result.error_kind}): {result.error}")
        raise SystemExit(2)
    if result.valid:
        click.echo("\nVALID - Transaction would be accepted")
    else:
        click.echo("\nINVALID - Transaction rejected")
        raise SystemExit(1)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
