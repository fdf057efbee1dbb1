"""CLI interface for tagvalidator using Typer framework."""

import json as jsonlib
import logging
from importlib import import_module
from pathlib import Path
from typing import Annotated, Any

import typer
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from tagvalidator import __description__, __version__
from tagvalidator.config import load_config
from tagvalidator.errors import ValidationErrors
from tagvalidator.validation import Validator

app = typer.Typer(
    name="tagvalidator",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()

VALID_FORMATS = ["table", "json"]

logger = logging.getLogger(__name__)


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"tagvalidator version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, help="Show version and exit")
    ] = False,
) -> None:
    """tagvalidator - declarative tag-based validation for Python values."""


def _setup(config_path: Path | None) -> Validator:
    """Load configuration, configure logging and build the validator."""
    try:
        config = load_config(config_path)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    logging.basicConfig(
        level=config.logging.level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    return Validator.from_config(config)


def _check_format(format: str) -> None:
    if format not in VALID_FORMATS:
        console.print(f"[red]Error:[/red] Invalid format '{format}'. Must be one of: {', '.join(VALID_FORMATS)}")
        raise typer.Exit(1)


def _load_target(target: str) -> Any:
    """Resolve ``package.module:Class`` to the class object."""
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"Target must look like 'package.module:Class', got '{target}'")
    obj: Any = import_module(module_name)
    for attr in attr_path.split("."):
        obj = getattr(obj, attr)
    return obj


def _parse_value(raw: str) -> Any:
    """JSON literal if it parses, the raw text otherwise."""
    try:
        return jsonlib.loads(raw)
    except jsonlib.JSONDecodeError:
        return raw


def _report(errors: ValidationErrors | None, format: str) -> int:
    """Print the outcome and return the exit code."""
    if format == "json":
        typer.echo(jsonlib.dumps({
            "valid": errors is None,
            "errors": errors.to_dict() if errors is not None else {},
        }, indent=2))
        return 0 if errors is None else 1

    if errors is None:
        console.print("[green]Valid: no violations found![/green]")
        return 0

    console.print(f"[red]Invalid: {len(errors.violations())} violation(s)[/red]")
    table = Table()
    table.add_column("Path", style="cyan")
    table.add_column("Rule", style="white")
    table.add_column("Message", style="white")
    for violation in errors.violations():
        table.add_row(escape(violation.path or "<value>"), escape(violation.rule), escape(violation.message))
    console.print(table)
    return 1


@app.command()
def valid(
    value: Annotated[
        str,
        typer.Argument(help="Value to check, parsed as JSON when possible (e.g. 42, \"abc\", [1,2])")
    ],
    tag: Annotated[
        str,
        typer.Option("--tag", "-t", help="Rule tag to apply, e.g. 'nonzero,min=3'")
    ],
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: table, json (default: table)")
    ] = "table",
    config: Annotated[
        Path,
        typer.Option("--config", "-c", help="Configuration file path (default: search for .tagvalidator.json)")
    ] = None,
) -> None:
    """Apply a rule tag to a single value."""
    _check_format(format)
    validator = _setup(config)

    parsed = _parse_value(value)
    logger.debug(f"Checking {parsed!r} against tag {tag!r}")
    raise typer.Exit(_report(validator.valid(parsed, tag), format))


@app.command()
def check(
    target: Annotated[
        str,
        typer.Argument(help="Dataclass or pydantic model to build, as 'package.module:Class'")
    ],
    data: Annotated[
        Path,
        typer.Option("--data", "-d", help="JSON file holding the object to validate")
    ],
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: table, json (default: table)")
    ] = "table",
    config: Annotated[
        Path,
        typer.Option("--config", "-c", help="Configuration file path (default: search for .tagvalidator.json)")
    ] = None,
) -> None:
    """Decode a JSON document into a type and validate it."""
    _check_format(format)

    try:
        validator = _setup(config)
        cls = _load_target(target)
        with open(data, encoding="utf-8") as f:
            payload = jsonlib.load(f)
        instance = TypeAdapter(cls).validate_python(payload)
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except PydanticValidationError as e:
        console.print(f"[red]Error:[/red] Could not build {escape(target)}: {escape(str(e))}")
        raise typer.Exit(1)
    except (ValueError, ImportError, AttributeError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    raise typer.Exit(_report(validator.validate(instance), format))


@app.command()
def rules(
    config: Annotated[
        Path,
        typer.Option("--config", "-c", help="Configuration file path (default: search for .tagvalidator.json)")
    ] = None,
) -> None:
    """List the rules available in tags."""
    validator = _setup(config)

    table = Table()
    table.add_column("Rule", style="cyan")
    table.add_column("Description", style="white")
    for name in validator.rule_names:
        rule = validator.rule(name)
        doc = (type(rule).__doc__ or "").strip().split("\n")[0]
        table.add_row(name, doc)
    console.print(f"[blue]Tag name:[/blue] {validator.tag_name}")
    console.print(table)


if __name__ == "__main__":
    app()
