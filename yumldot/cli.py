"""yumldot CLI - compile yUML diagrams for Graphviz."""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from yumldot import __version__
from yumldot.config import YumlConfig
from yumldot.core.colors import contrast_font_color, luma as color_luma, to_rgb
from yumldot.core.compiler import CompiledDiagram, DiagramCompiler
from yumldot.core.errors import YumlError, classify_error
from yumldot.logging import LOG_LEVELS, get_logger, setup_logging
from yumldot.renderer import SUPPORTED_FORMATS, format_for_path, write_rendered

console = Console()
err_console = Console(stderr=True)

log = get_logger(__name__)


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Path to yumldot.toml")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Override the configured log level",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], log_level: Optional[str]):
    """yumldot - yUML to Graphviz DOT compiler"""
    # Quiet logging until the config says otherwise
    setup_logging(log_level or "WARNING")
    config = YumlConfig.load(config_path)
    if log_level:
        config.log_level = log_level.upper()
    setup_logging(
        config.log_level,
        str(config.log_file) if config.log_file else None,
        config.log_json,
    )
    ctx.obj = config


def _fail(error: Exception):
    """Print a classified error and exit with status 1."""
    classified = classify_error(error)
    log.debug("command_failed", category=classified.category.value, error=classified.message)
    err_console.print(f"[red]✗ {escape(classified.message)}[/red]", highlight=False)
    if classified.suggestion:
        err_console.print(f"[dim]Suggestion: {escape(classified.suggestion)}[/dim]", highlight=False)
    raise SystemExit(1)


def _compile(source: Path, dark: bool) -> CompiledDiagram:
    """Read and compile a source file, exiting on any error."""
    try:
        text = source.read_text(encoding="utf-8")
        return DiagramCompiler(dark=dark).compile(text)
    except (YumlError, OSError, UnicodeDecodeError) as e:
        _fail(e)


@cli.command(name="compile")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Write DOT to a file")
@click.option("--dark", is_flag=True, help="White lines and text for dark backgrounds")
@click.pass_obj
def compile_cmd(config: YumlConfig, source: Path, output: Optional[Path], dark: bool):
    """Compile a yUML file to Graphviz DOT."""
    diagram = _compile(source, dark or config.dark_mode)
    dot = diagram.to_dot()

    if output is None:
        click.echo(dot, nl=False)
        return

    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(dot, encoding="utf-8")
    except OSError as e:
        _fail(e)
    console.print(f"[green]✓[/green] Wrote {output}")


@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", required=True, type=click.Path(dir_okay=False, path_type=Path), help="Image file to write")
@click.option("--format", "-f", "fmt", type=click.Choice(SUPPORTED_FORMATS), help="Output format (default: from suffix)")
@click.option("--dark", is_flag=True, help="White lines and text for dark backgrounds")
@click.pass_obj
def render(config: YumlConfig, source: Path, output: Path, fmt: Optional[str], dark: bool):
    """Compile a yUML file and render it with Graphviz."""
    diagram = _compile(source, dark or config.dark_mode)
    dot = diagram.to_dot()
    if not dot:
        _fail(YumlError(f"Nothing to render in {source}"))

    fmt = fmt or format_for_path(output, default=config.renderer.format)
    try:
        write_rendered(
            dot,
            output,
            fmt=fmt,
            binary=config.renderer.binary,
            timeout=config.renderer.timeout_s,
        )
    except (YumlError, OSError) as e:
        _fail(e)
    console.print(f"[green]✓[/green] Rendered {output} ({fmt})")


@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def check(config: YumlConfig, source: Path):
    """Validate a yUML file and summarize what it compiles to."""
    diagram = _compile(source, config.dark_mode)
    options = diagram.options

    table = Table(title=escape(source.name), show_header=False)
    table.add_column("Property", style="dim")
    table.add_column("Value", style="bold")
    table.add_row("Type", options.chart_type.value if options.chart_type else "-")
    table.add_row("Direction", f"{options.direction.value} ({options.direction.rankdir})")
    table.add_row("Generate", "yes" if options.generate else "no")
    table.add_row("Nodes", str(len(diagram.nodes)))
    table.add_row("Edges", str(len(diagram.edges)))
    table.add_row("Dropped edges", str(diagram.dropped_edges))
    console.print(table)

    if diagram.grammar is None:
        console.print("[yellow]⚠ Nothing compiled (empty document or unsupported type)[/yellow]")
    elif diagram.dropped_edges:
        console.print(f"[yellow]⚠ {diagram.dropped_edges} edge(s) had no node on one side[/yellow]")
    else:
        console.print("[green]✓ OK[/green]")


@cli.command()
@click.argument("color")
def luma(color: str):
    """Show the luma of COLOR and the font color forced on it."""
    rgb = to_rgb(color)
    if rgb is None:
        console.print(f"[yellow]⚠ Unknown color '{escape(color)}', using neutral luma[/yellow]")

    value = color_luma(color)
    font = contrast_font_color(color)
    console.print(f"[bold]{escape(color)}[/]: luma {value:.2f}")
    console.print(f"   font color: {font or 'renderer default'}")


@cli.command()
@click.option("--verbose", "-v", is_flag=True, help="Show detailed information")
@click.pass_context
def doctor(ctx: click.Context, verbose: bool):
    """Check the yumldot installation and configuration."""

    from yumldot.core.doctor import get_all_checks

    config: YumlConfig = ctx.obj
    config_path = ctx.parent.params.get("config_path") if ctx.parent else None

    console.print("[bold cyan]yumldot doctor[/bold cyan]\n")

    results = get_all_checks(config_path, binary=config.renderer.binary)
    checks = results["checks"]

    for num, name in enumerate(["python", "dependencies", "compiler", "graphviz", "config"], start=1):
        _print_check(num, checks[name])

    if verbose:
        console.print()
        for module, description, installed in results["dependencies"]:
            status = "[green]✓[/green]" if installed else "[red]✗[/red]"
            console.print(f"     {status} {description} ({module})")

    console.print()
    if results["overall"]["all_passed"]:
        console.print("[bold green]✓ All checks passed - yumldot is ready![/bold green]")
    elif results["overall"]["critical_passed"]:
        console.print(
            "[bold yellow]⚠ Some checks failed - compiling works, rendering may not[/bold yellow]"
        )
    else:
        console.print("[bold red]✗ Critical checks failed - yumldot may not work correctly[/bold red]")
        raise SystemExit(1)


def _print_check(num: int, check):
    """Helper to print a health check result."""

    status = "[green]✓[/green]" if check.passed else "[red]✗[/red]"
    console.print(f"[bold]{num}. {check.name}:[/] {status} {check.message}")

    if check.details:
        for line in check.details.split("\n"):
            console.print(f"   [dim]{line}[/dim]")


def main():
    cli()


if __name__ == "__main__":
    main()
