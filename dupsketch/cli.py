"""
Command-line interface for dupsketch.

Every input file (or every non-empty line, with ``--lines``) is one document.
Documents are checked against everything seen before them in the same run.
"""

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

import click
from rich.console import Console
from rich.table import Table

from . import __version__
from .build_info import is_release_build
from .config import ConfigManager, create_default_config_file
from .dedup import SuperMinHasherLSH
from .errors import DupSketchError
from .utils.logging_setup import get_logger, log_operation, setup_logging

logger = logging.getLogger(__name__)

console = Console()


def iter_documents(paths: List[Path], lines: bool) -> Iterator[Tuple[str, str]]:
    """Yield ``(doc_id, text)`` pairs in input order."""
    for path in paths:
        text = path.read_text(encoding="utf-8", errors="replace")
        if not lines:
            yield str(path), text
            continue
        for lineno, line in enumerate(text.splitlines(), start=1):
            if line.strip():
                yield f"{path}:{lineno}", line


def _fail(message: str):
    console.print(f"[red]✗ {message}[/red]", soft_wrap=True)
    raise click.exceptions.Exit(1)


@click.group(name="dupsketch")
@click.version_option(__version__, prog_name="dupsketch")
def main():
    """Near-duplicate detection with SuperMinHash signatures."""
    # scan reconfigures logging itself; other commands only need warnings on stderr
    get_logger(__name__, level="WARNING")


@main.command(name="scan")
@click.argument("paths", nargs=-1, required=True,
                type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--reference", "-r", "references", multiple=True,
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Documents indexed before scanning; never reported")
@click.option("--lines", is_flag=True, help="Treat every non-empty line as a document")
@click.option("--size", type=int, help="Signature size")
@click.option("--n-gram", type=int, help="Shingle width in characters")
@click.option("--threshold", type=float, help="Minimum similarity to report")
@click.option("--add-if-dup", is_flag=True,
              help="Index documents even when they match earlier ones")
@click.option("--check-only", is_flag=True, help="Query the index without adding scanned documents")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              help="Path to configuration file")
@click.option("--json", "as_json", is_flag=True, help="Output results as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--log-dir", type=click.Path(file_okay=False, path_type=Path),
              help="Also write JSON logs to this directory")
def scan(paths, references, lines, size, n_gram, threshold, add_if_dup, check_only,
         config_path, as_json, verbose, log_dir):
    """Report documents that near-duplicate earlier ones."""
    setup_logging(level="DEBUG" if verbose else "WARNING", log_dir=log_dir)
    log_operation(logger, "scan", paths=len(paths), references=len(references))

    overrides = {
        key: value
        for key, value in {
            "size": size,
            "n_gram": n_gram,
            "threshold": threshold,
            "add_if_dup": True if add_if_dup else None,
        }.items()
        if value is not None
    }
    try:
        config = replace(ConfigManager(config_path).load(), **overrides)
        detector = SuperMinHasherLSH.from_config(config)
    except DupSketchError as e:
        _fail(e.message)

    for doc_id, text in iter_documents(list(references), lines):
        detector.check_and_add(doc_id, text, threshold=config.threshold, add_if_dup=True)

    scanned = 0
    duplicates: List[Tuple[str, Dict[str, float]]] = []
    for doc_id, text in iter_documents(list(paths), lines):
        scanned += 1
        result = detector.check_and_add(
            doc_id,
            text,
            threshold=config.threshold,
            add=not check_only,
            add_if_dup=config.add_if_dup,
        )
        if result:
            duplicates.append((doc_id, result))

    stats = detector.stats()
    logger.info("Scanned %d documents, %d duplicates", scanned, len(duplicates))

    if as_json:
        click.echo(json.dumps({
            "scanned": scanned,
            "duplicates": [
                {"id": doc_id, "matches": matches} for doc_id, matches in duplicates
            ],
            "stats": stats.as_dict(),
        }, indent=2, ensure_ascii=False))
        return

    if duplicates:
        table = Table(title="Near duplicates")
        table.add_column("Document", style="cyan")
        table.add_column("Matches")
        table.add_column("Best", justify="right", style="magenta")
        for doc_id, matches in duplicates:
            ranked = sorted(matches.items(), key=lambda kv: (-kv[1], kv[0]))
            table.add_row(
                doc_id,
                "\n".join(f"{other} ({sim:.3f})" for other, sim in ranked),
                f"{ranked[0][1]:.3f}",
            )
        console.print(table)
    else:
        console.print("[green]No near duplicates found[/green]")

    console.print(
        f"Scanned {scanned} document(s), {len(duplicates)} near duplicate(s); "
        f"index holds {stats.total_documents} document(s) in {stats.total_buckets} bucket(s)"
    )


@main.command(name="info")
def info():
    """Show version and build diagnostics."""
    console.print(f"dupsketch {__version__}")
    console.print(f"release build: {is_release_build()}")


@main.group(name="config")
def config_group():
    """Manage dupsketch configuration."""
    pass


@config_group.command(name="init")
@click.option("--path", type=click.Path(dir_okay=False, path_type=Path),
              default=Path(ConfigManager.DEFAULT_CONFIG_FILE), show_default=True,
              help="Path for config file")
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def config_init(path: Path, force: bool):
    """Write a configuration file with default values."""
    if path.exists() and not force:
        if not click.confirm(f"Config file {path} already exists. Overwrite?"):
            console.print("[yellow]Aborted[/yellow]")
            return
    written = create_default_config_file(path)
    console.print(f"[green]✓ Created config file at {written}[/green]")


@config_group.command(name="show")
@click.option("--path", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Path to config file")
def config_show(path: Optional[Path]):
    """Display the effective configuration."""
    manager = ConfigManager(path)
    try:
        manager.display(manager.load())
    except DupSketchError as e:
        _fail(e.message)


@config_group.command(name="validate")
@click.option("--path", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Path to config file")
def config_validate(path: Optional[Path]):
    """Validate the effective configuration."""
    try:
        ConfigManager(path).load()
    except DupSketchError as e:
        _fail(f"Configuration has validation errors: {e.message}")
    console.print("[green]✓ Configuration is valid[/green]")


if __name__ == "__main__":
    main()
