from __future__ import annotations

import logging
import signal
from pathlib import Path
from threading import Event

import typer
from click.core import ParameterSource
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, TextColumn
from rich.table import Table

from ..config import AppConfig, dump_config
from ..core import ImportFailure, VaultImportService
from ..models import ProgressEvent, RunStats, TransformOptions
from ..settings import get_settings, prepare_config
from ..validation import validate_source_vault

console = Console()

app = typer.Typer(help="Import an Obsidian vault into a Dendron vault")


def _load_config(path: Path | None) -> AppConfig:
    return prepare_config(get_settings(), path)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _flag(ctx: typer.Context, name: str, value: bool, fallback: bool) -> bool:
    if ctx.get_parameter_source(name) is ParameterSource.DEFAULT:
        return fallback
    return value


def _resolve_path(value: Path | None, fallback: Path | None, label: str) -> Path:
    path = value or fallback
    if path is None:
        console.print(f"[red]No {label} folder given[/red] and none saved in config.")
        raise typer.Exit(2)
    return path


def _print_validation(cfg: AppConfig, source: Path) -> bool:
    result = validate_source_vault(
        source,
        marker=cfg.vault.config_marker,
        max_depth=cfg.vault.validation_depth,
        extension=cfg.vault.markdown_extension,
    )
    table = Table(title="Vault analysis")
    table.add_column("Property")
    table.add_column("Value")
    table.add_row("Path", str(result.path))
    table.add_row("Markdown files", str(result.stats.markdown_files))
    table.add_row("Folders", str(result.stats.folders))
    table.add_row("Total files", str(result.stats.total_files))
    table.add_row("Obsidian config", "Found" if result.stats.has_vault_config else "Not found")
    console.print(table)
    return result.is_likely_valid


def _print_completion(stats: RunStats) -> None:
    message = (
        f"Import completed! Processed {stats.processed_files}/{stats.total_files} files "
        f"in {round(stats.duration_seconds)}s"
    )
    if stats.cancelled:
        console.print(f"[yellow]Import cancelled[/yellow]: {stats.skipped_files} files skipped.")
    if not stats.errors:
        console.print(f"[green]{message}[/green]")
        return
    console.print(f"[yellow]{message}. {len(stats.errors)} errors occurred.[/yellow]")
    table = Table(title="Import errors")
    table.add_column("#")
    table.add_column("Error")
    for index, error in enumerate(stats.errors, start=1):
        table.add_row(str(index), error)
    console.print(table)


@app.command("import")
def import_vault(
    ctx: typer.Context,
    source: Path | None = typer.Argument(None, help="Obsidian vault folder"),
    target: Path | None = typer.Argument(None, help="Dendron vault folder"),
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
    hierarchy: bool = typer.Option(True, "--hierarchy/--no-hierarchy", help="Flatten folders into dot names"),
    preserve_metadata: bool = typer.Option(
        True, "--preserve-metadata/--strip-metadata", help="Keep leading frontmatter blocks"
    ),
    wiki_links: bool = typer.Option(True, "--wiki-links/--no-wiki-links", help="Rewrite [[wiki links]]"),
    schemas: bool = typer.Option(False, "--schemas/--no-schemas", help="Write hierarchy schema stubs"),
    assets: bool = typer.Option(True, "--assets/--no-assets", help="Copy images and other assets"),
    force: bool = typer.Option(False, "--force", help="Import even if the source does not look like a vault"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    _configure_logging(verbose)
    cfg = _load_config(config)
    source_path = _resolve_path(source, cfg.importer.source, "source")
    target_path = _resolve_path(target, cfg.importer.target, "target")

    if not _print_validation(cfg, source_path) and not force:
        console.print(
            "[yellow]The selected folder does not appear to be an Obsidian vault "
            "(no .md files found).[/yellow] Re-run with --force to proceed anyway."
        )
        raise typer.Exit(1)

    defaults = cfg.importer
    options = TransformOptions(
        convert_hierarchy=_flag(ctx, "hierarchy", hierarchy, defaults.convert_hierarchy),
        preserve_metadata=_flag(ctx, "preserve_metadata", preserve_metadata, defaults.preserve_metadata),
        convert_wiki_links=_flag(ctx, "wiki_links", wiki_links, defaults.convert_wiki_links),
        create_hierarchy_stubs=_flag(ctx, "schemas", schemas, defaults.create_hierarchy_stubs),
        handle_assets=_flag(ctx, "assets", assets, defaults.handle_assets),
    )

    cancellation = Event()

    def _request_cancel(signum, frame) -> None:  # type: ignore[no-untyped-def]
        console.print("Import cancelled by user")
        cancellation.set()

    previous_handler = signal.signal(signal.SIGINT, _request_cancel)
    service = VaultImportService(cfg)
    try:
        with Progress(
            TextColumn("{task.description}"),
            BarColumn(),
            TextColumn("{task.completed}/{task.total}"),
            console=console,
            transient=True,
        ) as bar:
            task = bar.add_task("Importing Obsidian to Dendron", total=None)

            def _progress(event: ProgressEvent) -> None:
                bar.update(
                    task,
                    description=event.message,
                    completed=event.completed,
                    total=event.total or None,
                )

            stats = service.transform_vault(
                source_path,
                target_path,
                options,
                cancellation=cancellation,
                progress=_progress,
            )
    except ImportFailure as exc:
        console.print(f"[red]Import failed[/red]: {exc.code} - {exc}")
        raise typer.Exit(1) from exc
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    _print_completion(stats)


@app.command()
def validate(
    path: Path,
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    cfg = _load_config(config)
    if _print_validation(cfg, path):
        console.print("[green]Looks like an Obsidian vault.[/green]")
        return
    console.print("[yellow]Does not look like an Obsidian vault.[/yellow]")
    raise typer.Exit(1)


@app.command("show-config")
def show_config(
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    console.print_json(dump_config(_load_config(config)))


@app.command()
def serve(
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    import uvicorn

    from ..api import create_app

    cfg = _load_config(config)
    try:
        api = create_app(cfg)
    except RuntimeError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc
    uvicorn.run(api, host=cfg.api.host, port=cfg.api.port)


if __name__ == "__main__":
    app()
