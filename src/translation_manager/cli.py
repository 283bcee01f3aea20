#!/usr/bin/env python3

import rich_click as click

# Configure rich-click to enable markup - MUST be first!
click.rich_click.USE_RICH_MARKUP = True

# Dracula theme colors
click.rich_click.STYLE_OPTION = "#ff79c6"
click.rich_click.STYLE_ARGUMENT = "#8be9fd"
click.rich_click.STYLE_COMMAND = "#50fa7b"
click.rich_click.STYLE_USAGE = "#bd93f9"
click.rich_click.STYLE_HELPTEXT = "#b3b8c0"

"""
Translation Manager - review and maintain multi-locale JSON message catalogs
"""

import asyncio
import json
import os
import sys

from rich.console import Console
from rich.table import Table

from . import __version__

console = Console()
err_console = Console(stderr=True)


def _build_store(ctx):
    from .catalog import TranslationStore
    from .core.config import get_config

    return TranslationStore.from_config(get_config(), messages_dir=ctx.obj.get("messages_dir"))


def _load_read_only(ctx):
    from .catalog import CatalogError

    store = _build_store(ctx)
    try:
        report = asyncio.run(store.load(record_snapshot=False))
    except CatalogError as e:
        err_console.print(f"[red]Error: {e!s}[/red]")
        sys.exit(1)
    for filename, error in report.errors.items():
        err_console.print(f"[yellow]Skipped {filename}: {error}[/yellow]")
    return store


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="translation-manager")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Configuration file path")
@click.option("--messages-dir", type=click.Path(file_okay=False), help="Directory holding <locale>.json files")
@click.option("--debug", is_flag=True, help="Enable detailed debug logging on stderr")
@click.pass_context
def main(ctx, config_path, messages_dir, debug):
    """[bold cyan]Translation Manager[/bold cyan] - review and maintain multi-locale JSON catalogs

    \b
    [bold yellow]Quick Start:[/bold yellow]
    \b
      [green]translation-manager status[/green]                 [italic]# Key, missing and review counts[/italic]
      [green]translation-manager unreviewed -n 20[/green]       [italic]# Keys waiting for review[/italic]
      [green]translation-manager serve --port 8780[/green]      [italic]# WebSocket server with live reload[/italic]
      [green]translation-manager apply-typography[/green]       [italic]# Re-run non-breaking space rules[/italic]
    """
    if debug:
        os.environ["TRANSLATION_MANAGER_LOG_LEVEL"] = "DEBUG"
        os.environ["TRANSLATION_MANAGER_CONSOLE_LOGS"] = "1"

    if config_path:
        from .core.config import reset_config

        reset_config(config_path)

    ctx.ensure_object(dict)
    ctx.obj["messages_dir"] = messages_dir


@main.command()
@click.option("--host", help="Interface to bind (default from config)")
@click.option("--port", type=int, help="Port to listen on (default from config)")
@click.option("--no-watch", is_flag=True, help="Do not reload when locale files change on disk")
@click.pass_context
def serve(ctx, host, port, no_watch):
    """Run the WebSocket server over the catalog."""
    from .catalog import ChangeWatcher
    from .core.config import get_config
    from .server import CatalogWebSocketServer

    config = get_config()
    store = _build_store(ctx)
    watcher = None
    if config.watcher_enabled and not no_watch:
        watcher = ChangeWatcher.from_config(store, config)
    server = CatalogWebSocketServer(store, config, watcher=watcher)

    console.print(f"[cyan]Serving {store.file_set.messages_dir} on ws://{host or server.host}:{port or server.port}[/cyan]")
    try:
        asyncio.run(server.start_server(host, port))
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
    except Exception as e:
        err_console.print(f"\n[red]Error: {e!s}[/red]")
        sys.exit(1)


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output JSON instead of a table")
@click.pass_context
def status(ctx, as_json):
    """Show key, missing-translation and review counts."""
    store = _load_read_only(ctx)
    summary = store.get_status_summary()

    if as_json:
        click.echo(
            json.dumps(
                {
                    "total": summary.total,
                    "missingTranslations": summary.missing_translations,
                    "waitingForCheck": summary.waiting_for_check,
                    "locales": list(store.locales),
                }
            )
        )
        return

    table = Table(title="Translation status")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="green")
    table.add_row("Locales", ", ".join(store.locales) or "-")
    table.add_row("Total keys", str(summary.total))
    table.add_row("Missing translations", str(summary.missing_translations))
    table.add_row("Waiting for check", str(summary.waiting_for_check))
    console.print(table)


@main.command()
@click.option("-n", "limit", type=int, default=None, help="Maximum number of keys to show")
@click.option("--json", "as_json", is_flag=True, help="Output JSON instead of a table")
@click.pass_context
def unreviewed(ctx, limit, as_json):
    """List keys waiting for review with their translations."""
    from .core.config import get_config

    store = _load_read_only(ctx)
    entries = store.get_unreviewed(limit if limit is not None else get_config().unreviewed_limit)

    if as_json:
        click.echo(json.dumps(entries, ensure_ascii=False, indent=2))
        return

    if not entries:
        console.print("[green]Everything has been reviewed[/green]")
        return

    table = Table(title=f"Unreviewed keys ({len(entries)})")
    table.add_column("Key", style="cyan", no_wrap=True)
    for locale in store.locales:
        table.add_column(locale)
    for key, translations in entries.items():
        table.add_row(key, *[str(translations.get(locale, "")) for locale in store.locales])
    console.print(table)


@main.command("apply-typography")
@click.pass_context
def apply_typography_command(ctx):
    """Apply non-breaking space rules to every stored translation."""
    store = _build_store(ctx)

    async def _run():
        await store.load()
        return await store.apply_typography_to_all()

    result = asyncio.run(_run())
    if not result.success:
        err_console.print(f"[red]Failed to save: {result.error}[/red]")
        sys.exit(1)
    console.print(
        f"[green]Updated {result.updated_translations} translations "
        f"across {result.total_keys} keys in {result.total_locales} locales[/green]"
    )


if __name__ == "__main__":
    main()
