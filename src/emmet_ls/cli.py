from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from emmet_ls import server as server_module
from emmet_ls.dispatch import Grammar
from emmet_ls.exceptions import ExpansionError
from emmet_ls.log import parse_level, setup_logger
from emmet_ls.render import expand

app = typer.Typer(add_completion=False)

_DEFAULT_TCP_HOST = "127.0.0.1"
_DEFAULT_TCP_PORT = 2087


@app.command("serve")
def serve(
    tcp: bool = typer.Option(False, "--tcp", help="Listen on TCP instead of stdio."),
    host: str = typer.Option(_DEFAULT_TCP_HOST, "--host"),
    port: int = typer.Option(_DEFAULT_TCP_PORT, "--port"),
    config: Optional[Path] = typer.Option(
        None, "--config", help="Path to emmet-ls.toml; defaults to the workspace root."
    ),
    log_level: str = typer.Option("warning", "--log-level"),
) -> None:
    """Start the language server."""
    level = parse_level(log_level)
    if level is None:
        raise typer.BadParameter(
            "log level must be one of debug, info, warning, error",
            param_hint="--log-level",
        )
    setup_logger(level)
    server = server_module.server
    server.config_path = config
    if tcp:
        server_module.start(lambda: server.start_tcp(host, port))
    else:
        server_module.start()


@app.command("expand")
def expand_command(
    abbreviation: str = typer.Argument(..., help="Abbreviation to expand."),
    stylesheet: bool = typer.Option(
        False, "--stylesheet", help="Use the stylesheet grammar instead of markup."
    ),
    preview: bool = typer.Option(
        False, "--preview", help="Print the preview text instead of the snippet."
    ),
) -> None:
    """Expand an abbreviation and print the snippet text."""
    grammar = Grammar.STYLESHEET if stylesheet else Grammar.MARKUP
    try:
        text = expand(abbreviation, grammar, snippet_fields=not preview)
    except ExpansionError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(text)
