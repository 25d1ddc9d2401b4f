# descrelay/cli.py
from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

import typer

from .clean_text import normalize
from .config import ExtractionSettings
from .document import SoupDocument, open_page
from .extractor.handler import GET_TITLE, GET_TITLE_AND_DESCRIPTION, ExtractionResult, handle_request
from .log import err, info
from .relay import relay

app = typer.Typer(help="Extract a page's title and description, clean it, relay it")


# -----------------------
# Helpers
# -----------------------
def _action(title_only: bool) -> dict:
    return {"action": GET_TITLE if title_only else GET_TITLE_AND_DESCRIPTION}


def _emit(result: ExtractionResult, deliver: bool, skip_empty: bool) -> None:
    if deliver:
        payload, reply = relay(result, skip_empty=skip_empty)
    else:
        payload, reply = {"title": result.title, "description": normalize(result.description)}, None
    out = dict(payload)
    if reply is not None:
        out["result"] = reply.result
        out["cached"] = reply.cached
    typer.echo(json.dumps(out, ensure_ascii=False, indent=2))


# -----------------------
# Commands
# -----------------------
@app.command()
def extract(
    url: str,
    deliver: bool = typer.Option(True, "--deliver/--no-deliver", help="POST the cleaned result to the receiver"),
    title_only: bool = typer.Option(False, "--title-only", help="Skip the description"),
    skip_empty: bool = typer.Option(False, "--skip-empty", help="Do not deliver when no description was found"),
    headed: bool = typer.Option(False, "--headed", help="Launch a visible browser window"),
    timeout_ms: int = typer.Option(45000, "--timeout-ms", help="Page load timeout"),
) -> None:
    """
    Render URL in Chromium, expand its description and print the cleaned result.
    """
    settings = ExtractionSettings.from_env()

    async def _run() -> ExtractionResult:
        async with open_page(url, timeout_ms=timeout_ms, headed=headed) as doc:
            return await handle_request(_action(title_only), doc, settings)

    info(f"extract: {url}")
    try:
        result = asyncio.run(_run())
    except Exception as e:
        err(f"extract: could not render {url} :: {e}")
        raise typer.Exit(code=1)
    _emit(result, deliver, skip_empty)


@app.command("extract-file")
def extract_file(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Saved HTML page"),
    base_url: str = typer.Option("", "--base-url", help="Resolve relative links against this URL"),
    deliver: bool = typer.Option(False, "--deliver/--no-deliver"),
    title_only: bool = typer.Option(False, "--title-only"),
    skip_empty: bool = typer.Option(False, "--skip-empty"),
) -> None:
    """
    Same as `extract`, on a saved HTML snapshot.
    """
    settings = ExtractionSettings.from_env()
    doc = SoupDocument(path.read_text(encoding="utf-8", errors="ignore"), base_url=base_url)
    result = asyncio.run(handle_request(_action(title_only), doc, settings))
    _emit(result, deliver, skip_empty)


@app.command()
def clean(text: Optional[str] = typer.Argument(None, help="Text to clean (default: stdin)")) -> None:
    """
    Normalize a description and print it.
    """
    raw = text if text is not None else sys.stdin.read()
    cleaned = normalize(raw)
    typer.echo(cleaned if cleaned is not None else "(no content)")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
) -> None:
    """
    Run the receiver (POST /data).
    """
    import uvicorn

    uvicorn.run("descrelay.server:app", host=host, port=port)


# -----------------------
# Entrypoint
# -----------------------
if __name__ == "__main__":
    app()
