import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from rich import print
from dotenv import load_dotenv

from .changes.compose import ACTION_LABELS, icon_for
from .changes.pipeline import collect
from .dispatcher import Dispatcher, NotificationRequest
from .log import configure_logging
from .settings import Settings
from .slack import SlackClient

app = typer.Typer(add_completion=False)


def _read_entries(path: Path) -> list[str]:
    text = path.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        # plain file: one change entry per line
        return [line for line in text.splitlines() if line.strip()]
    if not isinstance(data, list):
        raise typer.BadParameter("expected a JSON array of change entries")
    return [str(x) for x in data]


@app.command()
def parse(file: Path):
    """Parse change entries (JSON array or one per line) and show how they group."""
    groups, failures = collect(_read_entries(file))

    for action, entries in groups.items():
        label = ACTION_LABELS.get(action)
        title = f"{action} ({label})" if label else f"{action} [dim](not sent)[/dim]"
        print(f"\n[bold]{title}[/bold]")
        for e in entries:
            print(f"  {icon_for(e.object_type)} {e.path}")

    if failures:
        print("\n[bold red]Unparseable:[/bold red]")
        for f in failures:
            print(f"  - {f.raw}")


@app.command()
def notify(
    entries: list[str] = typer.Argument(None, help='Change entries, e.g. \'AD "/a.txt" FILE#br:/main\''),
    channel: Optional[str] = typer.Option(None, help="Slack channel (default: SLACK_CHANNEL)"),
    user: Optional[str] = None,
    machine: Optional[str] = None,
    content: Optional[str] = None,
):
    """Send one notification to Slack, the same way POST /notify does."""
    load_dotenv()
    st = Settings()
    configure_logging(st.log_level)

    channel = channel or st.slack_channel
    if not channel:
        print("[red]No channel[/red]: pass --channel or set SLACK_CHANNEL")
        raise typer.Exit(code=2)

    req = NotificationRequest(author=user, machine=machine, content=content, raw_change_entries=tuple(entries or ()))

    try:
        client = SlackClient(st)
    except RuntimeError as exc:
        print(f"[red]Cannot send[/red]: {exc}")
        raise typer.Exit(code=2)

    async def run():
        async with client:
            return await Dispatcher(client=client, settings=st).dispatch(req, channel)

    out = asyncio.run(run())
    if not out.ok:
        print(f"[red]FAILED[/red] {out.reason}")
        raise typer.Exit(code=1)

    print(f"[green]OK[/green] thread_ts={out.thread_ts} groups={','.join(out.sent) or '-'}")
    for w in out.warnings:
        print(f"[yellow]warning[/yellow] {w}")


@app.command()
def serve(host: Optional[str] = None, port: Optional[int] = None):
    """Run the webhook server (POST /notify/{channel}, POST /notify, GET /health)."""
    load_dotenv()
    import uvicorn

    st = Settings()
    uvicorn.run("psn.server:create_app", factory=True, host=host or st.host, port=port or st.port, reload=False)


if __name__ == "__main__":
    app()
