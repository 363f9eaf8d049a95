"""CLI interface for the Gemini panel using Rich."""

import argparse
import asyncio
import logging
import os

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, Prompt

from src.interface.panel import KeyStatus, PanelSession
from src.memory.response_log import ResponseRecord

console = Console()

STATUS_STYLES = {
    KeyStatus.UNKNOWN: ("?", "dim", "API Key status is Unknown"),
    KeyStatus.VALIDATING: ("…", "yellow", "Validating..."),
    KeyStatus.VALID: ("✓", "green", "API Key is Valid"),
    KeyStatus.INVALID: ("✗", "red", "API Key is Invalid"),
}

HELP_TEXT = (
    "Type a message to send it to Gemini.\n"
    "/key      validate and save a new API key\n"
    "/history  show all responses, newest first\n"
    "/clear    clear responses\n"
    "/quit     exit"
)


def _configure_logging() -> None:
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "WARNING").upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def display_status(session: PanelSession) -> None:
    """Print the key status line and the last validation message."""
    icon, style, tooltip = STATUS_STYLES[session.key_status]
    console.print(f"[{style}]{icon} {tooltip}[/{style}]")
    if session.validation_message:
        style = "red" if session.message_level == "error" else "cyan"
        console.print(f"[{style}]{escape(session.validation_message)}[/{style}]")


def display_record(record: ResponseRecord) -> None:
    style = "red" if record.is_error else "blue"
    console.print(Panel(
        escape(record.text_content),
        title=f"Query: {escape(record.original_query)}",
        title_align="left",
        style=style,
    ))


def display_history(session: PanelSession) -> None:
    """Render responses newest first."""
    records = session.log.newest_first()
    if not records:
        console.print("[dim]No responses yet. Send a message to see results here.[/dim]")
        return
    for record in records:
        display_record(record)


def ask_key() -> str | None:
    """Prompt for an API key; None when the user aborts the prompt."""
    try:
        return Prompt.ask("API Key", password=True, default="", show_default=False)
    except (KeyboardInterrupt, EOFError):
        return None


async def validate_key(session: PanelSession, key: str) -> None:
    with console.status("Validating API Key..."):
        await session.validate_and_save(key)
    display_status(session)


async def send_message(session: PanelSession, prompt: str) -> None:
    if not session.can_send:
        console.print("[red]A valid API key is required before sending messages.[/red]")
        return
    with console.status("Waiting for response..."):
        record = await session.submit(prompt)
    if record is not None:
        display_record(record)


async def run_panel(session: PanelSession) -> None:
    """Interactive loop: key configuration, then message sending."""
    console.print(Panel("Gemini Integration", style="bold blue"))

    if session.stored_key:
        with console.status("Validating stored API Key..."):
            await session.restore()
    display_status(session)

    if session.key_status is not KeyStatus.VALID:
        console.print("[dim]You can generate an API key from Google AI Studio.[/dim]")
        key = ask_key()
        if key is None:
            console.print("[dim]Bye![/dim]")
            return
        await validate_key(session, key)

    console.print(f"[dim]{HELP_TEXT}[/dim]")

    while True:
        try:
            user_input = Prompt.ask("\n[bold]You[/bold]")
        except (KeyboardInterrupt, EOFError):
            user_input = "/quit"

        command = user_input.strip().lower()
        if command in ("/quit", "exit", "quit", "q"):
            console.print("[dim]Bye![/dim]")
            break
        if command == "/key":
            key = ask_key()
            if key is not None:
                await validate_key(session, key)
        elif command == "/history":
            display_history(session)
        elif command == "/clear":
            if len(session.log) == 0:
                console.print("[dim]Nothing to clear.[/dim]")
            elif Confirm.ask("Are you sure you want to clear all responses?"):
                session.clear_responses()
                console.print("[dim]Responses cleared.[/dim]")
        elif command:
            await send_message(session, user_input)


async def run_once(session: PanelSession, key: str | None, prompt: str | None) -> int:
    """Non-interactive mode for --key / --ask."""
    if key is not None:
        await validate_key(session, key)
        if session.key_status is not KeyStatus.VALID:
            return 1
    if prompt is not None:
        if session.key_status is not KeyStatus.VALID:
            await session.restore()
        if session.key_status is not KeyStatus.VALID:
            display_status(session)
            return 1
        await send_message(session, prompt)
        records = session.log.snapshot()
        if not records or records[-1].is_error:
            return 1
    return 0


def main(args: list[str] | None = None):
    """Main CLI entry point with argument parsing."""
    parser = argparse.ArgumentParser(
        prog="gemini-panel",
        description="Gemini panel - validate an API key, send prompts, review responses",
    )
    parser.add_argument(
        "--key", metavar="KEY",
        help="Validate an API key and save it if valid",
    )
    parser.add_argument(
        "--ask", metavar="PROMPT",
        help="Send a single prompt with the saved key and print the response",
    )
    parser.add_argument(
        "--forget-key", action="store_true",
        help="Remove the saved API key",
    )

    parsed = parser.parse_args(args)
    _configure_logging()
    session = PanelSession()

    if parsed.forget_key:
        session.forget_key()
        console.print("[dim]Saved API key removed.[/dim]")
        return 0

    if parsed.key is not None or parsed.ask is not None:
        return asyncio.run(run_once(session, parsed.key, parsed.ask))

    asyncio.run(run_panel(session))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
