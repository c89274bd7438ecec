"""
OptaChat command-line interface.

Usage:
    optachat chat
    optachat send "Explain list comprehensions"
    optachat history --tail 5
    optachat render reply.md --html
    optachat config set-server http://localhost:5000
    optachat config set-timeout 30
"""

import logging
import sys
from typing import Dict, Optional

import click
from rich.console import Console
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from optachat_client.client import OptaChatClient
from optachat_client.config import get_config_manager
from optachat_client.conversation import Conversation, is_image_request
from optachat_client.exceptions import OptaChatError
from optachat_client.formatter import format_message, format_text
from optachat_client.models import ConversationMessage
from optachat_client.reactions import DEFAULT_REACTIONS
from optachat_client.render import to_html, to_rich

console = Console()

CHAT_HELP = (
    "Commands: /history, /clear, /clear-history, "
    "/react N EMOJI, /reactions, /quit"
)


def get_client(server_url: Optional[str] = None) -> OptaChatClient:
    """Client with the current configuration."""
    return OptaChatClient(server_url=server_url)


def error(message: str) -> None:
    console.print(Text.assemble(("✗ ", "red"), message))


def success(message: str) -> None:
    console.print(Text.assemble(("✓ ", "green"), message))


def info(message: str) -> None:
    console.print(Text.assemble(("ℹ ", "blue"), message))


def print_message(index: int, message: ConversationMessage, reactions: Optional[Dict[str, int]] = None) -> None:
    """Print one conversation message with its reactions."""
    label = "You" if message.role == "user" else "Assistant"
    style = "cyan" if message.role == "user" else "green"
    console.print(Rule(Text(f"#{index} {label}", style=style), align="left", style="dim"))
    console.print(to_rich(format_message(message)))
    if reactions:
        console.print(Text("  ".join(f"{emoji} {count}" for emoji, count in reactions.items()), style="dim"))


def print_conversation(conversation: Conversation, tail: Optional[int] = None) -> None:
    messages = conversation.messages
    start = max(len(messages) - tail, 0) if tail else 0
    for index in range(start, len(messages)):
        print_message(index, messages[index], conversation.reactions.snapshot(index))


@click.group()
@click.option(
    "--server", "-s",
    envvar="OPTACHAT_SERVER",
    help="Server URL (default: from config, http://localhost:5000)"
)
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
@click.pass_context
def main(ctx, server: Optional[str], verbose: bool):
    """OptaChat CLI - chat with the assistant backend from the terminal."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    ctx.ensure_object(dict)
    ctx.obj["server"] = server


# ===== CHAT COMMANDS =====

def _handle_command(conversation: Conversation, line: str) -> bool:
    """Run a /command. Returns False when the session should end."""
    command, _, argument = line.partition(" ")

    if command in ("/quit", "/exit"):
        return False
    elif command == "/history":
        if conversation.load_history():
            print_conversation(conversation)
        else:
            error("Could not load history")
    elif command == "/clear":
        conversation.clear()
        success("Session cleared")
    elif command == "/clear-history":
        if conversation.clear_history():
            success("History deleted")
        else:
            error("Could not delete history")
    elif command == "/react":
        index_text, _, emoji = argument.strip().partition(" ")
        emoji = emoji.strip() or DEFAULT_REACTIONS[0]
        try:
            index = int(index_text)
            conversation.react(index, emoji)
        except (ValueError, IndexError):
            error(f"Usage: /react N EMOJI (N between 0 and {len(conversation) - 1})")
        else:
            reactions = conversation.reactions.snapshot(index)
            info("  ".join(f"{e} {c}" for e, c in reactions.items()))
    elif command == "/reactions":
        info("Available: " + " ".join(DEFAULT_REACTIONS))
    else:
        info(CHAT_HELP)

    return True


@main.command()
@click.pass_context
def chat(ctx):
    """Interactive chat session."""
    with get_client(ctx.obj.get("server")) as client:
        conversation = Conversation(client)
        info(f"Connected to {client.server_url}. {CHAT_HELP}")

        while True:
            try:
                line = console.input("[bold cyan]You:[/bold cyan] ")
            except (EOFError, KeyboardInterrupt):
                break

            line = line.strip()
            if not line:
                continue
            if line.startswith("/"):
                if not _handle_command(conversation, line):
                    break
                continue

            status = "Generating image..." if is_image_request(line) else "Thinking..."
            with console.status(status):
                conversation.send(line)

            index = len(conversation) - 1
            print_message(index, conversation.messages[index])


@main.command()
@click.argument("message")
@click.option("--raw", is_flag=True, help="Print the reply text unformatted")
@click.pass_context
def send(ctx, message: str, raw: bool):
    """Send one message and print the reply."""
    try:
        with get_client(ctx.obj.get("server")) as client:
            reply = client.send_message(message)
    except OptaChatError as e:
        error(f"Error: {e.message}")
        sys.exit(1)

    if raw:
        click.echo(reply.image_ref if reply.kind == "image" else reply.text)
        return
    console.print(to_rich(format_message(reply)))


@main.command()
@click.option("--tail", "-n", default=0, help="Show only the last N messages")
@click.pass_context
def history(ctx, tail: int):
    """Show the stored conversation."""
    try:
        with get_client(ctx.obj.get("server")) as client:
            messages = client.fetch_history()
    except OptaChatError as e:
        error(f"Error: {e.message}")
        sys.exit(1)

    if not messages:
        info("History is empty")
        return

    start = max(len(messages) - tail, 0) if tail else 0
    for index in range(start, len(messages)):
        print_message(index, messages[index])


@main.command("clear-history")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def clear_history(ctx, yes: bool):
    """Delete the stored conversation on the server."""
    if not yes:
        click.confirm("Delete the whole chat history?", abort=True)

    try:
        with get_client(ctx.obj.get("server")) as client:
            client.clear_history()
    except OptaChatError as e:
        error(f"Error: {e.message}")
        sys.exit(1)

    success("History deleted")


@main.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--html", "as_html", is_flag=True, help="Print HTML instead of terminal output")
def render(source, as_html: bool):
    """Format a reply from FILE (or stdin) without contacting the server."""
    segments = format_text(source.read())

    if as_html:
        click.echo(to_html(segments))
    else:
        console.print(to_rich(segments))


# ===== CONFIG COMMANDS =====

@main.group()
def config():
    """Client configuration."""
    pass


@config.command("show")
def config_show():
    """Show the current configuration."""
    manager = get_config_manager()
    current = manager.get_config()

    table = Table(title="Configuration", show_header=False)
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    table.add_row("File", str(manager.config_file))
    table.add_row("Server", current.server_url)
    table.add_row("Timeout", f"{current.timeout:g}s")

    console.print(table)


@config.command("set-server")
@click.argument("url")
def config_set_server(url: str):
    """Store the server URL."""
    get_config_manager().set_server_url(url)
    success(f"Server set to {url.rstrip('/')}")


@config.command("set-timeout")
@click.argument("seconds", type=click.FloatRange(min=0, min_open=True))
def config_set_timeout(seconds: float):
    """Store the HTTP timeout in seconds."""
    get_config_manager().set_timeout(seconds)
    success(f"Timeout set to {seconds:g}s")


if __name__ == "__main__":
    main()
