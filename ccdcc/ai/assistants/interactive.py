from typing import Dict

from rich.console import Console
from rich.markup import escape

from ...user_input import read_user_prompt
from ..collector import collect
from ..environments import DocumentEnvironment
from ..prompts import build

EXIT_COMMANDS = ("exit", "quit", "q")


async def interactive(config: Dict) -> int:
    """
    Reads prompts until the user types exit/quit/q (or closes the input)
    and runs one exchange per prompt. A failing exchange is reported and the
    loop carries on. Returns the number of prompts sent.
    """
    console = Console()
    error_console = Console(stderr=True)
    environment = DocumentEnvironment()

    console.print("[bold blue]Welcome to CCDCC Interactive Mode[/]")
    console.print("[dim]Type 'exit' or 'quit' to end the session[/]")
    console.print()

    sent = 0
    while True:
        try:
            prompt = await read_user_prompt("Ask:")
        except EOFError:
            prompt = "exit"

        if prompt.lower() in EXIT_COMMANDS:
            console.print("[blue]Goodbye![/]")
            return sent

        if not prompt:
            continue

        try:
            request = build("interactive", prompt)
            console.print("[blue]Thinking...[/]")
            console.print()
            sent += 1
            await collect(config, request, console=console, environment=environment)
            console.print()
        except Exception as e:
            error_console.print(f"[red]Error:[/] {escape(str(e))}")
