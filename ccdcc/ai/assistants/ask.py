from typing import Dict, Optional

from rich.console import Console
from rich.markup import escape

from ...user_input import read_user_prompt
from ..collector import Exchange, collect
from ..environments import DocumentEnvironment
from ..prompts import ASK_MAX_TURNS, build


async def ask(
    config: Dict,
    prompt: Optional[str] = None,
    max_turns: int = ASK_MAX_TURNS,
    interactive: bool = False,
) -> Exchange:
    """Sends a single freeform prompt and echoes the whole exchange."""
    if interactive or not prompt:
        prompt = await read_user_prompt(
            "What would you like to ask?", default=prompt or ""
        )

    # Fails with "No prompt provided" before anything is sent.
    request = build("ask", prompt, {"max_turns": max_turns})

    console = Console()
    console.print("[blue]Asking the AI assistant...[/]")
    console.print(f"[dim]Prompt: {escape(request.body)}[/]")
    console.print()

    return await collect(config, request, console=console, environment=DocumentEnvironment())
