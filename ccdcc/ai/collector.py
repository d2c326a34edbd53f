import asyncio

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape

from .agent import Environment
from .messages import (
    AssistantMessage,
    Message,
    ResultMessage,
    SystemMessage,
    ToolResultMessage,
    is_successful_result,
)
from .prompts import PromptRequest
from .query import QueryOptions, query

ECHO_MODES = ("summary", "detailed", "json")


@dataclass
class Exchange:
    """Everything received during one exchange and the text extracted from it."""

    messages: List[Message] = field(default_factory=list)
    text: Optional[str] = None

    @property
    def result(self) -> Optional[ResultMessage]:
        for message in reversed(self.messages):
            if isinstance(message, ResultMessage):
                return message
        return None


class MessagePrinter:
    """
    Echoes exchange messages to the console.

    - json: every message, as pretty-printed JSON.
    - detailed: every message, rendered for humans.
    - summary: only the final answer (or why there is none).
    """

    def __init__(self, console: Console, mode: str = "detailed"):
        if mode not in ECHO_MODES:
            raise ValueError(f"Unknown echo mode '{mode}'. Use one of: {', '.join(ECHO_MODES)}")
        self.console = console
        self.mode = mode

    def print(self, message: Message):
        if self.mode == "json":
            self.console.print("[green]Assistant:[/]")
            self.console.print_json(data=message.to_dict())
        elif self.mode == "detailed":
            self._print_detailed(message)
        elif isinstance(message, ResultMessage):
            self._print_result(message)

    def _print_detailed(self, message: Message):
        if isinstance(message, SystemMessage):
            self.console.print(f"[dim]Session started with {message.model}[/]")
        elif isinstance(message, AssistantMessage):
            if message.content:
                self.console.print(Markdown(message.content))
            for tool_call in message.tool_calls:
                function = tool_call["function"]
                self.console.print(f"[dim]→ {function['name']}({escape(function['arguments'] or '')})[/]")
        elif isinstance(message, ToolResultMessage):
            self.console.print(
                f"[dim]← {message.tool_name} returned {len(message.content)} characters[/]"
            )
        elif isinstance(message, ResultMessage):
            if message.is_error:
                self._print_result(message)
            else:
                self.console.print(
                    f"[dim]Finished in {message.num_turns} turn(s), {message.duration_ms} ms[/]"
                )

    def _print_result(self, message: ResultMessage):
        if message.is_error:
            self.console.print(
                f"[yellow]No answer: the exchange ended with '{message.subtype}' "
                f"after {message.num_turns} turn(s).[/]"
            )
        elif message.result:
            self.console.print(Markdown(message.result))


async def collect(
    config: Dict,
    request: PromptRequest,
    echo: Optional[str] = "detailed",
    console: Optional[Console] = None,
    environment: Optional[Environment] = None,
    abort_event: Optional[asyncio.Event] = None,
) -> Exchange:
    """
    Runs one exchange for `request` to completion.

    Every message is kept (and echoed unless `echo` is None). The payload of
    the last successful result becomes `Exchange.text`; it stays None when
    the exchange produced no successful result.
    """
    printer = MessagePrinter(console or Console(), echo) if echo else None

    # One abort signal per exchange. Nothing in ccdcc sets it.
    abort_event = abort_event or asyncio.Event()
    options = QueryOptions(max_turns=request.max_turns, environment=environment)

    exchange = Exchange()
    async for message in query(config, request.body, abort_event, options):
        exchange.messages.append(message)
        if printer:
            printer.print(message)
        if is_successful_result(message):
            exchange.text = message.result

    return exchange
