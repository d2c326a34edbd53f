import asyncio

from dataclasses import dataclass
from typing import AsyncIterator, Dict, Optional

from .agent import Agent, Environment
from .messages import Message


@dataclass
class QueryOptions:
    max_turns: int = 5
    system_prompt: str = ""
    # Tools the model may use. None means a plain, tool-less exchange.
    environment: Optional[Environment] = None


async def query(
    config: Dict,
    prompt: str,
    abort_event: Optional[asyncio.Event] = None,
    options: Optional[QueryOptions] = None,
) -> AsyncIterator[Message]:
    """
    Sends `prompt` to the configured model and yields the exchange as it
    happens. The stream always terminates with one `ResultMessage`; setting
    `abort_event` ends it early at the next turn boundary.
    """
    options = options or QueryOptions()
    environment = options.environment or Environment()
    agent = Agent(config, environment, options.system_prompt)

    async for message in agent.stream(prompt, options.max_turns, abort_event):
        yield message
