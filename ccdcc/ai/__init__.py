"""
The `ai` package holds everything that talks to the model: the query loop
and its tools, the prompt templates, the response collector and one
assistant per ccdcc command.
"""

from .agent import Agent, Environment
from .collector import Exchange, collect
from .prompts import PromptRequest, build
from .query import QueryOptions, query
from .assistants.ask import ask
from .assistants.lint import lint
from .assistants.interactive import interactive
from .assistants.gen import gen


__all__ = [
    "Agent",
    "Environment",
    "Exchange",
    "collect",
    "PromptRequest",
    "build",
    "QueryOptions",
    "query",
    "ask",
    "lint",
    "interactive",
    "gen",
]
