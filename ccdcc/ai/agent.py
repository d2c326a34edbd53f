import asyncio
import inspect
import json
import time

from .llm import LLMClient
from .messages import (
    AssistantMessage,
    Message,
    ResultMessage,
    SystemMessage,
    ToolResultMessage,
)
from typing import AsyncIterator, Dict, List, Optional, get_type_hints


class Environment:
    """The set of tools the model may call during an exchange. Empty by default."""

    def __init__(self):
        self.tools = {}
        self._collect_tools()

    def _collect_tools(self):
        for attr_name in dir(self):
            if attr_name.startswith("_"):
                continue

            attr = getattr(self, attr_name)
            if hasattr(attr, "__tool_info__"):
                self.tools[attr_name] = getattr(attr, "__tool_info__")

    def get_tools(self) -> List[Dict]:
        # Format the function in the OpenAI format
        return [
            {
                "type": "function",
                "function": {
                    "name": t["tool_name"],
                    "description": t["description"],
                    "parameters": t["parameters"],
                },
            }
            for t in self.tools.values()
        ]

    def run_tool(self, tool_name: str, args: Dict) -> str:
        tool_info = self.tools.get(tool_name)
        if tool_info:
            func = tool_info["function"]
            return func(self, **args)
        else:
            raise ValueError(f"Tool '{tool_name}' not found.")

    @staticmethod
    def tool():
        def decorator(func):
            signature = inspect.signature(func)
            type_hints = get_type_hints(func)

            args_schema = {"type": "object", "properties": {}, "required": []}

            param_types = {
                str: "string",
                int: "integer",
                float: "number",
                bool: "boolean",
                list: "array",
                dict: "object",
            }

            for param_name, param in signature.parameters.items():
                if param_name == "self":
                    continue

                param_type = type_hints.get(param_name, str)
                args_schema["properties"][param_name] = {
                    "type": param_types.get(param_type, "string")
                }

                # If parameter has no default, it's required
                if param.default == inspect.Parameter.empty:
                    args_schema["required"].append(param_name)

            func.__tool_info__ = {
                "function": func,
                "tool_name": func.__name__,
                "description": func.__doc__.strip() if func.__doc__ else "",
                "parameters": args_schema,
            }
            return func

        return decorator


class Agent:
    """
    Runs one exchange with the model: sends the task, executes any tool calls
    the model requests and streams every step back as a message.
    """

    def __init__(self, config: Dict, env: Environment, system_prompt: str = ""):
        self.config = config
        self.env = env
        self.llm = LLMClient(self.config["provider_configs"])
        self._messages = []
        if system_prompt:
            self._messages.append(LLMClient.format_system_message(system_prompt))

    @property
    def model(self) -> str:
        return f"{self.config['provider']}:{self.config['model']}"

    async def stream(
        self,
        user_task: str,
        max_turns: int = 5,
        abort_event: Optional[asyncio.Event] = None,
        **kwargs
    ) -> AsyncIterator[Message]:
        """
        Yields a `SystemMessage`, then the assistant and tool messages of each
        turn, and always ends with exactly one `ResultMessage`.
        """
        if max_turns <= 0:
            raise ValueError("max_turns must be a positive integer.")

        started = time.monotonic()
        self._messages.append(LLMClient.format_user_message(user_task))
        yield SystemMessage(model=self.model, tools=list(self.env.tools))

        for turn in range(max_turns):
            if abort_event is not None and abort_event.is_set():
                yield self._result("error_aborted", turn, started)
                return

            # The provider SDK is blocking; keep the event loop free while it runs.
            response = await asyncio.to_thread(
                self.llm.completion,
                model=self.model,
                messages=self._messages[:],
                tools=self.env.get_tools(),
                **kwargs
            )
            self._messages.append(response.assistant_message)
            yield AssistantMessage(content=response.content, tool_calls=response.tool_calls)

            if not response.tool_calls:
                yield self._result(
                    "success", turn + 1, started, result=response.content or ""
                )
                return

            for tool_call in response.tool_calls:
                tool_name = tool_call["function"]["name"]
                try:
                    tool_args = json.loads(tool_call["function"]["arguments"] or "{}")
                    result = self.env.run_tool(tool_name, tool_args)
                except Exception as e:
                    result = f"Error: {str(e)}"

                self._messages.append(
                    LLMClient.format_tool_message(str(result), tool_call["id"])
                )
                yield ToolResultMessage(
                    tool_call_id=tool_call["id"], tool_name=tool_name, content=str(result)
                )

        yield self._result("error_max_turns", max_turns, started)

    @staticmethod
    def _result(
        subtype: str, num_turns: int, started: float, result: Optional[str] = None
    ) -> ResultMessage:
        return ResultMessage(
            subtype=subtype,
            is_error=subtype != "success",
            num_turns=num_turns,
            duration_ms=int((time.monotonic() - started) * 1000),
            result=result,
        )
