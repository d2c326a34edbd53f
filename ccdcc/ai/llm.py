from dataclasses import dataclass
import aisuite

from typing import Dict, List, Optional


@dataclass
class LLMCompletionResponse:
    """One assistant turn as returned by the provider, before `Agent.stream` tags it."""

    assistant_message: Dict

    @property
    def content(self) -> Optional[str]:
        """The answer text; `None` on turns that only request tools."""
        return self.assistant_message.get("content")

    @property
    def tool_calls(self) -> List[Dict]:
        """Document tools the model wants run before it answers."""
        return self.assistant_message.get("tool_calls") or []


class LLMClient:
    """
    Sends each turn of an ask, lint, interactive or gen exchange to the
    provider named in the ccdcc config (`provider:model`) through aisuite.
    """

    def __init__(self, provider_configs: Dict):
        """
        Args:
            provider_configs: The `provider_configs` section of
                `~/.ccdcc/config.json` (API keys, base URLs).
        """
        self.client = aisuite.Client(provider_configs)

    @staticmethod
    def format_system_message(content: str) -> Dict:
        return {"role": "system", "content": content}

    @staticmethod
    def format_user_message(content: str) -> Dict:
        return {"role": "user", "content": content}

    @staticmethod
    def format_tool_message(content: str, tool_call_id: str) -> Dict:
        return {"role": "tool", "content": content, "tool_call_id": tool_call_id}

    def completion(
        self,
        model: str,
        messages: List[Dict],
        tools: Optional[List[Dict]] = None,
        **kwargs
    ) -> LLMCompletionResponse:
        """
        Runs one turn. `lint` and `gen` exchanges carry no tools, and some
        providers reject an empty tool list, so `tools` is only sent when set.
        """
        if tools:
            kwargs["tools"] = tools

        response = self.client.chat.completions.create(
            model=model, messages=messages, **kwargs
        )

        # Only the fields the provider set, so the message can be appended to the history as is.
        message_dict = response.choices[0].message.model_dump(exclude_unset=True)
        return LLMCompletionResponse(assistant_message=message_dict)
