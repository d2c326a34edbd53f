from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional


@dataclass
class SystemMessage:
    """Opens an exchange: which model answers and which tools it may call."""

    model: str
    tools: List[str] = field(default_factory=list)
    subtype: str = "init"
    type: str = "system"

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class AssistantMessage:
    """One model turn: its text (if any) and the tool calls it requested."""

    content: Optional[str]
    tool_calls: List[Dict] = field(default_factory=list)
    type: str = "assistant"

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class ToolResultMessage:
    tool_call_id: str
    tool_name: str
    content: str
    type: str = "tool"

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class ResultMessage:
    """
    The terminal message of an exchange.

    `result` carries the final assistant text and is only meaningful when
    `is_error` is False (subtype "success").
    """

    subtype: str
    is_error: bool
    num_turns: int
    duration_ms: int
    result: Optional[str] = None
    type: str = "result"

    def to_dict(self) -> Dict:
        return asdict(self)


Message = SystemMessage | AssistantMessage | ToolResultMessage | ResultMessage


def is_successful_result(message: Message) -> bool:
    return isinstance(message, ResultMessage) and not message.is_error
