"""
Prompt templates for every ccdcc operation and the `build` function that
turns an operation kind plus its options into a `PromptRequest`.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from ..errors import UnsupportedFormatError, ValidationError

ASK_MAX_TURNS = 5
LINT_MAX_TURNS = 2
INTERACTIVE_MAX_TURNS = 3
GENERATE_MAX_TURNS = 2

LINT_PROMPT = """
You are a technical writing expert analyzing documents using a quality framework with three criteria:

**EFFECTIVENESS** - Content accuracy and clarity:
- Clear, unambiguous expressions
- Concrete examples and specific details
- Prevention of misunderstandings
- Factual accuracy

**EFFICIENCY** - Information retrieval efficiency:
- Logical structure and hierarchy
- Clear navigation with headings
- Concise expression without redundancy
- Prioritized important information

**SATISFACTION** - Readability and user experience:
- Appropriate vocabulary for target audience
- Consistent, polite writing style
- Reader-friendly presentation
- Visual organization

Please analyze this document content and provide:

1. **SCORES** (1-5 for each criterion):
   - Effectiveness: [score]/5
   - Efficiency: [score]/5
   - Satisfaction: [score]/5

2. **SPECIFIC ISSUES** with examples from the text

3. **IMPROVEMENT SUGGESTIONS** for each criterion

{fix_section}

Document content:
---
{content}
---

Provide analysis in a structured, actionable format."""

LINT_FIX_SECTION = "4. **IMPROVED VERSION** with fixes applied"

README_PROMPT = """
Generate a comprehensive README.md file based on the following content.

Requirements:
- Start with a clear project title and description
- Include installation and usage instructions
- Add sections for features, requirements, and development setup
- Use proper markdown formatting with clear headings
- Include code examples where appropriate
- Add badges and visual elements if relevant
- Target audience: {context}
- Detail level: {scope}

Source content:
---
{content}
---

Generate only the README.md content without explanations."""

CLAUDE_PROMPT = """
Generate a CLAUDE.md file for Claude Code AI assistant based on the following content.

Requirements:
- Provide clear project overview and context for AI
- Include development environment details and dependencies
- List essential commands for development and usage
- Specify code style and architecture guidelines
- Add any special instructions for AI assistance
- Format as structured markdown with clear sections
- Target: AI assistant understanding of the project
- Detail level: {scope}

Source content:
---
{content}
---

Generate only the CLAUDE.md content without explanations."""

SLIDES_PROMPT = """
Generate markdown content for presentation slides based on the following content.

Requirements:
- Structure as slide-friendly sections with clear titles
- Use bullet points and concise statements
- Include speaker notes where helpful
- Focus on key points and visual elements
- Target audience: {context}
- Presentation style: {scope}

Source content:
---
{content}
---

Generate slide content in markdown format."""


@dataclass(frozen=True)
class GenerateFormat:
    name: str
    template: str
    default_scope: str
    default_context: str = ""
    extension: str = ".md"


GENERATE_FORMATS: Dict[str, GenerateFormat] = {
    "readme": GenerateFormat("readme", README_PROMPT, "overview", "developers and users"),
    "claude": GenerateFormat("claude", CLAUDE_PROMPT, "detailed"),
    "slides": GenerateFormat("slides", SLIDES_PROMPT, "overview", "general audience"),
}
GENERATE_FORMATS["claude.md"] = GENERATE_FORMATS["claude"]


@dataclass
class PromptRequest:
    """A fully rendered prompt, ready to be sent in one exchange."""

    kind: str
    body: str
    max_turns: int
    format: Optional[str] = None

    def __post_init__(self):
        if not self.body or not self.body.strip():
            raise ValidationError("No prompt provided")
        if isinstance(self.max_turns, bool) or not isinstance(self.max_turns, int) or self.max_turns <= 0:
            raise ValidationError(
                f"max turns must be a positive integer, got {self.max_turns!r}"
            )


def get_generate_format(format: str) -> GenerateFormat:
    """Looks up a generate format by name (case-insensitive)."""
    generate_format = GENERATE_FORMATS.get(format.lower())
    if generate_format is None:
        raise UnsupportedFormatError(format)
    return generate_format


def build_lint(content: str, fix: bool = False) -> PromptRequest:
    body = LINT_PROMPT.format(
        fix_section=LINT_FIX_SECTION if fix else "", content=content
    )
    return PromptRequest("lint", body, LINT_MAX_TURNS)


def build_generate(
    format: str,
    content: str,
    scope: Optional[str] = None,
    context: Optional[str] = None,
) -> PromptRequest:
    generate_format = get_generate_format(format)
    body = generate_format.template.format(
        content=content,
        scope=scope or generate_format.default_scope,
        context=context or generate_format.default_context,
    )
    return PromptRequest(
        generate_format.name, body, GENERATE_MAX_TURNS, format=generate_format.name
    )


def build(kind: str, content: str = "", options: Optional[Dict] = None) -> PromptRequest:
    """
    Renders the prompt for an operation.

    Args:
        kind: "ask", "interactive", "lint", "gen"/"generate" (with
            options["format"]) or the name of a generate format such as "readme".
        content: The user prompt for ask/interactive, otherwise the document
            or source content to embed.
        options: "max_turns" (ask only), "fix" (lint), "format", "scope" and
            "context" (generate).

    Raises:
        ValidationError: empty prompt or a non-positive turn limit.
        UnsupportedFormatError: unknown generate format. Raised before
            anything is sent.
    """
    options = options or {}

    if kind == "ask":
        max_turns = options.get("max_turns")
        return PromptRequest(
            "ask", content, ASK_MAX_TURNS if max_turns is None else max_turns
        )
    if kind == "interactive":
        return PromptRequest("interactive", content, INTERACTIVE_MAX_TURNS)
    if kind == "lint":
        return build_lint(content, fix=bool(options.get("fix")))

    format = (options.get("format") or "") if kind in ("gen", "generate") else kind
    return build_generate(
        format, content, scope=options.get("scope"), context=options.get("context")
    )
