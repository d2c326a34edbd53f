import os
from typing import Dict, Optional

from rich.console import Console
from rich.markup import escape

from ...documents import (
    GeneratedArtifact,
    read_document,
    resolve_output_path,
    write_artifact,
)
from ...errors import GenerationFailure
from ..collector import collect
from ..prompts import build, get_generate_format

DEFAULT_SOURCE = "content/raw/project-overview.md"
SCOPES = ("overview", "detailed", "reference")
CONTEXTS = ("user", "developer", "manager")


async def generate_document(
    config: Dict,
    source: str,
    format: str,
    console: Console,
    scope: Optional[str] = None,
    context: Optional[str] = None,
    output: Optional[str] = None,
) -> str:
    """Generates one document from `source` and returns the path it was written to."""
    # Unknown formats fail here, before the source is read or anything is sent.
    generate_format = get_generate_format(format)

    content = read_document(source)
    console.print(f"\n[blue]📝 Generating {escape(format)} from: {escape(os.path.basename(source))}[/]")
    console.print(f"[dim]Source: {escape(source)}[/]")
    console.print(f"[dim]Scope: {escape(scope or generate_format.default_scope)}[/]")
    console.print(f"[dim]Context: {escape(context or generate_format.default_context)}[/]")

    request = build(generate_format.name, content, {"scope": scope, "context": context})
    exchange = await collect(config, request, echo=None, console=console)
    if not exchange.text:
        raise GenerationFailure("Failed to generate content")

    output_path = resolve_output_path(generate_format.name, output, generate_format.extension)
    await write_artifact(GeneratedArtifact(exchange.text, output_path, generate_format.name))

    console.print(f"\n[green]✅ Generated {escape(format)} successfully[/]")
    console.print(f"[dim]Output: {escape(output_path)}[/]")
    return output_path


async def gen(
    config: Dict,
    format: str,
    source: str = DEFAULT_SOURCE,
    scope: Optional[str] = "overview",
    context: Optional[str] = "user",
    output: Optional[str] = None,
) -> str:
    console = Console()
    console.print("[bold blue]🚀 CCDCC Document Generator[/]")
    console.print(f"[dim]Format: {escape(format)}[/]")
    console.print(f"[dim]Source: {escape(source)}[/]")
    console.print()

    return await generate_document(
        config, source, format, console, scope=scope, context=context, output=output
    )
