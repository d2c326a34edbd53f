import os
from typing import Dict, List, Optional

from rich.console import Console
from rich.markup import escape

from ...documents import (
    SUPPORTED_EXTENSIONS,
    GeneratedArtifact,
    find_document_files,
    read_document,
    resolve_review_path,
    write_artifact,
)
from ...errors import CcdccError
from ..collector import Exchange, collect
from ..prompts import build

DEFAULT_OUTPUT_DIR = "./linted"
OUTPUT_FORMATS = ("summary", "detailed", "json")


async def lint_document(
    config: Dict,
    path: str,
    console: Console,
    fix: bool = False,
    output: Optional[str] = None,
    format: str = "summary",
) -> Exchange:
    """
    Reviews one document. With `fix` and an `output` directory, the review
    (including the improved version) is saved as `<stem>-tw-reviewed<ext>`.
    """
    content = read_document(path)

    console.print(f"\n[blue]📄 Analyzing: {escape(os.path.basename(path))}[/]")
    console.print(f"[dim]Path: {escape(path)}[/]")
    console.print(f"[dim]Content length: {len(content)} characters[/]")

    request = build("lint", content, {"fix": fix})
    exchange = await collect(config, request, echo=format, console=console)

    if fix and output:
        if exchange.text:
            review_path = resolve_review_path(path, output)
            await write_artifact(GeneratedArtifact(exchange.text, review_path, "lint"))
            console.print(f"\n[green]✅ Analysis complete. Improved version saved to {escape(review_path)}[/]")
        else:
            console.print("\n[yellow]No review was produced, nothing was saved.[/]")

    return exchange


async def lint(
    config: Dict,
    target: Optional[str] = None,
    output: str = DEFAULT_OUTPUT_DIR,
    fix: bool = False,
    format: str = "summary",
) -> List[str]:
    """
    Reviews every document found at `target` (default: the current
    directory), one after the other, and returns the analyzed paths.
    """
    target = target or os.getcwd()
    console = Console()
    error_console = Console(stderr=True)

    console.print("[bold blue]🔍 CCDCC Technical Writing Linter[/]")
    console.print(f"[dim]Target: {escape(target)}[/]")
    console.print("[dim]Framework: Effectiveness × Efficiency × Satisfaction[/]")
    console.print()

    files = find_document_files(target, error_console)
    if not files:
        console.print("[yellow]No supported document files found.[/]")
        console.print(f"[dim]Supported extensions: {', '.join(SUPPORTED_EXTENSIONS)}[/]")
        return []

    console.print(f"[green]Found {len(files)} document(s) to analyze:[/]")
    for file in files:
        console.print(f"[dim]  • {escape(os.path.basename(file))}[/]")

    failed = []
    for file in files:
        try:
            await lint_document(config, file, console, fix=fix, output=output, format=format)
        except Exception as e:
            # Keep going with the other documents; the command fails at the end.
            error_console.print(f"[red]Error analyzing {escape(file)}:[/] {escape(str(e))}")
            failed.append(file)

    console.print("\n[bold blue]📊 Analysis Summary[/]")
    console.print(f"[green]✅ Analyzed {len(files)} document(s)[/]")
    if fix:
        console.print(f"[dim]Output directory: {escape(str(output))}[/]")
    if format == "json":
        console.print_json(
            data={"target": target, "analyzed": files, "failed": failed, "fix": fix}
        )

    if failed:
        raise CcdccError(f"{len(failed)} of {len(files)} document(s) could not be analyzed")

    return files
