import asyncio
import os

from dataclasses import dataclass
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from .errors import AccessError, WriteError

SUPPORTED_EXTENSIONS = (".md", ".txt", ".rst")
REVIEW_SUFFIX = "-tw-reviewed"


def is_document(path: str) -> bool:
    return os.path.splitext(path)[1].lower() in SUPPORTED_EXTENSIONS


def _report(error: AccessError, console: Optional[Console]):
    console = console or Console(stderr=True)
    console.print(f"[red]{escape(str(error))}[/]")


def find_document_files(target: str, console: Optional[Console] = None) -> List[str]:
    """
    Returns the documents (.md, .txt, .rst) found at `target`.

    A file target yields itself if it is a document. A directory target
    yields its direct document entries in the order the file system lists
    them; subdirectories are not visited. Paths that cannot be read are
    reported on `console` (stderr by default) and left out.
    """
    try:
        if os.path.isfile(target):
            return [target] if is_document(target) else []
        entries = os.listdir(target)
    except OSError as e:
        _report(AccessError(target, e), console)
        return []

    files = []
    for entry in entries:
        full_path = os.path.join(target, entry)
        try:
            os.stat(full_path)
        except OSError as e:
            _report(AccessError(full_path, e), console)
            continue

        if os.path.isfile(full_path) and is_document(entry):
            files.append(full_path)

    return files


def read_document(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


@dataclass
class GeneratedArtifact:
    content: str
    path: str
    format: str


def resolve_output_path(
    format: str, output_dir: Optional[str] = None, extension: str = ".md"
) -> str:
    """`<output_dir>/<format><ext>`, or `<FORMAT><ext>` in the cwd when no directory is given."""
    if output_dir:
        return os.path.join(output_dir, f"{format}{extension}")
    return f"{format.upper()}{extension}"


def resolve_review_path(source: str, output_dir: str) -> str:
    """Where lint --fix stores the review of `source`, e.g. out/notes-tw-reviewed.md."""
    stem, extension = os.path.splitext(os.path.basename(source))
    return os.path.join(output_dir, f"{stem}{REVIEW_SUFFIX}{extension}")


def _write(path: str, content: str):
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)


async def write_artifact(artifact: GeneratedArtifact) -> str:
    """Writes the artifact, creating its directory if needed, and returns its path."""
    try:
        await asyncio.to_thread(_write, artifact.path, artifact.content)
    except OSError as e:
        raise WriteError(f"Could not write {artifact.path}: {e}") from e
    return artifact.path
