import os

from rich.console import Console
from rich.markup import escape

from .. import documents
from ..errors import AccessError
from .agent import Environment

# Characters of a document handed back to the model in one tool call.
DOCUMENT_CHAR_LIMIT = 40000


class DocumentEnvironment(Environment):
    """
    Lets the model look around the user's documents during `ask` and
    `interactive`. Only the document types `lint` understands can be read.
    """

    def __init__(self):
        super().__init__()
        self.console = Console()

    @Environment.tool()
    def get_working_directory(self) -> str:
        """Returns the directory ccdcc was started from."""
        return os.getcwd()

    @Environment.tool()
    def list_documents(self, path: str = ".") -> str:
        """Lists the documents (.md, .txt, .rst) directly inside a directory and the
        sub-directories that can be listed next. Defaults to the current directory."""
        if not os.path.isdir(path):
            return f"Error: '{path}' is not a directory."

        # Access problems are reported by discovery, the model just sees fewer entries.
        names = [os.path.basename(p) for p in documents.find_document_files(path, self.console)]
        try:
            folders = sorted(e for e in os.listdir(path) if os.path.isdir(os.path.join(path, e)))
        except OSError as e:
            return str(AccessError(path, e))

        self.console.print(f"[green]✓ Listing documents in:[/] {escape(path)}")
        return f"Documents: {', '.join(names) or '(none)'}\nFolders: {', '.join(folders)}"

    @Environment.tool()
    def read_document(self, path: str) -> str:
        """Reads a .md, .txt or .rst document as UTF-8 text. Long documents are cut
        after 40000 characters."""
        if not documents.is_document(path):
            return f"Error: '{path}' is not a document ({', '.join(documents.SUPPORTED_EXTENSIONS)})."

        try:
            content = documents.read_document(path)
        except (OSError, UnicodeDecodeError) as e:
            return str(AccessError(path, e))

        self.console.print(f"[green]✓ Reading document:[/] {escape(path)}")
        if len(content) > DOCUMENT_CHAR_LIMIT:
            return content[:DOCUMENT_CHAR_LIMIT] + "\n... (document truncated)"
        return content
