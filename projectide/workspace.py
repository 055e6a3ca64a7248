"""
Virtual Workspace

In-memory project tree edited in the browser: files, open tabs and the
active file.
"""

import json
import logging
from typing import Dict, List, Optional

from .clock import Clock, now_millis
from .models import EditorFile

logger = logging.getLogger(__name__)

LANGUAGES = {
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "json": "json",
    "css": "css",
    "html": "html",
    "md": "markdown",
}

# Keywords that make sent text land in a .ts file instead of .md
CODE_HINTS = ("const", "function", "import", "class", "<div", "SELECT", "FROM")

WELCOME_JS = (
    "// Welcome to your project!\n"
    "// Use the panel on the left to create new files.\n"
    "// Right-click in the editor for more options."
)

README_MD = """# Project IDE v1.0.0

## Quickstart Workflow

1.  **Set API Key**: open the **Gemini API** page and enter your Google Gemini API key.
2.  **Go to Staging**: choose an AI Profile, write your request and click **Send to Gemini**.
3.  **Go to Downloads**: every file in the reply is listed there, grouped by project.
4.  **Import or Iterate**: **Import** copies a file into `downloads/`; **Stage** sends
    it back to the staging context so you can ask for changes.
5.  **Download Your Project**: the **Download Project** button on the Editor page
    saves a ZIP of all your files.
"""


def language_for_path(path: str) -> str:
    extension = path.rsplit(".", 1)[-1].lower() if "." in path else ""
    return LANGUAGES.get(extension, "plaintext")


def bejson_template(path: str) -> str:
    """Starter record document for new empty .json files."""
    hierarchy = f"/{path.rsplit('/', 1)[0]}" if "/" in path else "/"
    return json.dumps({
        "Format": "BEJson",
        "Format_Version": "1-0-4",
        "Format_Creator": "Elton Boehnen",
        "Parent_Hierarchy": hierarchy,
        "Records_Type": ["NewRecord"],
        "Fields": [
            {"name": "id", "type": "integer"},
            {"name": "name", "type": "string"},
        ],
        "Values": [
            [1, "Example Record"],
        ],
    }, indent=2)


class Workspace:
    """Project files plus editor tab state."""

    def __init__(self, clock: Clock = now_millis, seed: bool = True):
        self._clock = clock
        self._files: Dict[str, EditorFile] = {}
        self._open: List[str] = []
        self.active_file_id: Optional[str] = None

        if seed:
            self._seed()

    def _seed(self):
        package_json = json.dumps({
            "Format": "BEJson",
            "Format_Version": "1-0-4",
            "Format_Creator": "Elton Boehnen",
            "Parent_Hierarchy": "/",
            "Records_Type": ["PackageConfig"],
            "Fields": [
                {"name": "key", "type": "string"},
                {"name": "value", "type": "string"},
            ],
            "Values": [
                ["name", "my-project"],
                ["version", "1.0.0"],
            ],
        }, indent=2)

        for file_id, path, content in (
            ("1", "src/welcome.js", WELCOME_JS),
            ("2", "package.json", package_json),
            ("3", "documents/README.md", README_MD),
        ):
            self._files[file_id] = EditorFile(
                id=file_id, path=path, content=content, language=language_for_path(path)
            )
        self._open = ["1", "3"]
        self.active_file_id = "3"

    # Queries

    @property
    def files(self) -> List[EditorFile]:
        return list(self._files.values())

    @property
    def open_file_ids(self) -> List[str]:
        return list(self._open)

    @property
    def open_files(self) -> List[EditorFile]:
        return [self._files[file_id] for file_id in self._open if file_id in self._files]

    @property
    def active_file(self) -> Optional[EditorFile]:
        return self._files.get(self.active_file_id) if self.active_file_id else None

    def get(self, file_id: str) -> EditorFile:
        """
        Raises:
            KeyError: If no file has that id
        """
        try:
            return self._files[file_id]
        except KeyError:
            raise KeyError(f"File not found: {file_id}")

    def has_path(self, path: str) -> bool:
        return any(f.path == path for f in self._files.values())

    # Mutations

    def unique_path(self, path: str) -> str:
        """Append -1, -2, ... before the extension until the path is free."""
        folder, sep, name = path.rpartition("/")
        if "." in name:
            stem, extension = name.rsplit(".", 1)
            base, suffix = f"{folder}{sep}{stem}", f".{extension}"
        else:
            base, suffix = path, ""

        candidate = path
        counter = 1
        while self.has_path(candidate):
            candidate = f"{base}-{counter}{suffix}"
            counter += 1
        return candidate

    def create_file(self, path: str, content: str = "") -> EditorFile:
        """
        Create a file, open it and make it active.

        Args:
            path: Desired path; a numeric suffix is added if it is taken
            content: Initial contents; empty .json files get a template

        Raises:
            ValueError: If path is blank
        """
        path = path.strip()
        if not path:
            raise ValueError("File path must not be empty")

        new_path = self.unique_path(path)
        language = language_for_path(new_path)
        if not content and language == "json":
            content = bejson_template(new_path)

        new_file = EditorFile(
            id=str(self._clock()),
            path=new_path,
            content=content,
            language=language,
        )
        self._files[new_file.id] = new_file
        self.open_file(new_file.id)

        logger.info(f"Created file: {new_path}")
        return new_file

    def open_file(self, file_id: str) -> None:
        self.get(file_id)
        if file_id not in self._open:
            self._open.append(file_id)
        self.active_file_id = file_id

    def close_file(self, file_id: str) -> None:
        if file_id in self._open:
            self._open.remove(file_id)
        if self.active_file_id == file_id:
            self.active_file_id = self._open[0] if self._open else None

    def update_content(self, file_id: str, content: str) -> EditorFile:
        updated = self.get(file_id).model_copy(update={"content": content})
        self._files[file_id] = updated
        return updated

    def send_content_to_editor(self, content: str) -> EditorFile:
        """Place a block of text (usually an AI reply) in a new file."""
        looks_like_code = any(hint in content for hint in CODE_HINTS)
        extension = "ts" if looks_like_code else "md"
        return self.create_file(f"from-gemini/response-{self._clock()}.{extension}", content)
