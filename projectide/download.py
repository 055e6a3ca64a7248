"""
Export and Import

ZIP export of generated files and of the project tree, and import of a
generated file back into the workspace.
"""

import io
import logging
import zipfile
from typing import Iterable, Tuple

from .config import IMPORT_FOLDER
from .models import EditorFile, GeneratedFile
from .workspace import Workspace

logger = logging.getLogger(__name__)


def split_extension(base_name: str) -> Tuple[str, str]:
    """
    Split a base name into stem and extension.

    Dotfiles such as '.env' have no extension; '.eslintrc.json' has 'json'.
    """
    stem, dot, extension = base_name.rpartition(".")
    if not dot or not stem:
        return base_name, ""
    return stem, extension


def versioned_file_name(record: GeneratedFile) -> str:
    """
    Insert the version before the extension of the base name.

    'src/App.tsx' at 1.0.2 becomes 'src/App-v1.0.2.tsx'; folders are untouched.
    """
    folder, sep, base_name = record.file_name.rpartition("/")
    stem, extension = split_extension(base_name)
    versioned = f"{stem}-v{record.version}"
    if extension:
        versioned = f"{versioned}.{extension}"
    return f"{folder}{sep}{versioned}"


def download_name(record: GeneratedFile) -> str:
    """File name for downloading a single generated version, without folders."""
    return versioned_file_name(record).rsplit("/", 1)[-1]


def _zip_bytes(entries: Iterable) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for arcname, content in entries:
            archive.writestr(arcname, content)
    return buffer.getvalue()


def build_generated_zip(records: Iterable[GeneratedFile]) -> bytes:
    """Archive each generated file as project_name/versioned_file_name."""
    records = list(records)
    data = _zip_bytes(
        (f"{r.project_name}/{versioned_file_name(r)}", r.content) for r in records
    )
    logger.info(f"Built generated files archive ({len(records)} files, {len(data)} bytes)")
    return data


def build_project_zip(files: Iterable[EditorFile]) -> bytes:
    """Archive the project tree; each file keeps its own path."""
    files = list(files)
    data = _zip_bytes((f.path, f.content) for f in files)
    logger.info(f"Built project archive ({len(files)} files, {len(data)} bytes)")
    return data


def import_path(record: GeneratedFile, folder: str = IMPORT_FOLDER) -> str:
    """
    Workspace path for an imported generated file.

    Folders in the file name are dropped: 'src/ui/Button.tsx' at 1.0.1
    becomes 'downloads/Button-v1.0.1.tsx'. Names without an extension,
    dotfiles included, get '.txt'.
    """
    base_name = record.file_name.rsplit("/", 1)[-1] or "file"
    stem, extension = split_extension(base_name)
    return f"{folder}/{stem}-v{record.version}.{extension or 'txt'}"


def import_into_workspace(record: GeneratedFile, workspace: Workspace) -> EditorFile:
    """Copy a generated file into the project tree and open it."""
    return workspace.create_file(import_path(record), record.content)
