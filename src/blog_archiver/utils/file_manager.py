"""
File Management Utilities

Writes extracted posts into the output directory, one Markdown file per
post, named after the post title.
"""

import os
import re
import logging
from pathlib import Path
from typing import Union

from ..exceptions import PersistError
from ..models import ExtractedDocument


MAX_FILENAME_LENGTH = 120


def sanitize_filename(name: str, max_length: int = MAX_FILENAME_LENGTH) -> str:
    """
    Make a title safe to use as a filename on common filesystems.

    Drops reserved characters and control characters, collapses whitespace
    and strips leading/trailing dots and spaces.
    """
    name = re.sub(r'\s+', ' ', name or '')
    name = re.sub(r'[<>:"/\\|?*\x00-\x1f\x7f]', '', name)
    name = name.strip('. ')
    if len(name) > max_length:
        name = name[:max_length].rstrip('. ')
    return name or "untitled"


class FileManager:
    """
    Persists extracted posts.

    Filenames come from the sanitized title. When a file with that name
    already exists a numeric suffix is added (Title.md, Title_2.md, ...);
    files are opened in exclusive-create mode so two worker threads saving
    posts with the same title never overwrite each other.
    """

    def __init__(self, output_dir: Union[str, Path], extension: str = ".md"):
        """
        Initialize the file manager.

        Args:
            output_dir: Directory receiving the post files (created on demand)
            extension: Extension appended to every filename
        """
        self.output_dir = Path(output_dir)
        self.extension = extension
        self.logger = logging.getLogger(__name__)

    def ensure_output_dir(self) -> Path:
        """Create the output directory if it does not exist yet."""
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistError(f"Cannot create output directory: {e}", path=str(self.output_dir)) from e
        return self.output_dir

    def format_document(self, document: ExtractedDocument) -> str:
        """Render a post as Markdown: title heading, source line, body."""
        parts = [f"# {document.title}"]
        if document.url:
            parts.append(f"Source: <{document.url}>")
        if document.body:
            parts.append(document.body)
        return "\n\n".join(parts) + "\n"

    def save_document(self, document: ExtractedDocument) -> Path:
        """
        Write a post to a new file in the output directory.

        Returns:
            Path of the created file

        Raises:
            PersistError: if the directory or file cannot be written
        """
        self.ensure_output_dir()
        content = self.format_document(document)
        base_name = sanitize_filename(document.title)

        counter = 1
        while True:
            suffix = "" if counter == 1 else f"_{counter}"
            path = self.output_dir / f"{base_name}{suffix}{self.extension}"
            try:
                handle = open(path, 'x', encoding='utf-8')
            except FileExistsError:
                counter += 1
                continue
            except OSError as e:
                raise PersistError(f"Failed to create {path.name}: {e}", path=str(path)) from e

            try:
                with handle:
                    handle.write(content)
            except OSError as e:
                path.unlink(missing_ok=True)
                raise PersistError(f"Failed to write {path.name}: {e}", path=str(path)) from e
            break

        self.logger.info(f"Saved post ({os.path.getsize(path)} bytes): {path.name}")
        return path
