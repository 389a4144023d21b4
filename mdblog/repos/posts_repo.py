import logging
import os
from pathlib import Path
from typing import Iterable, Iterator, List, NamedTuple

from mdblog.errors import ContentReadError, PostNotFoundError
from mdblog.settings import settings

logger = logging.getLogger(__name__)


class SourceDocument(NamedTuple):
    path: Path
    slug: str
    text: str


class FilePostsRepo:
    """
    Reads raw post documents from a directory of Markdown files.

    Anything exposing ``read(slug)`` and ``list_documents()`` can stand in for
    this class, which is how the services are tested without touching disk.
    """

    def __init__(self, root=None, extensions: Iterable[str] | None = None):
        self.root = Path(root) if root is not None else settings.posts_path
        self.extensions: List[str] = [
            ext.lower() for ext in (extensions or settings.POST_EXTENSIONS)
        ]

    def read(self, slug: str) -> str:
        if not self._is_safe_slug(slug):
            raise PostNotFoundError(f"Invalid post slug: {slug!r}")

        for ext in self.extensions:
            path = self.root / f"{slug}{ext}"
            try:
                return self._read_file(path)
            except FileNotFoundError:
                continue
        raise PostNotFoundError(f"No post found for slug {slug!r} in {self.root}")

    def list_documents(self) -> Iterator[SourceDocument]:
        """
        Walk the root recursively, yielding every Markdown document.
        Entries are visited in lexical order so listings are stable.
        """
        if not self.root.is_dir():
            raise ContentReadError(f"Posts directory not found: {self.root}")

        def on_error(err: OSError):
            raise ContentReadError(f"Failed to walk {err.filename}: {err}") from err

        for dirpath, dirnames, filenames in os.walk(self.root, onerror=on_error):
            dirnames.sort()
            for name in sorted(filenames):
                path = Path(dirpath) / name
                if not self._is_markdown(path):
                    continue
                try:
                    text = self._read_file(path)
                except FileNotFoundError as e:
                    # Removed between the walk and the read
                    raise ContentReadError(f"Failed to read {path}: {e}") from e
                yield SourceDocument(path=path, slug=path.stem, text=text)

    def _is_markdown(self, path: Path) -> bool:
        return path.suffix.lower() in self.extensions and path.is_file()

    @staticmethod
    def _is_safe_slug(slug: str) -> bool:
        if not slug or slug.startswith("."):
            return False
        return "/" not in slug and "\\" not in slug and "\x00" not in slug

    @staticmethod
    def _read_file(path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error reading post file {path}: {e}")
            raise ContentReadError(f"Failed to read {path}: {e}") from e
