"""
Include Resolution
==================

Filesystem-backed resolver for ``Require(name)`` directives.

The lexer only knows a resolver as a callable ``name -> text | None``.
FileIncludeResolver implements it by searching a list of directories in
order, the way a C preprocessor searches its include path.

Example:
    >>> resolver = FileIncludeResolver(["src", "lib"])
    >>> text = resolver("shapes.txt")   # src/shapes.txt or lib/shapes.txt
"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class FileIncludeResolver:
    """
    Resolve required units by searching directories.

    Attributes:
        search_paths: Directories searched in order
        encoding: Text encoding of included files
    """

    def __init__(self, search_paths: Iterable[PathLike] = (".",), encoding: str = "utf-8"):
        self.search_paths = [Path(p) for p in search_paths]
        self.encoding = encoding

    def find(self, name: str) -> Optional[Path]:
        """Return the first existing file for ``name``, or None."""
        for path in self.search_paths:
            candidate = path / name
            if candidate.is_file():
                return candidate
        return None

    def __call__(self, name: str) -> Optional[str]:
        """
        Return the text of ``name``, or None if it cannot be found.

        A file that exists but cannot be read or decoded is logged and
        treated as not found.
        """
        path = self.find(name)
        if path is None:
            logger.debug(f"'{name}' not found in {[str(p) for p in self.search_paths]}")
            return None

        try:
            text = path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Cannot read required file {path}: {e}")
            return None

        logger.debug(f"Resolved '{name}' to {path}")
        return text

    def __repr__(self) -> str:
        return f"FileIncludeResolver({[str(p) for p in self.search_paths]!r})"
