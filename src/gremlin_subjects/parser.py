"""Source file parsing with a content-addressed cache.

Many methods usually live in the same file, so SourceParser keeps each
parsed tree around and hands it out again as long as the file content has
not changed. Content hashing means an edited file is always re-parsed,
whatever its timestamp says.
"""

from __future__ import annotations

import ast
import hashlib
import logging
import threading
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from pathlib import Path


logger = logging.getLogger(__name__)


class SourceParser:
    """Parses Python source files into ASTs, caching by content hash.

    Trees are shared between callers and must not be mutated; copy a node
    with ``copy.deepcopy`` before changing it.

    Example:
        >>> from pathlib import Path
        >>> parser = SourceParser()
        >>> tree = parser(Path('src/app/models.py'))
        >>> parser(Path('src/app/models.py')) is tree
        True
    """

    def __init__(self) -> None:
        self._trees: dict[Path, tuple[str, ast.Module]] = {}
        self._lock = threading.Lock()

    def __call__(self, path: Path) -> ast.Module:
        """Parse a source file.

        Args:
            path: The file to parse.

        Returns:
            The parsed module.

        Raises:
            OSError: If the file cannot be read.
            SyntaxError: If the file is not valid Python.
        """
        source = path.read_text(encoding='utf-8')
        digest = hashlib.sha256(source.encode('utf-8')).hexdigest()

        with self._lock:
            cached = self._trees.get(path)
        if cached is not None and cached[0] == digest:
            logger.debug('Reusing parsed tree for %s', path)
            return cached[1]

        tree = ast.parse(source, filename=str(path))
        with self._lock:
            self._trees[path] = (digest, tree)
        return tree

    def clear(self) -> None:
        """Drop every cached tree."""
        with self._lock:
            self._trees.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._trees)
