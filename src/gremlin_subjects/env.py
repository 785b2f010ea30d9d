"""Execution environment shared by all matchers in a run.

The Env bundles the collaborators an evaluator needs: a parser turning files
into ASTs, a path constructor, the denylist of pseudo-filenames that never
point at readable source, and the warning sink diagnostics go to.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
import threading
from typing import TYPE_CHECKING

from gremlin_subjects.parser import SourceParser


if TYPE_CHECKING:
    import ast
    from collections.abc import Callable, Iterator

    from gremlin_subjects.config import MatcherConfig


logger = logging.getLogger(__name__)

# Filenames the interpreter gives to code that was not loaded from a file
DEFAULT_SOURCE_DENYLIST: frozenset[str] = frozenset({'<string>', '<stdin>'})

# Prefixes of pseudo-filenames for stdlib code frozen into the interpreter, e.g. "<frozen os>"
DEFAULT_SOURCE_DENYLIST_PREFIXES: tuple[str, ...] = ('<frozen ',)


class WarningSink:
    """Append-only, thread-safe collection of diagnostic messages.

    Evaluators running on different threads may append concurrently; reads
    always work on a snapshot so iteration never races with writers.

    Example:
        >>> sink = WarningSink()
        >>> sink.append('something is off')
        >>> sink.snapshot()
        ('something is off',)
    """

    def __init__(self) -> None:
        self._messages: list[str] = []
        self._lock = threading.Lock()

    def append(self, message: str) -> None:
        """Record a message."""
        with self._lock:
            self._messages.append(message)

    def snapshot(self) -> tuple[str, ...]:
        """Return all messages recorded so far, in order."""
        with self._lock:
            return tuple(self._messages)

    def __len__(self) -> int:
        with self._lock:
            return len(self._messages)

    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())


@dataclass(frozen=True)
class Env:
    """Collaborators for matching methods to subjects.

    Attributes:
        parser: Callable turning a source path into a parsed module.
        warnings: Sink receiving diagnostics.
        pathname: Constructor turning a filename string into a path.
        source_denylist: Filenames that mark code with no readable source.
        source_denylist_prefixes: Filename prefixes that mark code with no readable source.
    """

    parser: Callable[[Path], ast.Module]
    warnings: WarningSink = field(default_factory=WarningSink)
    pathname: Callable[[str], Path] = Path
    source_denylist: frozenset[str] = DEFAULT_SOURCE_DENYLIST
    source_denylist_prefixes: tuple[str, ...] = DEFAULT_SOURCE_DENYLIST_PREFIXES

    def denies(self, filename: str) -> bool:
        """Return True if a code object's filename cannot point at readable source."""
        return filename in self.source_denylist or filename.startswith(self.source_denylist_prefixes)

    def warn(self, message: str) -> None:
        """Report a diagnostic to the shared sink."""
        logger.warning('%s', message)
        self.warnings.append(message)


def build_env(config: MatcherConfig | None = None) -> Env:
    """Build an environment with the default parser.

    Args:
        config: Optional configuration; its denylists replace the default ones.

    Returns:
        A ready-to-use Env with a fresh warning sink.
    """
    denylist = DEFAULT_SOURCE_DENYLIST
    if config is not None and config.source_denylist is not None:
        denylist = frozenset(config.source_denylist)
    prefixes = DEFAULT_SOURCE_DENYLIST_PREFIXES
    if config is not None and config.source_denylist_prefixes is not None:
        prefixes = tuple(config.source_denylist_prefixes)
    return Env(parser=SourceParser(), source_denylist=denylist, source_denylist_prefixes=prefixes)
