"""Configuration loading for gremlin-subjects.

This module reads configuration from the pyproject.toml [tool.gremlin-subjects]
section and provides defaults when configuration is absent.
"""

from __future__ import annotations

from dataclasses import dataclass
import tomllib
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from pathlib import Path


@dataclass
class MatcherConfig:
    """Configuration for gremlin-subjects.

    All fields default to None, meaning the built-in defaults apply.

    Attributes:
        source_denylist: Pseudo-filenames marking code with no readable source
            (e.g. '<string>' for code run through exec).
        source_denylist_prefixes: Pseudo-filename prefixes marking code with no
            readable source (e.g. '<frozen ' for frozen stdlib modules).
    """

    source_denylist: list[str] | None = None
    source_denylist_prefixes: list[str] | None = None


def load_config(rootdir: Path) -> MatcherConfig:
    """Load configuration from pyproject.toml.

    Reads the [tool.gremlin-subjects] section from pyproject.toml in the
    given directory. Returns default configuration if the file or section
    does not exist.

    Args:
        rootdir: Directory containing pyproject.toml.

    Returns:
        MatcherConfig with values from pyproject.toml or defaults.

    Raises:
        TypeError: If a denylist setting is not a list of strings.
    """
    pyproject_path = rootdir / 'pyproject.toml'

    if not pyproject_path.exists():
        return MatcherConfig()

    with pyproject_path.open('rb') as f:
        data = tomllib.load(f)

    tool_config = data.get('tool', {}).get('gremlin-subjects', {})

    return MatcherConfig(
        source_denylist=_string_list(tool_config, 'source-denylist'),
        source_denylist_prefixes=_string_list(tool_config, 'source-denylist-prefixes'),
    )


def _string_list(tool_config: dict[str, object], key: str) -> list[str] | None:
    value = tool_config.get(key)
    if value is not None and not (isinstance(value, list) and all(isinstance(entry, str) for entry in value)):
        raise TypeError(f'{key} must be a list of strings, got {value!r}')
    return value  # type: ignore[return-value]
