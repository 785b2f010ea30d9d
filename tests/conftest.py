"""Shared pytest configuration and fixtures for gremlin-subjects tests."""

from __future__ import annotations

import importlib.util
from itertools import count
from pathlib import Path
import sys
import textwrap
from typing import TYPE_CHECKING

import pytest

from gremlin_subjects.env import Env, WarningSink
from gremlin_subjects.parser import SourceParser


if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    import types


_module_ids = count()


# Auto-mark tests based on directory
def pytest_collection_modifyitems(
    config: pytest.Config,  # noqa: ARG001
    items: list[pytest.Item],
) -> None:
    """Automatically apply markers based on test directory."""
    for item in items:
        path_parts = Path(str(item.fspath)).parts

        if 'small' in path_parts:
            item.add_marker(pytest.mark.small)
        elif 'medium' in path_parts:
            item.add_marker(pytest.mark.medium)
        elif 'large' in path_parts:
            item.add_marker(pytest.mark.large)


@pytest.fixture
def env() -> Env:
    """An environment with a real parser and an empty warning sink."""
    return Env(parser=SourceParser(), warnings=WarningSink())


@pytest.fixture
def load_module(tmp_path: Path) -> Iterator[Callable[[str], types.ModuleType]]:
    """Write source to a file and import it as a fresh module.

    Modules are removed from sys.modules when the test finishes.
    """
    loaded: list[str] = []

    def _load(source: str) -> types.ModuleType:
        name = f'_gremlin_subjects_sample_{next(_module_ids)}'
        path = tmp_path / f'{name}.py'
        path.write_text(textwrap.dedent(source), encoding='utf-8')
        spec = importlib.util.spec_from_file_location(name, path)
        assert spec is not None
        assert spec.loader is not None
        module = importlib.util.module_from_spec(spec)
        sys.modules[name] = module
        loaded.append(name)
        spec.loader.exec_module(module)
        return module

    yield _load

    for name in loaded:
        sys.modules.pop(name, None)
