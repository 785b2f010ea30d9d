"""Tests for the Evaluator.

These tests use an in-memory parser and hand-built target methods so the
skip policy, search and caching can be checked without touching disk.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from pathlib import Path

import pytest

from gremlin_subjects.env import Env, WarningSink
from gremlin_subjects.evaluator import (
    CLOSURE_WARNING_FORMAT,
    SOURCE_LOCATION_WARNING_FORMAT,
    Evaluator,
    is_closure_path,
)
from gremlin_subjects.subject import Context, InstanceMethodSubject
from gremlin_subjects.target import SourceLocation
from gremlin_subjects.variants import FunctionVariant, InstanceMethodVariant


SOURCE = """
class Sample:
    def foo(self):
        return 1

    def foo(self):
        return 2


def make_bar():
    def bar(self):
        return 3
    return bar


Sample.baz = lambda self: 4
"""


@dataclass(frozen=True)
class FakeMethod:
    name: str
    source_location: SourceLocation | None

    def __str__(self) -> str:
        return f'Sample.{self.name}'


class FakeParser:
    """Parser returning a fixed tree and counting calls."""

    def __init__(self, source: str = SOURCE) -> None:
        self.source = source
        self.calls: list[Path] = []

    def __call__(self, path: Path) -> ast.Module:
        self.calls.append(path)
        return ast.parse(self.source)


class FailingParser:
    def __call__(self, path: Path) -> ast.Module:
        raise SyntaxError('invalid syntax', (str(path), 1, 1, 'def (', 1, 5))


class Sample:
    pass


@pytest.fixture
def parser():
    return FakeParser()


@pytest.fixture
def env(parser):
    return Env(parser=parser, warnings=WarningSink())


def _evaluator(env, name, location, variant=None):
    return Evaluator(Sample, FakeMethod(name, location), env, variant or InstanceMethodVariant())


class TestEvaluatorMatch:
    """Test the matched path through the evaluator."""

    def test_returns_single_subject(self, env):
        evaluator = _evaluator(env, 'foo', SourceLocation('sample.py', 6))

        subjects = evaluator.call()

        assert len(subjects) == 1
        assert isinstance(subjects[0], InstanceMethodSubject)

    def test_subject_context_uses_scope_and_resolved_path(self, env):
        evaluator = _evaluator(env, 'foo', SourceLocation('sample.py', 6))

        subject = evaluator.call()[0]

        assert subject.context == Context(Sample, Path('sample.py'))
        assert subject.source_path == Path('sample.py')

    def test_selects_definition_at_source_line(self, env):
        first = _evaluator(env, 'foo', SourceLocation('sample.py', 3)).call()[0]
        second = _evaluator(env, 'foo', SourceLocation('sample.py', 6)).call()[0]

        assert first.node.lineno == 3
        assert second.node.lineno == 6

    def test_subject_carries_env_warning_sink(self, env):
        subject = _evaluator(env, 'foo', SourceLocation('sample.py', 6)).call()[0]

        assert subject.warnings is env.warnings

    def test_no_warning_on_match(self, env):
        _evaluator(env, 'foo', SourceLocation('sample.py', 6)).call()

        assert len(env.warnings) == 0

    def test_no_matching_node_returns_empty_without_warning(self, env):
        evaluator = _evaluator(env, 'missing', SourceLocation('sample.py', 3))

        assert evaluator.call() == []
        assert len(env.warnings) == 0

    def test_function_variant_matches_top_level_def(self):
        env = Env(parser=FakeParser('def top():\n    return 1\n'))
        evaluator = Evaluator(Sample, FakeMethod('top', SourceLocation('m.py', 1)), env, FunctionVariant())

        assert evaluator.call()[0].name == 'top'

    def test_uses_env_pathname(self, parser):
        env = Env(parser=parser, pathname=lambda name: Path('/root') / name)

        subject = _evaluator(env, 'foo', SourceLocation('sample.py', 6)).call()[0]

        assert subject.source_path == Path('/root/sample.py')
        assert parser.calls == [Path('/root/sample.py')]


class TestEvaluatorSourceLocationSkip:
    """Test skipping methods without a usable source location."""

    def test_absent_location_warns_and_returns_empty(self, env, parser):
        evaluator = _evaluator(env, 'foo', None)

        assert evaluator.call() == []
        assert env.warnings.snapshot() == (SOURCE_LOCATION_WARNING_FORMAT % 'Sample.foo',)
        assert parser.calls == []

    @pytest.mark.parametrize('pseudo_filename', ['<string>', '<stdin>'])
    def test_denylisted_location_behaves_like_absent(self, env, parser, pseudo_filename):
        evaluator = _evaluator(env, 'foo', SourceLocation(pseudo_filename, 6))

        assert evaluator.call() == []
        assert env.warnings.snapshot() == (
            'Sample.foo does not have a valid source location, unable to emit subject',
        )
        assert parser.calls == []

    def test_frozen_module_location_behaves_like_absent(self, env, parser):
        evaluator = _evaluator(env, 'foo', SourceLocation('<frozen os>', 6))

        assert evaluator.call() == []
        assert env.warnings.snapshot() == (SOURCE_LOCATION_WARNING_FORMAT % 'Sample.foo',)
        assert parser.calls == []

    def test_denylist_prefixes_come_from_env(self, parser):
        env = Env(parser=parser, source_denylist_prefixes=('sam',))

        assert _evaluator(env, 'foo', SourceLocation('sample.py', 6)).call() == []
        assert len(env.warnings) == 1

    def test_denylist_comes_from_env(self, parser):
        env = Env(parser=parser, source_denylist=frozenset({'sample.py'}))

        assert _evaluator(env, 'foo', SourceLocation('sample.py', 6)).call() == []
        assert len(env.warnings) == 1

    def test_location_check_comes_before_closure_check(self, env):
        evaluator = _evaluator(env, 'bar', SourceLocation('<string>', 11))

        evaluator.call()

        assert env.warnings.snapshot() == (SOURCE_LOCATION_WARNING_FORMAT % 'Sample.bar',)


class TestEvaluatorClosureSkip:
    """Test skipping methods defined inside closures."""

    def test_def_inside_function_warns_and_returns_empty(self, env):
        evaluator = _evaluator(env, 'bar', SourceLocation('sample.py', 11))

        assert evaluator.call() == []
        assert env.warnings.snapshot() == (
            'Sample.bar is dynamically defined in a closure, unable to emit subject',
        )

    def test_lambda_warns_and_returns_empty(self, env):
        evaluator = _evaluator(env, '<lambda>', SourceLocation('sample.py', 16))

        assert evaluator.call() == []
        assert env.warnings.snapshot() == (CLOSURE_WARNING_FORMAT % 'Sample.<lambda>',)


class TestEvaluatorCaching:
    """Test that derived values are computed once."""

    def test_second_call_returns_same_subject(self, env, parser):
        evaluator = _evaluator(env, 'foo', SourceLocation('sample.py', 6))

        first = evaluator.call()
        second = evaluator.call()

        assert first[0] is second[0]
        assert len(parser.calls) == 1

    def test_second_call_emits_no_additional_warning(self, env):
        evaluator = _evaluator(env, 'bar', SourceLocation('sample.py', 11))

        evaluator.call()
        evaluator.call()

        assert len(env.warnings) == 1

    def test_second_call_on_absent_location_emits_no_additional_warning(self, env):
        evaluator = _evaluator(env, 'foo', None)

        assert evaluator.call() == evaluator.call() == []
        assert len(env.warnings) == 1

    def test_separate_evaluators_share_nothing(self, env):
        first = _evaluator(env, 'foo', SourceLocation('sample.py', 6)).call()[0]
        second = _evaluator(env, 'foo', SourceLocation('sample.py', 6)).call()[0]

        assert first is not second


class TestEvaluatorErrors:
    """Test that parse failures are not swallowed."""

    def test_parse_error_propagates(self):
        env = Env(parser=FailingParser())
        evaluator = _evaluator(env, 'foo', SourceLocation('sample.py', 6))

        with pytest.raises(SyntaxError):
            evaluator.call()

        assert len(env.warnings) == 0


class TestIsClosurePath:
    """Test closure detection on node paths."""

    def test_empty_path_is_not_closure(self):
        assert not is_closure_path([])

    def test_class_nesting_is_not_closure(self):
        tree = ast.parse('class A:\n    class B:\n        def f(self):\n            pass\n')
        outer = tree.body[0]
        inner = outer.body[0]

        assert not is_closure_path([tree, outer, inner, inner.body[0]])

    def test_enclosing_function_is_closure(self):
        tree = ast.parse('def outer():\n    def inner():\n        pass\n')
        outer = tree.body[0]

        assert is_closure_path([tree, outer, outer.body[0]])

    def test_lambda_is_closure(self):
        tree = ast.parse('f = lambda: 1')

        assert is_closure_path([tree, tree.body[0], tree.body[0].value])
