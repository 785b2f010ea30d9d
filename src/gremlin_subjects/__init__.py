"""gremlin-subjects: Resolve live methods to the AST nodes gremlins feed on.

Given a function or method object that is already loaded, gremlin-subjects
finds the ``def`` node that defines it and wraps that node in an immutable
subject for a mutation testing engine. Methods that cannot be traced back to
readable source, or that are defined inside a closure, are skipped with a
diagnostic on the environment's warning sink.

Example:
    Match an instance method::

        >>> import json
        >>> from gremlin_subjects import MethodMatcher, build_env
        >>> env = build_env()
        >>> subjects = MethodMatcher.for_name(json.JSONEncoder, 'encode').call(env)
        >>> subjects[0].expression
        'json.encoder.JSONEncoder.encode'
"""

from __future__ import annotations

from gremlin_subjects.env import Env, WarningSink, build_env
from gremlin_subjects.matcher import MethodMatcher
from gremlin_subjects.subject import Context, Subject
from gremlin_subjects.target import RuntimeMethod, SourceLocation


__version__ = '0.1.0'
__all__ = [
    'Context',
    'Env',
    'MethodMatcher',
    'RuntimeMethod',
    'SourceLocation',
    'Subject',
    'WarningSink',
    '__version__',
    'build_env',
]
