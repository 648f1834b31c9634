"""
Path Patterns

Glob-style path matching used to classify changed files.
"""

import re
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional, Pattern

from ..exceptions import ConfigurationError


def _translate_class(expression: str, start: int) -> tuple:
    """
    Translate a character class starting at ``expression[start] == '['``.

    Returns:
        Tuple of (regex fragment, index after the closing bracket)
    """
    i = start + 1
    negate = False
    if i < len(expression) and expression[i] in '!^':
        negate = True
        i += 1

    members = []
    while i < len(expression) and expression[i] != ']':
        char = expression[i]
        if char == '/':
            raise ConfigurationError(f"Path separator not allowed in character class: {expression!r}")
        if char == '\\':
            i += 1
            if i >= len(expression):
                raise ConfigurationError(f"Dangling escape in pattern: {expression!r}")
            members.append(re.escape(expression[i]))
        elif char == '-':
            members.append('-')
        else:
            members.append(re.escape(char))
        i += 1

    if i >= len(expression):
        raise ConfigurationError(f"Unclosed character class in pattern: {expression!r}")
    if not members:
        raise ConfigurationError(f"Empty character class in pattern: {expression!r}")

    body = ''.join(members)
    if negate:
        return f'[^/{body}]', i + 1
    return f'[{body}]', i + 1


def translate_glob(expression: str) -> str:
    """
    Translate a glob expression into an anchored regular expression.

    Supported syntax:
    - ``*`` any run of characters within one path segment
    - ``**`` any run of characters across segments (``**/`` also matches no directory)
    - ``?`` a single character other than ``/``
    - ``[abc]``, ``[a-z]``, ``[!abc]`` character classes
    - ``{a,b}`` alternation (not nested)
    - ``\\`` escapes the following character

    Args:
        expression: Glob expression

    Returns:
        Regular expression source matching the whole path

    Raises:
        ConfigurationError: If the expression is not a valid glob
    """
    parts = []
    in_group = False
    i = 0
    n = len(expression)

    while i < n:
        char = expression[i]

        if char == '*':
            if expression.startswith('**', i):
                # Consecutive globstars collapse into one quantifier
                crosses_segments = False
                while expression.startswith('**', i):
                    i += 2
                    if i < n and expression[i] == '/':
                        i += 1
                    else:
                        crosses_segments = True
                parts.append('.*' if crosses_segments else '(?:[^/]*/)*')
                continue
            parts.append('[^/]*')
        elif char == '?':
            parts.append('[^/]')
        elif char == '[':
            fragment, i = _translate_class(expression, i)
            parts.append(fragment)
            continue
        elif char == '{':
            if in_group:
                raise ConfigurationError(f"Nested groups not supported in pattern: {expression!r}")
            in_group = True
            parts.append('(?:')
        elif char == '}' and in_group:
            in_group = False
            parts.append(')')
        elif char == ',' and in_group:
            parts.append('|')
        elif char == '\\':
            i += 1
            if i >= n:
                raise ConfigurationError(f"Dangling escape in pattern: {expression!r}")
            parts.append(re.escape(expression[i]))
        else:
            parts.append(re.escape(char))
        i += 1

    if in_group:
        raise ConfigurationError(f"Unclosed group in pattern: {expression!r}")

    return ''.join(parts)


def normalize_expression(expression: str) -> str:
    """Trim, lower-case and root-anchor a glob expression."""
    normalized = expression.strip().lower()
    if normalized and not normalized.startswith('/'):
        normalized = '/' + normalized
    return normalized


@dataclass(frozen=True)
class PathPattern:
    """
    A single glob pattern matched against normalized paths.

    Candidate paths must already be trimmed, lower-cased and start with ``/``.
    Patterns are compared by their normalized expression, so duplicate
    patterns collapse when collected into a set.
    """
    expression: str
    _regex: Optional[Pattern] = field(default=None, init=False, repr=False, compare=False, hash=False)

    def __post_init__(self):
        if not isinstance(self.expression, str):
            raise ConfigurationError(f"Pattern must be a string, got {type(self.expression).__name__}")

        normalized = normalize_expression(self.expression)
        if not normalized:
            raise ConfigurationError("Pattern must not be blank")

        try:
            regex = re.compile(translate_glob(normalized), re.DOTALL)
        except re.error as e:
            raise ConfigurationError(f"Invalid pattern {self.expression!r}: {e}") from e

        object.__setattr__(self, 'expression', normalized)
        object.__setattr__(self, '_regex', regex)

    def matches(self, candidate_path: str) -> bool:
        return self._regex.fullmatch(candidate_path) is not None


@dataclass(frozen=True)
class PatternConditions:
    """
    Include/exclude pattern pair.

    A path matches when it matches at least one include pattern and no
    exclude pattern. An empty include set matches nothing. Evaluation order
    among patterns is unspecified; configurations whose outcome depends on it
    are invalid.
    """
    includes: FrozenSet[PathPattern] = frozenset()
    excludes: FrozenSet[PathPattern] = frozenset()

    def __post_init__(self):
        object.__setattr__(self, 'includes', frozenset(self.includes))
        object.__setattr__(self, 'excludes', frozenset(self.excludes))

    @classmethod
    def from_expressions(
        cls,
        include: Optional[Iterable[str]] = None,
        exclude: Optional[Iterable[str]] = None
    ) -> "PatternConditions":
        """
        Compile include/exclude glob expressions.

        Raises:
            ConfigurationError: If any expression is invalid
        """
        return cls(
            includes=frozenset(PathPattern(e) for e in (include or ())),
            excludes=frozenset(PathPattern(e) for e in (exclude or ())),
        )

    def matches(self, candidate_path: str) -> bool:
        if not self.includes:
            return False

        return (
            any(p.matches(candidate_path) for p in self.includes)
            and not any(p.matches(candidate_path) for p in self.excludes)
        )
