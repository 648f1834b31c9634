"""
Property-based tests for include/exclude pattern conditions.
"""

from hypothesis import given, strategies as st

from chronicler.analysis.patterns import PathPattern, PatternConditions


segments = st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789_-", min_size=1, max_size=8)
paths = st.lists(segments, min_size=1, max_size=5).map(lambda parts: "/" + "/".join(parts))


class TestPatternConditions:
    """Property tests for PatternConditions.matches."""

    @given(path=paths, exclude=st.lists(paths, max_size=3))
    def test_empty_includes_match_nothing(self, path, exclude):
        """
        Property: Without include patterns no path matches.
        """
        conditions = PatternConditions.from_expressions(include=[], exclude=exclude)

        assert not conditions.matches(path)

    @given(path=paths, include=st.lists(paths, max_size=3))
    def test_exclude_wins(self, path, include):
        """
        Property: A path matching an exclude pattern never matches.
        """
        conditions = PatternConditions.from_expressions(include=include + ["**", path], exclude=[path])

        assert not conditions.matches(path)

    @given(path=paths)
    def test_literal_pattern_matches_itself(self, path):
        assert PathPattern(path).matches(path)
        assert PatternConditions.from_expressions(include=[path]).matches(path)

    @given(path=paths)
    def test_double_star_matches_every_path(self, path):
        assert PathPattern("**").matches(path)

    @given(path=paths, include=st.lists(paths, min_size=1, max_size=4), exclude=st.lists(paths, max_size=4))
    def test_pattern_order_is_irrelevant(self, path, include, exclude):
        """
        Property: Conditions depend on the pattern sets, not their order.
        """
        forward = PatternConditions.from_expressions(include=include, exclude=exclude)
        backward = PatternConditions.from_expressions(include=include[::-1], exclude=exclude[::-1])

        assert forward == backward
        assert forward.matches(path) == backward.matches(path)

    @given(path=paths)
    def test_pattern_case_is_normalized(self, path):
        assert PathPattern(path.upper()).matches(path)
