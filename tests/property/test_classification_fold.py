"""
Property-based tests for folding changed-file classifications.
"""

from hypothesis import given, strategies as st

from chronicler.analysis.classifier import (
    ClassificationAccumulator,
    Verdict,
    classify_changed_files,
    combine_all,
)
from chronicler.analysis.settings import default_settings
from chronicler.models.pull_request import ChangedFile


accumulators = st.builds(ClassificationAccumulator, st.booleans(), st.booleans())

filenames = st.sampled_from([
    "src/app.js",
    "src/main/java/App.java",
    "lib/util.py",
    "src/test/AppTest.java",
    "src/docs/guide.md",
    "README.md",
    "docs/index.html",
    "CHANGELOG.md",
    "module/CHANGE_LOG.md",
    "RELEASE_NOTES.md",
    "release-notes/1.2.0.txt",
])
changed_files = filenames.map(ChangedFile)
pages = st.lists(st.lists(changed_files, min_size=1, max_size=5), max_size=6)


class RecordingPages:
    """Lazy page source that records which pages were requested."""

    def __init__(self, pages):
        self.pages = pages
        self.requested = []

    def __iter__(self):
        for number, page in enumerate(self.pages, start=1):
            self.requested.append(number)
            yield page


def fold(files):
    settings = default_settings()
    return combine_all(ClassificationAccumulator.for_file(settings, f) for f in files)


class TestClassificationFold:
    """Property tests for ClassificationAccumulator and classify_changed_files."""

    @given(a=accumulators, b=accumulators, c=accumulators)
    def test_combine_is_associative(self, a, b, c):
        assert (a | b) | c == a | (b | c)

    @given(a=accumulators, b=accumulators)
    def test_combine_is_commutative(self, a, b):
        assert a | b == b | a

    @given(a=accumulators)
    def test_empty_accumulator_is_identity(self, a):
        assert a | ClassificationAccumulator() == a
        assert a | a == a

    @given(files=st.lists(changed_files, max_size=20), data=st.data())
    def test_file_order_is_irrelevant(self, files, data):
        """
        Property: Any permutation of the changed files yields the same verdict.
        """
        shuffled = data.draw(st.permutations(files))
        settings = default_settings()

        assert classify_changed_files(settings, [files]) == classify_changed_files(settings, [shuffled])

    @given(pages=pages)
    def test_paging_is_irrelevant(self, pages):
        """
        Property: Per-page results combined equal the result for one concatenated page.
        """
        settings = default_settings()
        flattened = [f for page in pages for f in page]
        per_page = combine_all(fold(page) for page in pages)

        assert classify_changed_files(settings, pages) == per_page.to_verdict()
        assert classify_changed_files(settings, [flattened]) == fold(flattened).to_verdict()

    @given(pages=pages)
    def test_no_page_requested_after_verdict_is_complete(self, pages):
        """
        Property: Pages after the one completing the verdict are never requested.
        """
        source = RecordingPages(pages)

        verdict = classify_changed_files(default_settings(), source)

        completing_page = None
        running = ClassificationAccumulator()
        for number, page in enumerate(pages, start=1):
            running = running | fold(page)
            if running.is_complete:
                completing_page = number
                break

        if completing_page is None:
            assert source.requested == list(range(1, len(pages) + 1))
        else:
            assert verdict == Verdict(True, True)
            assert source.requested == list(range(1, completing_page + 1))

    @given(pages=pages)
    def test_classification_is_idempotent(self, pages):
        settings = default_settings()

        assert classify_changed_files(settings, pages) == classify_changed_files(settings, pages)
