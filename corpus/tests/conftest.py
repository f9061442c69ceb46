"""Shared fixtures for post-corpus tests."""

import textwrap

import pytest


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Reset all module-level singletons and caches between tests."""
    yield

    # 1. Settings LRU cache
    from corpus.config import get_settings

    get_settings.cache_clear()

    # 2. Loaded corpus cache (query service)
    import corpus.services.documents as documents_mod

    documents_mod._cache = None

    # 3. Per-file parse cache (loader)
    import corpus.services.loader as loader_mod

    loader_mod._document_cache.clear()


def write_doc(root, relative_path: str, content: str):
    """Write a dedented document below *root* and return its path."""
    path = root / relative_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content).lstrip(), encoding="utf-8")
    return path


@pytest.fixture
def doc_writer():
    """Expose write_doc to tests without importing conftest."""
    return write_doc


@pytest.fixture
def content_dir(tmp_path):
    """A small content tree: two posts, one draft, and an About page."""
    root = tmp_path / "content"
    write_doc(
        root,
        "post/database-cleaner.md",
        """
        ---
        title: You might not need DatabaseCleaner
        date: 2017-10-31T09:30:00-04:00
        categories: [rails, testing]
        tags: [rspec, database_cleaner]
        ---
        Transactional fixtures roll back every example.
        """,
    )
    write_doc(
        root,
        "post/lint-factories.md",
        """
        ---
        title: Lint your factories
        date: 2017-11-02T08:00:00-04:00
        categories: [Rails, testing]
        tags: [rspec, factory_girl]
        ---
        Call FactoryGirl.lint before the suite.
        """,
    )
    write_doc(
        root,
        "post/unfinished.md",
        """
        ---
        title: Unfinished thoughts on system tests
        date: 2017-10-31T12:00:00-04:00
        draft: true
        tags: [capybara]
        ---
        Not ready yet.
        """,
    )
    write_doc(
        root,
        "about.md",
        """
        ---
        title: About
        date: 2017-10-30T20:00:00-04:00
        showpagemeta: false
        ---
        Notes on testing Rails applications.
        """,
    )
    return root


@pytest.fixture
def mock_settings(monkeypatch, content_dir):
    """Provide a Settings object pointing at the temporary content tree."""
    from corpus.config import Settings, get_settings

    test_settings = Settings(
        content_dir=str(content_dir),
        corpus_on_error="fail",
        include_future=False,
        corpus_cache_ttl=60,
    )

    get_settings.cache_clear()
    monkeypatch.setattr("corpus.config.get_settings", lambda: test_settings)

    # Patch get_settings in modules that import it directly
    # (from corpus.config import get_settings creates a local binding that
    # the corpus.config monkeypatch above does not affect)
    for mod_path in [
        "corpus.services.documents",
        "scripts.check_corpus",
    ]:
        monkeypatch.setattr(f"{mod_path}.get_settings", lambda: test_settings)

    return test_settings
