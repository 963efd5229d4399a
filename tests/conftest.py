import pypandoc
import pytest

from classy.markdown.config import get_pandoc_config


def _pandoc_available():
    try:
        pypandoc.get_pandoc_version()
    except OSError:
        return False
    return True


PANDOC_AVAILABLE = _pandoc_available()


@pytest.fixture
def pandoc():
    """Skip the test when no pandoc binary can be found."""
    if not PANDOC_AVAILABLE:
        pytest.skip("pandoc binary not available")


@pytest.fixture
def render_html(pandoc):
    """Render markdown produced by classy to HTML, the way mdBook's renderer would."""

    def render(markdown):
        return pypandoc.convert_text(markdown, to="html", format=get_pandoc_config()["reader"])

    return render


def make_book(*contents):
    return {
        "sections": [
            {
                "Chapter": {
                    "name": f"Chapter {n}",
                    "content": content,
                    "number": [n],
                    "sub_items": [],
                    "path": f"chapter_{n}.md",
                    "source_path": f"chapter_{n}.md",
                    "parent_names": [],
                }
            }
            for n, content in enumerate(contents, start=1)
        ],
        "__non_exhaustive": None,
    }


def make_context(mdbook_version="0.4.34", renderer="html"):
    return {
        "root": "/path/to/book",
        "config": {
            "book": {
                "authors": ["AUTHOR"],
                "language": "en",
                "multilingual": False,
                "src": "src",
                "title": "TITLE",
            },
            "preprocessor": {"classy": {"command": "mdbook-classy"}},
        },
        "renderer": renderer,
        "mdbook_version": mdbook_version,
    }


@pytest.fixture
def book_factory():
    return make_book


@pytest.fixture
def context_factory():
    return make_context
