# classy/markdown/config.py

PREPROCESSOR_NAME = "classy"

# mdBook release whose JSON request layout this preprocessor was written against
MDBOOK_VERSION = "0.4.34"

SUPPORTED_RENDERERS = ("html",)

# Markdown extensions mdBook turns on in its own CommonMark parser
MDBOOK_EXTENSIONS = ["pipe_tables", "footnotes", "strikeout", "task_lists"]


def get_pandoc_config():
    """
    Configuration for the pypandoc parse/serialize round trip.

    Chapters are read into pandoc's JSON AST and written back as markdown in
    the same CommonMark dialect, so the HTML renderer downstream sees the
    syntax it expects. Line wrapping is preserved so untouched paragraphs keep
    their original line breaks.
    """
    dialect = "+".join(["commonmark"] + MDBOOK_EXTENSIONS)

    return {
        "reader": dialect,
        "reader_args": [],
        "writer": dialect,
        "writer_args": [
            # Keep soft line breaks where the author put them
            "--wrap=preserve",
        ],
    }
