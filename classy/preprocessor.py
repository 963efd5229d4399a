# classy/preprocessor.py

import logging

from classy.book import PreprocessorContext, iter_chapters
from classy.errors import ClassyError
from classy.markdown.config import PREPROCESSOR_NAME, SUPPORTED_RENDERERS
from classy.markdown.renderer import classify_markdown

logger = logging.getLogger(__name__)


class Classy:
    """mdBook preprocessor that applies ``{:.class-name}`` paragraph annotations."""

    name = PREPROCESSOR_NAME

    def supports_renderer(self, renderer: str) -> bool:
        return renderer in SUPPORTED_RENDERERS

    def run(self, ctx: PreprocessorContext, book: dict) -> dict:
        """
        Rewrite the content of every chapter in place.

        A chapter that fails to transform is logged and keeps its original
        content; the remaining chapters are still processed.
        """
        for chapter in iter_chapters(book):
            self.classify_chapter(chapter)
        return book

    def classify_chapter(self, chapter: dict) -> None:
        content = chapter.get("content")
        if not isinstance(content, str) or not content:
            # Draft chapters have no content
            return

        name = chapter.get("name") or chapter.get("path") or "<unnamed>"
        context = {"chapter": name}

        try:
            chapter["content"] = classify_markdown(content, context)
        except (ClassyError, RuntimeError, OSError, ValueError) as exc:
            logger.error(f"{self.name} error in chapter {name!r}: {exc}")
            return

        if context.get("annotations"):
            logger.debug(
                f"Applied {len(context['annotations'])} class annotation(s) to {name!r}"
            )
