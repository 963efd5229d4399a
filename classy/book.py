# classy/book.py
"""
The parts of mdBook's preprocessor protocol that classy needs.

mdBook runs a preprocessor with a JSON array ``[context, book]`` on stdin and
expects the (possibly modified) book back as JSON on stdout. The book is kept
as plain dicts so that every field classy does not touch survives the round
trip unchanged.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import IO, Any, Dict, Iterator, List, Tuple

from classy.errors import RequestError

logger = logging.getLogger(__name__)


@dataclass
class PreprocessorContext:
    root: str = ""
    config: Dict[str, Any] = field(default_factory=dict)
    renderer: str = ""
    mdbook_version: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PreprocessorContext":
        return cls(
            root=data.get("root") or "",
            config=data.get("config") or {},
            renderer=data.get("renderer") or "",
            mdbook_version=data.get("mdbook_version") or "",
        )


def load_request(stream: IO[str]) -> Tuple[PreprocessorContext, dict]:
    """
    Read the ``[context, book]`` request mdBook writes to the preprocessor.

    Raises:
        RequestError: If the input is not valid JSON or not shaped like a request
    """
    try:
        payload = json.load(stream)
    except json.JSONDecodeError as exc:
        raise RequestError(f"Unable to parse the input: {exc}") from exc

    if not isinstance(payload, list) or len(payload) != 2:
        raise RequestError("Expected a JSON array of [context, book]")

    context, book = payload
    if not isinstance(context, dict) or not isinstance(book, dict):
        raise RequestError("Expected a JSON array of [context, book]")

    return PreprocessorContext.from_dict(context), book


def dump_book(book: dict, stream: IO[str]) -> None:
    json.dump(book, stream, ensure_ascii=False)
    stream.flush()


def _book_items(book: dict) -> List[Any]:
    # mdBook 0.4 calls the top level "sections", 0.5 renamed it to "items"
    if "sections" in book:
        return book["sections"] or []
    return book.get("items") or []


def iter_chapters(book: dict) -> Iterator[dict]:
    """
    Yield every chapter of the book in document order, nested chapters included.

    Separators, part titles and malformed entries are skipped. The yielded dicts are the book's
    own, so changes to them land in the book.
    """
    yield from _walk(_book_items(book))


def _walk(items: List[Any]) -> Iterator[dict]:
    for item in items:
        if not isinstance(item, dict) or "Chapter" not in item:
            continue
        chapter = item["Chapter"]
        if not isinstance(chapter, dict):
            logger.warning(f"Skipping malformed chapter entry: {chapter!r}")
            continue
        yield chapter
        yield from _walk(chapter.get("sub_items") or [])
