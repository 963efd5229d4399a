# classy/markdown/events.py
"""
Flat event stream view of a pandoc document.

Pandoc parses markdown into a nested JSON AST. The paragraph class rewrite
works on a flat, ordered stream of events instead, so this module converts
between the two:

    Para [Str "{:.red}", SoftBreak, Str "red", Space, Str "text"]

becomes:

    START(paragraph), TEXT("{:.red}"), INLINE(SoftBreak), TEXT("red text"),
    END(paragraph)

Container blocks (paragraphs, blockquotes, divs, lists and list items) are
opened and closed with START/END events. Raw HTML blocks become HTML events.
Inside a paragraph, runs of Str/Space inlines are merged into a single TEXT
event, so a text run ends at a line break or at any other inline element.
Everything else passes through untouched as an opaque BLOCK or INLINE event.

The parse and serialize helpers at the bottom drive pandoc through pypandoc.
"""

import enum
import json
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

import pypandoc

from classy.errors import EventStreamError
from classy.markdown.config import get_pandoc_config


class EventKind(enum.Enum):
    START = "start"
    END = "end"
    TEXT = "text"
    HTML = "html"
    BLOCK = "block"
    INLINE = "inline"


class Tag(enum.Enum):
    PARAGRAPH = "Para"
    BLOCK_QUOTE = "BlockQuote"
    DIV = "Div"
    BULLET_LIST = "BulletList"
    ORDERED_LIST = "OrderedList"
    ITEM = "Item"


_LIST_TAGS = (Tag.BULLET_LIST, Tag.ORDERED_LIST)

# Inline nodes merged into a single text run
_TEXT_INLINES = ("Str", "Space")

# Inline nodes dropped when they end up at the very start of a paragraph
_BREAK_INLINES = ("SoftBreak", "LineBreak", "Space")

_HTML_FORMATS = ("html", "html5")


@dataclass(frozen=True)
class Event:
    """
    One item of the flat event stream.

    Events are compared by value. ``node`` holds whatever pandoc data the
    event needs to be turned back into a tree: the original inlines of a text
    run, the node of an opaque block or inline, or the attributes of a div or
    ordered list.
    """

    kind: EventKind
    tag: Optional[Tag] = None
    text: str = ""
    node: Any = None

    @property
    def is_paragraph_start(self) -> bool:
        return self.kind is EventKind.START and self.tag is Tag.PARAGRAPH

    @property
    def is_paragraph_end(self) -> bool:
        return self.kind is EventKind.END and self.tag is Tag.PARAGRAPH

    @property
    def is_text(self) -> bool:
        return self.kind is EventKind.TEXT


def paragraph_start() -> Event:
    return Event(EventKind.START, Tag.PARAGRAPH)


def paragraph_end() -> Event:
    return Event(EventKind.END, Tag.PARAGRAPH)


def text(value: str) -> Event:
    return Event(EventKind.TEXT, text=value)


def html(markup: str) -> Event:
    return Event(EventKind.HTML, text=markup)


# --- AST -> events ----------------------------------------------------------


def flatten(blocks: List[dict]) -> List[Event]:
    """
    Flatten a list of pandoc blocks into an event stream.

    Args:
        blocks: The ``blocks`` array of a pandoc JSON document

    Returns:
        Events in document order
    """
    events: List[Event] = []
    for block in blocks:
        _flatten_block(block, events)
    return events


def _flatten_block(block: dict, events: List[Event]) -> None:
    kind = block.get("t")
    content = block.get("c")

    if kind == "Para":
        events.append(paragraph_start())
        _flatten_inlines(content, events)
        events.append(paragraph_end())
    elif kind == "RawBlock" and content[0] in _HTML_FORMATS:
        events.append(html(content[1]))
    elif kind == "BlockQuote":
        events.append(Event(EventKind.START, Tag.BLOCK_QUOTE))
        for child in content:
            _flatten_block(child, events)
        events.append(Event(EventKind.END, Tag.BLOCK_QUOTE))
    elif kind == "Div":
        attr, children = content
        events.append(Event(EventKind.START, Tag.DIV, node=attr))
        for child in children:
            _flatten_block(child, events)
        events.append(Event(EventKind.END, Tag.DIV))
    elif kind in ("BulletList", "OrderedList"):
        if kind == "BulletList":
            tag, list_attrs, items = Tag.BULLET_LIST, None, content
        else:
            tag, (list_attrs, items) = Tag.ORDERED_LIST, content
        events.append(Event(EventKind.START, tag, node=list_attrs))
        for item in items:
            events.append(Event(EventKind.START, Tag.ITEM))
            for child in item:
                _flatten_block(child, events)
            events.append(Event(EventKind.END, Tag.ITEM))
        events.append(Event(EventKind.END, tag))
    else:
        events.append(Event(EventKind.BLOCK, node=block))


def _flatten_inlines(inlines: List[dict], events: List[Event]) -> None:
    run: List[dict] = []
    for inline in inlines:
        if inline.get("t") in _TEXT_INLINES:
            run.append(inline)
            continue
        _flush_text_run(run, events)
        run = []
        events.append(Event(EventKind.INLINE, node=inline))
    _flush_text_run(run, events)


def _flush_text_run(run: List[dict], events: List[Event]) -> None:
    if not run:
        return
    value = "".join(node["c"] if node["t"] == "Str" else " " for node in run)
    events.append(Event(EventKind.TEXT, text=value, node=tuple(run)))


# --- events -> AST ----------------------------------------------------------


class _Frame:
    """An open container while rebuilding the tree."""

    def __init__(self, tag: Optional[Tag], payload: Any = None):
        self.tag = tag
        self.payload = payload
        self.children: List[Any] = []


def unflatten(events: List[Event]) -> List[dict]:
    """
    Rebuild pandoc blocks from an event stream.

    Args:
        events: A balanced event stream, as produced by ``flatten`` or by the
            paragraph class rewrite

    Returns:
        The ``blocks`` array of a pandoc JSON document

    Raises:
        EventStreamError: If START/END events do not pair up, or an event
            shows up somewhere pandoc cannot hold it
    """
    stack = [_Frame(None)]

    for position, event in enumerate(events):
        frame = stack[-1]
        in_paragraph = frame.tag is Tag.PARAGRAPH

        if event.kind is EventKind.START:
            if in_paragraph:
                raise EventStreamError(
                    f"event {position}: cannot open {event.tag.value} inside a paragraph"
                )
            if (event.tag is Tag.ITEM) != (frame.tag in _LIST_TAGS):
                raise EventStreamError(
                    f"event {position}: list items must sit directly inside a list"
                )
            stack.append(_Frame(event.tag, event.node))
        elif event.kind is EventKind.END:
            if frame.tag is None or frame.tag is not event.tag:
                opened = frame.tag.value if frame.tag else "nothing"
                raise EventStreamError(
                    f"event {position}: {event.tag.value} closed while {opened} is open"
                )
            stack.pop()
            stack[-1].children.append(_build(frame))
        elif event.kind is EventKind.TEXT:
            if not in_paragraph:
                raise EventStreamError(f"event {position}: text outside a paragraph")
            frame.children.extend(_text_inlines(event))
        elif event.kind is EventKind.HTML:
            raw = "RawInline" if in_paragraph else "RawBlock"
            frame.children.append({"t": raw, "c": ["html", event.text]})
        elif event.kind is EventKind.INLINE:
            if not in_paragraph:
                raise EventStreamError(f"event {position}: inline outside a paragraph")
            frame.children.append(event.node)
        else:
            if in_paragraph:
                raise EventStreamError(f"event {position}: block inside a paragraph")
            frame.children.append(event.node)

    if len(stack) > 1:
        unclosed = ", ".join(frame.tag.value for frame in stack[1:])
        raise EventStreamError(f"unterminated containers at end of stream: {unclosed}")

    return stack[0].children


def _build(frame: _Frame) -> Any:
    children = frame.children
    if frame.tag is Tag.PARAGRAPH:
        return {"t": "Para", "c": _strip_leading_breaks(children)}
    if frame.tag is Tag.BLOCK_QUOTE:
        return {"t": "BlockQuote", "c": children}
    if frame.tag is Tag.DIV:
        return {"t": "Div", "c": [frame.payload, children]}
    if frame.tag is Tag.BULLET_LIST:
        return {"t": "BulletList", "c": children}
    if frame.tag is Tag.ORDERED_LIST:
        return {"t": "OrderedList", "c": [frame.payload, children]}
    # A list item is just its list of blocks
    return children


def _strip_leading_breaks(inlines: List[dict]) -> List[dict]:
    start = 0
    while start < len(inlines) and inlines[start].get("t") in _BREAK_INLINES:
        start += 1
    return inlines[start:]


def _text_inlines(event: Event) -> List[dict]:
    if event.node is not None:
        return list(event.node)

    inlines: List[dict] = []
    for i, word in enumerate(event.text.split(" ")):
        if i:
            inlines.append({"t": "Space"})
        if word:
            inlines.append({"t": "Str", "c": word})
    return inlines


# --- footnotes ---------------------------------------------------------------


def map_notes(node: Any, transform: Callable[[List[dict]], List[dict]]) -> Any:
    """
    Return a copy of ``node`` with the blocks of every footnote replaced.

    Pandoc keeps a footnote definition inside the ``Note`` inline that
    references it, wherever that is (a paragraph, a heading, a table cell).
    ``transform`` receives each note's block list and returns the new one.
    """
    if isinstance(node, list):
        return [map_notes(child, transform) for child in node]
    if isinstance(node, dict):
        if node.get("t") == "Note":
            return {"t": "Note", "c": transform(node["c"])}
        return {key: map_notes(value, transform) for key, value in node.items()}
    return node


# --- pandoc round trip ------------------------------------------------------


def parse(source: str) -> Tuple[dict, List[Event]]:
    """
    Parse markdown with pandoc and flatten it.

    Returns:
        The pandoc JSON document (kept for its metadata and API version) and
        the event stream of its blocks
    """
    config = get_pandoc_config()
    raw = pypandoc.convert_text(
        source,
        to="json",
        format=config["reader"],
        extra_args=config["reader_args"],
    )
    document = json.loads(raw)
    return document, flatten(document.get("blocks", []))


def serialize(document: dict, events: List[Event]) -> str:
    """
    Rebuild ``document`` from ``events`` and write it back out as markdown.

    Raises:
        EventStreamError: If the event stream is unbalanced
    """
    config = get_pandoc_config()
    rebuilt = dict(document)
    rebuilt["blocks"] = unflatten(events)
    return pypandoc.convert_text(
        json.dumps(rebuilt),
        to=config["writer"],
        format="json",
        extra_args=config["writer_args"],
    )
