# classy/markdown/renderer.py

import logging

from .annotations import ANNOTATION_PREFIX
from .events import (
    Event,
    EventKind,
    flatten,
    map_notes,
    parse,
    serialize,
    unflatten,
)
from .rewriter import paragraph_classes

logger = logging.getLogger(__name__)


def footnote_classes(events, context):
    """
    Run the event processors over the blocks of every footnote.

    Footnote definitions live inside opaque ``Note`` inlines, so each one is
    flattened into a stream of its own, processed and rebuilt in place.
    """

    def process_note(blocks):
        return unflatten(apply_event_processors(flatten(blocks), context))

    new_events = []
    for event in events:
        if event.kind in (EventKind.BLOCK, EventKind.INLINE):
            node = map_notes(event.node, process_note)
            event = Event(event.kind, event.tag, event.text, node)
        new_events.append(event)
    return new_events


EVENT_PROCESSORS = [
    footnote_classes,  # Annotated paragraphs inside footnote definitions
    paragraph_classes,  # Wrap {:.class-name} paragraphs in a classed div
    # Order matters - they run sequentially
]


def apply_event_processors(events, context):
    """Apply all event processors in order"""
    for processor in EVENT_PROCESSORS:
        events = processor(events, context)
    return events


def classify_markdown(text, context=None):
    """
    Rewrite one chapter's markdown, applying paragraph class annotations.

    Args:
        text: Raw chapter markdown
        context: Optional dict shared with the event processors

    Returns:
        The rewritten markdown, or ``text`` itself when nothing changed
    """
    context = context if context is not None else {}

    # Checked on the raw source: a marker spelled with entities is never matched
    if not text or ANNOTATION_PREFIX not in text:
        return text

    document, events = parse(text)
    new_events = apply_event_processors(events, context)

    if new_events == events:
        return text

    logger.debug(
        f"Rewrote {len(context.get('annotations', []))} annotated paragraph(s) "
        f"in {context.get('chapter') or 'chapter'}"
    )
    return serialize(document, new_events)
