# classy/markdown/rewriter.py
"""
Wrap annotated paragraphs in a classed <div>.

Given the annotations found by ``scan_annotations``, build a new event
stream where each annotated paragraph is bracketed by raw HTML events

    <div class="class-name">
    ...paragraph...
    </div>

and the annotation text run itself is dropped. Everything outside the
annotated paragraphs is copied through untouched.
"""

import html as html_lib
import logging
from typing import List, Sequence

from classy.markdown.annotations import ClassAnnotation, scan_annotations
from classy.markdown.events import Event, html

logger = logging.getLogger(__name__)


def wrapper_open(class_name: str) -> Event:
    return html(f'<div class="{html_lib.escape(class_name, quote=True)}">')


def wrapper_close() -> Event:
    return html("</div>")


def rewrite_events(
    events: Sequence[Event], annotations: Sequence[ClassAnnotation]
) -> List[Event]:
    """
    Splice wrapper events around every annotated paragraph.

    Args:
        events: The original event stream
        annotations: Annotations for ``events`` in document order

    Returns:
        A new event stream. Each annotation adds a wrapper pair and removes
        its text run; all other events are kept in order.
    """
    new_events: List[Event] = []
    last_end = 0

    for annotation in annotations:
        # Unannotated events before this paragraph
        new_events.extend(events[last_end : annotation.paragraph_start])

        end = annotation.paragraph_end
        if end is None:
            # Unterminated paragraph: take the rest of the stream
            end = len(events) - 1
            logger.debug(
                f"Paragraph annotated with {annotation.class_name!r} is never closed"
            )

        new_events.append(wrapper_open(annotation.class_name))
        new_events.append(events[annotation.paragraph_start])
        new_events.extend(events[annotation.index + 1 : end + 1])
        new_events.append(wrapper_close())

        last_end = end + 1

    new_events.extend(events[last_end:])
    return new_events


def paragraph_classes(events: List[Event], context: dict) -> List[Event]:
    """
    Event processor applying ``{:.class-name}`` paragraph annotations.

    The class names found are appended to ``context["annotations"]``.
    """
    annotations = scan_annotations(events)
    context.setdefault("annotations", []).extend(a.class_name for a in annotations)
    if not annotations:
        return events
    return rewrite_events(events, annotations)
