# classy/markdown/annotations.py
"""
Find paragraphs that open with a class annotation.

Syntax (kramdown style, on its own line at the start of a paragraph):

    {:.warning}
    This paragraph ends up inside <div class="warning">.

Only the text run that directly follows a paragraph start is considered, so
an annotation in the middle of a paragraph stays literal text. Annotations do
not nest: a paragraph end always closes the most recent open annotation.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from classy.markdown.events import Event

ANNOTATION_PREFIX = "{:."
ANNOTATION_SUFFIX = "}"


@dataclass
class ClassAnnotation:
    class_name: str
    index: int  # position of the annotation text run
    paragraph_start: int
    paragraph_end: Optional[int] = None


def match_annotation(value: str) -> Optional[str]:
    """
    Return the class name if ``value`` is a complete annotation.

    ``{:.}`` and other values with nothing between the braces are rejected.
    """
    if len(value) <= len(ANNOTATION_PREFIX) + len(ANNOTATION_SUFFIX):
        return None
    if not value.startswith(ANNOTATION_PREFIX) or not value.endswith(ANNOTATION_SUFFIX):
        return None
    return value[len(ANNOTATION_PREFIX) : -len(ANNOTATION_SUFFIX)]


def scan_annotations(events: Sequence[Event]) -> List[ClassAnnotation]:
    """
    Walk the event stream once and record every annotated paragraph.

    Args:
        events: Flat event stream of one chapter

    Returns:
        Annotations in document order. ``paragraph_end`` stays ``None`` only
        when the stream ends before the paragraph is closed.
    """
    annotations: List[ClassAnnotation] = []

    for i, event in enumerate(events):
        if event.is_text:
            if i > 0 and events[i - 1].is_paragraph_start:
                class_name = match_annotation(event.text)
                if class_name is not None:
                    annotations.append(
                        ClassAnnotation(
                            class_name=class_name,
                            index=i,
                            paragraph_start=i - 1,
                        )
                    )
        elif event.is_paragraph_end:
            if annotations and annotations[-1].paragraph_end is None:
                annotations[-1].paragraph_end = i

    return annotations
