from classy.markdown.annotations import scan_annotations
from classy.markdown.events import (
    Event,
    EventKind,
    Tag,
    html,
    paragraph_end,
    paragraph_start,
    text,
)
from classy.markdown.rewriter import (
    paragraph_classes,
    rewrite_events,
    wrapper_close,
    wrapper_open,
)

SOFT_BREAK = Event(EventKind.INLINE, node={"t": "SoftBreak"})
HEADING = Event(EventKind.BLOCK, node={"t": "Header", "c": [1, ["", [], []], []]})


def rewrite(events):
    return rewrite_events(events, scan_annotations(events))


def test_wrapper_events():
    assert wrapper_open("red") == html('<div class="red">')
    assert wrapper_close() == html("</div>")
    assert wrapper_open('a"b') == html('<div class="a&quot;b">')


def test_rewrite_without_annotations_is_a_copy():
    events = [HEADING, paragraph_start(), text("hello"), paragraph_end()]

    assert rewrite(events) == events


def test_rewrite_wraps_annotated_paragraph():
    style = html("<style>.red{color: red;}</style>")
    events = [
        style,
        paragraph_start(),
        text("{:.red}"),
        SOFT_BREAK,
        text("red text"),
        paragraph_end(),
    ]

    assert rewrite(events) == [
        style,
        html('<div class="red">'),
        paragraph_start(),
        SOFT_BREAK,
        text("red text"),
        paragraph_end(),
        html("</div>"),
    ]


def test_rewrite_multiple_annotations_keeps_content_between():
    events = [
        paragraph_start(),
        text("{:.red}"),
        SOFT_BREAK,
        text("red text"),
        paragraph_end(),
        HEADING,
        paragraph_start(),
        text("plain text"),
        paragraph_end(),
        paragraph_start(),
        text("{:.blue}"),
        SOFT_BREAK,
        text("blue text"),
        paragraph_end(),
        paragraph_start(),
        text("tail"),
        paragraph_end(),
    ]

    new_events = rewrite(events)

    assert new_events == [
        html('<div class="red">'),
        paragraph_start(),
        SOFT_BREAK,
        text("red text"),
        paragraph_end(),
        html("</div>"),
        HEADING,
        paragraph_start(),
        text("plain text"),
        paragraph_end(),
        html('<div class="blue">'),
        paragraph_start(),
        SOFT_BREAK,
        text("blue text"),
        paragraph_end(),
        html("</div>"),
        paragraph_start(),
        text("tail"),
        paragraph_end(),
    ]
    # One wrapper pair added and one text run removed per annotation
    assert len(new_events) == len(events) + 2


def test_rewrite_wrappers_follow_annotation_order():
    classes = ["one", "two", "three"]
    events = []
    for name in classes:
        events += [paragraph_start(), text(f"{{:.{name}}}"), paragraph_end()]

    new_events = rewrite(events)

    openers = [
        e.text for e in new_events if e.kind is EventKind.HTML and e.text != "</div>"
    ]
    assert openers == [f'<div class="{name}">' for name in classes]


def test_rewrite_unterminated_paragraph_wraps_to_end_of_stream():
    events = [
        paragraph_start(),
        text("plain"),
        paragraph_end(),
        paragraph_start(),
        text("{:.red}"),
        SOFT_BREAK,
        text("red text"),
    ]

    assert rewrite(events) == [
        paragraph_start(),
        text("plain"),
        paragraph_end(),
        html('<div class="red">'),
        paragraph_start(),
        SOFT_BREAK,
        text("red text"),
        html("</div>"),
    ]


def test_rewrite_inside_blockquote():
    events = [
        Event(EventKind.START, Tag.BLOCK_QUOTE),
        paragraph_start(),
        text("{:.note}"),
        SOFT_BREAK,
        text("quoted"),
        paragraph_end(),
        Event(EventKind.END, Tag.BLOCK_QUOTE),
    ]

    assert rewrite(events) == [
        Event(EventKind.START, Tag.BLOCK_QUOTE),
        html('<div class="note">'),
        paragraph_start(),
        SOFT_BREAK,
        text("quoted"),
        paragraph_end(),
        html("</div>"),
        Event(EventKind.END, Tag.BLOCK_QUOTE),
    ]


def test_paragraph_classes_records_annotations_in_context():
    events = [paragraph_start(), text("{:.red}"), paragraph_end()]
    context = {}

    new_events = paragraph_classes(events, context)

    assert context["annotations"] == ["red"]
    assert new_events[0] == html('<div class="red">')


def test_paragraph_classes_returns_same_events_when_nothing_matches():
    events = [paragraph_start(), text("{:.}"), paragraph_end()]
    context = {}

    assert paragraph_classes(events, context) is events
    assert context["annotations"] == []
