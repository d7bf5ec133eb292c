"""
Streaming XML event sources.

The interpreter consumes a flat stream of `(event, name, value)` tuples:

    (EVENT_START, local_name, attributes)
    (EVENT_TEXT, None, text)
    (EVENT_END, local_name, None)

Names and attribute keys have their namespace stripped. Any iterable of such tuples is a
valid source, so documents can be driven from synthetic event lists as well as from XML.
"""

from xml.etree.ElementTree import iterparse

EVENT_START = "start"
EVENT_TEXT = "text"
EVENT_END = "end"


def local_name(tag):
    if tag[0] == "{":
        return tag[tag.index("}") + 1 :]
    if ":" in tag:
        return tag[tag.index(":") + 1 :]
    return tag


def local_attributes(attrib):
    return {local_name(k): v for k, v in attrib.items()}


class IterparseEventSource:
    """
    Event source over an XML byte or text stream, built on iterparse.

    Character data is emitted when the next structural event arrives, by then the tree
    builder has attached it to the element as text or tail.
    """

    def __init__(self, stream):
        self.stream = stream

    def __iter__(self):
        pending = None
        for event, elem in iterparse(self.stream, events=("start", "end")):
            if pending is not None:
                owner, attr = pending
                text = getattr(owner, attr)
                if text:
                    yield EVENT_TEXT, None, text
                pending = None
            tag = local_name(elem.tag)
            if event == "start":
                yield EVENT_START, tag, local_attributes(elem.attrib)
                pending = elem, "text"
            else:
                yield EVENT_END, tag, None
                pending = elem, "tail"
                # Finished subtrees are not needed again.
                for child in list(elem):
                    elem.remove(child)


class ListEventSource:
    """
    Event source over prepared events, for tests and callers producing their own stream.

    Usage:
        source = ListEventSource()
        source.start("svg", viewBox="0 0 10 10")
        source.start("rect", width="10", height="10")
        source.end("rect")
        source.end("svg")
    """

    def __init__(self, events=None):
        self.events = list(events) if events is not None else []

    def __iter__(self):
        return iter(self.events)

    def start(self, name, attributes=None, **kwargs):
        attributes = dict(attributes) if attributes is not None else {}
        attributes.update(kwargs)
        self.events.append((EVENT_START, name, attributes))
        return self

    def text(self, text):
        self.events.append((EVENT_TEXT, None, text))
        return self

    def end(self, name):
        self.events.append((EVENT_END, name, None))
        return self

    def element(self, name, attributes=None, **kwargs):
        self.start(name, attributes, **kwargs)
        return self.end(name)
