"""Observes XML documents and records their structure in a SchemaRegistry.

This module provides:
- iter_xml_tokens: turn an XML byte stream into start/char-data/end tokens
- XmlObserver: feed those tokens into the schema nodes of a registry
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import BinaryIO, Dict, Iterable, Iterator, List, NamedTuple, Tuple

from xmlstructize.common import XmlName, split_clark_name
from xmlstructize.errors import ParseError
from xmlstructize.naming import IgnoreNamespaceNaming, NameStrategy
from xmlstructize.schema_inference import SchemaNode, SchemaRegistry

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class StartElement(NamedTuple):
    name: XmlName
    attributes: Tuple[Tuple[XmlName, str], ...]


class CharData(NamedTuple):
    text: str


class EndElement(NamedTuple):
    name: XmlName


Token = StartElement | CharData | EndElement


def _parse_error(err: ET.ParseError) -> ParseError:
    return ParseError(str(err).split(': line')[0], getattr(err, 'position', None))


def _element_tokens(event: str, element: ET.Element) -> Iterator[Token]:
    if event == 'start':
        attributes = tuple((split_clark_name(k), v) for k, v in element.attrib.items())
        yield StartElement(split_clark_name(element.tag), attributes)
        return
    # The text before the first child and the tail of every child are all
    # known once the element ends.
    if element.text:
        yield CharData(element.text)
    for child in element:
        if child.tail:
            yield CharData(child.tail)
    yield EndElement(split_clark_name(element.tag))
    # Release the subtree; the element's own tail may still be filled in.
    del element[:]
    element.text = None
    element.attrib.clear()


def _read_tokens(parser: ET.XMLPullParser) -> Iterator[Token]:
    # feed() queues syntax errors; read_events() raises them after the
    # events that preceded the error.
    try:
        for event, element in parser.read_events():
            yield from _element_tokens(event, element)
    except ET.ParseError as err:
        raise _parse_error(err) from err


def iter_xml_tokens(stream: BinaryIO, chunk_size: int = CHUNK_SIZE) -> Iterator[Token]:
    """Reads an XML document from a binary stream and yields its tokens.

    Character data of an element is delivered after its last child and
    before its end token. Empty or whitespace-only input yields nothing.

    Raises:
        ParseError: The document is malformed or truncated
        OSError: Reading the stream failed
    """
    parser = ET.XMLPullParser(events=('start', 'end'))
    seen_content = False
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        if not seen_content and not chunk.strip():
            continue
        seen_content = True
        try:
            parser.feed(chunk)
        except ET.ParseError as err:
            raise _parse_error(err) from err
        yield from _read_tokens(parser)
    if not seen_content:
        return
    try:
        parser.close()
    except ET.ParseError as err:
        raise _parse_error(err) from err
    yield from _read_tokens(parser)


@dataclass
class _Frame:
    node: SchemaNode
    child_counts: Dict[XmlName, int] = field(default_factory=dict)
    char_data: List[str] = field(default_factory=list)


class XmlObserver:
    """Records the elements of one document into a schema registry.

    Evidence is committed element by element as each one closes, so a parse
    error leaves the evidence of already closed elements in the registry.
    """

    def __init__(self, registry: SchemaRegistry, name_strategy: NameStrategy | None = None,
                 top_level_attributes: bool = False):
        self.registry = registry
        self.name_strategy = name_strategy or IgnoreNamespaceNaming()
        self.top_level_attributes = top_level_attributes
        self.frames: List[_Frame] = []

    def start_element(self, token: StartElement) -> None:
        name = self.name_strategy.normalize(token.name)
        node = self.registry.lookup(name)
        is_root = not self.frames
        if is_root:
            self.registry.add_root(name)
        if not is_root or self.top_level_attributes:
            # names merged by the name strategy count once per instance
            seen = set()
            for attr_name, value in token.attributes:
                key = self.name_strategy.normalize(attr_name)
                node.record_attribute(key, value, present=key not in seen)
                seen.add(key)
        node.ensure_order(self.registry.order)
        self.frames.append(_Frame(node))

    def char_data(self, token: CharData) -> None:
        if self.frames:
            self.frames[-1].char_data.append(token.text)

    def end_element(self, token: EndElement) -> None:
        if not self.frames:
            raise ParseError(f"unexpected end element {token.name}")
        frame = self.frames.pop()
        node = frame.node
        node.record_char_data(''.join(frame.char_data).strip())
        for child_name, count in frame.child_counts.items():
            node.record_child_occurrence(child_name, count)
        node.finalize_instance()
        if self.frames:
            counts = self.frames[-1].child_counts
            counts[node.name] = counts.get(node.name, 0) + 1

    def observe(self, tokens: Iterable[Token]) -> None:
        """Consumes a token stream for one document."""
        self.frames = []
        for token in tokens:
            if isinstance(token, StartElement):
                self.start_element(token)
            elif isinstance(token, CharData):
                self.char_data(token)
            else:
                self.end_element(token)
        if self.frames:
            raise ParseError(f"unexpected end of document inside {self.frames[-1].node.name}")
        logger.debug("Observed document, %d distinct elements so far", len(self.registry))

    def observe_stream(self, stream: BinaryIO) -> None:
        self.observe(iter_xml_tokens(stream))
