"""Structural evidence gathered from XML documents and primitive type inference.

This module provides:
- classify_values: infer the primitive kind shared by a set of text samples
- SchemaNode: the evidence accumulated for every occurrence of one element name
- SchemaRegistry: all schema nodes observed so far, keyed by qualified name
"""

import itertools
import math
import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, Iterator, List

from xmlstructize.common import XmlName


class PrimitiveKind(Enum):
    """Primitive kinds in precedence order, most specific first."""
    BOOL = 'bool'
    INT = 'int'
    FLOAT = 'float'
    TIME = 'time'
    STRING = 'string'


_BOOL_VALUES = frozenset(['true', 'false'])
_INT_PATTERN = re.compile(r'[+-]?([0-9]+)')
_FLOAT_PATTERN = re.compile(r'[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?')
_FLOAT_SPECIALS = frozenset(['inf', '+inf', '-inf', 'infinity', '+infinity', '-infinity', 'nan', '+nan', '-nan'])
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
INT64_MAX_DIGITS = 19


def is_bool(value: str) -> bool:
    return value in _BOOL_VALUES


def is_int(value: str) -> bool:
    match = _INT_PATTERN.fullmatch(value)
    if not match:
        return False
    digits = match.group(1).lstrip('0')
    if len(digits) > INT64_MAX_DIGITS:
        return False
    number = int(digits or '0')
    if value.startswith('-'):
        number = -number
    return INT64_MIN <= number <= INT64_MAX


def is_float(value: str) -> bool:
    if value.lower() in _FLOAT_SPECIALS:
        return True
    if not _FLOAT_PATTERN.fullmatch(value):
        return False
    # 1e400 overflows a float64
    return math.isfinite(float(value))


def time_layouts(time_layout: str) -> List[str]:
    """Returns the layout and, if it ends whole seconds, a variant accepting fractional seconds."""
    if '%S' in time_layout and '%f' not in time_layout:
        return [time_layout, time_layout.replace('%S', '%S.%f', 1)]
    return [time_layout]


def is_time(value: str, time_layout: str) -> bool:
    for layout in time_layouts(time_layout):
        try:
            datetime.strptime(value, layout)
        except ValueError:
            continue
        return True
    return False


def classify_values(samples: Iterable[str], time_layout: str = '') -> PrimitiveKind:
    """Infers the most specific primitive kind satisfied by every sample.

    Empty samples are compatible with every kind. Times are only recognized
    when a time layout (a datetime.strptime format) is given.

    Args:
        samples: The observed text values
        time_layout: strptime format for timestamps, empty to disable

    Returns:
        The inferred PrimitiveKind, STRING when there is no non-empty sample
    """
    values = [s for s in samples if s != '']
    if not values:
        return PrimitiveKind.STRING
    if all(is_bool(v) for v in values):
        return PrimitiveKind.BOOL
    if all(is_int(v) for v in values):
        return PrimitiveKind.INT
    if all(is_float(v) for v in values):
        return PrimitiveKind.FLOAT
    if time_layout and all(is_time(v, time_layout) for v in values):
        return PrimitiveKind.TIME
    return PrimitiveKind.STRING


@dataclass
class AttributeEvidence:
    """Distinct values seen for one attribute and the number of instances carrying it."""
    samples: Dict[str, None] = field(default_factory=dict)
    count: int = 0


@dataclass
class ChildEvidence:
    """Number of parent instances containing a child, and whether it ever repeated in one."""
    count: int = 0
    repeats: bool = False


class SchemaNode:
    """Evidence accumulated for every occurrence of one element name.

    A node is shared by all places the name occurs, in any document. Attribute
    and child evidence is recorded per instance; finalize_instance() closes an
    instance once all of its evidence has been recorded.
    """

    def __init__(self, name: XmlName):
        self.name = name
        self.attributes: Dict[XmlName, AttributeEvidence] = {}
        self.children: Dict[XmlName, ChildEvidence] = {}
        self._char_data_samples: Dict[str, None] = {}
        self.instance_count = 0
        self.first_seen_order: int | None = None

    def record_attribute(self, name: XmlName, value: str, present: bool = True) -> None:
        """Records an attribute value; present=False adds the sample without counting another instance."""
        evidence = self.attributes.get(name)
        if evidence is None:
            evidence = self.attributes[name] = AttributeEvidence()
        evidence.samples[value] = None
        if present:
            evidence.count += 1

    def record_child_occurrence(self, name: XmlName, count_in_instance: int) -> None:
        """Records how many times a child occurred within one instance of this node."""
        evidence = self.children.get(name)
        if evidence is None:
            evidence = self.children[name] = ChildEvidence()
        if count_in_instance >= 1:
            evidence.count += 1
        if count_in_instance > 1:
            evidence.repeats = True

    def record_char_data(self, text: str) -> None:
        self._char_data_samples[text] = None

    def finalize_instance(self) -> None:
        self.instance_count += 1

    def ensure_order(self, counter: Iterator[int]) -> None:
        if self.first_seen_order is None:
            self.first_seen_order = next(counter)

    @property
    def char_data_samples(self) -> List[str]:
        return list(self._char_data_samples)

    @property
    def is_simple(self) -> bool:
        """True when the node never carried attributes or child elements."""
        return not self.attributes and not self.children

    @property
    def has_char_data(self) -> bool:
        return any(self._char_data_samples)

    def __repr__(self) -> str:
        return f"SchemaNode({self.name!s}, instances={self.instance_count})"


class SchemaRegistry:
    """All schema nodes observed so far, keyed by qualified name.

    The registry is mutated in place by observers and is not synchronized:
    callers must not observe documents into the same registry concurrently.
    """

    def __init__(self):
        self.nodes: Dict[XmlName, SchemaNode] = {}
        self.root_names: Dict[XmlName, None] = {}
        self.order = itertools.count(1)

    def lookup(self, name: XmlName) -> SchemaNode:
        """Returns the node for name, creating it on first use."""
        node = self.nodes.get(name)
        if node is None:
            node = self.nodes[name] = SchemaNode(name)
        return node

    def add_root(self, name: XmlName) -> None:
        self.root_names.setdefault(name, None)

    def __contains__(self, name: XmlName) -> bool:
        return name in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)
