"""Turns the accumulated schema evidence into type declarations.

The finalizer reads a SchemaRegistry without mutating it and produces frozen
decision records: which element names get a declared Go struct, in which
order, and how every field is typed. The Go emitter only consumes these
records.
"""

# pylint: disable=too-many-arguments

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple

from xmlstructize.common import XmlName
from xmlstructize.errors import DuplicateNameError, RecursiveTypeError
from xmlstructize.naming import CamelCaseExportNaming, ExportNameStrategy
from xmlstructize.schema_inference import PrimitiveKind, SchemaNode, SchemaRegistry, classify_values

logger = logging.getLogger(__name__)


class FieldRole(Enum):
    ATTRIBUTE = 'attr'
    CHAR_DATA = 'chardata'
    ELEMENT = 'element'


@dataclass(frozen=True)
class TypeDecision:
    """A struct shape: a declared type, or an inline expansion when named types are off."""
    name: XmlName
    display_name: str
    fields: Tuple['FieldDecision', ...]


@dataclass(frozen=True)
class FieldDecision:
    """One struct field.

    Exactly one of kind (a primitive), type_name (a declared struct) or inline
    (an anonymous struct) is set.
    """
    name: XmlName
    display_name: str
    role: FieldRole
    kind: PrimitiveKind | None = None
    type_name: str | None = None
    inline: TypeDecision | None = None
    repeated: bool = False
    optional: bool = False


@dataclass(frozen=True)
class SchemaDecisions:
    declarations: Tuple[TypeDecision, ...]


class TypeFinalizer:
    """Decides declared types, ordering and field bindings for a registry."""

    def __init__(self, export_name_strategy: ExportNameStrategy | None = None,
                 char_data_field_name: str = 'CharData', named_types: bool = True,
                 preserve_order: bool = False, time_layout: str = ''):
        self.export_name_strategy = export_name_strategy or CamelCaseExportNaming()
        self.char_data_field_name = char_data_field_name
        self.named_types = named_types
        self.preserve_order = preserve_order
        self.time_layout = time_layout
        self.kinds: Dict[XmlName, PrimitiveKind] = {}

    def display_name(self, name: XmlName) -> str:
        return self.export_name_strategy.export(name)

    def sort_key(self, name: XmlName, first_seen: int):
        if self.preserve_order:
            return (first_seen,)
        return (self.display_name(name), name.space, name.local)

    def node_kind(self, node: SchemaNode) -> PrimitiveKind:
        kind = self.kinds.get(node.name)
        if kind is None:
            kind = self.kinds[node.name] = classify_values(node.char_data_samples, self.time_layout)
        return kind

    def finalize(self, registry: SchemaRegistry) -> SchemaDecisions:
        """Computes the declarations for everything observed in registry.

        Raises:
            DuplicateNameError: Two declared types or two fields of one type share a Go name
            RecursiveTypeError: An element contains itself and named types are disabled
        """
        self.kinds = {}
        if self.named_types:
            declared = [n for n in registry.nodes.values() if not n.is_simple]
        else:
            declared = [registry.nodes[name] for name in registry.root_names
                        if not registry.nodes[name].is_simple]
        declared.sort(key=lambda n: self.sort_key(n.name, n.first_seen_order or 0))

        seen: Dict[str, XmlName] = {}
        for node in declared:
            display_name = self.display_name(node.name)
            if display_name in seen:
                raise DuplicateNameError(display_name, (seen[display_name], node.name))
            seen[display_name] = node.name

        declarations = tuple(self.type_decision(registry, node, []) for node in declared)
        logger.debug("Finalized %d declared types from %d elements", len(declarations), len(registry))
        return SchemaDecisions(declarations)

    def type_decision(self, registry: SchemaRegistry, node: SchemaNode, stack: List[XmlName]) -> TypeDecision:
        display_name = self.display_name(node.name)
        if node.name in stack:
            raise RecursiveTypeError(display_name)
        stack.append(node.name)
        try:
            fields: List[FieldDecision] = []

            attributes = list(node.attributes.items())
            if not self.preserve_order:
                attributes.sort(key=lambda item: self.sort_key(item[0], 0))
            for attr_name, evidence in attributes:
                fields.append(FieldDecision(
                    name=attr_name,
                    display_name=self.display_name(attr_name),
                    role=FieldRole.ATTRIBUTE,
                    kind=classify_values(evidence.samples, self.time_layout),
                    optional=evidence.count < node.instance_count))

            if node.has_char_data:
                fields.append(FieldDecision(
                    name=XmlName('', ''),
                    display_name=self.char_data_field_name,
                    role=FieldRole.CHAR_DATA,
                    kind=PrimitiveKind.STRING))

            children = list(node.children.items())
            if not self.preserve_order:
                children.sort(key=lambda item: self.sort_key(item[0], 0))
            for child_name, evidence in children:
                fields.append(self.child_field(registry, registry.nodes[child_name], evidence.count,
                                               evidence.repeats, node.instance_count, stack))

            names: Dict[str, XmlName] = {}
            for f in fields:
                if f.display_name in names:
                    raise DuplicateNameError(f.display_name, (names[f.display_name], f.name), kind='field')
                names[f.display_name] = f.name
            return TypeDecision(node.name, display_name, tuple(fields))
        finally:
            stack.pop()

    def child_field(self, registry: SchemaRegistry, child: SchemaNode, count: int, repeats: bool,
                    parent_instances: int, stack: List[XmlName]) -> FieldDecision:
        kind = None
        type_name = None
        inline = None
        if child.is_simple:
            kind = self.node_kind(child)
        elif self.named_types:
            type_name = self.display_name(child.name)
        else:
            inline = self.type_decision(registry, child, stack)
        return FieldDecision(
            name=child.name,
            display_name=self.display_name(child.name),
            role=FieldRole.ELEMENT,
            kind=kind,
            type_name=type_name,
            inline=inline,
            repeated=repeats,
            optional=not repeats and count < parent_instances)
