"""Renders finalized schema decisions as Go source."""

import logging
from typing import List, Set

from xmlstructize.common import process_template
from xmlstructize.errors import FormatError
from xmlstructize.goformat import GoSourceFormatter
from xmlstructize.schema_inference import PrimitiveKind
from xmlstructize.type_finalizer import FieldDecision, FieldRole, SchemaDecisions, TypeDecision

logger = logging.getLogger(__name__)

DEFAULT_HEADER = '// This file is automatically generated. DO NOT EDIT.'
INDENT = '\t'

PRIMITIVE_GO_TYPES = {
    PrimitiveKind.BOOL: 'bool',
    PrimitiveKind.FLOAT: 'float64',
    PrimitiveKind.TIME: 'time.Time',
    PrimitiveKind.STRING: 'string',
}


class GoEmitter:
    """Renders struct declarations with encoding/xml field tags."""

    def __init__(self, package_name: str = 'main', header: str = DEFAULT_HEADER, int_type: str = 'int',
                 use_pointers_for_optional_fields: bool = True, format_source: bool = True, formatter=None):
        self.package_name = package_name
        self.header = header
        self.int_type = int_type
        self.use_pointers_for_optional_fields = use_pointers_for_optional_fields
        self.format_source = format_source
        self.formatter = formatter or GoSourceFormatter()

    def map_primitive_to_go(self, kind: PrimitiveKind) -> str:
        if kind is PrimitiveKind.INT:
            return self.int_type
        return PRIMITIVE_GO_TYPES[kind]

    def field_type(self, field: FieldDecision, indent: str) -> str:
        if field.kind is not None:
            go_type = self.map_primitive_to_go(field.kind)
        elif field.inline is not None:
            go_type = self.struct_body(field.inline, indent)
        else:
            go_type = field.type_name
        if field.repeated:
            return f"[]{go_type}"
        if field.optional and self.use_pointers_for_optional_fields:
            return f"*{go_type}"
        return go_type

    def field_tag(self, field: FieldDecision) -> str:
        if field.role is FieldRole.CHAR_DATA:
            value = ',chardata'
        else:
            value = f"{field.name.space} {field.name.local}" if field.name.space else field.name.local
            if field.role is FieldRole.ATTRIBUTE:
                value += ',attr'
        if field.optional and not self.use_pointers_for_optional_fields:
            value += ',omitempty'
        return f'`xml:"{value}"`'

    def struct_body(self, decision: TypeDecision, indent: str = '') -> str:
        lines = ['struct {']
        for field in decision.fields:
            field_indent = indent + INDENT
            lines.append(f"{field_indent}{field.display_name} {self.field_type(field, field_indent)} {self.field_tag(field)}")
        lines.append(f"{indent}}}")
        return '\n'.join(lines)

    def get_imports(self, decisions: SchemaDecisions) -> List[str]:
        """Collects the packages referenced by the field types"""
        imports: Set[str] = set()

        def visit(decision: TypeDecision):
            for field in decision.fields:
                if field.kind is PrimitiveKind.TIME:
                    imports.add('time')
                if field.inline is not None:
                    visit(field.inline)

        for declaration in decisions.declarations:
            visit(declaration)
        return sorted(imports)

    def emit(self, decisions: SchemaDecisions) -> str:
        """Renders the declarations and, if enabled, formats the result.

        Raises:
            FormatError: The formatter rejected the generated source
        """
        context = {
            'header': self.header,
            'package_name': self.package_name,
            'imports': self.get_imports(decisions),
            'declarations': [{
                'name': declaration.display_name,
                'body': self.struct_body(declaration),
            } for declaration in decisions.declarations],
        }
        source = process_template('xmltogo/go_source.jinja', **context)
        if not self.format_source:
            return source
        logger.debug("Formatting %d bytes of generated source", len(source))
        try:
            return self.formatter.format(source)
        except FormatError:
            raise
        except Exception as err:  # pylint: disable=broad-except
            raise FormatError(f"formatter failed: {err}") from err
