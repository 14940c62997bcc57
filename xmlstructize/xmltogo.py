"""Infers Go structs from observed XML documents.

This module provides:
- XmlToGo: accumulate evidence over any number of documents, then generate Go source
- convert_xml_to_go_source / convert_xml_to_go: one-shot conversion of XML files
"""

# pylint: disable=too-many-arguments, too-many-instance-attributes

import io
import logging
import os
from typing import BinaryIO, List

from xmlstructize.goemitter import DEFAULT_HEADER, GoEmitter
from xmlstructize.goformat import GofmtFormatter, GoSourceFormatter
from xmlstructize.naming import (CamelCaseExportNaming, ExportNameStrategy, IgnoreNamespaceNaming, NameStrategy,
                                 QualifiedNaming)
from xmlstructize.schema_inference import SchemaRegistry
from xmlstructize.type_finalizer import TypeFinalizer
from xmlstructize.xmltoschema import XmlObserver

logger = logging.getLogger(__name__)

DEFAULT_CHAR_DATA_FIELD_NAME = 'CharData'
DEFAULT_INT_TYPE = 'int'
DEFAULT_PACKAGE_NAME = 'main'
DEFAULT_TIME_LAYOUT = '%Y-%m-%dT%H:%M:%S%z'


class XmlToGo:
    """Observes XML documents and generates Go structs they can be unmarshalled into.

    Evidence from every observed document is merged by element name into one
    registry that lives as long as this object. Observing is not thread-safe:
    a single writer is assumed, callers that share an instance must serialize
    observe calls themselves.
    """

    def __init__(self, package_name: str = DEFAULT_PACKAGE_NAME, header: str = DEFAULT_HEADER,
                 char_data_field_name: str = DEFAULT_CHAR_DATA_FIELD_NAME, int_type: str = DEFAULT_INT_TYPE,
                 name_strategy: NameStrategy | None = None, export_name_strategy: ExportNameStrategy | None = None,
                 format_source: bool = True, formatter=None, named_types: bool = True,
                 preserve_order: bool = False, time_layout: str = DEFAULT_TIME_LAYOUT,
                 top_level_attributes: bool = False, use_pointers_for_optional_fields: bool = True) -> None:
        self.package_name = package_name
        self.header = header
        self.char_data_field_name = char_data_field_name
        self.int_type = int_type
        self.name_strategy = name_strategy or IgnoreNamespaceNaming()
        self.export_name_strategy = export_name_strategy or CamelCaseExportNaming()
        self.format_source = format_source
        self.formatter = formatter or GoSourceFormatter()
        self.named_types = named_types
        self.preserve_order = preserve_order
        self.time_layout = time_layout
        self.top_level_attributes = top_level_attributes
        self.use_pointers_for_optional_fields = use_pointers_for_optional_fields
        self.registry = SchemaRegistry()

    def observe_stream(self, stream: BinaryIO) -> None:
        """Observes one XML document read from a binary stream.

        Raises:
            ParseError: The document is malformed. Elements closed before the
                error remain recorded.
            OSError: Reading the stream failed
        """
        observer = XmlObserver(self.registry, self.name_strategy, self.top_level_attributes)
        observer.observe_stream(stream)

    def observe_bytes(self, data: bytes) -> None:
        self.observe_stream(io.BytesIO(data))

    def observe_string(self, text: str) -> None:
        self.observe_stream(io.BytesIO(text.encode('utf-8')))

    def observe_file(self, file_path: str) -> None:
        logger.debug("Observing %s", file_path)
        with open(file_path, 'rb') as f:
            self.observe_stream(f)

    def generate(self) -> str:
        """Returns the Go source for all documents observed so far.

        Raises:
            DuplicateNameError: Two element names map to the same Go identifier
            RecursiveTypeError: An element contains itself and named types are disabled
            FormatError: Formatting the generated source failed
        """
        finalizer = TypeFinalizer(
            export_name_strategy=self.export_name_strategy,
            char_data_field_name=self.char_data_field_name,
            named_types=self.named_types,
            preserve_order=self.preserve_order,
            time_layout=self.time_layout)
        decisions = finalizer.finalize(self.registry)
        emitter = GoEmitter(
            package_name=self.package_name,
            header=self.header,
            int_type=self.int_type,
            use_pointers_for_optional_fields=self.use_pointers_for_optional_fields,
            format_source=self.format_source,
            formatter=self.formatter)
        return emitter.emit(decisions)


def convert_xml_to_go_source(input_files: List[str], package_name: str = DEFAULT_PACKAGE_NAME,
                             header: str = DEFAULT_HEADER, char_data_field_name: str = DEFAULT_CHAR_DATA_FIELD_NAME,
                             int_type: str = DEFAULT_INT_TYPE, named_types: bool = True, preserve_order: bool = False,
                             time_layout: str = DEFAULT_TIME_LAYOUT, top_level_attributes: bool = False,
                             use_pointers_for_optional_fields: bool = True, format_source: bool = True,
                             use_gofmt: bool = False, keep_namespaces: bool = False) -> str:
    """Infers Go structs from XML files.

    All files are observed into one schema, so repeated element names across
    files contribute to the same struct.

    Args:
        input_files: List of XML file paths to analyze
        package_name: Go package name
        header: Text placed before the package clause, empty for none
        char_data_field_name: Field name for the text of mixed-content elements
        int_type: Go type used for integer values
        named_types: Declare a named struct per element instead of inline structs
        preserve_order: Order types and fields as first observed instead of by name
        time_layout: strptime format recognizing time values, empty to disable
        top_level_attributes: Include the attributes of document elements
        use_pointers_for_optional_fields: Use pointers for optional fields instead of omitempty
        format_source: Format the generated source
        use_gofmt: Format with the gofmt binary instead of the built-in formatter
        keep_namespaces: Keep elements with equal local names in different namespaces apart

    Returns:
        The generated Go source
    """
    if not input_files:
        raise ValueError("At least one input file is required")

    xmltogo = XmlToGo(
        package_name=package_name,
        header=header,
        char_data_field_name=char_data_field_name,
        int_type=int_type,
        name_strategy=QualifiedNaming() if keep_namespaces else IgnoreNamespaceNaming(),
        format_source=format_source,
        formatter=GofmtFormatter() if use_gofmt else GoSourceFormatter(),
        named_types=named_types,
        preserve_order=preserve_order,
        time_layout=time_layout,
        top_level_attributes=top_level_attributes,
        use_pointers_for_optional_fields=use_pointers_for_optional_fields)
    for file_path in input_files:
        xmltogo.observe_file(file_path)
    return xmltogo.generate()


def convert_xml_to_go(input_files: List[str], go_file_path: str, **kwargs) -> None:
    """Infers Go structs from XML files and writes them to go_file_path.

    Takes the same keyword arguments as convert_xml_to_go_source. Nothing is
    written when inference or formatting fails.
    """
    source = convert_xml_to_go_source(input_files, **kwargs)

    output_dir = os.path.dirname(go_file_path)
    if output_dir and not os.path.exists(output_dir):
        os.makedirs(output_dir)

    with open(go_file_path, 'w', encoding='utf-8') as f:
        f.write(source)
