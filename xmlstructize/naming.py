"""Naming strategies.

A name strategy decides which observed XML names are merged into one schema
node. An export name strategy decides the Go identifier rendered for a name.
Both are plain objects so that callers (and tests) can substitute their own.
"""

from typing import Dict

from xmlstructize.common import XmlName, go_export_name, pascal


class NameStrategy:
    """Maps an observed XML name to the key of its schema node."""

    def normalize(self, name: XmlName) -> XmlName:
        raise NotImplementedError


class IgnoreNamespaceNaming(NameStrategy):
    """Merges elements and attributes by local name, dropping the namespace."""

    def normalize(self, name: XmlName) -> XmlName:
        return XmlName('', name.local)


class QualifiedNaming(NameStrategy):
    """Keeps the namespace, so equal local names in different namespaces stay apart."""

    def normalize(self, name: XmlName) -> XmlName:
        return name


class ExportNameStrategy:
    """Maps an XML name to an exported Go identifier."""

    def export(self, name: XmlName) -> str:
        raise NotImplementedError


class CamelCaseExportNaming(ExportNameStrategy):
    """'foo-bar' becomes 'FooBar'; the namespace is ignored."""

    def export(self, name: XmlName) -> str:
        return go_export_name(name.local)


class PascalExportNaming(ExportNameStrategy):
    """Splits snake_case, kebab-case and camelCase words and capitalizes each."""

    def export(self, name: XmlName) -> str:
        return go_export_name(pascal(name.local))


class MappedExportNaming(ExportNameStrategy):
    """Uses explicit identifiers for known local names and falls back to another strategy."""

    def __init__(self, mapping: Dict[str, str], fallback: ExportNameStrategy | None = None):
        self.mapping = dict(mapping)
        self.fallback = fallback or CamelCaseExportNaming()

    def export(self, name: XmlName) -> str:
        if name.local in self.mapping:
            return self.mapping[name.local]
        return self.fallback.export(name)
