"""
Common utility functions for xmlstructize.
"""

# pylint: disable=line-too-long

import os
import re
from typing import NamedTuple

import jinja2


class XmlName(NamedTuple):
    """A namespace-qualified XML name."""
    space: str
    local: str

    def __str__(self) -> str:
        return f"{{{self.space}}}{self.local}" if self.space else self.local


def split_clark_name(tag: str) -> XmlName:
    """
    Split an ElementTree tag or attribute name in Clark notation ('{uri}local')
    into an XmlName.

    Args:
        tag (str): The name as reported by ElementTree.

    Returns:
        XmlName: The namespace and local name.
    """
    if tag.startswith('{'):
        space, _, local = tag[1:].partition('}')
        return XmlName(space, local)
    return XmlName('', tag)


def pascal(string):
    """
    Convert a string to PascalCase from snake_case, camelCase, or PascalCase.
    Underscores at the beginning of the string are preserved in the output, but
    underscores in the middle of the string are removed.

    Args:
        string (str): The string to convert.

    Returns:
        str: The string in PascalCase.
    """
    if not string:
        return string
    words = []
    startswith_under = string[0] == '_'
    if '_' in string or '-' in string:
        words = re.split(r'[_-]', string)
    elif string[0].isupper():
        words = re.findall(r'[A-Z][a-z0-9_]*', string)
    else:
        words = re.findall(r'[a-z0-9]+|[A-Z][a-z0-9_]*', string)
    result = ''.join(word.capitalize() for word in words)
    if startswith_under:
        result = '_' + result
    return result


_WORD_BOUNDARY = re.compile(r'[-.]+(\w)?')
_NON_IDENTIFIER = re.compile(r'\W')


def go_export_name(string: str) -> str:
    """
    Convert an XML local name into an exported Go identifier.

    Hyphens and dots start a new word ('foo-bar' becomes 'FooBar'), underscores
    are kept ('foo_bar' becomes 'Foo_bar') and the first letter is upper-cased.
    Names that cannot start a Go identifier are prefixed with 'X'.
    """
    result = _WORD_BOUNDARY.sub(lambda m: (m.group(1) or '').upper(), string)
    result = _NON_IDENTIFIER.sub('_', result)
    if not result or not result[0].isalpha():
        result = 'X' + result
    return result[0].upper() + result[1:]


def process_template(file_path: str, **kvargs) -> str:
    """
    Process a file as a Jinja2 template with the given object as input.

    Args:
        file_path (str): The path to the template, relative to the package.

    Returns:
        str: The processed template as a string.
    """
    file_dir = os.path.dirname(__file__)
    template_loader = jinja2.FileSystemLoader(searchpath=file_dir)
    template_env = jinja2.Environment(loader=template_loader, keep_trailing_newline=True)

    template = template_env.get_template(file_path)
    return template.render(**kvargs)

