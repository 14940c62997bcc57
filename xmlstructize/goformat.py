"""Canonical formatting of generated Go source.

GoSourceFormatter is a pure-Python formatter for the subset of Go that the
emitter produces (package clause, imports and struct declarations). It
indents by brace depth with tabs and aligns field names, types and tags in
columns the way gofmt does. GofmtFormatter delegates to an installed gofmt.
"""

import logging
import re
import subprocess
from typing import List

from xmlstructize.errors import FormatError

logger = logging.getLogger(__name__)

_TAG = re.compile(r'`[^`]*`')


class GoSourceFormatter:
    """Formats emitted Go struct declarations without external tools."""

    def format(self, source: str) -> str:
        lines = [line.strip() for line in source.splitlines()]
        out: List[str] = []
        section: List[List[str]] = []
        depth = 0

        def flush():
            out.extend(self.align(section, depth))
            section.clear()

        for number, line in enumerate(lines, 1):
            if line.count('`') % 2:
                raise FormatError(f"line {number}: unterminated struct tag")
            if line.startswith('//') or not line:
                flush()
                if line or (out and out[-1]):
                    out.append('\t' * depth + line if line else '')
                continue
            code = _TAG.sub('', line)
            opens = code.count('{') + code.count('(')
            closes = code.count('}') + code.count(')')
            leading_close = code[0] in '})'
            if leading_close:
                flush()
                depth -= 1
                if depth < 0:
                    raise FormatError(f"line {number}: unbalanced closing brace")
                out.append('\t' * depth + ' '.join(line.split(None, 1)))
                depth += opens - closes + 1
            else:
                opener = opens > closes
                cells = line.split(None, 1 if opener else 2)
                if depth > 0 and len(cells) >= 2 and not line.endswith('('):
                    if opener:
                        cells[1] = ' '.join(cells[1].split())
                    section.append(cells)
                    if opener:
                        # a field with an inline struct type ends the alignment block
                        flush()
                else:
                    flush()
                    out.append('\t' * depth + ' '.join(line.split()))
                depth += opens - closes
            if depth < 0:
                raise FormatError(f"line {number}: unbalanced closing brace")
        flush()
        if depth != 0:
            raise FormatError("unexpected end of source: unclosed brace")
        while out and not out[-1]:
            out.pop()
        return '\n'.join(out) + '\n'

    def align(self, section: List[List[str]], depth: int) -> List[str]:
        """Aligns consecutive field lines into name, type and tag columns."""
        if not section:
            return []
        indent = '\t' * depth
        name_width = max(len(cells[0]) for cells in section)
        tagged = [cells for cells in section if len(cells) == 3]
        type_width = max((len(cells[1]) for cells in tagged), default=0)
        result = []
        for cells in section:
            if len(cells) == 3:
                result.append(f"{indent}{cells[0].ljust(name_width)} {cells[1].ljust(type_width)} {cells[2]}")
            else:
                result.append(f"{indent}{cells[0].ljust(name_width)} {cells[1]}")
        return result


class GofmtFormatter:
    """Formats Go source by piping it through the gofmt binary."""

    def __init__(self, gofmt_path: str = 'gofmt'):
        self.gofmt_path = gofmt_path

    def format(self, source: str) -> str:
        try:
            result = subprocess.run([self.gofmt_path], input=source, capture_output=True, text=True, check=False)
        except OSError as err:
            raise FormatError(f"could not run {self.gofmt_path}: {err}") from err
        if result.returncode != 0:
            logger.debug("gofmt rejected source:\n%s", source)
            raise FormatError(result.stderr.strip() or f"{self.gofmt_path} exited with status {result.returncode}")
        return result.stdout
