"""Descriptor text rendering for Sequelize ModelBuilder models."""

import re
from typing import Any, Dict, List

from ..config import GeneratorOptions
from .attributes import AttributeLine, CanonicalAttribute
from .literals import js_literal, quote_string

MODEL_BUILDER_IMPORT = "import { ModelBuilder } from 'hc-database/sequelize/modelBuilder.js';"

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
# Runs of letters and digits in any script
_TOKENS = re.compile(r"[^\W_]+")


def class_name(table: str) -> str:
    """Declared model name: first letter upper-cased, the rest lower-cased."""
    return table[:1].upper() + table[1:].lower()


def _split_words(token: str) -> List[str]:
    """Split a letter/digit run on case changes and letter-digit boundaries."""
    words = []
    start = 0
    for i in range(1, len(token)):
        prev, char = token[i - 1], token[i]
        following = token[i + 1:i + 2]
        if (
            prev.isdigit() != char.isdigit()
            or (prev.islower() and char.isupper())
            or (prev.isupper() and char.isupper() and following.islower())
        ):
            words.append(token[start:i])
            start = i
    words.append(token[start:])
    return words


def model_name(table: str) -> str:
    """Registered model name: the identifier's words, lower-cased and spaced.

    ``user_roles``, ``userRoles`` and ``User-Roles`` all become ``user roles``.
    A name with no letters or digits at all is registered verbatim.
    """
    words = [word.lower() for token in _TOKENS.findall(table) for word in _split_words(token)]
    return " ".join(words) or table


def _property_key(name: str) -> str:
    if _IDENTIFIER.match(name):
        return name
    return quote_string(name)


class DescriptorRenderer:
    """Turns the canonical attributes of a table into descriptor source."""

    def __init__(self, options: GeneratorOptions):
        self.options = options
        self.indent = options.indent_unit

    def render_lines(self, lines: List[AttributeLine], level: int) -> List[str]:
        """Render sibling entries at a nesting level, comma-separated."""
        out = []
        pad = self.indent * level
        for i, line in enumerate(lines):
            sep = "," if i < len(lines) - 1 else ""
            if line.children:
                out.append(f"{pad}{line.key}: {{")
                out.extend(self.render_lines(line.children, level + 1))
                out.append(f"{pad}}}{sep}")
            else:
                out.append(f"{pad}{line.key}: {line.value}{sep}")
        return out

    def field_lines(self, attributes: Dict[str, CanonicalAttribute]) -> List[AttributeLine]:
        return [
            AttributeLine(
                _property_key(name),
                children=attribute.to_lines(self.options.global_name, self.options.local_name),
            )
            for name, attribute in attributes.items()
        ]

    def option_lines(self, table: str) -> List[AttributeLine]:
        """Model options: freezeTableName followed by the additional options."""
        lines = []
        if self.options.freeze_table_name:
            lines.append(AttributeLine("freezeTableName", "true"))
        for key, value in self.options.additional.items():
            if key == "name":
                # Keep the table name verbatim for both forms
                lines.append(AttributeLine("name", children=[
                    AttributeLine("singular", quote_string(table)),
                    AttributeLine("plural", quote_string(table)),
                ]))
            else:
                lines.append(AttributeLine(_property_key(key), self._option_value(value)))
        return lines

    @staticmethod
    def _option_value(value: Any) -> str:
        if isinstance(value, str):
            return value
        return js_literal(value)

    def render(self, table: str, attributes: Dict[str, CanonicalAttribute]) -> str:
        """Render the descriptor of one table.

        Args:
            table: Table name
            attributes: Canonical attributes keyed by column, in column order

        Returns:
            Descriptor source text, newline-terminated
        """
        out = [
            f"import {self.options.global_name} from 'sequelize';",
            "",
            MODEL_BUILDER_IMPORT,
            "",
            f"export const {class_name(table)} = new ModelBuilder()"
            f".build({quote_string(model_name(table))}, {{",
        ]
        out.extend(self.render_lines(self.field_lines(attributes), 1))

        options = self.option_lines(table)
        if options:
            out.append("}, {")
            out.extend(self.render_lines(options, 1))
        out.append("});")
        return "\n".join(out) + "\n"
