"""Canonical attribute model and raw column translation."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..database.dialects import DialectAdapter
from ..database.models import ForeignKeyRef, RawColumn
from .literals import js_literal, quote_string
from .type_mappers import TypeExpr, TypeMapper, is_bit_boolean, is_date_type

DATE_KEYWORDS = {
    "current_timestamp",
    "current_date",
    "current_time",
    "localtime",
    "localtimestamp",
}


class DefaultKind(str, Enum):
    STRING = "string"
    FUNCTION = "function"
    KEYWORD = "keyword"
    RAW = "raw"


@dataclass(frozen=True)
class DefaultExpr:
    """A column default in its rendered form."""
    kind: DefaultKind
    value: Any

    def render(self, local_name: str) -> str:
        if self.kind == DefaultKind.STRING:
            return quote_string(str(self.value))
        if self.kind == DefaultKind.FUNCTION:
            return f"{local_name}.fn({quote_string(self.value)})"
        if self.kind == DefaultKind.KEYWORD:
            return f"{local_name}.literal({quote_string(self.value)})"
        return js_literal(self.value)


@dataclass(frozen=True)
class Reference:
    model: str
    key: str


@dataclass
class AttributeLine:
    """One ``key: value`` entry of a descriptor, or a nested block.

    A line with children renders as ``key: { ... }`` and ignores ``value``.
    """
    key: str
    value: str = ""
    children: List["AttributeLine"] = field(default_factory=list)


@dataclass
class CanonicalAttribute:
    """Synthesis-ready attributes of one column."""
    type: TypeExpr
    allow_null: bool
    default_value: Optional[DefaultExpr] = None
    primary_key: Optional[bool] = None
    auto_increment: Optional[bool] = None
    references: Optional[Reference] = None

    def to_lines(self, global_name: str, local_name: str) -> List[AttributeLine]:
        """Lay the attributes out in descriptor order."""
        lines = [
            AttributeLine("type", self.type.render(global_name)),
            AttributeLine("allowNull", js_literal(bool(self.allow_null))),
        ]
        if self.default_value is not None:
            lines.append(AttributeLine("defaultValue", self.default_value.render(local_name)))
        if self.primary_key:
            lines.append(AttributeLine("primaryKey", "true"))
        if self.auto_increment:
            lines.append(AttributeLine("autoIncrement", "true"))
        if self.references is not None:
            lines.append(AttributeLine("references", children=[
                AttributeLine("model", quote_string(self.references.model)),
                AttributeLine("key", quote_string(self.references.key)),
            ]))
        return lines


class AttributeMapper:
    """Translates raw columns plus key references into canonical attributes."""

    def __init__(
        self,
        dialect: Optional[DialectAdapter] = None,
        type_mapper: Optional[TypeMapper] = None,
    ):
        self.dialect = dialect
        self.type_mapper = type_mapper or TypeMapper()

    def map_default(self, column: RawColumn) -> Optional[DefaultExpr]:
        """Resolve the default of a column that is not auto-incremented."""
        value = column.default_value
        if value is None:
            return None
        if self.dialect is not None and self.dialect.is_disabled_default(column, value):
            return None

        if is_bit_boolean(column.type):
            return DefaultExpr(DefaultKind.RAW, 1 if value == "b'1'" else 0)

        if isinstance(value, str):
            if is_date_type(column.type):
                if value.endswith("()"):
                    return DefaultExpr(DefaultKind.FUNCTION, value[:-2])
                if value.lower() in DATE_KEYWORDS:
                    return DefaultExpr(DefaultKind.KEYWORD, value)
            return DefaultExpr(DefaultKind.STRING, value)

        return DefaultExpr(DefaultKind.RAW, value)

    def map_column(self, column: RawColumn, ref: Optional[ForeignKeyRef] = None) -> CanonicalAttribute:
        """Build the canonical attributes of one column.

        Args:
            column: Raw column metadata
            ref: Key reference discovered for the column, if any

        Returns:
            CanonicalAttribute for the column
        """
        attribute = CanonicalAttribute(
            type=self.type_mapper.map_type(column),
            allow_null=column.allow_null,
        )

        # A column pointing at another table's key is not itself primary
        if column.primary_key and (ref is None or ref.is_primary_key):
            attribute.primary_key = True

        # Serial wins over references when a column is both
        if ref is not None and ref.is_serial_key:
            attribute.auto_increment = True
        elif ref is not None and ref.is_foreign_key:
            attribute.references = Reference(model=ref.target_table, key=ref.target_column)

        if not attribute.auto_increment:
            attribute.default_value = self.map_default(column)

        return attribute

    def map_table(
        self,
        columns: Dict[str, RawColumn],
        refs: Optional[Dict[str, ForeignKeyRef]] = None,
    ) -> Dict[str, CanonicalAttribute]:
        """Map every column of a table, preserving column order."""
        refs = refs or {}
        return {name: self.map_column(column, refs.get(name)) for name, column in columns.items()}
