"""Native column type to Sequelize data type mapping."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from ..database.models import RawColumn
from .literals import quote_string


class TypeKind(str, Enum):
    """Sequelize data types the mapper can produce."""
    BOOLEAN = "BOOLEAN"
    INTEGER = "INTEGER"
    BIGINT = "BIGINT"
    TEXT = "TEXT"
    CHAR = "CHAR"
    DATE = "DATE"
    FLOAT = "FLOAT"
    DECIMAL = "DECIMAL"
    DOUBLE = "DOUBLE"
    UUID = "UUID"
    JSON = "JSON"
    JSONB = "JSONB"
    GEOMETRY = "GEOMETRY"
    ENUM = "ENUM"
    # Native type passed through as an identifier
    RAW = "RAW"


@dataclass(frozen=True)
class TypeExpr:
    """A resolved data type, e.g. ``INTEGER(11)`` or ``ENUM('a','b')``."""
    kind: TypeKind
    name: str
    suffix: str = ""

    def render(self, global_name: str) -> str:
        return f"{global_name}.{self.name}{self.suffix}"


# Fallback for columns declared without a type
UNTYPED = TypeExpr(TypeKind.RAW, "STRING")

_WIDTH = re.compile(r"\(\d+\)")

# First match wins. JSONB and FLOAT8 sit ahead of the broader JSON and FLOAT
# patterns that would otherwise shadow them.
_CASCADE = [
    (re.compile(r"^(tinyint\(1\)|boolean|bit\(1\))$"), TypeKind.BOOLEAN),
    (re.compile(r"^(smallint|mediumint|tinyint|int)"), TypeKind.INTEGER),
    (re.compile(r"^bigint"), TypeKind.BIGINT),
    (re.compile(r"^string|varchar|varying|nvarchar"), TypeKind.TEXT),
    (re.compile(r"^char"), TypeKind.CHAR),
    (re.compile(r"text|ntext$"), TypeKind.TEXT),
    (re.compile(r"^(date|time)"), TypeKind.DATE),
    (re.compile(r"^(float8|double precision)"), TypeKind.DOUBLE),
    (re.compile(r"^(float|float4)"), TypeKind.FLOAT),
    (re.compile(r"^decimal"), TypeKind.DECIMAL),
    (re.compile(r"^uuid|uniqueidentifier"), TypeKind.UUID),
    (re.compile(r"^jsonb"), TypeKind.JSONB),
    (re.compile(r"^json"), TypeKind.JSON),
    (re.compile(r"^geometry"), TypeKind.GEOMETRY),
]

# Only these kinds keep the display width of the native type
_KEEPS_WIDTH = {TypeKind.INTEGER, TypeKind.CHAR}


def is_date_type(native_type: Optional[str]) -> bool:
    """Whether a native type belongs to the date/time family."""
    lowered = (native_type or "").lower()
    return lowered.startswith("date") or lowered.startswith("time")


def is_bit_boolean(native_type: Optional[str]) -> bool:
    """Whether a native type stores a boolean as a single bit."""
    return (native_type or "").lower() == "bit(1)"


class TypeMapper:
    """Maps native column types onto Sequelize data types."""

    def enum_type(self, values: Iterable[str]) -> TypeExpr:
        """Build an ENUM expression from its member list."""
        members = ",".join(quote_string(str(v)) for v in values)
        return TypeExpr(TypeKind.ENUM, "ENUM", f"({members})")

    def map_native_type(self, native_type: Optional[str]) -> TypeExpr:
        """Resolve a native type string.

        Never returns an empty expression: untyped columns map to STRING and
        unknown types pass through verbatim.
        """
        if not native_type or not native_type.strip():
            return UNTYPED

        # Enum types spelled out by the engine, e.g. mysql's ENUM('a','b')
        if native_type[:5].upper() == "ENUM(":
            return TypeExpr(TypeKind.ENUM, "ENUM", native_type[4:])

        lowered = native_type.lower()
        for pattern, kind in _CASCADE:
            if pattern.search(lowered):
                suffix = ""
                if kind in _KEEPS_WIDTH:
                    width = _WIDTH.search(lowered)
                    suffix = width.group(0) if width else ""
                return TypeExpr(kind, kind.value, suffix)

        return TypeExpr(TypeKind.RAW, native_type)

    def map_type(self, column: RawColumn) -> TypeExpr:
        """Resolve the data type of a raw column."""
        if column.type == "USER-DEFINED" and column.special:
            return self.enum_type(column.special)
        return self.map_native_type(column.type)
