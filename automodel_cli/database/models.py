"""Raw metadata models produced by schema introspection."""

from typing import Any, Dict, List, Optional, Union
from dataclasses import dataclass, field, fields

DefaultValue = Union[str, int, float, bool, None]


@dataclass
class RawColumn:
    """A column exactly as the database describes it."""
    name: str
    type: str
    allow_null: bool = True
    default_value: DefaultValue = None
    primary_key: bool = False
    # Engine-specific extras, e.g. postgres enum members
    special: List[str] = field(default_factory=list)


# Pragma-style keys returned by sqlite's foreign_key_list
_PRAGMA_KEYS = {
    "from": "source_column",
    "to": "target_column",
    "table": "target_table",
}


def normalize_row_keys(row: Dict[str, Any]) -> Dict[str, Any]:
    """Rename engine-specific foreign key fields to their canonical names."""
    return {_PRAGMA_KEYS.get(key, key): value for key, value in row.items()}


@dataclass
class ForeignKeyRef:
    """A foreign key linkage row, normalized to canonical field names.

    Fields the engine returns beyond the canonical ones are kept in ``extra``
    so dialect predicates can inspect them.
    """
    source_table: str
    source_column: Optional[str]
    target_table: Optional[str] = None
    target_column: Optional[str] = None
    source_schema: Optional[str] = None
    target_schema: Optional[str] = None
    is_foreign_key: bool = False
    is_primary_key: bool = False
    is_serial_key: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def _known_fields(cls) -> List[str]:
        return [f.name for f in fields(cls) if f.name != "extra"]

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ForeignKeyRef":
        """Build a reference from a normalized row."""
        known = cls._known_fields()
        kwargs = {key: value for key, value in row.items() if key in known}
        kwargs.setdefault("source_table", "")
        kwargs.setdefault("source_column", None)
        extra = {key: value for key, value in row.items() if key not in known}
        return cls(extra=extra, **kwargs)

    def to_row(self) -> Dict[str, Any]:
        """Flatten back into a row. Flags only appear once they are set."""
        row = dict(self.extra)
        for name in self._known_fields():
            value = getattr(self, name)
            if name.startswith("is_") and not value:
                continue
            row[name] = value
        return row

    def merged_with(self, other: "ForeignKeyRef") -> "ForeignKeyRef":
        """Shallow-merge ``other`` over this reference, last write wins per field."""
        row = self.to_row()
        row.update(other.to_row())
        return ForeignKeyRef.from_row(row)

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a canonical field or an engine-specific extra."""
        if key in self._known_fields():
            return getattr(self, key)
        return self.extra.get(key, default)
