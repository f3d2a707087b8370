"""Column names of row types.

A row type is a dataclass; its fields are the columns, in order. A field
declared with :func:`column` can be renamed or skipped. A class attribute
``__rename_all__`` applies a case convention (``"camelCase"``,
``"PascalCase"``, ``"UPPERCASE"``, ``"kebab-case"`` and so on) to all names.
A tuple type ``(SomeRow, int, ...)`` has the columns of its first element;
scalar types have no columns.
"""

import dataclasses
import typing
from enum import Enum

_METADATA_KEY = "chwire"


class _RenameRule(Enum):
    LOWER = "lowercase"
    UPPER = "UPPERCASE"
    PASCAL = "PascalCase"
    CAMEL = "camelCase"
    SNAKE = "snake_case"
    SCREAMING_SNAKE = "SCREAMING_SNAKE_CASE"
    KEBAB = "kebab-case"
    SCREAMING_KEBAB = "SCREAMING-KEBAB-CASE"

    def apply_to_field(self, field):
        if self in (_RenameRule.LOWER, _RenameRule.SNAKE):
            return field
        if self in (_RenameRule.UPPER, _RenameRule.SCREAMING_SNAKE):
            return field.upper()
        if self is _RenameRule.PASCAL:
            return "".join(part[:1].upper() + part[1:] for part in field.split("_"))
        if self is _RenameRule.CAMEL:
            pascal = _RenameRule.PASCAL.apply_to_field(field)
            return pascal[:1].lower() + pascal[1:]
        if self is _RenameRule.KEBAB:
            return field.replace("_", "-")
        return field.upper().replace("_", "-")


def column(*, rename=None, skip_serializing=False, skip_deserializing=False, **kwargs):
    """Declare a dataclass field with column options.

    Other keyword arguments are passed on to :func:`dataclasses.field`.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[_METADATA_KEY] = {
        "rename": rename,
        "skip_serializing": skip_serializing,
        "skip_deserializing": skip_deserializing,
    }
    return dataclasses.field(metadata=metadata, **kwargs)


def _tuple_members(row_type):
    if typing.get_origin(row_type) is tuple:
        return typing.get_args(row_type)
    if isinstance(row_type, tuple):
        return row_type
    return None


def column_names(row_type):
    """Return the column names of a row type as a tuple of strings."""
    members = _tuple_members(row_type)
    if members is not None:
        # (SomeRow, P1, P2, ...) takes the names of SomeRow.
        return column_names(members[0]) if len(members) >= 2 else ()

    if isinstance(row_type, type) and issubclass(row_type, Enum):
        raise TypeError("`Row` can be derived only for structs")

    if not dataclasses.is_dataclass(row_type):
        return ()
    cls = row_type if isinstance(row_type, type) else type(row_type)

    rule_name = getattr(cls, "__rename_all__", None)
    try:
        rule = _RenameRule(rule_name) if rule_name is not None else _RenameRule.SNAKE
    except ValueError:
        raise ValueError(f"unknown rename rule {rule_name!r}") from None

    names = []
    for field in dataclasses.fields(cls):
        options = field.metadata.get(_METADATA_KEY, {})
        if options.get("skip_serializing") or options.get("skip_deserializing"):
            continue
        name = options.get("rename") or field.name
        names.append(rule.apply_to_field(name))
    return tuple(names)


def escape_identifier(name):
    """Quote a name as an identifier with backticks."""
    escaped = name.replace("\\", "\\\\").replace("`", "\\`")
    return f"`{escaped}`"


def join_column_names(row_type):
    """Return the quoted column names joined with commas, or None if there are none."""
    names = column_names(row_type)
    if not names:
        return None
    return ",".join(escape_identifier(name) for name in names)