"""
Argot value coercion layer.

Scope
- ValueType: the closed set of value kinds a command may declare
  (text, integer, float, double, boolean).
- resolve(tag): map a declared tag to its ValueType, or fail explicitly.
- coerce(raw, tag): convert a raw matched substring into its typed value.

Coercion is lazy: parse() only ever stores raw strings, and conversion happens
at typed access (Command.typed / RootCommand.typed). This is the single place
where type errors surface:
- UnsupportedValueTypeError when the tag has no registered coercion.
- ValueCoercionError when the raw string does not parse for its declared kind.
Nothing is silently defaulted or truncated.
"""
from enum import StrEnum

from .faults import UnsupportedValueTypeError, ValueCoercionError


class ValueType(StrEnum):
    """
    closed enumeration of supported value kinds.

    members compare equal to their lowercase names, so configuration files can
    declare `type = "integer"` and get ValueType.INTEGER back from resolve().
    """
    TEXT    = "text"
    INTEGER = "integer"
    FLOAT   = "float"
    DOUBLE  = "double"
    BOOLEAN = "boolean"


def _boolean(raw, /):
    match raw.strip().lower():
        case "true":
            return True
        case "false":
            return False
    raise ValueError(f"invalid boolean literal: {raw!r}")


# Registered coercions; every ValueType member must appear here.
_COERCIONS = {
    ValueType.TEXT: str,
    ValueType.INTEGER: int,
    ValueType.FLOAT: float,
    ValueType.DOUBLE: float,
    ValueType.BOOLEAN: _boolean,
}

# Python builtins accepted as tags, for declarations such as `type=int`.
_ALIASES = {
    str: ValueType.TEXT,
    int: ValueType.INTEGER,
    float: ValueType.DOUBLE,
    bool: ValueType.BOOLEAN,
}


def resolve(tag, /):
    """
    Return the ValueType declared by `tag`.

    Accepted tags
    - a ValueType member;
    - its name or value as a string, case-insensitive ("integer", "INTEGER");
    - one of the builtins str, int, float or bool.

    Raises
    - UnsupportedValueTypeError for anything else.
    """
    if isinstance(tag, ValueType):
        return tag
    if isinstance(tag, str):
        try:
            return ValueType(tag.strip().lower())
        except ValueError:
            pass
    elif isinstance(tag, type) and tag in _ALIASES:
        return _ALIASES[tag]
    raise UnsupportedValueTypeError(f"no coercion is registered for value type {tag!r}")


def coerce(raw, tag, /):
    """
    Convert `raw` to the value kind declared by `tag`.

    - text: passed through unchanged.
    - integer: int(raw).
    - float/double: float(raw).
    - boolean: "true"/"false", case-insensitive.

    Raises
    - TypeError if raw is not a string.
    - UnsupportedValueTypeError if the tag cannot be resolved.
    - ValueCoercionError if raw does not parse as the declared kind.
    """
    if not isinstance(raw, str):
        raise TypeError("coerce() raw value must be a string")
    kind = resolve(tag)
    try:
        coercion = _COERCIONS[kind]
    except KeyError:
        raise UnsupportedValueTypeError(f"no coercion is registered for value type {kind.value!r}") from None
    try:
        return coercion(raw)
    except ValueError:
        raise ValueCoercionError(f"cannot read {raw!r} as {kind.value}") from None


__all__ = (
    "ValueType",
    "resolve",
    "coerce",
)
