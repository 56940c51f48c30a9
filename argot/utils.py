"""
Argot utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the values, commands, builder and catalog layers.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/"".

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated methods for clean tracebacks.

- mirror("attr")
  • Read-only property exposing a private backing field (self._attr) as an immutable view.

- Sealed / seal(object)
  • Once sealed, an object refuses any attribute write or deletion.

- boundary(name)
  • Compiled, cached regex matching `name` only when flanked by whitespace or the
    start/end of the text.

Stability and contract
- Names not in __all__ are internal and may change without notice.
"""
import builtins
import functools
import re
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and "".
    - Printable: repr(Unset) -> "Unset".
    - Non-subclassable and a singleton per process.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0 or "" are preserved as-is; only Unset is replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce("", "fallback")     -> ""
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator that will.

    Forms
    - rename(callable, name) -> callable
    - @rename(name)
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _freeze(object):
    """
    Shallow read-only view of a container value.

    - Sequence (non-string) → tuple
    - Mapping               → MappingProxyType
    - Set                   → frozenset
    - anything else         → returned as-is
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(object)
    elif isinstance(object, Mapping):
        return MappingProxyType(object)
    elif isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors the private backing attribute "_{name}".

    Containers are returned as read-only views so that the public API cannot be
    used to mutate a sealed object.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


class Sealed:
    """
    Mixin refusing attribute writes once seal() has been applied.

    The seal marker lives under a non-identifier key ('-sealed') in the instance
    dictionary, so it cannot collide with a regular attribute.
    """

    def __setattr__(self, name, value, /):
        if self.__dict__.get("-sealed", False):
            raise AttributeError(f"{type(self).__typename__} is sealed, {name!r} is read-only")
        object.__setattr__(self, name, value)

    def __delattr__(self, name, /):
        if self.__dict__.get("-sealed", False):
            raise AttributeError(f"{type(self).__typename__} is sealed, {name!r} cannot be deleted")
        object.__delattr__(self, name)


def seal(object, /):
    """
    Seal a Sealed instance in place and return it (fluent style).
    """
    if not isinstance(object, Sealed):
        raise TypeError("seal() argument must be a sealable object")
    object.__dict__["-sealed"] = True
    return object


@functools.cache
def boundary(name, /):
    """
    Compile a matcher for `name` bounded by whitespace or the text edges.

    "-A" matches in "-A", "x -A" and "-A x", but never inside "-AB" or "x-A".
    """
    if not isinstance(name, str):
        raise TypeError("boundary() argument must be a string")
    return re.compile(rf"(?<!\S){re.escape(name)}(?!\S)")


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "seal",
    "boundary",

    # Types
    "UnsetType",
    "Sealed",

    # Constants
    "Unset",
)
