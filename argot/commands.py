"""
Argot command layer: recognise, parse and strip commands in free-form text.

What this module provides
- Command: one named token plus an optional payload, in one of three shapes:
  • Shape.FLAG: zero-payload flag, always optional (e.g. "-A").
  • Shape.VALUE: name followed by a value matched by a pattern (e.g. "-c 3"),
    mandatory or optional.
  • Shape.DEFAULT: a value command whose value may be omitted, in which case a
    literal default is used.
- RootCommand: wraps a Command and owns an ordered tuple of children (leaf
  commands or nested roots), folding validate/parse/strip/help over them.
- flag(), valued(), defaulted(): shorthand constructors for each shape.

Matching rules
- Names are boundary-aware: "-A" matches in "-A", "x -A" and "-A x", never in
  "-AB". Names may contain inner spaces ("view task").
- A value is searched right after an occurrence of the name, skipping
  whitespace; the pattern must match from there and end on a token boundary
  (whitespace or end of text). "-c 14" has a value for r"\\d+", "-c 14c" has not.
  An empty match is never a value.
- strip() leaves surrounding whitespace untouched, so "ping -c 3 -A x" minus
  "-A" is "ping -c 3  x" (two spaces).

Contract
- validate(input) -> bool
- parse(input, accumulator=None) -> dict: raises InvalidInputError when
  validate(input) is false; always returns a fresh dict (the given accumulator
  is copied, never mutated).
- strip(input) -> str
- help_text() -> str

Immutability
- Every Command and RootCommand is sealed after construction: attribute writes
  raise AttributeError and container fields are exposed as read-only views.
  RootCommand.attach() returns a new tree instead of mutating the receiver, so a
  tree handed to concurrent readers can never change under them.
"""
import functools
import operator
import re
from collections import defaultdict
from collections.abc import Mapping
from enum import StrEnum

from rich.box import ROUNDED
from rich.table import Table
from rich.text import Text

from .faults import *
from .utils import *
from .values import ValueType, coerce


class Shape(StrEnum):
    """
    closed set of command node shapes.
    """
    FLAG    = "flag"
    VALUE   = "value"
    DEFAULT = "default"


class CommandType(type):
    """
    Metaclass giving command-like classes a uniform, introspectable surface.

    Responsibilities
    - Expose the names listed in __introspectable__ as read-only properties
      mirroring the private "_{name}" backing fields.
    - Provide stable __repr__/__rich_repr__ implementations for diagnostics.
    - Derive __typename__ from the class name (camel-case split with hyphens),
      used in error messages.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - command(name='-c', descr='how many to send', shape='value', ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers.
            """
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _check_input(cls, input, /):
    if not isinstance(input, str):
        raise TypeError(f"{cls.__typename__} input must be a string")


def _check_accumulator(cls, accumulator, /):
    if accumulator is None:
        return {}
    if not isinstance(accumulator, Mapping):
        raise TypeError(f"{cls.__typename__} accumulator must be a mapping")
    return dict(accumulator)


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate the fields shared by every shape.

    - name: non-empty string once trimmed.
    - descr: string, trimmed (may be empty).
    - shape: Shape member or its value.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    metadata["name"] = name

    if not isinstance(descr := metadata["descr"], str):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    metadata["descr"] = descr.strip()

    try:
        metadata["shape"] = Shape(metadata["shape"])
    except ValueError:
        raise ValueError(f"{cls.__typename__} 'shape' must be one of 'flag', 'value' or 'default'") from None


def _sanitize_shaped_metadata(cls, metadata, /):
    """
    Internal: validate the payload fields against the resolved shape.

    Flags
    - carry no pattern and no default; optional is forced to True and an
      explicit optional=False is rejected (a mandatory zero-payload flag carries
      no information).

    Value and default-valued commands
    - pattern: str or compiled re.Pattern, default ".*" (match anything).
    - optional: bool, default False.
    - default: required non-empty string for Shape.DEFAULT, forbidden otherwise.

    The value type tag is stored as given; it is only resolved at typed access.
    """
    shape = metadata["shape"]

    if shape is Shape.FLAG:
        if metadata["pattern"] is not Unset:
            raise TypeError(f"flag {cls.__typename__} cannot declare a 'pattern'")
        if metadata["default"] is not Unset:
            raise TypeError(f"flag {cls.__typename__} cannot declare a 'default'")
        if metadata["optional"] is not Unset and not metadata["optional"]:
            raise TypeError(f"flag {cls.__typename__} cannot be mandatory")
        metadata["pattern"] = None
        metadata["default"] = None
        metadata["optional"] = True
        return

    pattern = coalesce(metadata["pattern"], ".*")
    if not isinstance(pattern, str | re.Pattern):
        raise TypeError(f"{cls.__typename__} 'pattern' must be a string or a compiled pattern")
    try:
        pattern = re.compile(pattern)
        # the value must end on a token boundary: whitespace or end of text
        metadata["matcher"] = re.compile(rf"(?:{pattern.pattern})(?!\S)", pattern.flags)
    except re.error as error:
        raise ValueError(f"{cls.__typename__} 'pattern' is not a valid regular expression: {error}") from None
    metadata["pattern"] = pattern
    metadata["optional"] = bool(coalesce(metadata["optional"], False))

    if shape is Shape.DEFAULT:
        if not isinstance(default := metadata["default"], str):
            raise TypeError(f"default-valued {cls.__typename__} 'default' must be a string")
        elif not default:
            raise ValueError(f"default-valued {cls.__typename__} 'default' cannot be empty")
    elif metadata["default"] is not Unset:
        raise TypeError(f"{cls.__typename__} of shape {shape.value!r} cannot declare a 'default'")
    else:
        metadata["default"] = None


class Command(Sealed, metaclass=CommandType):
    """
    A single named command node: a boundary-matched name plus an optional payload.

    Shapes
    - Shape.FLAG: no payload; validate() is always true, parse() is a no-op copy,
      strip() removes the name only.
    - Shape.VALUE: validate() is always true when optional; when mandatory it
      requires an occurrence of the name followed by a value. parse() records the
      first value found.
    - Shape.DEFAULT: like VALUE, but a name followed by nothing at all also
      validates and parses to the literal default. A present value that does not
      match the pattern fails validation.

    Properties
    - name, descr, shape, type, pattern, optional, default (read-only).
    """

    __introspectable__ = (
        "name",
        "descr",
        "shape",
        "type",
        "pattern",
        "optional",
        "default",
    )

    def __new__(
            cls,
            name,
            descr="",
            /,
            shape=Shape.VALUE,
            *,
            type=ValueType.TEXT,
            pattern=Unset,
            optional=Unset,
            default=Unset
    ):
        """
        Construct a sealed command node.

        Parameters
        - name: str
          Token recognised in the text; trimmed, must not be empty.
        - descr: str
          Help text rendered by help_text().
        - shape: Shape | str
          One of flag, value or default.
        - type: ValueType | str | type
          Value-type tag used by typed(); not resolved until typed access.
        - pattern: str | re.Pattern
          Value pattern for valued shapes (defaults to ".*"); forbidden for flags.
        - optional: bool
          Whether the command may be absent. Flags are always optional.
        - default: str
          Literal default for Shape.DEFAULT; forbidden for other shapes.

        Raises
        - TypeError/ValueError on malformed or contradictory fields.
        """
        metadata = {
            "name": name,
            "descr": descr,
            "shape": shape,
            "type": type,
            "pattern": pattern,
            "optional": optional,
            "default": default,
            "matcher": None,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_shaped_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._boundary = boundary(self._name)
        return seal(self)

    def _occurrences(self, input, /):
        """
        Yield (name match, value match | None) for every boundary occurrence of the name.
        """
        for match in self._boundary.finditer(input):
            if self._matcher is None:
                yield match, None
                continue
            rest = input[match.end():]
            start = len(input) - len(rest.lstrip())
            value = self._matcher.match(input, start)
            yield match, (value if value is not None and value.group() else None)

    def present(self, input, /):
        """
        Return True when the name occurs in `input` as a whitespace-bounded token.
        """
        _check_input(type(self), input)
        return self._boundary.search(input) is not None

    def validate(self, input, /):
        _check_input(type(self), input)
        match self._shape:
            case Shape.FLAG:
                return True
            case Shape.VALUE:
                return self._optional or any(value for _, value in self._occurrences(input))
            case Shape.DEFAULT:
                if not (occurrences := list(self._occurrences(input))):
                    return self._optional
                return any(value or not input[match.end():].strip() for match, value in occurrences)
        raise RuntimeError("unreachable")

    def parse(self, input, accumulator=None, /):
        """
        Extract this command's value from `input` into a copy of `accumulator`.

        - flags: the copy is returned unchanged.
        - value: `name -> value` of the first occurrence carrying a value; an
          optional command without value returns the copy unchanged.
        - default-valued: as value, but an occurrence followed by nothing records
          `name -> default`.

        Raises
        - InvalidInputError when validate(input) is false.
        """
        if not self.validate(input):
            raise InvalidInputError(f"{self._name!r} is not satisfied by {input!r}", source=self._name)
        accumulator = _check_accumulator(type(self), accumulator)

        if self._shape is Shape.FLAG:
            return accumulator

        for match, value in self._occurrences(input):
            if value:
                accumulator[self._name] = value.group()
                break
            if self._shape is Shape.DEFAULT and not input[match.end():].strip():
                accumulator[self._name] = self._default
                break
        return accumulator

    def strip(self, input, /):
        """
        Remove the first matched value (if any) and every occurrence of the name.

        Whitespace around removed tokens is preserved.
        """
        _check_input(type(self), input)
        for _, value in self._occurrences(input):
            if value:
                input = input[:value.start()] + input[value.end():]
                break
        return self._boundary.sub("", input)

    def help_text(self):
        return f"{self._name}: {self._descr}"

    def typed(self, accumulator, /, default=None):
        """
        Coerce this command's raw value from `accumulator` to its declared type.

        Returns `default` when the accumulator holds no entry for this command.

        Raises
        - UnsupportedValueTypeError / ValueCoercionError (see argot.values.coerce).
        """
        if not isinstance(accumulator, Mapping):
            raise TypeError(f"{type(self).__typename__} accumulator must be a mapping")
        if self._name not in accumulator:
            return default
        return coerce(accumulator[self._name], self._type)


class RootCommand(Sealed, metaclass=CommandType):
    """
    A command that owns an ordered set of child commands.

    The root's own node must be present in the text (whatever its shape), and it
    must validate; then every child must validate on the same text. Children are
    leaf Commands or nested RootCommands and are folded in declaration order.

    Nested roots
    - A nested root is as optional as its own node (flags always are). When its
      name is absent and it is optional, the whole subtree is skipped by
      validate(), parse() and strip() of the enclosing root.

    Trailing content
    - By default, unrecognised text around the commands is tolerated:
      "ping asdfa" validates against a bare "ping" root.
    - With strict=True, validate() additionally requires that nothing but
      whitespace remains once strip() has removed the whole tree.
    """

    __introspectable__ = (
        "command",
        "children",
        "strict",
    )

    def __new__(cls, command, /, children=(), *, strict=False):
        """
        Construct a sealed root.

        Raises
        - TypeError when `command` is not a Command or a child is not a
          Command/RootCommand.
        - DuplicateCommandNameError when two children share a name.
        """
        if not isinstance(command, Command):
            raise TypeError(f"{cls.__typename__} 'command' must be a command")
        try:
            children = tuple(children)
        except TypeError:
            raise TypeError(f"{cls.__typename__} 'children' must be an iterable of commands") from None

        names = set()
        for child in children:
            if not isinstance(child, Command | RootCommand):
                raise TypeError(f"{cls.__typename__} 'children' must be an iterable of commands")
            if child.name in names:
                raise DuplicateCommandNameError(
                    f"{command.name!r} already has a child named {child.name!r}",
                    source=command.name,
                )
            names.add(child.name)

        self = super().__new__(cls)
        self._command = command
        self._children = children
        self._strict = bool(strict)
        return seal(self)

    @property
    def name(self):
        return self._command.name

    @property
    def descr(self):
        return self._command.descr

    @property
    def optional(self):
        return self._command.optional

    def _engaged(self, input, /):
        """
        Yield the children taking part in the fold over `input`.
        """
        for child in self._children:
            if isinstance(child, RootCommand) and child.optional and not child.present(input):
                continue
            yield child

    def walk(self):
        """
        Yield every leaf node of the tree depth-first, the root's own node first.
        """
        yield self._command
        for child in self._children:
            if isinstance(child, RootCommand):
                yield from child.walk()
            else:
                yield child

    def find(self, name, /):
        """
        Return the node named `name` anywhere in the tree, or None.
        """
        return next((node for node in self.walk() if node.name == name), None)

    def present(self, input, /):
        return self._command.present(input)

    def validate(self, input, /):
        if not (self._command.present(input) and self._command.validate(input)):
            return False
        if not all(child.validate(input) for child in self._engaged(input)):
            return False
        return not self._strict or not self.strip(input).strip()

    def parse(self, input, accumulator=None, /):
        """
        Build the accumulator for the whole tree.

        The full tree is validated first; on failure nothing is parsed and
        InvalidInputError is raised. Otherwise the root's own value (if any) is
        recorded, then each child contributes in declaration order.
        """
        if not self.validate(input):
            raise InvalidInputError(f"{self.name!r} is not satisfied by {input!r}", source=self.name)
        accumulator = self._command.parse(input, accumulator)
        for child in self._engaged(input):
            accumulator = child.parse(input, accumulator)
        return accumulator

    def strip(self, input, /):
        engaged = tuple(self._engaged(input))
        input = self._command.strip(input)
        for child in engaged:
            input = child.strip(input)
        return input

    def attach(self, child, /):
        """
        Return a new root with `child` appended to the children.

        Raises
        - DuplicateCommandNameError if a child with the same name already exists.
        """
        return type(self)(self._command, (*self._children, child), strict=self._strict)

    def help_text(self):
        return "\n".join(f"{node.name}: {node.descr}" for node in (self._command, *self._children))

    def typed(self, accumulator, /):
        """
        Return {name: typed value} for every node of the tree present in `accumulator`.
        """
        if not isinstance(accumulator, Mapping):
            raise TypeError(f"{type(self).__typename__} accumulator must be a mapping")
        return {node.name: node.typed(accumulator) for node in self.walk() if node.name in accumulator}

    def __rich__(self):
        styles = defaultdict(str, {
            "command-name": "bold #FF4D94",  # MAGENTA-PINK → the root stands out
            "child-name": "bold #00E6FF",  # CYAN for children
            "description": "#9CA3AF",  # Muted gray
            "table": "#4B5563",  # Slate border
        } | getattr(__import__("__main__"), "__styles__", {}))

        table = Table(box=ROUNDED, show_header=False, border_style=styles["table"])
        table.add_column(no_wrap=True)
        table.add_column(style=styles["description"])
        table.add_row(Text(self.name, styles["command-name"]), self.descr)
        for child in self._children:
            table.add_row(Text(child.name, styles["child-name"]), child.descr)
        return table


def flag(name, descr="", /):
    """
    Build a zero-payload flag command (always optional).
    """
    return Command(name, descr, Shape.FLAG)


def valued(name, descr="", /, type=ValueType.TEXT, pattern=".*", *, optional=False):
    """
    Build a value command, mandatory unless `optional` is set.
    """
    return Command(name, descr, Shape.VALUE, type=type, pattern=pattern, optional=optional)


def defaulted(name, descr, default, /, type=ValueType.TEXT, pattern=".*", *, optional=False):
    """
    Build a value command falling back to the literal `default` when the value is omitted.
    """
    return Command(name, descr, Shape.DEFAULT, type=type, pattern=pattern, optional=optional, default=default)


__all__ = (
    # Classes
    "Shape",
    "Command",
    "RootCommand",

    # Factories
    "flag",
    "valued",
    "defaulted",
)
