"""
Argot builder: declarative command-tree configuration.

What this module provides
- Blueprint: an immutable configuration value describing one command and its
  nested child blueprints (flat fields + children).
- Blueprint.from_mapping(): the same, from plain nested mappings such as a
  parsed TOML/JSON document.
- build(blueprint): pure construction of a sealed RootCommand.
- command(name, descr, **fields): shorthand for build(Blueprint(...)).

Shape selection (in priority order)
1. noargs=True always yields a flag, whatever the other fields say.
2. a non-empty default literal yields a default-valued command.
3. otherwise a value command, mandatory unless optional=True.

Children are built and attached whatever shape the parent resolves to. A child
blueprint without children becomes a leaf Command; one with children becomes a
nested RootCommand. Duplicate sibling names abort the build with
DuplicateCommandNameError; no partially-built tree ever escapes.

Example
    tree = command(
        "ping", "send an ICMP request",
        noargs=True,
        children=[
            Blueprint("-c", "how many to send", type="integer", pattern=r"\\d+", optional=True),
            Blueprint("-A", "audible ping", noargs=True),
        ],
    )
    tree.parse("ping -c 3 -A")  # {'-c': '3'}
"""
import logging
import re
from collections.abc import Iterable, Mapping

from .commands import Command, CommandType, RootCommand, Shape
from .utils import *
from .values import ValueType

logger = logging.getLogger(__name__)

# Accepted configuration keys and the Blueprint field each one feeds.
_FIELDS = {
    "name": "name",
    "help": "descr",
    "descr": "descr",
    "type": "type",
    "pattern": "pattern",
    "optional": "optional",
    "noargs": "noargs",
    "default": "default",
    "children": "children",
    "strict": "strict",
}


class Blueprint(Sealed, metaclass=CommandType):
    """
    Immutable configuration for one command node and its children.

    Fields
    - name: str, the command token (required, non-empty).
    - descr: str, help text (default "").
    - type: value-type tag (default ValueType.TEXT).
    - pattern: str | re.Pattern, value pattern (default ".*", match anything).
    - optional: bool (default False).
    - noargs: bool, request a zero-payload flag (default False).
    - default: str, literal used when the value is omitted (default: none).
    - children: Iterable[Blueprint | Mapping], nested configurations.
    - strict: bool, reject trailing unrecognised text (top-level trees only).
    """

    __introspectable__ = (
        "name",
        "descr",
        "type",
        "pattern",
        "optional",
        "noargs",
        "default",
        "children",
        "strict",
    )

    def __new__(
            cls,
            name,
            descr="",
            /,
            *,
            type=ValueType.TEXT,
            pattern=".*",
            optional=False,
            noargs=False,
            default=Unset,
            children=(),
            strict=False
    ):
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} 'name' must be a string")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} 'name' cannot be empty")

        if not isinstance(descr, str):
            raise TypeError(f"{cls.__typename__} 'descr' must be a string")

        if not isinstance(pattern, str | re.Pattern):
            raise TypeError(f"{cls.__typename__} 'pattern' must be a string or a compiled pattern")

        if not isinstance(default, str | Unset):
            raise TypeError(f"{cls.__typename__} 'default' must be a string")

        if not isinstance(children, Iterable) or isinstance(children, str | Mapping):
            raise TypeError(f"{cls.__typename__} 'children' must be an iterable of blueprints")

        blueprints = []
        for child in children:
            if isinstance(child, Mapping):
                child = Blueprint.from_mapping(child)
            elif not isinstance(child, Blueprint):
                raise TypeError(f"{cls.__typename__} 'children' must be an iterable of blueprints")
            blueprints.append(child)

        self = super().__new__(cls)
        self._name = name
        self._descr = descr
        self._type = type
        self._pattern = pattern
        self._optional = bool(optional)
        self._noargs = bool(noargs)
        # an empty literal means "no default", like an absent one
        self._default = coalesce(default) or None
        self._children = tuple(blueprints)
        self._strict = bool(strict)
        return seal(self)

    @classmethod
    def from_mapping(cls, mapping, /):
        """
        Build a Blueprint from a plain mapping.

        Keys: name, help (or descr), type, pattern, optional, noargs, default,
        children (a list of mappings), strict. Unknown keys are rejected so that
        typos in configuration files do not go unnoticed.
        """
        if not isinstance(mapping, Mapping):
            raise TypeError(f"{cls.__typename__} configuration must be a mapping")
        if unknown := sorted(set(mapping) - set(_FIELDS)):
            raise ValueError(f"{cls.__typename__} configuration has unknown keys: {", ".join(map(repr, unknown))}")
        if "name" not in mapping:
            raise ValueError(f"{cls.__typename__} configuration requires a 'name'")
        if "help" in mapping and "descr" in mapping:
            raise ValueError(f"{cls.__typename__} configuration cannot have both 'help' and 'descr'")

        fields = {_FIELDS[key]: value for key, value in mapping.items()}
        return cls(fields.pop("name"), fields.pop("descr", ""), **fields)


def _resolve_command(blueprint, /):
    """
    Select the node shape for a blueprint (noargs > default > value).
    """
    if blueprint.noargs:
        return Command(blueprint.name, blueprint.descr, Shape.FLAG, type=blueprint.type)
    if blueprint.default:
        return Command(
            blueprint.name,
            blueprint.descr,
            Shape.DEFAULT,
            type=blueprint.type,
            pattern=blueprint.pattern,
            optional=blueprint.optional,
            default=blueprint.default,
        )
    return Command(
        blueprint.name,
        blueprint.descr,
        Shape.VALUE,
        type=blueprint.type,
        pattern=blueprint.pattern,
        optional=blueprint.optional,
    )


def _assemble(blueprint, /):
    command = _resolve_command(blueprint)
    if not blueprint.children:
        return command
    return RootCommand(command, map(_assemble, blueprint.children))


def build(blueprint, /):
    """
    Build a sealed RootCommand from a blueprint (or a configuration mapping).

    Raises
    - DuplicateCommandNameError when siblings share a name at any depth.
    - TypeError/ValueError on malformed fields (e.g. an invalid pattern).
    """
    if isinstance(blueprint, Mapping):
        blueprint = Blueprint.from_mapping(blueprint)
    elif not isinstance(blueprint, Blueprint):
        raise TypeError("build() argument must be a blueprint")

    tree = RootCommand(
        _resolve_command(blueprint),
        map(_assemble, blueprint.children),
        strict=blueprint.strict,
    )
    logger.debug("built command tree %r (%s) with %d children", tree.name, tree.command.shape, len(tree.children))
    return tree


def command(name, descr="", /, **fields):
    """
    Shorthand for build(Blueprint(name, descr, **fields)).
    """
    return build(Blueprint(name, descr, **fields))


__all__ = (
    "Blueprint",
    "build",
    "command",
)
