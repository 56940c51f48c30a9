"""
Argot catalog: the set of top-level commands a host recognises.

A Catalog holds sealed RootCommands in priority order and answers one question
per inbound text: which command, if any, does this text invoke? The first root
that validates wins; its accumulator and the stripped residue are returned as a
Resolution for the host's dispatcher to act on.

Hosts facing humans use interpret(), which reports an unmatched text as an
UnknownCommandError through faults.trigger() (raised, or rendered with rich in
shell mode).
"""
import logging
from collections import namedtuple

from rich.console import Group

from .commands import RootCommand
from .faults import *

logger = logging.getLogger(__name__)


class Resolution(namedtuple("Resolution", ("command", "values", "residue"))):
    """
    outcome of a successful resolution.

    - command: the RootCommand that recognised the text.
    - values: name -> raw string accumulator built by command.parse().
    - residue: the text left once the command tree has been stripped.
    """
    __slots__ = ()

    def typed(self):
        """
        Coerce every recorded value to its declared type (see RootCommand.typed).
        """
        return self.command.typed(self.values)


class Catalog:
    """
    Ordered, immutable collection of root commands with distinct names.
    """
    __slots__ = ("_commands",)

    def __init__(self, *commands):
        names = set()
        for command in commands:
            if not isinstance(command, RootCommand):
                raise TypeError("catalog commands must be root commands")
            if command.name in names:
                raise DuplicateCommandNameError(f"the catalog already has a command named {command.name!r}", source="catalog")
            names.add(command.name)
        object.__setattr__(self, "_commands", commands)

    def __setattr__(self, name, value, /):
        raise AttributeError("catalog is read-only")

    @property
    def commands(self):
        return self._commands

    def __iter__(self):
        return iter(self._commands)

    def __len__(self):
        return len(self._commands)

    def __contains__(self, name, /):
        return any(command.name == name for command in self._commands)

    def __getitem__(self, name, /):
        for command in self._commands:
            if command.name == name:
                return command
        raise KeyError(name)

    def __repr__(self):
        return f"catalog({", ".join(repr(command.name) for command in self._commands)})"

    def resolve(self, input, /):
        """
        Return the Resolution of the first command validating `input`, or None.
        """
        if not isinstance(input, str):
            raise TypeError("catalog input must be a string")
        for command in self._commands:
            if command.validate(input):
                logger.debug("resolved %r to command %r", input, command.name)
                return Resolution(command, command.parse(input), command.strip(input))
        logger.debug("no command recognises %r", input)
        return None

    def interpret(self, input, /, *, shell=False, fancy=False, colorful=False):
        """
        Resolve `input`, surfacing an unmatched text as an UnknownCommandError.

        Outside shell mode the fault is raised; in shell mode it is rendered on
        stderr and None is returned.
        """
        if (resolution := self.resolve(input)) is None:
            trigger(
                UnknownCommandError(f"no command recognises {input!r}"),
                shell=shell,
                fancy=fancy,
                colorful=colorful,
            )
        return resolution

    def help_text(self):
        return "\n\n".join(command.help_text() for command in self._commands)

    def __rich__(self):
        return Group(*self._commands)


__all__ = (
    "Catalog",
    "Resolution",
)
