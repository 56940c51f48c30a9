"""
Argot faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every fault the engine
  raises. Codes are grouped by domain to keep messages and log searches predictable.
- CommandException: base type carrying a message + options (code, title, hint)
  that knows how to render itself in a friendly, lowercased, actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

All faults are synchronous, local and deterministic: fix the input or the
configuration, retrying never helps.

Integration
- Library code raises the concrete exceptions directly.
- Hosts that talk to humans call trigger(fault, shell=True) to render the fault
  on stderr through rich instead of propagating it.
"""
import copy
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by high-level domain)
    - input (2110x)
      • INVALID_INPUT, UNKNOWN_COMMAND
    - configuration (2120x)
      • DUPLICATE_COMMAND_NAME
    - values (2130x)
      • UNSUPPORTED_VALUE_TYPE, VALUE_COERCION_FAILURE

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- input errors (211xx) ---
    INVALID_INPUT               = 21101
    UNKNOWN_COMMAND             = 21102

    # --- configuration errors (212xx) ---
    DUPLICATE_COMMAND_NAME      = 21201

    # --- value errors (213xx) ---
    UNSUPPORTED_VALUE_TYPE      = 21301
    VALUE_COERCION_FAILURE      = 21302

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    base fault: a message plus immutable rendering options.

    subclasses declare their defaults (code, title, hint) in __defaults__; explicit
    options given at construction or through copy.replace() win over them.
    """
    __defaults__ = MappingProxyType({
        "code": FaultCode.INVALID_INPUT,
        "title": "fault",
        "hint": "",
        "source": "argot",
        "shell": False,
        "fancy": False,
        "colorful": False,
    })

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(dict(type(self).__defaults__) | options)

    @property
    def code(self):
        return self.options["code"]

    def __str__(self):
        return "" if self.message is Unset else self.message

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if self.options["colorful"] else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not self.options["colorful"]:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(getattr(main, "__prog__", self.options["source"]), styler("prog-name"))

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(self.code.normalize(), styler("code")),
            " | ",
            text(self.options["title"].title(), styler("error-title")),
            " ]"
        )
        message = text(str(self), styler("error-message"))

        renders = [message]
        if self.options["hint"]:
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(self.options["hint"], styler("hint"))))

        if self.options["fancy"]:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self):
        if not self.options["shell"]:
            raise self from None
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class InvalidInputError(CommandException):
    """parse() invoked on text that does not satisfy the node's validate()."""
    __defaults__ = CommandException.__defaults__ | {
        "code": FaultCode.INVALID_INPUT,
        "title": "invalid input",
        "hint": "check the command with validate() before parsing it",
    }


class UnknownCommandError(CommandException):
    """no command of a catalog recognises the text."""
    __defaults__ = CommandException.__defaults__ | {
        "code": FaultCode.UNKNOWN_COMMAND,
        "title": "unknown command",
        "hint": "send 'help' to list the available commands",
    }


class DuplicateCommandNameError(CommandException):
    """two sibling commands share a name at attach/build time."""
    __defaults__ = CommandException.__defaults__ | {
        "code": FaultCode.DUPLICATE_COMMAND_NAME,
        "title": "duplicate command name",
        "hint": "sibling commands must have distinct names",
    }


class UnsupportedValueTypeError(CommandException):
    """typed access requested for a value-type tag with no registered coercion."""
    __defaults__ = CommandException.__defaults__ | {
        "code": FaultCode.UNSUPPORTED_VALUE_TYPE,
        "title": "unsupported value type",
        "hint": "use one of text, integer, float, double or boolean",
    }


class ValueCoercionError(CommandException):
    """a stored raw string fails numeric/boolean parsing for its declared type."""
    __defaults__ = CommandException.__defaults__ | {
        "code": FaultCode.VALUE_COERCION_FAILURE,
        "title": "value coercion failure",
        "hint": "tighten the command pattern so it only matches valid values",
    }


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via copy.replace() before triggering.
    - in shell mode, rendering happens via the rich console; otherwise the fault is raised.

    typical options
    - shell, fancy, colorful, source, title, hint.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "CommandException",
    "InvalidInputError",
    "UnknownCommandError",
    "DuplicateCommandNameError",
    "UnsupportedValueTypeError",
    "ValueCoercionError",
    "FaultCode",
    "trigger",
    "getdoc",
)
