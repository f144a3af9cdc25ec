"""
Lexonaut faults: every error, warning, and terminator the parser can surface.

Families
- DeclarationError (programmer mistakes, raised while arguments are declared)
  • InvalidNameError, DuplicateNameError
- ParseError (bad input, raised by the first failure of a parse call)
  • UnknownOptionError, MissingArgumentError, ConversionError, UnexpectedArgumentError
- CommandWarning (non-fatal)
  • EmptyValueWarning
- HelpRequested (terminator fired by the built-in help flag)

Anatomy
- A fault is a short, lowercased, position-first message plus a read-only 'options'
  mapping of context: token, argument, index, expected, hint, and the runtime
  switches (prog, shell, fancy, colorful, usage) merged in by the parser.
- FaultCode gives every family member a stable number; __codes__ in __main__ can
  relabel them, __docs__ in __main__ can document them (see getdoc()).

Surfacing
- trigger(fault, **options) merges options into a copy of the fault and fires it:
  library mode raises errors and routes warnings to the warnings module; shell
  mode prints them with rich to stderr (then the usage line) and exits with 1.
"""
import sys
import warnings
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
    Stable numeric identifiers, one per fault type.

    - 101xx declaration errors
    - 111xx parse errors
    - 121xx warnings
    - 131xx terminators
    """
    # --- declaration errors (101xx) ---
    INVALID_NAME                = 10101
    DUPLICATE_NAME              = 10102

    # --- parse errors (111xx) ---
    UNKNOWN_OPTION              = 11101
    MISSING_ARGUMENT            = 11102
    CONVERSION_FAILED           = 11103
    UNEXPECTED_ARGUMENT         = 11104

    # --- warnings (121xx) ---
    EMPTY_VALUE                 = 12101

    # --- terminators (131xx) ---
    HELP_REQUESTED              = 13101

    def normalize(self):
        """
        The label shown to users: __codes__[self] from __main__ when the host
        defines it, the number otherwise.
        """
        labels = getattr(__import__("__main__"), "__codes__", {})
        return str(labels.get(self, self.value))


class _Fault:
    """
    Message, context options, and rich rendering shared by errors and warnings.
    """
    code = None
    title = "fault"
    palette = {}

    def __init__(self, message=Unset, /, **options):
        if not isinstance(message, str | Unset):
            raise TypeError("fault message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def token(self):
        """
        the offending raw token, when the fault was caused by one.
        """
        return self.options.get("token")

    @property
    def argument(self):
        """
        the declared argument involved in the fault, when any.
        """
        return self.options.get("argument")

    def __str__(self):
        return "" if self.message is Unset else self.message

    def __replace__(self, /, **overrides):
        return type(self)(self.message, **(dict(self.options) | overrides))

    def __rich__(self):
        options = self.options
        colorful = options.get("colorful", True)
        styles = defaultdict(str, self.palette | getattr(__import__("__main__"), "__styles__", {}))

        def styled(fragment, key):
            if isinstance(fragment, Text):
                return fragment if colorful else Text(fragment.plain)
            return Text(str(fragment), styles[key] if colorful else "")

        prog = getattr(__import__("__main__"), "__prog__", None) or options.get("prog") or "lexonaut"
        code = options.get("code", self.code)
        header = Text.assemble(
            "[ ",
            styled(prog, "prog"),
            " — ",
            styled(code.normalize() if isinstance(code, FaultCode) else "-", "code"),
            " | ",
            styled(options.get("title", self.title).title(), "title"),
            " ]",
        )
        body = [styled(str(self), "message")]
        if hint := options.get("hint"):
            body.append(Text.assemble(styled(" → ", "arrow"), styled(hint, "hint")))

        if not options.get("fancy", False):
            return Group(header, *body)

        width = None
        if "ratio" in options:
            width = int((console.width - 4) * options["ratio"])
        return Panel(Group(*body), title=header, title_align="left", width=width)


class CommandException(_Fault, Exception):
    """
    Base of every lexonaut error.
    """
    title = "error"
    palette = {
        "prog": "bold #F2F2F7",
        "code": "bold #4FD1FF",
        "title": "bold #FF5C8A",
        "message": "#D0D0D8",
        "arrow": "dim #8FE3A0",
        "hint": "italic #8FE3A0",
    }

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        if usage := self.options.get("usage"):
            console.print(usage)
        sys.exit(1)


class DeclarationError(CommandException, ValueError):
    title = "bad declaration"


class InvalidNameError(DeclarationError):
    code = FaultCode.INVALID_NAME
    title = "invalid name"


class DuplicateNameError(DeclarationError):
    code = FaultCode.DUPLICATE_NAME
    title = "duplicate name"


class ParseError(CommandException):
    title = "bad input"


class UnknownOptionError(ParseError):
    code = FaultCode.UNKNOWN_OPTION
    title = "unknown option"


class MissingArgumentError(ParseError):
    code = FaultCode.MISSING_ARGUMENT
    title = "missing argument"


class ConversionError(ParseError, ValueError):
    code = FaultCode.CONVERSION_FAILED
    title = "bad value"

    @property
    def expected(self):
        """
        human-readable name of the type the token should have converted to.
        """
        return self.options.get("expected")


class UnexpectedArgumentError(ParseError):
    code = FaultCode.UNEXPECTED_ARGUMENT
    title = "unexpected argument"


class CommandWarning(_Fault, Warning):
    """
    Base of every non-fatal lexonaut notice.
    """
    title = "warning"
    palette = {
        "prog": "bold #F2F2F7",
        "code": "bold #FFB020",
        "title": "bold #FFC7DD",
        "message": "#DADAE2",
        "arrow": "dim #B5EEB0",
        "hint": "italic #B5EEB0",
    }

    def __trigger__(self):
        if self.options.get("shell", False):
            console.print(self)
        else:
            # attribute the warning to the code that called Parser.parse()
            warnings.warn(self, stacklevel=6)


class EmptyValueWarning(CommandWarning):
    code = FaultCode.EMPTY_VALUE
    title = "empty value"


class HelpRequested(Exception):
    """
    Terminator fired by the built-in help flag; options["help"] holds the rendered help.

    Shell mode prints the help to stdout and exits with status 0. Library mode
    raises the signal so the embedding code decides what to do with the text.
    """
    code = FaultCode.HELP_REQUESTED

    def __init__(self, /, **options):
        super().__init__("help requested")
        self.options = MappingProxyType(options)

    @property
    def help(self):
        return self.options.get("help")

    def __replace__(self, /, **overrides):
        return type(self)(**(dict(self.options) | overrides))

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        Console().print(self.options.get("help", ""))
        sys.exit(0)


def trigger(fault, /, **options):
    """
    Fire 'fault' with 'options' merged into its context.

    The fault is copied through __replace__(**options) and then __trigger__() decides,
    from the merged 'shell' switch, whether to raise, warn, or print and exit.
    """
    if not (callable(getattr(fault, "__trigger__", None)) and callable(getattr(fault, "__replace__", None))):
        raise TypeError("trigger() argument must be a fault")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    Documentation for 'code' from the __docs__ mapping in __main__, or None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault code")
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "FaultCode",
    "CommandException",
    "DeclarationError",
    "InvalidNameError",
    "DuplicateNameError",
    "ParseError",
    "UnknownOptionError",
    "MissingArgumentError",
    "ConversionError",
    "UnexpectedArgumentError",
    "CommandWarning",
    "EmptyValueWarning",
    "HelpRequested",
    "trigger",
    "getdoc",
)
