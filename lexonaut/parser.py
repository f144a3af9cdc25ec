"""
Lexonaut parser layer: declare arguments, then parse an argument vector.

What this module provides
- Parser: owns a Registry of declared arguments and drives a TokenReader over
  the argument vector, dispatching every classified token:
  • short/long option → the registered flag or option (UnknownOptionError otherwise)
  • end-of-options marker → nothing; later tokens are values regardless of prefix
  • value → the next positional in declaration order (UnexpectedArgumentError when none is left)
  • after the stream ends, every unmatched positional reports MissingArgumentError.
- invoke(parser, prompt): convenience runner for shell-like strings or iterables,
  always in shell mode (print diagnostics and exit instead of raising).

Modes
- library mode (shell=False, default): the first parse error is raised as a typed
  exception; warnings go through the warnings module; --help raises HelpRequested.
- shell mode (shell=True): the first parse error is printed with rich to stderr,
  followed by the usage line, and the process exits with status 1; --help prints
  the help text and exits with status 0.

Quick start
    from lexonaut import Parser

    parser = Parser("Inventory lookup.")
    every = parser.flag("-a", "--all", descr="list every item")
    integer = parser.option("-i", "--integer", type=int, default=0)
    name = parser.positional("name", descr="item to look up")

    parser.parse(["prog", "-a", "-i", "42", "widget"])
    assert (every.get(), integer.get(), name.get()) == (True, 42, "widget")
"""
import difflib
import os.path
import shlex
import sys
from collections import deque
from collections.abc import Iterable
from types import MappingProxyType

from rich.text import Text

from .arguments import Flag, AggregatingFlag, SingleValueOption, PositionalArgument
from .faults import *
from .formatting import render_usage, render_help
from .reader import TokenKind, TokenReader
from .registry import Registry
from .utils import *


class Parser:
    """
    Declarative command-line parser.

    Parameters
    - descr: Unset | str | Text
      Description paragraph shown in help.
    - prog: Unset | str
      Program name for usage/help/diagnostics. When Unset, __prog__ from __main__
      is used, then the basename of argv[0] from the last parse, then sys.argv[0].
    - prefix: str (keyword-only)
      Option prefix character; a single non-alphanumeric, non-whitespace character.
    - helper: bool (keyword-only)
      Declare "-h"/"--help" automatically (spelled with 'prefix').
    - shell / fancy / colorful: bool (keyword-only)
      Runtime switches for how faults are surfaced and rendered.

    Lifecycle
    - declare (flag/aggregate/option/positional/declare) any number of times;
    - parse once or more; the first parse freezes the registry, and every parse
      starts by restoring all values to their defaults;
    - read values through the returned arguments' get().
    """

    def __init__(self, descr=Unset, prog=Unset, *, prefix="-", helper=True, shell=False, fancy=False, colorful=True):
        if not isinstance(descr, str | Text | Unset):
            raise TypeError("parser 'descr' must be a string")
        elif isinstance(descr, str) and not (descr := descr.strip()):
            raise ValueError("parser 'descr' cannot be empty")

        if not isinstance(prog, str | Unset):
            raise TypeError("parser 'prog' must be a string")
        elif isinstance(prog, str) and not (prog := prog.strip()):
            raise ValueError("parser 'prog' cannot be empty")

        if not isinstance(prefix, str):
            raise TypeError("parser 'prefix' must be a string")
        elif len(prefix) != 1 or prefix.isalnum() or prefix.isspace() or prefix == "_":
            raise ValueError("parser 'prefix' must be a single non-alphanumeric character")

        self.descr = coalesce(descr)
        self.shell = bool(shell)
        self.fancy = bool(fancy)
        self.colorful = bool(colorful)
        self.registry = Registry(prefix)
        self._prog = prog
        self._argv0 = Unset
        self._namespace = MappingProxyType({})

        if helper:
            self.declare(Flag(
                prefix + "h",
                prefix * 2 + "help",
                descr="show this help message and exit",
                callback=self._helper,
            ))

    @property
    def prefix(self):
        return self.registry.prefix

    @property
    def prog(self):
        """
        the program name used in usage lines and diagnostics.
        """
        if self._prog is not Unset:
            return self._prog
        main = __import__("__main__")
        if hasattr(main, "__prog__"):
            return str(main.__prog__)
        argv0 = coalesce(self._argv0, sys.argv[0] if sys.argv else "")
        return os.path.basename(argv0) or "lexonaut"

    @property
    def namespace(self):
        """
        read-only mapping of every name (aliases and positional names) to the
        value stored by the last parse.
        """
        return self._namespace

    # --- declaration -----------------------------------------------------------

    def declare(self, argument, /):
        """
        Register a flag, option, or positional; returns the argument itself.

        The whole name set is validated before the registry changes, so a
        failing declaration leaves no trace.

        Raises
        - InvalidNameError: the argument's names use another prefix.
        - DuplicateNameError: a short or long name is already taken.
        - RuntimeError: parsing has already started.
        """
        return self.registry.enroll(argument)

    def flag(self, *names, **options):
        """
        Declare a Flag (constant=True, default=False unless given).
        """
        return self.declare(Flag(*names, **options))

    def aggregate(self, *names, **options):
        """
        Declare an AggregatingFlag; 'aggregator' is required.
        """
        return self.declare(AggregatingFlag(*names, **options))

    def option(self, *names, **options):
        """
        Declare a SingleValueOption.
        """
        return self.declare(SingleValueOption(*names, **options))

    def positional(self, name, /, **options):
        """
        Declare a PositionalArgument; positionals are matched in declaration order.
        """
        return self.declare(PositionalArgument(name, **options))

    # --- rendering ---------------------------------------------------------------

    def usage(self, width=Unset, /):
        """
        The usage line as rich Text (see formatting.render_usage).
        """
        return render_usage(self, width)

    def help(self, width=Unset, /):
        """
        The full help text as rich Text (see formatting.render_help).
        """
        return render_help(self, width)

    def _context(self):
        return {
            "prog": self.prog,
            "shell": self.shell,
            "fancy": self.fancy,
            "colorful": self.colorful,
        }

    def _helper(self, value):
        trigger(HelpRequested(help=self.help()), **self._context())

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this parser's runtime switches and usage line merged in.
        """
        trigger(fault, **(self._context() | {"usage": self.usage()} | options))

    # --- parsing -----------------------------------------------------------------

    def _unknown(self, token):
        input = token.display(self.prefix)
        suggestions = difflib.get_close_matches(input, self.registry.names(), 5)
        if token.kind is TokenKind.LONG and "=" in token.payload:
            hint = "inline values are not supported; pass it as '%s %s'" % tuple(
                input.split("=", 1)
            )
        elif suggestions:
            hint = "did you mean %r? you can also run '%s %s' to see all options" % (
                suggestions[0], self.prog, self.prefix * 2 + "help"
            )
        else:
            hint = "try '%s %s' to see all available options" % (self.prog, self.prefix * 2 + "help")
        kind = "short" if token.kind is TokenKind.SHORT else "long"
        return UnknownOptionError(
            "unknown %s option %r at %s position" % (kind, input, ordinal(token.index)),
            token=input,
            index=token.index,
            suggestions=tuple(suggestions),
            hint=hint,
        )

    def _parseargs(self, reader):
        positionals = deque(self.registry.positionals)

        for token in reader:
            match token.kind:
                case TokenKind.SHORT:
                    argument = self.registry.short(token.payload)
                case TokenKind.LONG:
                    argument = self.registry.long(token.payload)
                case TokenKind.MARKER:
                    continue
                case TokenKind.VALUE:
                    if not positionals:
                        raise UnexpectedArgumentError(
                            "unexpected argument %r at %s position" % (token.payload, ordinal(token.index)),
                            token=token.payload,
                            index=token.index,
                            hint="%s takes %d positional argument%s" % (
                                self.prog,
                                len(self.registry.positionals),
                                "" if len(self.registry.positionals) == 1 else "s",
                            ),
                        )
                    argument = positionals.popleft()
                case _:
                    raise RuntimeError("unexpected token")

            if argument is None:
                raise self._unknown(token)
            argument.parse(reader)

        # each leftover positional reports its own missing value against the drained reader
        while positionals:
            positionals.popleft().parse(reader)

    def parse(self, argv=Unset, /):
        """
        Parse an argument vector (argv[0] is the program name) into the declared arguments.

        Parameters
        - argv: Unset | Iterable[str]
          Defaults to sys.argv.

        Returns
        - a read-only mapping from every name to its parsed value (also kept in
          self.namespace); the arguments themselves hold the values as well.

        Raises (library mode)
        - UnknownOptionError, MissingArgumentError, ConversionError, UnexpectedArgumentError
        - HelpRequested when the built-in help flag is matched
        """
        argv = coalesce(argv, sys.argv)
        if isinstance(argv, str) or not isinstance(argv, Iterable):
            raise TypeError("parse() argument must be an iterable of strings")
        argv = list(argv)
        if not all(isinstance(argument, str) for argument in argv):
            raise TypeError("parse() argument must be an iterable of strings")

        if argv:
            self._argv0 = argv[0]

        self.registry.freeze()
        self.registry.reset()

        reader = TokenReader(argv[1:], self.prefix, **self._context())
        try:
            self._parseargs(reader)
        except ParseError as fault:
            self.trigger(fault)

        namespace = {}
        for argument in self.registry:
            namespace.update(dict.fromkeys(argument.names, argument.get()))
        self._namespace = MappingProxyType(namespace)
        return self._namespace

    def __repr__(self):
        return "%s(prog=%r, registry=%r)" % (type(self).__name__, self.prog, self.registry)


def invoke(parser, prompt=Unset, /):
    """
    Run a parser in shell mode.

    prompt
    - Unset: sys.argv is parsed.
    - str: split like a shell command line (shlex); the program name is prepended.
    - iterable of str: used as the arguments; the program name is prepended.

    Faults are printed and terminate the process (exit status 1, or 0 for help).
    """
    if not isinstance(parser, Parser):
        raise TypeError("invoke() first argument must be a parser")

    match prompt:
        case UnsetType():
            argv = sys.argv
        case str():
            argv = [parser.prog, *shlex.split(prompt)]
        case Iterable():
            argv = [parser.prog, *prompt]
        case _:
            raise TypeError("invoke() second argument must be a string or an iterable of strings")

    shell = parser.shell
    parser.shell = True
    try:
        return parser.parse(argv)
    finally:
        parser.shell = shell


__all__ = (
    "Parser",
    "invoke",
)
