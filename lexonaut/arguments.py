r"""
Lexonaut argument specifications.

Overview
- Variants (a closed set; none of them can be subclassed)
  • Flag[_T]: named, presence-only; stores a constant when matched (-a/--all).
  • AggregatingFlag[_T]: named, repeatable; folds a constant into the current
    value through a caller-supplied aggregator (-v -v -v → 3).
  • SingleValueOption[_T]: named, value-bearing; pulls exactly one value from the
    reader and converts it (-i 42, -i42, --integer 42).
  • PositionalArgument[_T]: unnamed, value-bearing; matched by position.

- Shared behavior (Argument)
  • parse(reader): consume what the variant needs from a TokenReader and store it.
  • get() / value: the current value (the default until matched).
  • short_usage() / long_usage() / help(): fragments for the usage/help renderer.
  • reset(): restore the default (done by the parser before every parse).

- Introspection & representation
  • Every name in a variant's __fields__ is readable as a frozen property
    (flag.names, option.default, ...); repr() and rich pretty-printing show the
    subset listed in __shown__.

Metadata (sanitized on construction)
- Shared (all variants)
  • descr: Unset | str | Text (short help), non-empty when provided.
  • callback: Unset | callable, invoked with the stored value after each match.
- Named (Flag/AggregatingFlag/SingleValueOption)
  • names: one or more of "<p><alnum>" (short) or "<p><p><alnum>[<alnum-or-hyphen>...]"
    (long, no trailing hyphen), all using the same prefix character <p>; duplicates rejected.
- Value-bearing (SingleValueOption/PositionalArgument)
  • type: the declared element type; its default converter comes from converters.converter_for().
  • converter: Unset | callable overriding the default converter.
  • metavar: Unset | str (label in usage/help).

Quick example:
    >>> verbose = AggregatingFlag("-v", "--verbose", constant=1, default=0, aggregator=operator.add)
    >>> integer = SingleValueOption("-i", "--integer", type=int, default=0)
    >>> name = PositionalArgument("name")

Public API
- Classes: Argument, Flag, AggregatingFlag, SingleValueOption, PositionalArgument
"""
import builtins
import re
from abc import ABCMeta, abstractmethod

from rich.text import Text

from .converters import converter_for, typename
from .faults import *
from .utils import *


class ArgumentType(ABCMeta):
    """
    Metaclass of the argument variants.

    When a class is created it
    - derives __typename__ from the class name: SingleValueOption gives
      "single-value-option", which is how messages refer to the variant;
    - installs a mirror() property for every entry of __fields__;
    - with the class keyword sealed=True, rejects any further subclass.
    """

    def __new__(cls, name, bases, namespace, sealed=False, **options):
        namespace["__typename__"] = "-".join(map(str.lower, re.findall(r"[A-Z][^A-Z]*", name)))
        for field in namespace.get("__fields__", ()):
            namespace[field] = mirror(field)
        self = super().__new__(cls, name, bases, namespace, **options)

        if sealed:
            def __init_subclass__(subclass, **options):
                raise TypeError("%s is sealed and cannot be subclassed" % self.__name__)
            self.__init_subclass__ = classmethod(__init_subclass__)

        return self


_SHORT = r"(?P<prefix>[^\w\s])(?P<short>[^\W_])"
_LONG = r"(?P<prefix>[^\w\s])(?P=prefix)(?P<long>[^\W_](?:(?:[^\W_]|-)*[^\W_])?)"


def _text(cls, metadata, key, *types):
    # Unset → None; strings are trimmed and may not end up empty
    value = metadata[key]
    if not isinstance(value, (str, UnsetType, *types)):
        raise TypeError("%s %s must be a string, not %s" % (cls.__typename__, key, type(value).__name__))
    if isinstance(value, str) and not (value := value.strip()):
        raise ValueError("%s %s is blank" % (cls.__typename__, key))
    metadata[key] = coalesce(value)


def _sanitize_metadata(cls, metadata, /):
    """
    Check what every variant accepts: 'descr' (str or rich Text, non-blank,
    None when omitted) and 'callback' (a callable, or Unset for none).
    """
    _text(cls, metadata, "descr", Text)
    if metadata["callback"] is not Unset and not callable(metadata["callback"]):
        raise TypeError("%s callback must be callable" % cls.__typename__)


def _sanitize_named_metadata(cls, metadata, /):
    r"""
    Check the names of a named variant and split them by shape.

    With p the prefix character (anything but a letter, digit, '_' or blank):
        p<letter-or-digit>                     short: -x, -1
        pp<letter-or-digit>[...]               long:  --all, --dry-run, --x
    where a long name continues with letters, digits and hyphens, never ending
    on a hyphen. Every alias of one declaration uses the same p.

    Adds 'shorts' (the characters), 'longs' (without the prefix) and 'prefix' to
    'metadata' and stores 'names' back as a tuple in declaration order.
    """
    if not metadata["names"]:
        raise InvalidNameError(
            "%s declared without a name" % cls.__typename__,
            title="missing name",
            hint="give at least one of '-x' or '--example'",
        )

    names, shorts, longs, prefixes = [], [], [], set()
    for name in metadata["names"]:
        if not isinstance(name, str):
            raise InvalidNameError(
                "%s name %r is a %s, not a string" % (cls.__typename__, name, type(name).__name__),
                token=name,
                hint="write names as strings, e.g. '-x' or '--example'",
            )
        name = name.strip()
        match = re.fullmatch(_SHORT, name) or re.fullmatch(_LONG, name)
        if match is None:
            raise InvalidNameError(
                "%s name %r is malformed" % (cls.__typename__, name),
                token=name,
                hint="use '-' plus one letter or digit, or '--' plus letters, digits and inner hyphens",
            )
        if name in names:
            raise InvalidNameError(
                "%s name %r is given twice" % (cls.__typename__, name),
                token=name,
                hint="drop the repeated alias",
            )
        if "short" in match.groupdict():
            shorts.append(match["short"])
        else:
            longs.append(match["long"])
        names.append(name)
        prefixes.add(match["prefix"])

    if len(prefixes) > 1:
        raise InvalidNameError(
            "%s names mix the prefixes %s" % (cls.__typename__, ", ".join(map(repr, sorted(prefixes)))),
            token=tuple(names),
            hint="start every alias with the same character",
        )

    metadata.update(names=tuple(names), shorts=tuple(shorts), longs=tuple(longs), prefix=prefixes.pop())


def _sanitize_parametric_metadata(cls, metadata, /):
    """
    Check the value-bearing part: 'metavar' (non-blank string, None when omitted),
    'type' (callable) and 'converter' (callable, resolved from 'type' through
    converter_for() when omitted). 'default' is taken as is.
    """
    _text(cls, metadata, "metavar")

    if not callable(metadata["type"]):
        raise TypeError("%s type must be callable" % cls.__typename__)

    if metadata["converter"] is Unset:
        metadata["converter"] = converter_for(metadata["type"])
    elif not callable(metadata["converter"]):
        raise TypeError("%s converter must be callable" % cls.__typename__)


class Argument(metaclass=ArgumentType):
    """
    Abstract, parseable unit with a display form and a help string.

    Subclasses implement parse(reader), short_usage() and long_usage(); the
    value slot (_value), its default (_default), and the optional callback are
    handled here.
    """
    __fields__ = ()
    __shown__ = None

    def _bind(self, metadata):
        # each key lands in self._<key>, which the __fields__ properties read
        for key, object in metadata.items():
            setattr(self, "_" + key, object)
        self._value = self._default

    def __rich_repr__(self):
        for field in type(self).__shown__ or type(self).__fields__:
            yield field, getattr(self, field)

    def __repr__(self):
        return "%s(%s)" % (
            type(self).__typename__,
            ", ".join("%s=%r" % pair for pair in self.__rich_repr__()),
        )

    def get(self):
        """
        Return the current value: the default before parsing, the parsed value after.
        """
        return self._value

    @property
    def value(self):
        return self._value

    def reset(self):
        """
        Restore the value slot to the declared default.
        """
        self._value = self._default

    def help(self):
        """
        The help text (None when no description was declared).
        """
        return self._descr

    def _store(self, value):
        self._value = value
        if self._callback is not Unset:
            self._callback(value)

    @abstractmethod
    def parse(self, reader, /):
        """
        Consume what this argument needs from 'reader' and update the value slot.
        """
        raise NotImplementedError

    @abstractmethod
    def short_usage(self):
        """
        Compact usage fragment, e.g. "[-x]" or "[--name <meta>]".
        """
        raise NotImplementedError

    @abstractmethod
    def long_usage(self):
        """
        Listing of every alias with its value placeholder, e.g. "-i <integer>, --integer <integer>".
        """
        raise NotImplementedError

    def display(self):
        """
        The name used for this argument in messages ("--integer", "-i", "name").
        """
        return self._names[0]


class _Named(Argument):
    """
    Behavior shared by variants matched through names.
    """

    def display(self):
        # prefer a long alias in messages; it reads better than a single letter
        if self._longs:
            return self._prefix * 2 + self._longs[0]
        return self._prefix + self._shorts[0]


class _Parametric(Argument):
    """
    Behavior shared by variants that pull exactly one value from the reader.
    """

    def placeholder(self):
        """
        Value placeholder for usage/help, e.g. "<integer>" or the explicit metavar.
        """
        if self._metavar is not None:
            return self._metavar
        return "<%s>" % self._metavar_fallback()

    @abstractmethod
    def _metavar_fallback(self):
        """
        Bare label wrapped in angle brackets when no metavar was declared.
        """
        raise NotImplementedError

    def parse(self, reader, /):
        """
        Pull one value from the reader, convert it, and store it.

        Raises
        - MissingArgumentError: the reader is exhausted or the next argument is option-shaped.
        - ConversionError: the converter refused the token.
        """
        index = reader.index
        if (token := reader.next_value()) is None:
            raise MissingArgumentError(
                "%s %r requires a value, but none was given" % (self._kind(), self.display()),
                argument=self,
                index=index,
                expected=typename(self._type),
                hint="pass a value for %s, e.g. %s" % (self.display(), self._example()),
            )

        if token == "":
            trigger(EmptyValueWarning(
                "empty value for %s %r at %s position" % (self._kind(), self.display(), ordinal(reader.index)),
                argument=self,
                index=reader.index,
                hint="quote a non-empty value if this was not intended",
            ), **reader.context)

        try:
            value = self._converter(token)
        except (ValueError, TypeError) as error:
            expected = getattr(error, "expected", None) or typename(self._type)
            raise ConversionError(
                "cannot interpret %r as %s for %s %r at %s position" % (
                    token, expected, self._kind(), self.display(), ordinal(reader.index)
                ),
                token=token,
                argument=self,
                index=reader.index,
                expected=expected,
                hint="pass a valid %s for %s" % (expected, self.display()),
            ) from error

        self._store(value)

    @abstractmethod
    def _kind(self):
        """
        Word naming the variant in messages ("option", "positional").
        """
        raise NotImplementedError

    @abstractmethod
    def _example(self):
        """
        Sample invocation used in the missing-value hint.
        """
        raise NotImplementedError


class Flag[_T](_Named, sealed=True):
    """
    Named, presence-only specification.

    Matching any alias overwrites the value with 'constant'; the reader is never
    touched, so "-ab" continues with "b" after a flag "a".

    Parameters
    - names: one or more names ("-a", "--all").
    - constant: value stored on every match (default True).
    - default: value before matching (default False).
    - descr: help text.
    - callback: called with the stored value after every match.
    """

    __fields__ = (
        "names",
        "shorts",
        "longs",
        "prefix",
        "constant",
        "default",
        "descr",
        "callback",
    )
    __shown__ = (
        "names",
        "constant",
        "default",
        "descr",
    )

    def __init__(self, *names, constant=True, default=False, descr=Unset, callback=Unset):
        metadata = {
            "names": names,
            "constant": constant,
            "default": default,
            "descr": descr,
            "callback": callback,
        }
        _sanitize_metadata(type(self), metadata)
        _sanitize_named_metadata(type(self), metadata)
        self._bind(metadata)

    def parse(self, reader, /):
        self._store(self._constant)

    def short_usage(self):
        return "[%s]" % self._names[0]

    def long_usage(self):
        return ", ".join(self._names)


class AggregatingFlag[_T](_Named, sealed=True):
    """
    Named, repeatable presence specification.

    Every match stores aggregator(current value, constant). There is no default
    aggregator: counting uses operator.add with constant=1 and default=0,
    OR-ing uses operator.or_, and so on.

    Parameters
    - names: one or more names ("-v", "--verbose").
    - aggregator: required, keyword-only callable (current, constant) -> new value.
    - constant: value folded in on every match (default True).
    - default: value before matching (default False).
    - descr, callback: as for Flag.
    """

    __fields__ = (
        "names",
        "shorts",
        "longs",
        "prefix",
        "constant",
        "default",
        "aggregator",
        "descr",
        "callback",
    )
    __shown__ = (
        "names",
        "constant",
        "default",
        "aggregator",
        "descr",
    )

    def __init__(self, *names, aggregator, constant=True, default=False, descr=Unset, callback=Unset):
        if not callable(aggregator):
            raise TypeError("%s aggregator must be callable" % type(self).__typename__)
        metadata = {
            "names": names,
            "aggregator": aggregator,
            "constant": constant,
            "default": default,
            "descr": descr,
            "callback": callback,
        }
        _sanitize_metadata(type(self), metadata)
        _sanitize_named_metadata(type(self), metadata)
        self._bind(metadata)

    def parse(self, reader, /):
        self._store(self._aggregator(self._value, self._constant))

    def short_usage(self):
        return "[%s]..." % self._names[0]

    def long_usage(self):
        return ", ".join(self._names)


class SingleValueOption[_T](_Named, _Parametric, sealed=True):
    """
    Named, value-bearing specification.

    When matched, exactly one value is requested from the reader: the rest of a
    short cluster ("-n5"), or the next raw argument when it is not option-shaped
    ("-n 5", "--number 5").

    Parameters
    - names: one or more names ("-i", "--integer").
    - type: declared element type (default str).
    - default: value before matching (default None).
    - converter: overrides the default converter for 'type'.
    - metavar: placeholder shown in usage/help; defaults to "<first long name>",
      or "<first short name>" when there is no long name.
    - descr, callback: as for Flag.
    """

    __fields__ = (
        "names",
        "shorts",
        "longs",
        "prefix",
        "type",
        "default",
        "converter",
        "metavar",
        "descr",
        "callback",
    )
    __shown__ = (
        "names",
        "type",
        "default",
        "metavar",
        "descr",
    )

    def __init__(self, *names, type=str, default=None, converter=Unset, metavar=Unset, descr=Unset, callback=Unset):
        metadata = {
            "names": names,
            "type": type,
            "default": default,
            "converter": converter,
            "metavar": metavar,
            "descr": descr,
            "callback": callback,
        }
        _sanitize_metadata(builtins.type(self), metadata)
        _sanitize_named_metadata(builtins.type(self), metadata)
        _sanitize_parametric_metadata(builtins.type(self), metadata)
        self._bind(metadata)

    def _metavar_fallback(self):
        return self._longs[0] if self._longs else self._shorts[0]

    def _kind(self):
        return "option"

    def _example(self):
        return "%s %s" % (self._names[0], self.placeholder())

    def short_usage(self):
        return "[%s %s]" % (self._names[0], self.placeholder())

    def long_usage(self):
        return ", ".join("%s %s" % (name, self.placeholder()) for name in self._names)


class PositionalArgument[_T](_Parametric, sealed=True):
    """
    Positional, value-bearing specification.

    Positionals are required and are satisfied in declaration order by the first
    value tokens not consumed as option arguments.

    Parameters
    - name: identifier used in messages and as the default placeholder ("<name>").
    - type, default, converter, metavar, descr, callback: as for SingleValueOption.
    """

    __fields__ = (
        "name",
        "names",
        "type",
        "default",
        "converter",
        "metavar",
        "descr",
        "callback",
    )

    def __init__(self, name, /, type=str, default=None, converter=Unset, metavar=Unset, descr=Unset, callback=Unset):
        if not isinstance(name, str):
            raise InvalidNameError(
                f"{builtins.type(self).__typename__} name must be a string",
                token=name,
                hint="declare positionals with a plain name like 'file'",
            )
        if not re.fullmatch(r"[^\W_][\w-]*", name := name.strip()):
            raise InvalidNameError(
                f"{builtins.type(self).__typename__} name {name!r} is not a valid name",
                token=name,
                hint="start with a letter or digit and do not use a prefix character",
            )
        metadata = {
            "name": name,
            "names": (name,),
            "type": type,
            "default": default,
            "converter": converter,
            "metavar": metavar,
            "descr": descr,
            "callback": callback,
        }
        _sanitize_metadata(builtins.type(self), metadata)
        _sanitize_parametric_metadata(builtins.type(self), metadata)
        self._bind(metadata)

    def _metavar_fallback(self):
        return self._name

    def _kind(self):
        return "positional"

    def _example(self):
        return self.placeholder()

    def display(self):
        return self._name

    def short_usage(self):
        return self.placeholder()

    def long_usage(self):
        return self.placeholder()


__all__ = (
    "Argument",
    "Flag",
    "AggregatingFlag",
    "SingleValueOption",
    "PositionalArgument",
)

# the metaclass stays internal
del ArgumentType
