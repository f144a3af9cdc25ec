"""
Lexonaut converters: turn one raw token into a typed value.

Contract
- A converter is any callable taking a single string and returning a value.
- Failure is signalled with ConversionError (a ValueError); plain ValueError and
  TypeError coming from wrapped types are translated into ConversionError.
- Non-string converters must consume the whole token: leading or trailing
  characters (including whitespace) are a failure, never a truncation.
- The string converter is the identity and performs no checks at all.

Defaults
- bool  → read_bool  ("true"/"false", "1"/"0"; case-sensitive)
- int   → read_int   (optional sign followed by decimal digits)
- float → read_float (anything float() accepts, minus surrounding whitespace and underscores)
- str   → read_str   (identity)
- any other callable type T → T(token), with ValueError/TypeError mapped to ConversionError
"""
import re

from .faults import ConversionError
from .utils import rename


_INTEGER = re.compile(r"[+-]?[0-9]+")
_BOOLEANS = {
    "true": True,
    "false": False,
    "1": True,
    "0": False,
}


def _refuse(token, expected):
    return ConversionError(
        "cannot interpret %r as %s" % (token, expected),
        token=token,
        expected=expected,
    )


def read_str(token, /):
    """
    Identity converter; exempt from whole-token checks.
    """
    return token


def read_bool(token, /):
    try:
        return _BOOLEANS[token]
    except KeyError:
        raise _refuse(token, "bool") from None


def read_int(token, /):
    # int() alone would accept " 5", "1_000" and other forms that leave the
    # literal token only partially interpreted.
    if not _INTEGER.fullmatch(token):
        raise _refuse(token, "int")
    return int(token)


def read_float(token, /):
    if token != token.strip() or "_" in token:
        raise _refuse(token, "float")
    try:
        return float(token)
    except ValueError:
        raise _refuse(token, "float") from None


_DEFAULTS = {
    bool: read_bool,
    int: read_int,
    float: read_float,
    str: read_str,
}


def converter_for(type, /):
    """
    Resolve the default converter for a declared element type.

    Builtin scalar types map to the strict readers above. Any other callable is
    wrapped so that its ValueError/TypeError surfaces as ConversionError naming
    the type.

    Raises
    - TypeError: when 'type' is not callable.
    """
    try:
        return _DEFAULTS[type]
    except (KeyError, TypeError):
        pass

    if not callable(type):
        raise TypeError("converter_for() argument must be callable")

    expected = getattr(type, "__name__", repr(type))

    @rename("read_" + expected.lower() if expected.isidentifier() else "read")
    def read(token, /):
        try:
            return type(token)
        except ConversionError:
            raise
        except (ValueError, TypeError):
            raise _refuse(token, expected) from None

    return read


def typename(type, /):
    """
    Display name of a declared element type ("int", "float", "Path", ...).
    """
    return getattr(type, "__name__", repr(type))


__all__ = (
    "read_str",
    "read_bool",
    "read_int",
    "read_float",
    "converter_for",
    "typename",
)
