"""
Lexonaut utilities shared by the argument, registry, and parser layers.

Contents
- Unset: the "not provided" sentinel. It is falsy, prints as "Unset", survives
  copy/pickle as the very same object, and its type cannot be subclassed.
  Use it as a default wherever None is a meaningful value of its own.
- coalesce(value, default=None): Unset → default; anything else (None, 0, "") is kept.
- rename("name"): decorator giving generated callables a stable __name__/__qualname__.
- mirror("attr"): read-only property over self._attr that hands out frozen copies,
  so declared metadata (names, aliases, ...) cannot be mutated from outside.
- ordinal(n): "first", "second", ... "tenth", then "11th", "22nd", "103rd".

Examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(0, "fallback")
    0
    >>> ordinal(3)
    'third'
"""
from collections.abc import Mapping, Sequence, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Type of the Unset sentinel; UnsetType() always returns the one instance.
    """
    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __reduce__(self):
        # pickle and copy resolve the module-level name, which keeps identity
        return "Unset"

    # isinstance(value, str | Unset) reads better than naming UnsetType at call sites
    def __or__(self, other, /):
        try:
            return UnsetType | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | UnsetType
        except TypeError:
            return NotImplemented


def coalesce(object, default=None, /):
    """
    Return 'default' when 'object' is Unset, otherwise 'object' unchanged.
    """
    return default if object is Unset else object


def rename(name, /):
    """
    Decorator setting __name__ and __qualname__ of the decorated callable to 'name'.

    Used on functions built inside factories (accessors, converters, generated
    dunders) so tracebacks and reprs show a meaningful name.
    """
    if not isinstance(name, str):
        raise TypeError("rename() argument must be a string")

    def decorator(function):
        if not callable(function):
            raise TypeError("@rename() must be applied to a callable")
        function.__name__ = function.__qualname__ = name
        return function

    return decorator


def _freeze(object):
    match object:
        case str() | bytes():
            return object
        case Mapping():
            return MappingProxyType({key: _freeze(value) for key, value in object.items()})
        case Set():
            return frozenset(map(_freeze, object))
        case Sequence():
            return tuple(map(_freeze, object))
        case _:
            return object


def mirror(name, /):
    """
    Build a read-only property exposing self._<name>.

    Containers are handed out frozen (tuples, frozensets, read-only mappings),
    recursively; scalars are returned as they are.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


_ORDINALS = (
    "zeroth", "first", "second", "third", "fourth", "fifth",
    "sixth", "seventh", "eighth", "ninth", "tenth",
)


def ordinal(number, /):
    """
    Spell a position as an English ordinal.

    Words are used up to "tenth"; beyond that the numeric suffix form is used
    ("11th", "22nd", "103rd").
    """
    if not isinstance(number, int) or isinstance(number, bool):
        raise TypeError("ordinal() argument must be an integer")
    if number < 0:
        raise ValueError("ordinal() argument must be a non-negative integer")
    if number < len(_ORDINALS):
        return _ORDINALS[number]
    if 10 <= number % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return "%d%s" % (number, suffix)


Unset = UnsetType()


__all__ = (
    "coalesce",
    "rename",
    "mirror",
    "ordinal",
    "UnsetType",
    "Unset",
)
