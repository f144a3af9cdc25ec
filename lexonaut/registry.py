"""
Lexonaut registry: owns every declared argument and resolves names to them.

Layout
- arena: list of arguments in declaration order; the only owner of the objects.
- shorts: short character → arena index.
- longs: long name (prefix stripped) → arena index.
- positionals: arena indices of positional arguments, in declaration order.

Invariants
- short characters are unique across the registry; so are long names.
- enroll() validates the whole name set of an argument before touching any map,
  so a failed declaration leaves the registry exactly as it was.
- once frozen (the parser freezes it when parsing starts) the structure is read-only.
"""
from .arguments import Argument, PositionalArgument
from .faults import *


class Registry:
    """
    Arena of declared arguments with index-based name maps.
    """

    def __init__(self, prefix="-"):
        self.prefix = prefix
        self.frozen = False
        self._arena = []
        self._shorts = {}
        self._longs = {}
        self._positionals = []

    def __len__(self):
        return len(self._arena)

    def __iter__(self):
        return iter(self._arena)

    def __contains__(self, argument):
        return any(argument is other for other in self._arena)

    @property
    def arguments(self):
        """
        every argument in declaration order.
        """
        return tuple(self._arena)

    @property
    def options(self):
        """
        named arguments (flags and options) in declaration order.
        """
        return tuple(argument for argument in self._arena if not isinstance(argument, PositionalArgument))

    @property
    def positionals(self):
        """
        positional arguments in declaration order.
        """
        return tuple(self._arena[index] for index in self._positionals)

    def short(self, character, /):
        """
        Resolve a short option character; None when unknown.
        """
        try:
            return self._arena[self._shorts[character]]
        except KeyError:
            return None

    def long(self, name, /):
        """
        Resolve a long option name (without prefix); None when unknown.
        """
        try:
            return self._arena[self._longs[name]]
        except KeyError:
            return None

    def names(self):
        """
        Every registered option name, spelled with its prefix.
        """
        return [self.prefix + short for short in self._shorts] + [self.prefix * 2 + long for long in self._longs]

    def _check(self, argument):
        if argument in self:
            raise DuplicateNameError(
                "%s %r is already declared" % (type(argument).__typename__, argument.display()),
                argument=argument,
                hint="declare each argument once",
            )

        if isinstance(argument, PositionalArgument):
            return

        if argument.prefix != self.prefix:
            raise InvalidNameError(
                "%s %r uses prefix %r but this parser expects %r" % (
                    type(argument).__typename__, argument.display(), argument.prefix, self.prefix
                ),
                argument=argument,
                token=argument.names[0],
                hint="spell every name with the %r prefix" % self.prefix,
            )

        for short in argument.shorts:
            if short in self._shorts:
                raise DuplicateNameError(
                    "short name %r is already used by %r" % (
                        self.prefix + short, self._arena[self._shorts[short]].display()
                    ),
                    argument=argument,
                    token=self.prefix + short,
                    hint="pick another letter for %r" % argument.display(),
                )
        for long in argument.longs:
            if long in self._longs:
                raise DuplicateNameError(
                    "long name %r is already used by %r" % (
                        self.prefix * 2 + long, self._arena[self._longs[long]].display()
                    ),
                    argument=argument,
                    token=self.prefix * 2 + long,
                    hint="pick another name for %r" % argument.display(),
                )

    def enroll(self, argument, /):
        """
        Add an argument to the arena and index its names.

        Raises
        - TypeError: 'argument' is not an Argument.
        - RuntimeError: the registry is frozen.
        - InvalidNameError: the argument's prefix differs from the registry's.
        - DuplicateNameError: a name (or the argument itself) is already registered.
        """
        if not isinstance(argument, Argument):
            raise TypeError("enroll() argument must be a flag, an option, or a positional")
        if self.frozen:
            raise RuntimeError("cannot declare arguments once parsing has started")

        # validate everything first; mutate only when nothing can fail anymore
        self._check(argument)

        index = len(self._arena)
        self._arena.append(argument)
        if isinstance(argument, PositionalArgument):
            self._positionals.append(index)
            return argument

        self._shorts.update(dict.fromkeys(argument.shorts, index))
        self._longs.update(dict.fromkeys(argument.longs, index))
        return argument

    def freeze(self):
        self.frozen = True

    def reset(self):
        """
        Restore every argument to its declared default.
        """
        for argument in self._arena:
            argument.reset()

    def __repr__(self):
        return "%s(%d arguments, shorts=%r, longs=%r, frozen=%r)" % (
            type(self).__name__, len(self._arena), sorted(self._shorts), sorted(self._longs), self.frozen
        )


__all__ = (
    "Registry",
)
