"""
Lexonaut token reader: the state machine that walks a raw argument vector.

What it does
- Classifies each raw argument into a Token: a short option, a long option,
  a free-standing value, or the end-of-options marker; END closes the stream.
- Expands short-option clusters lazily ("-abc" → a, b, c) by keeping a cursor
  inside the current raw argument between calls.
- Supplies option arguments through next_value(), which never reclassifies:
  it returns the rest of a cluster ("-n5" → "5"), a value token that was just
  classified, or the next raw argument when that argument is not option-shaped.

Cursor states (see Cursor)
- EXHAUSTED: the current raw argument is fully consumed; the next call fetches.
- AT_START: the current raw argument was classified as a value and is staged,
  untouched, for next_value(). An unclaimed value is dropped by the next
  next_token() call.
- MID_TOKEN: the cursor sits inside a short-option cluster at 'offset'.

Classification (evaluated once per next_token() call)
1. MID_TOKEN                          → SHORT(next character)
2. EXHAUSTED and nothing left         → END
3. fetch the next raw argument
4. honoring options and token == "--" → MARKER (option syntax is disabled for good)
5. honoring and "-" + non-"-" + ...   → SHORT(second character), rest stays in the cluster
6. honoring and "--" + one or more    → LONG(everything after "--")
7. otherwise                          → VALUE(whole token)

A lone prefix ("-") falls through to step 7 and is a value.
"""
import enum
from types import MappingProxyType
from typing import NamedTuple


class TokenKind(enum.Enum):
    """
    Classification of one lexeme of the argument vector.
    """
    SHORT = "short"
    LONG = "long"
    VALUE = "value"
    MARKER = "marker"
    END = "end"


class Token(NamedTuple):
    """
    One classified lexeme.

    - kind: TokenKind
    - payload: the option character (SHORT), the name after the prefixes (LONG),
      the verbatim argument (VALUE), the marker itself (MARKER), or "" (END).
    - index: 1-based position of the raw argument the lexeme came from
      (0 for END).
    """
    kind: TokenKind
    payload: str
    index: int

    def display(self, prefix="-"):
        """
        Render the token the way the user typed it ("-a", "--all", "file.txt").
        """
        match self.kind:
            case TokenKind.SHORT:
                return prefix + self.payload
            case TokenKind.LONG:
                return prefix * 2 + self.payload
            case _:
                return self.payload


class Cursor(NamedTuple):
    """
    Position of the reader inside the current raw argument.
    """
    state: str
    offset: int = 0

    EXHAUSTED = "exhausted"
    AT_START = "at-start"
    MID_TOKEN = "mid-token"


_EXHAUSTED = Cursor(Cursor.EXHAUSTED)
_AT_START = Cursor(Cursor.AT_START)


class TokenReader:
    """
    Single-use reader over one argument vector (program name excluded).

    Parameters
    - arguments: iterable of raw strings, consumed left to right.
    - prefix: the option prefix character ("-" by default).
    - context: runtime options forwarded to faults triggered while parsing
      (prog, shell, fancy, colorful, ...).

    Attributes
    - honoring: True until the end-of-options marker is seen.
    - cursor: the current Cursor.
    - index: 1-based position of the current raw argument (0 before the first fetch).

    The reader is not reentrant; one instance belongs to one parse call.
    """

    def __init__(self, arguments, /, prefix="-", **context):
        if not isinstance(prefix, str) or len(prefix) != 1:
            raise ValueError("prefix must be a single character")
        self.prefix = prefix
        self.context = MappingProxyType(context)
        self.honoring = True
        self.cursor = _EXHAUSTED
        self.index = 0
        self._arguments = list(arguments)
        self._position = 0
        self._current = ""

    @property
    def current(self):
        """
        the raw argument the cursor is in (empty before the first fetch).
        """
        return self._current

    @property
    def remaining(self):
        """
        raw arguments not fetched yet.
        """
        return tuple(self._arguments[self._position:])

    def exhausted(self):
        """
        True when no lexeme is left: nothing staged, no cluster pending, no raw argument left.
        """
        return self.cursor.state == Cursor.EXHAUSTED and self._position >= len(self._arguments)

    def _fetch(self):
        self._current = self._arguments[self._position]
        self._position += 1
        self.index = self._position

    def _looks_like_option(self, argument):
        return self.honoring and argument.startswith(self.prefix)

    def _classify(self):
        token = self._current
        prefix = self.prefix

        if self.honoring and token == prefix * 2:
            # the marker is consumed once and never re-emitted
            self.honoring = False
            self.cursor = _EXHAUSTED
            return Token(TokenKind.MARKER, token, self.index)

        if self.honoring and len(token) >= 2 and token[0] == prefix and token[1] != prefix:
            self.cursor = Cursor(Cursor.MID_TOKEN, 2) if len(token) > 2 else _EXHAUSTED
            return Token(TokenKind.SHORT, token[1], self.index)

        if self.honoring and len(token) > 2 and token.startswith(prefix * 2):
            self.cursor = _EXHAUSTED
            return Token(TokenKind.LONG, token[2:], self.index)

        # staged verbatim for the positional that claims it
        self.cursor = _AT_START
        return Token(TokenKind.VALUE, token, self.index)

    def next_token(self):
        """
        Classify and return the next Token; END once everything is consumed.
        """
        match self.cursor:
            case Cursor(state=Cursor.MID_TOKEN, offset=offset):
                character = self._current[offset]
                offset += 1
                self.cursor = Cursor(Cursor.MID_TOKEN, offset) if offset < len(self._current) else _EXHAUSTED
                return Token(TokenKind.SHORT, character, self.index)
            case Cursor(state=Cursor.AT_START):
                self.cursor = _EXHAUSTED

        if self._position >= len(self._arguments):
            return Token(TokenKind.END, "", 0)

        self._fetch()
        return self._classify()

    def next_value(self):
        """
        Fetch one free-standing value for an option or positional.

        Returns
        - the rest of the current cluster when the cursor is mid-token ("-n5" → "5");
        - the staged value token when one was just classified;
        - the next raw argument, verbatim, unless option syntax is honored and it
          starts with the prefix;
        - None when the stream is exhausted or the next argument is option-shaped.
          In that case nothing is consumed.
        """
        match self.cursor:
            case Cursor(state=Cursor.MID_TOKEN, offset=offset):
                self.cursor = _EXHAUSTED
                return self._current[offset:]
            case Cursor(state=Cursor.AT_START):
                self.cursor = _EXHAUSTED
                return self._current

        if self._position >= len(self._arguments):
            return None
        if self._looks_like_option(self._arguments[self._position]):
            return None

        self._fetch()
        self.cursor = _EXHAUSTED
        return self._current

    def __iter__(self):
        """
        Yield tokens until END (END itself is not yielded).
        """
        while (token := self.next_token()).kind is not TokenKind.END:
            yield token

    def __repr__(self):
        return "%s(cursor=%r, honoring=%r, index=%d, remaining=%r)" % (
            type(self).__name__, self.cursor, self.honoring, self.index, self.remaining
        )


__all__ = (
    "TokenKind",
    "Token",
    "Cursor",
    "TokenReader",
)
