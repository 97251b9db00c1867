r"""
Sextant tokens and option styles.

A parse never mutates its input: the raw strings are classified once into an
immutable Tokens tuple and every node reads it through a cursor.

Classification (per OptionStyle)
- option token: starts with one of the style's prefixes and the remainder, up to
  the first value separator, is a valid name body r"[^\W\d_](-?[^\W_]+)*".
  Anything after the separator is the fused value ("-o:x", "--out=x").
- argument token: everything else, including "-", "--", and "-5".

Option names are always declared in dash form ("-o", "--output"); the style only
decides how tokens are recognized and how names are rendered for help.
"""
import re
from collections import namedtuple
from enum import Enum
from types import MappingProxyType

from .utils import Unset, coalesce

_BODY = re.compile(r"[^\W\d_](-?[^\W_]+)*")


class TokenKind(Enum):
    ARGUMENT = "argument"
    OPTION = "option"


class Token(namedtuple("Token", ("index", "text", "kind", "name", "body", "long", "value"))):
    """
    one classified command-line token.

    fields
    - index: position in the original argument vector (the program name is 0).
    - text: the raw token.
    - kind: TokenKind.
    - name/body: for option tokens, the name part ("--out") and its body ("out").
    - long: True/False for long/short prefixes, None when the style cannot tell.
    - value: fused value (possibly empty) or None when there was no separator.
    """
    __slots__ = ()

    @property
    def is_option(self):
        return self.kind is TokenKind.OPTION


class Tokens(tuple):
    """
    immutable token sequence plus the parse context every node may consult.

    - style: the OptionStyle used to classify the tokens.
    - options: read-only runtime options (prog, shell, fancy, colorful) forwarded
      to fault rendering.
    """

    def __new__(cls, tokens=(), style=Unset, /, **options):
        self = super().__new__(cls, tokens)
        self.style = coalesce(style, OptionStyle())
        self.options = MappingProxyType(options)
        return self

    def __repr__(self):
        return f"Tokens({list(map(lambda x: x.text, self))!r})"


class OptionStyle:
    """
    recognized option prefixes and fused-value separators.

    parameters
    - long: prefix of long names (default "--").
    - short: prefix of short names (default "-").
    - separators: characters splitting a fused name/value token (default ":=").
    """
    __slots__ = ("_long", "_short", "_separators")

    def __init__(self, long="--", short="-", separators=":="):
        for name, object in (("long", long), ("short", short)):
            if not isinstance(object, str):
                raise TypeError(f"option-style {name!r} prefix must be a string")
            if not object or object.strip() != object:
                raise ValueError(f"option-style {name!r} prefix must be a non-blank string")
        if not isinstance(separators, str):
            raise TypeError("option-style 'separators' must be a string")
        if any(char.isspace() or char.isalnum() for char in separators):
            raise ValueError("option-style 'separators' cannot contain blanks or alphanumerics")
        self._long = long
        self._short = short
        self._separators = separators

    @classmethod
    def dos(cls):
        """
        slash-prefixed style ("/o", "/output", "/o:value").
        """
        return cls("/", "/", ":=")

    @property
    def long(self):
        return self._long

    @property
    def short(self):
        return self._short

    @property
    def separators(self):
        return self._separators

    @property
    def ambiguous(self):
        """
        True when long and short names share a prefix (kind cannot be told apart).
        """
        return self._long == self._short

    def render(self, name, /):
        """
        render a dash-declared option name in this style ("--output" → "/output").
        """
        body, long = split_name(name)
        return (self._long if long else self._short) + body

    def classify(self, text, index=0, /):
        """
        classify one raw string into a Token.
        """
        for prefix, long in sorted(((self._long, True), (self._short, False)), key=lambda x: -len(x[0])):
            if not text.startswith(prefix):
                continue
            rest = text[len(prefix):]
            cut = min((rest.find(char) for char in self._separators if char in rest), default=-1)
            body, value = (rest, None) if cut < 0 else (rest[:cut], rest[cut + 1:])
            if _BODY.fullmatch(body):
                return Token(
                    index, text, TokenKind.OPTION, prefix + body, body, None if self.ambiguous else long, value
                )
            break
        return Token(index, text, TokenKind.ARGUMENT, None, None, None, None)

    def __eq__(self, other):
        if not isinstance(other, OptionStyle):
            return NotImplemented
        return (self._long, self._short, self._separators) == (other._long, other._short, other._separators)

    def __hash__(self):
        return hash((self._long, self._short, self._separators))

    def __repr__(self):
        return f"option-style(long={self._long!r}, short={self._short!r}, separators={self._separators!r})"


def split_name(name, /):
    """
    split a dash-declared option name into (body, long).

    "--output" → ("output", True); "-o" and "-long" → ("o", False), ("long", False).
    """
    if name.startswith("--"):
        return name[2:], True
    return name[1:], False


def tokenize(arguments, style=Unset, /, *, offset=1, **options):
    """
    classify raw strings into a Tokens sequence.

    offset is the index of the first string in the original argument vector
    (1 by default, the program name being consumed separately).
    """
    style = coalesce(style, OptionStyle())
    if not isinstance(style, OptionStyle):
        raise TypeError("tokenize() style must be an option-style")
    tokens = []
    for index, text in enumerate(arguments, offset):
        if not isinstance(text, str):
            raise TypeError("tokenize() arguments must be strings")
        tokens.append(style.classify(text, index))
    return Tokens(tokens, style, **options)


__all__ = (
    "TokenKind",
    "Token",
    "Tokens",
    "OptionStyle",
    "split_name",
    "tokenize",
)
