"""
Sextant token conversion.

converter(type) selects, once and at construction time, the function turning a
token's text into the destination's value. Every converter signals failure the
same way: by raising ConversionFailure carrying the offending text. Leaf parsers
turn that into a conversion error result, never into a no-match.

Built-in types
- str: identity.
- int: decimal integers (surrounding blanks rejected).
- float: anything float() accepts, except blanks.
- bool: true/false, yes/no, on/off, 1/0 (case-insensitive).
- any other callable: called with the text; ValueError/TypeError/ArithmeticError
  count as a failure.
"""
from .utils import rename

_BOOLEANS = {
    "true": True,
    "yes": True,
    "on": True,
    "1": True,
    "false": False,
    "no": False,
    "off": False,
    "0": False,
}


class ConversionFailure(ValueError):
    def __init__(self, text, /):
        super().__init__(f"Unable to convert '{text}' to destination type")
        self.text = text


def _to_str(text):
    return text


def _to_int(text):
    if text != text.strip():
        raise ConversionFailure(text)
    try:
        return int(text, 10)
    except ValueError:
        raise ConversionFailure(text) from None


def _to_float(text):
    if not text.strip() or text != text.strip():
        raise ConversionFailure(text)
    try:
        return float(text)
    except ValueError:
        raise ConversionFailure(text) from None


def _to_bool(text):
    try:
        return _BOOLEANS[text.lower()]
    except KeyError:
        raise ConversionFailure(text) from None


_BUILTINS = {
    str: _to_str,
    bool: _to_bool,
    int: _to_int,
    float: _to_float,
}


def converter(type=str, /):
    """
    return the str → value function for a destination type.

    raises TypeError when type is not callable.
    """
    try:
        return _BUILTINS[type]
    except (KeyError, TypeError):  # unhashable custom converters
        pass

    if not callable(type):
        raise TypeError("converter() argument must be callable")

    @rename(getattr(type, "__name__", "convert"))
    def convert(text):
        try:
            return type(text)
        except ConversionFailure:
            raise
        except (ValueError, TypeError, ArithmeticError):
            raise ConversionFailure(text) from None

    return convert


__all__ = (
    "ConversionFailure",
    "converter",
)
