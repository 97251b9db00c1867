"""
Sextant choice validation.

A value-bearing leaf may restrict the values it accepts once its token has been
converted. Two validators exist:

- Choices: a fixed collection of allowed values, compared by equality against the
  converted value. Rejections enumerate the allowed values.
- Check: a one-argument predicate over the converted value. Rejections use a
  generic message.

Both answer with a Result and never with a no-match: a value that converted but
is not allowed is always reported.

    >>> restrict(("fast", "slow")).validate("medium", "medium").message
    "Value 'medium' not expected. Allowed values are: fast, slow"
"""
from collections.abc import Iterable, Set

from .faults import FaultCode
from .results import Result


class Choices:
    """
    fixed set of allowed values (order kept for messages and help).
    """
    __slots__ = ("_values",)

    def __init__(self, values, /):
        if not isinstance(values, Iterable) or isinstance(values, str):
            raise TypeError("choices must be a non-string iterable")
        if not isinstance(values, Set):
            sanitized = []
            for value in values:
                if value in sanitized:
                    raise ValueError("choices cannot contain duplicates")
                sanitized.append(value)
            values = sanitized
        if not (values := tuple(values)):
            raise ValueError("choices cannot be empty")
        self._values = values

    @property
    def values(self):
        return self._values

    def validate(self, value, text, /):
        if value in self._values:
            return Result.ok()
        return Result.error(
            FaultCode.VALIDATION_ERROR,
            f"Value '{text}' not expected. Allowed values are: {", ".join(map(str, self._values))}",
        )

    def __str__(self):
        return "{%s}" % ",".join(map(str, self._values))

    def __repr__(self):
        return f"choices({list(self._values)!r})"


class Check:
    """
    predicate deciding whether a converted value is allowed.
    """
    __slots__ = ("_predicate",)

    def __init__(self, predicate, /):
        if not callable(predicate):
            raise TypeError("check predicate must be callable")
        self._predicate = predicate

    @property
    def predicate(self):
        return self._predicate

    def validate(self, value, text, /):
        try:
            allowed = self._predicate(value)
        except Exception as exc:
            return Result.error(FaultCode.VALIDATION_ERROR, f"Value '{text}' not expected.", hint=str(exc))
        if allowed:
            return Result.ok()
        return Result.error(FaultCode.VALIDATION_ERROR, f"Value '{text}' not expected.")

    def __str__(self):
        return ""

    def __repr__(self):
        return f"check({getattr(self._predicate, "__name__", self._predicate)!r})"


def restrict(choices, /):
    """
    build the validator for a leaf's choices= argument.

    accepts an existing validator, a predicate, or an iterable of allowed values.
    """
    if isinstance(choices, Choices | Check):
        return choices
    if callable(choices) and not isinstance(choices, Iterable):
        return Check(choices)
    return Choices(choices)


__all__ = (
    "Choices",
    "Check",
    "restrict",
)
