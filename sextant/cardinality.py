"""
Sextant cardinality.

How many times a node may match inside its enclosing group, as an inclusive
[minimum, maximum] range where a missing maximum means unbounded.

Shorthands accepted by Cardinality.parse() (and every cardinality= argument)
- "?": zero or one (the default for every node).
- "*": zero or more.
- "+": one or more.
- n:   exactly n (n >= 1).
"""

_SHORTHANDS = {
    "?": (0, 1),
    "*": (0, None),
    "+": (1, None),
}


class Cardinality:
    __slots__ = ("_minimum", "_maximum")

    def __init__(self, minimum=0, maximum=None, /):
        if not isinstance(minimum, int) or isinstance(minimum, bool):
            raise TypeError("cardinality minimum must be an integer")
        if maximum is not None and (not isinstance(maximum, int) or isinstance(maximum, bool)):
            raise TypeError("cardinality maximum must be an integer or None")
        if minimum < 0:
            raise ValueError("cardinality minimum cannot be negative")
        if maximum is not None and (maximum < 1 or maximum < minimum):
            raise ValueError("cardinality maximum must be positive and not below the minimum")
        self._minimum = minimum
        self._maximum = maximum

    @classmethod
    def exactly(cls, count, /):
        return cls(count, count)

    @classmethod
    def optional(cls):
        return cls(0, 1)

    @classmethod
    def required(cls):
        return cls(1, 1)

    @classmethod
    def any(cls):
        return cls(0, None)

    @classmethod
    def parse(cls, shorthand, /):
        """
        normalize a cardinality= argument into a Cardinality.
        """
        if isinstance(shorthand, Cardinality):
            return shorthand
        if isinstance(shorthand, str):
            try:
                return cls(*_SHORTHANDS[shorthand])
            except KeyError:
                raise ValueError("cardinality must be one of '?', '*', or '+'") from None
        if isinstance(shorthand, int) and not isinstance(shorthand, bool):
            if shorthand < 1:
                raise ValueError("cardinality must be a positive integer")
            return cls.exactly(shorthand)
        raise TypeError("cardinality must be a string, an integer, or a cardinality")

    @property
    def minimum(self):
        return self._minimum

    @property
    def maximum(self):
        return self._maximum

    @property
    def is_optional(self):
        return self._minimum == 0

    @property
    def is_repeatable(self):
        return self._maximum is None or self._maximum > 1

    def exhausted(self, count, /):
        return self._maximum is not None and count >= self._maximum

    def satisfied(self, count, /):
        return count >= self._minimum

    def __eq__(self, other):
        if not isinstance(other, Cardinality):
            return NotImplemented
        return (self._minimum, self._maximum) == (other._minimum, other._maximum)

    def __hash__(self):
        return hash((self._minimum, self._maximum))

    def __repr__(self):
        return f"cardinality({self._minimum}, {self._maximum})"

    def __str__(self):
        match (self._minimum, self._maximum):
            case (0, 1):
                return "?"
            case (0, None):
                return "*"
            case (1, None):
                return "+"
            case (minimum, maximum) if minimum == maximum:
                return str(minimum)
        return "%d..%s" % (self._minimum, "" if self._maximum is None else self._maximum)


__all__ = (
    "Cardinality",
)
