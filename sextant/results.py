"""
Sextant result algebra.

Every node answers a match attempt with a Result instead of raising. A result is
either successful, carrying an Outcome and the number of tokens it consumed, or an
error, carrying a FaultCode and a message.

Outcomes
- MATCHED: the node claimed tokens (flags claim their own name only).
- NO_MATCH: the node does not claim the current tokens; never consumes anything.
- SHORT_CIRCUIT: the node matched and asks every ancestor to stop right away
  (help-like flags); ancestors skip their requirement checks.

Errors are terminal: the first one produced anywhere in the tree is handed back
untouched to the top-level caller.

Composition
    >>> first = Result.ok(Outcome.MATCHED, 2)
    >>> first.then(Result.ok(Outcome.NO_MATCH), optional=True).consumed
    2
    >>> bool(first.then(Result.error(FaultCode.MISSING_VALUE, "Expected a value")))
    False
"""
from enum import Enum

from .faults import FaultCode, fault
from .utils import Unset, mirror


class Outcome(Enum):
    MATCHED = "matched"
    NO_MATCH = "no-match"
    SHORT_CIRCUIT = "short-circuit"


class Result:
    """
    three-valued match result (matched / no-match / error).

    use the factories instead of the constructor:
    - Result.ok(outcome=Outcome.MATCHED, consumed=0)
    - Result.error(code, message, index=..., hint=...)
    - Result.runtime_error(message)  (for callbacks rejecting a value)

    bool(result) is True for every successful outcome, including NO_MATCH.
    """
    __slots__ = ("_outcome", "_consumed", "_code", "_message", "_index", "_hint")

    outcome = mirror("outcome")
    consumed = mirror("consumed")
    code = mirror("code")
    message = mirror("message")
    index = mirror("index")
    hint = mirror("hint")

    def __init__(self, outcome, consumed, code, message, index, hint):
        self._outcome = outcome
        self._consumed = consumed
        self._code = code
        self._message = message
        self._index = index
        self._hint = hint

    @classmethod
    def ok(cls, outcome=Outcome.MATCHED, consumed=0, /):
        if not isinstance(outcome, Outcome):
            raise TypeError("Result.ok() outcome must be an Outcome")
        if not isinstance(consumed, int) or isinstance(consumed, bool) or consumed < 0:
            raise ValueError("Result.ok() consumed must be a non-negative integer")
        if outcome is Outcome.NO_MATCH and consumed:
            raise ValueError("Result.ok() no-match cannot consume tokens")
        return cls(outcome, consumed, None, "", None, None)

    @classmethod
    def error(cls, code, message, /, *, index=None, hint=Unset):
        if not isinstance(code, FaultCode) or code is FaultCode.DEPRECATED_ARGUMENT:
            raise TypeError("Result.error() code must be an error fault-code")
        if not isinstance(message, str) or not message:
            raise ValueError("Result.error() message must be a non-empty string")
        return cls(None, 0, code, message, index, hint or None)

    @classmethod
    def runtime_error(cls, message, /):
        """
        error result for a destination callback that rejects a converted value.
        """
        return cls.error(FaultCode.RUNTIME_ERROR, message)

    @property
    def failed(self):
        return self._code is not None

    @property
    def matched(self):
        return self._outcome is Outcome.MATCHED

    @property
    def short_circuit(self):
        return self._outcome is Outcome.SHORT_CIRCUIT

    @property
    def no_match(self):
        return self._outcome is Outcome.NO_MATCH

    def __bool__(self):
        return not self.failed

    def then(self, step, /, *, optional=False):
        """
        sequence this result (a consumed prefix) with the result of the remainder.

        step is either a Result or a zero-argument callable producing one; the
        callable is only evaluated when this result allows going on.

        rules
        - error in either side → that error (the first one encountered).
        - no-match here → no-match (the remainder is never attempted).
        - short-circuit here → unchanged (nothing after it runs).
        - matched + matched → matched with both consumptions added.
        - matched + short-circuit → short-circuit with both consumptions added.
        - matched + no-match → matched with this consumption when optional,
          otherwise no-match.
        """
        if self.failed or self.no_match or self.short_circuit:
            return self

        if callable(step) and not isinstance(step, Result):
            step = step()
        if not isinstance(step, Result):
            raise TypeError("then() step must be a Result or produce one")

        if step.failed:
            return step
        if step.no_match:
            return self if optional else step
        return Result.ok(step.outcome, self.consumed + step.consumed)

    def fault(self, **options):
        """
        build the exception matching this error result (see sextant.faults).
        """
        if not self.failed:
            raise ValueError("fault() requires an error result")
        extras = {"index": self._index}
        if self._hint:
            extras["hint"] = self._hint
        return fault(self._code, self._message, **(extras | options))

    def __eq__(self, other):
        if not isinstance(other, Result):
            return NotImplemented
        return (
            (self._outcome, self._consumed, self._code, self._message) ==
            (other._outcome, other._consumed, other._code, other._message)
        )

    def __hash__(self):
        return hash((self._outcome, self._consumed, self._code, self._message))

    def __repr__(self):
        if self.failed:
            return f"Result.error({self._code.name}, {self._message!r})"
        return f"Result.ok({self._outcome.value}, consumed={self._consumed})"

    def __rich_repr__(self):
        if self.failed:
            yield "code", self._code
            yield "message", self._message
        else:
            yield "outcome", self._outcome
            yield "consumed", self._consumed


__all__ = (
    "Outcome",
    "Result",
)
