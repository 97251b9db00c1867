"""
Sextant groups (composite nodes).

A Group owns an ordered list of children and resolves a window of tokens
against them, one consumption cycle at a time, until no child makes progress
or the tokens run out.

Modes
- unordered (default): every child whose cardinality is not exhausted may claim
  the next token. Named children (literals, options, flags, commands) are tried
  first, in declaration order, then positional ones (operands, nested groups).
  The first child that matches wins the cycle.
- sequential: children take turns in declaration order. A child keeps its turn
  while it matches and its maximum is not reached; when it stops matching, the
  turn passes on only if its minimum is satisfied, otherwise resolution halts.

Outcomes
- an error from any child ends the group with that error.
- a short-circuit from any child ends the group successfully right away; no
  requirement is checked.
- no progress at all: no-match (the parent decides whether that is a problem).
- progress: every child below its minimum is reported ("Expected: ..."), unless
  the child is vacuous (a group that may legitimately match nothing). Otherwise
  the optional success callback runs, and the group matched.

A nested group halts on the first token none of its children claims, so that a
repeatable group may match again and the parent's own children get their turn.
Only the root reports a repetition ("Too many occurrences of: ...") for a
trailing token that one of its exhausted named children recognizes.

A sequential group whose first child is named (a literal or an option) counts
as named itself: it is tried before the positional siblings of its parent.
"""
from .bindings import bind
from .faults import FaultCode
from .nodes import Node, _style
from .results import Outcome, Result
from .utils import *


def _decorate(node, style, /):
    """
    Internal: usage fragment of a child as seen from its parent.

    optional children are wrapped in brackets, required composites in
    parentheses, and repeatable children are suffixed with "...".
    """
    if not (fragment := node.usage(style)):
        return ""
    if node.cardinality.is_optional:
        fragment = f"[{fragment}]"
    elif isinstance(node, Group) and not node.is_named and " " in fragment:
        fragment = f"({fragment})"
    if node.cardinality.is_repeatable:
        fragment += "..."
    return fragment


class Group(Node):
    """
    Composite node resolving tokens against its children.

    Parameters
    - children: the nodes to resolve against (order matters).
    - sequential: resolve children in turn instead of in any order.
    - cardinality: how many times the whole group may match ("?" by default).
    - callback: called with the group once it matched; it may return a Result
      to reject the match (see sextant.bindings).
    - hidden: suppress from the parent's usage/help.
    """
    __introspectable__ = (
        "children",
        "sequential",
        "cardinality",
        "hidden",
    )

    def __init__(self, *children, sequential=False, cardinality="?", callback=Unset, hidden=False):
        if callback is not Unset and not callable(callback):
            raise TypeError(f"{type(self).__typename__} 'callback' must be callable")
        self._configure({
            "children": [],
            "sequential": bool(sequential),
            "cardinality": cardinality,
            "hidden": hidden,
        })
        self._callback = callback
        self._binder = bind(callback)
        self.add(*children)

    def add(self, *children):
        """
        append children (chainable).
        """
        for child in children:
            if not isinstance(child, Node):
                raise TypeError(f"{type(self).__typename__} children must be parser nodes")
            if child is self:
                raise ValueError(f"{type(self).__typename__} cannot contain itself")
            self._children.append(child)
        return self

    def command(self, name, /, *children, **options):
        """
        create a sub-command, add it to this group, and return it.
        """
        from .commands import Command
        self.add(command := Command(name, *children, **options))
        return command

    @property
    def is_named(self):
        """
        a sequential group led by a named child is gated by that child, and
        competes with the named nodes of its parent.
        """
        return self._sequential and bool(self._children) and self._children[0].is_named

    @property
    def vacuous(self):
        return all(child.cardinality.is_optional or child.vacuous for child in self._children)

    def recognizes(self, tokens, cursor, /):
        if self.is_named:
            return self._children[0].recognizes(tokens, cursor)
        return any(child.recognizes(tokens, cursor) for child in self._children)

    def _resolve(self, tokens, cursor, /):
        """
        run the consumption cycles from cursor.

        returns (total, counts): total is the accumulated Result (matched with
        the consumed count, or the terminating error/short-circuit), counts the
        number of matches per child index.
        """
        counts = [0] * len(self._children)
        total = Result.ok(Outcome.MATCHED, 0)
        if self._sequential:
            return self._resolve_sequential(tokens, cursor, counts, total)
        return self._resolve_unordered(tokens, cursor, counts, total)

    def _resolve_unordered(self, tokens, cursor, counts, total, /):
        order = sorted(range(len(self._children)), key=lambda index: not self._children[index].is_named)
        position = cursor
        while position < len(tokens):
            for index in order:
                child = self._children[index]
                if child.cardinality.exhausted(counts[index]):
                    continue
                result = child.match(tokens, position)
                if not result or not result.no_match:
                    break
            else:
                break

            total = total.then(result)
            if total.failed or total.short_circuit:
                return total, counts
            counts[index] += 1
            position += result.consumed
            if not result.consumed:
                break
        return total, counts

    def _resolve_sequential(self, tokens, cursor, counts, total, /):
        position = cursor
        turn = 0
        while turn < len(self._children) and position < len(tokens):
            child = self._children[turn]
            if child.cardinality.exhausted(counts[turn]):
                turn += 1
                continue
            result = child.match(tokens, position)
            if result.no_match:
                if not child.cardinality.satisfied(counts[turn]) and not child.vacuous:
                    break
                turn += 1
                continue

            total = total.then(result)
            if total.failed or total.short_circuit:
                return total, counts
            counts[turn] += 1
            position += result.consumed
            if not result.consumed:
                turn += 1
        return total, counts

    def _missing(self, tokens, counts, /):
        """
        error for the first child below its minimum, or None.
        """
        for child, count in zip(self._children, counts):
            if not child.cardinality.satisfied(count) and not child.vacuous:
                usage = child.usage(tokens.style)
                return Result.error(
                    FaultCode.CARDINALITY_ERROR,
                    f"Expected: {usage}",
                    hint=(
                        f"{usage!r} is required" if not count else
                        f"{usage!r} is required {child.cardinality.minimum} times, got {count}"
                    ),
                )
        return None

    def _repeated(self, tokens, position, counts, /):
        """
        error for an exhausted named child offered again at position, or None.
        """
        for child, count in zip(self._children, counts):
            if child.is_named and child.cardinality.exhausted(count) and child.recognizes(tokens, position):
                usage = child.usage(tokens.style)
                return Result.error(
                    FaultCode.CARDINALITY_ERROR,
                    f"Too many occurrences of: {usage}",
                    index=tokens[position].index,
                    hint=f"{usage!r} may be given at most {child.cardinality.maximum} time(s)",
                )
        return None

    def _accepted(self, consumed, /):
        if (checked := self._binder(self)).failed:
            return checked
        return Result.ok(Outcome.MATCHED, consumed)

    def match(self, tokens, cursor, /):
        total, counts = self._resolve(tokens, cursor)
        if total.failed or total.short_circuit:
            return total
        if not total.consumed:
            return Result.ok(Outcome.NO_MATCH)
        if missing := self._missing(tokens, counts):
            return missing
        return self._accepted(total.consumed)

    def usage(self, style=Unset, /):
        style = _style(style)
        return " ".join(filter(None, (_decorate(child, style) for child in self._children if not child.hidden)))

    def help(self, style=Unset, /):
        style = _style(style)
        text = []
        for child in self._children:
            if not child.hidden:
                text.extend(child.help(style))
        return text


__all__ = (
    "Group",
)
