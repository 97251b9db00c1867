"""
Sextant parser nodes (shared base).

Every node of a parser tree (leaves, groups, commands) derives from Node and
answers the same questions:

- match(tokens, cursor) → Result: try to claim tokens starting at cursor.
- cardinality: how many times the node may match inside its parent.
- is_named / is_positional: named nodes are tried before positional ones in
  unordered groups.
- vacuous: True for composites that may legitimately match nothing.
- recognizes(tokens, cursor): side-effect free check (no conversion, no binding)
  used by groups to report a bounded node appearing too many times.
- usage(style) / help(style): read-only fragments for help renderers.

NodeType gives every node class a __typename__ ("operand", "option", ...), a
stable __repr__/__rich_repr__, and read-only properties for the names listed in
__introspectable__ (backed by "_name" attributes).
"""
import functools
import operator
import re

from rich.text import Text

from .cardinality import Cardinality
from .faults import FaultCode, DeprecatedArgumentWarning, trigger, getdoc
from .tokens import OptionStyle
from .utils import *


class NodeType(type):
    """
    Metaclass that makes parser nodes introspectable.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens).
    - Expose the names in __introspectable__ as read-only properties via mirror().
    - Provide __repr__/__rich_repr__ unless the class defines its own.

    Conventions
    - __displayable__ (if set) narrows what __rich_repr__ shows; otherwise
      __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        if "__repr__" not in namespace:
            @rename("__repr__")
            def __repr__(self):
                return f"{type(self).__typename__}({
                    ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
                })"
            self.__repr__ = __repr__

        if "__rich_repr__" not in namespace:
            @rename("__rich_repr__")
            def __rich_repr__(self):
                for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                    yield name, getattr(self, name)
            self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate the metadata every node carries.

    - cardinality: "?", "*", "+", a positive int, or a Cardinality.
    - descr: Unset | str | Text, non-empty after trimming; None when omitted.
    - hidden/deprecated: coerced to bool.

    The dict is mutated in place.
    """
    try:
        metadata["cardinality"] = Cardinality.parse(metadata["cardinality"])
    except (TypeError, ValueError) as exc:
        raise type(exc)(f"{cls.__typename__} {exc}") from None

    if not isinstance(descr := metadata.get("descr", Unset), str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)

    metadata["hidden"] = bool(metadata.get("hidden", False))
    metadata["deprecated"] = bool(metadata.get("deprecated", False))


class Node(metaclass=NodeType):
    """
    Base of every parser node.

    Subclasses set their metadata through _configure() and implement match().
    """
    __introspectable__ = (
        "cardinality",
        "descr",
        "hidden",
        "deprecated",
    )

    is_named = False

    def _configure(self, metadata, /):
        _sanitize_metadata(type(self), metadata)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def is_positional(self):
        return not self.is_named

    @property
    def vacuous(self):
        return False

    def recognizes(self, tokens, cursor, /):
        return False

    def match(self, tokens, cursor, /):
        raise NotImplementedError(f"{type(self).__typename__} does not implement match()")

    def usage(self, style=Unset, /):
        return ""

    def help(self, style=Unset, /):
        return []

    def _warn(self, tokens, token, /):
        """
        emit a deprecation notice for a matched token (no-op unless deprecated).
        """
        if not self._deprecated:
            return
        trigger(DeprecatedArgumentWarning(
            f"{token.text!r} is deprecated",
            code=FaultCode.DEPRECATED_ARGUMENT,
            title="deprecated argument",
            index=token.index,
            docs=getdoc(FaultCode.DEPRECATED_ARGUMENT),
        ), **tokens.options)


def _style(style, /):
    style = coalesce(style, OptionStyle())
    if not isinstance(style, OptionStyle):
        raise TypeError("style must be an option-style")
    return style


__all__ = (
    "Node",
)
