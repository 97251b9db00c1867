r"""
Sextant leaf parsers and decorators.

Overview
- Leaves
  • Literal: fixed keyword (sub-command names, verbs). Required by default.
  • Option: named, value-bearing option with one or more names (-o/--output).
  • Flag: named, presence-only switch (-v/--verbose).
  • Operand: positional, value-bearing argument.

- Decorators
  • @option(...), @flag(...), @operand(...): build the leaf and bind the
    decorated function as its destination.

Matching
- Literal claims an argument token equal to its name.
- Option claims an option token carrying one of its names. The value is the
  fused part ("-o:x", "-o=x") or else the next token, which must not be an option
  token. Consumes 1 or 2 tokens.
- Flag claims an option token carrying one of its names, without a fused value.
- Operand claims any argument token.

Values
- The token text is converted (see sextant.conversions), then checked against
  the leaf's choices (see sextant.choices), then bound (see sextant.bindings).
  The first failing step ends the match with an error; nothing is bound then.

Metadata (sanitized on construction)
- names: r"--?[^\W\d_](-?[^\W_]+)*", unique, declared in dash form.
- hint: Unset | str, the value label in usage/help ("<filename>").
- type: Unset | Callable, the conversion type (inferred from the destination).
- choices: Unset | Iterable | Callable, allowed values or predicate.
- cardinality: "?" | "*" | "+" | int | Cardinality.
- descr: Unset | str | Text (short help).
- hidden/deprecated: bool.

Quick example:
    >>> from sextant import Option, Ref, flag
    >>> output = Option("-o", "--output", dest=Ref(config, "file_name"), hint="filename")
    ...
    >>> @flag("-v", "--verbose")
    >>> def on_verbose(): ...
"""
import builtins
import re

from .bindings import Ref, bind, infer
from .choices import Choices, restrict
from .conversions import ConversionFailure, converter
from .faults import FaultCode
from .nodes import Node, _style
from .results import Outcome, Result
from .tokens import split_name
from .utils import *


def _sanitize_named_metadata(cls, metadata, /):
    """
    Internal: validate option names (order kept for help, duplicates rejected).
    """
    names = []
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif not re.fullmatch(r"--?[^\W\d_](-?[^\W_]+)*", name):
            raise ValueError(f"{cls.__typename__} names must be valid shell-style option names (unicodes are allowed)")
        elif name in names:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        names.append(name)

    metadata["names"] = tuple(names)


def _sanitize_parametric_metadata(cls, metadata, /):
    """
    Internal: resolve the value pipeline of Option and Operand.

    - dest: Unset | Ref | Callable.
    - hint: Unset | str, non-empty after trimming. Defaults to the Ref name, the
      choices ("{a,b}"), or "value".
    - type: explicit conversion type, otherwise inferred from dest.
    - choices: turned into a Choices/Check validator (None when Unset).
    - cardinality: defaults to "*" for accumulating destinations, "?" otherwise.

    The dict is mutated in place; "type" is replaced by the resolved type.
    """
    if not isinstance(dest := metadata["dest"], Ref | Unset) and not callable(dest):
        raise TypeError(f"{cls.__typename__} 'dest' must be a ref or a callable")

    if (kind := metadata["type"]) is not Unset and not callable(kind):
        raise TypeError(f"{cls.__typename__} 'type' must be callable")
    metadata["type"], multiple = infer(dest, kind)

    if (choices := metadata["choices"]) is not Unset:
        try:
            choices = restrict(choices)
        except (TypeError, ValueError) as exc:
            raise type(exc)(f"{cls.__typename__} {exc}") from None
    metadata["choices"] = coalesce(choices)

    if not isinstance(hint := metadata["hint"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'hint' must be a string")
    elif isinstance(hint, str) and not (hint := hint.strip()):
        raise ValueError(f"{cls.__typename__} 'hint' cannot be empty")
    if hint is Unset:
        if isinstance(metadata["choices"], Choices):
            hint = str(metadata["choices"])
        elif isinstance(dest, Ref):
            hint = dest.hint
        else:
            hint = "value"
    metadata["hint"] = hint

    if metadata["cardinality"] is Unset:
        metadata["cardinality"] = "*" if multiple else "?"


class Literal(Node):
    """
    Fixed keyword matched case-sensitively against one argument token.

    Literals are required by default (cardinality 1): a literal placed in a
    group is a word the user must type.
    """
    __introspectable__ = (
        "name",
        "cardinality",
        "descr",
        "hidden",
        "deprecated",
    )

    is_named = True

    def __init__(self, name, /, descr=Unset, *, cardinality=1, hidden=False, deprecated=False):
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__typename__} name must be a string")
        if not name or name != name.strip() or any(char.isspace() for char in name):
            raise ValueError(f"{type(self).__typename__} name must be a non-empty word")
        self._configure({
            "name": name,
            "cardinality": cardinality,
            "descr": descr,
            "hidden": hidden,
            "deprecated": deprecated,
        })

    def recognizes(self, tokens, cursor, /):
        return cursor < len(tokens) and not tokens[cursor].is_option and tokens[cursor].text == self._name

    def match(self, tokens, cursor, /):
        if not self.recognizes(tokens, cursor):
            return Result.ok(Outcome.NO_MATCH)
        self._warn(tokens, tokens[cursor])
        return Result.ok(Outcome.MATCHED, 1)

    def usage(self, style=Unset, /):
        return self._name

    def help(self, style=Unset, /):
        return [(self._name, str(coalesce(self._descr, "")))]


class _Named(Node):
    """
    Internal: name handling shared by Option and Flag.
    """
    is_named = True

    def _claims(self, token, /):
        if not token.is_option:
            return False
        for name in self._names:
            body, long = split_name(name)
            if body == token.body and (token.long is None or token.long is long):
                return True
        return False

    def recognizes(self, tokens, cursor, /):
        return cursor < len(tokens) and self._claims(tokens[cursor])

    def _rendered(self, style, /):
        style = _style(style)
        return [style.render(name) for name in self._names]


class _Valued(Node):
    """
    Internal: convert → validate → bind pipeline shared by Option and Operand.
    """

    def _setup(self, metadata, /):
        _sanitize_parametric_metadata(type(self), metadata)
        self._configure(metadata)
        self._converter = converter(self._type)
        self._binder = bind(self._dest)

    def _accept(self, token, text, consumed, /):
        try:
            value = self._converter(text)
        except ConversionFailure as failure:
            return Result.error(FaultCode.CONVERSION_ERROR, str(failure), index=token.index)
        if self._choices is not None:
            if (checked := self._choices.validate(value, text)).failed:
                return checked
        if (bound := self._binder(value)).failed:
            return bound
        return Result.ok(Outcome.MATCHED, consumed)


class Option(_Named, _Valued):
    """
    Named, value-bearing option.

    Parameters
    - names: one or more names ("-o", "--output", "-output").
    - dest: Ref | Callable | Unset, where converted values go.
    - hint: value label for usage/help (defaults per dest/choices).
    - type: conversion type, inferred from dest when omitted.
    - choices: allowed values (Iterable) or predicate (Callable).
    - cardinality: defaults to "*" for list destinations, "?" otherwise.
    - descr, hidden, deprecated: help/UX metadata.
    """
    __introspectable__ = (
        "names",
        "dest",
        "hint",
        "type",
        "choices",
        "cardinality",
        "descr",
        "hidden",
        "deprecated",
    )

    def __init__(
            self,
            *names,
            dest=Unset,
            hint=Unset,
            type=Unset,
            choices=Unset,
            cardinality=Unset,
            descr=Unset,
            hidden=False,
            deprecated=False
    ):
        metadata = {
            "names": names,
            "dest": dest,
            "hint": hint,
            "type": type,
            "choices": choices,
            "cardinality": cardinality,
            "descr": descr,
            "hidden": hidden,
            "deprecated": deprecated,
        }
        _sanitize_named_metadata(builtins.type(self), metadata)
        self._setup(metadata)

    def match(self, tokens, cursor, /):
        if not self.recognizes(tokens, cursor):
            return Result.ok(Outcome.NO_MATCH)
        token = tokens[cursor]
        self._warn(tokens, token)

        if token.value is not None:
            text, consumed = token.value, 1
        elif cursor + 1 < len(tokens) and not tokens[cursor + 1].is_option:
            text, consumed = tokens[cursor + 1].text, 2
        else:
            text, consumed = "", 1

        if not text:
            return Result.error(
                FaultCode.MISSING_VALUE,
                f"Expected a value following '{token.name}'",
                index=token.index,
                hint=f"write it as '{token.name} <{self._hint}>' or '{token.name}={self._hint}'",
            )
        return self._accept(token, text, consumed)

    def usage(self, style=Unset, /):
        return f"{"|".join(self._rendered(style))} <{self._hint}>"

    def help(self, style=Unset, /):
        return [(f"{", ".join(self._rendered(style))} <{self._hint}>", str(coalesce(self._descr, "")))]


class Flag(_Named):
    """
    Named, presence-only switch.

    Parameters
    - names: one or more names ("-v", "--verbose").
    - dest: Ref (receives True) | Callable (called without arguments) | Unset.
    - terminator: a matched terminator stops the whole parse successfully,
      skipping every requirement check (help/version switches).
    - cardinality, descr, hidden, deprecated: as for other nodes.
    """
    __introspectable__ = (
        "names",
        "dest",
        "terminator",
        "cardinality",
        "descr",
        "hidden",
        "deprecated",
    )

    def __init__(
            self,
            *names,
            dest=Unset,
            terminator=False,
            cardinality="?",
            descr=Unset,
            hidden=False,
            deprecated=False
    ):
        metadata = {
            "names": names,
            "dest": dest,
            "terminator": bool(terminator),
            "cardinality": cardinality,
            "descr": descr,
            "hidden": hidden,
            "deprecated": deprecated,
        }
        _sanitize_named_metadata(type(self), metadata)
        if not isinstance(dest, Ref | Unset) and not callable(dest):
            raise TypeError(f"{type(self).__typename__} 'dest' must be a ref or a callable")
        self._configure(metadata)
        self._binder = bind(self._dest, presence=True)

    def match(self, tokens, cursor, /):
        if not self.recognizes(tokens, cursor):
            return Result.ok(Outcome.NO_MATCH)
        token = tokens[cursor]
        if token.value is not None:
            return Result.error(
                FaultCode.VALIDATION_ERROR,
                f"Flag '{token.name}' does not take a value",
                index=token.index,
                hint=f"remove the value after '{token.name}'",
            )
        self._warn(tokens, token)
        if (bound := self._binder(True)).failed:
            return bound
        return Result.ok(Outcome.SHORT_CIRCUIT if self._terminator else Outcome.MATCHED, 1)

    def usage(self, style=Unset, /):
        return "|".join(self._rendered(style))

    def help(self, style=Unset, /):
        return [(", ".join(self._rendered(style)), str(coalesce(self._descr, "")))]


class Operand(_Valued):
    """
    Positional, value-bearing argument.

    Parameters
    - hint: value label for usage/help (defaults per dest/choices).
    - dest, type, choices, cardinality, descr, hidden, deprecated: as for Option.
    """
    __introspectable__ = (
        "hint",
        "dest",
        "type",
        "choices",
        "cardinality",
        "descr",
        "hidden",
        "deprecated",
    )

    def __init__(
            self,
            hint=Unset,
            /,
            dest=Unset,
            type=Unset,
            choices=Unset,
            cardinality=Unset,
            descr=Unset,
            *,
            hidden=False,
            deprecated=False
    ):
        self._setup({
            "hint": hint,
            "dest": dest,
            "type": type,
            "choices": choices,
            "cardinality": cardinality,
            "descr": descr,
            "hidden": hidden,
            "deprecated": deprecated,
        })

    def match(self, tokens, cursor, /):
        if cursor >= len(tokens) or tokens[cursor].is_option:
            return Result.ok(Outcome.NO_MATCH)
        token = tokens[cursor]
        self._warn(tokens, token)
        return self._accept(token, token.text, 1)

    def usage(self, style=Unset, /):
        return f"<{self._hint}>"

    def help(self, style=Unset, /):
        return [(f"<{self._hint}>", str(coalesce(self._descr, "")))]


def _decorator(cls, name, /, *args, **kwargs):
    """
    Internal: build a decorator binding the decorated function as dest.
    """
    if "dest" in kwargs:
        raise TypeError(f"@{name}() cannot specify a 'dest'")

    @rename(name)
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError(f"@{name}() must be applied to a callable")
        return cls(*args, dest=callback, **kwargs)

    return wrapper


def option(*args, **kwargs):
    """
    Decorator/factory for a named option bound to the decorated function.

        @option("-i", "--index", hint="index")
        def on_index(index: int):
            if not 0 <= index <= 10:
                return Result.runtime_error("index must be between 0 and 10")

    The conversion type is taken from the first parameter annotation unless
    type= is given.
    """
    return _decorator(Option, "option", *args, **kwargs)


def flag(*args, **kwargs):
    """
    Decorator/factory for a presence-only flag bound to the decorated function.

        @flag("-v", "--verbose")
        def on_verbose(): ...
    """
    return _decorator(Flag, "flag", *args, **kwargs)


def operand(*args, **kwargs):
    """
    Decorator/factory for a positional operand bound to the decorated function.

        @operand("file")
        def on_file(file): ...
    """
    return _decorator(Operand, "operand", *args, **kwargs)


__all__ = (
    # Classes (leaves)
    "Literal",
    "Option",
    "Flag",
    "Operand",

    # Decorators
    "option",
    "flag",
    "operand",
)
