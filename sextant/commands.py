"""
Sextant commands and programs.

- Command: a sequential group made of a literal (the sub-command name) followed
  by a required sub-group holding the sub-command's own arguments. Nothing in
  the sub-group is tried unless the name matched.
- Program: the root group. It binds the executable name (first argument),
  classifies the remaining arguments with its option style, resolves them,
  and always checks its own requirements, even when nothing matched. A
  trailing token repeating one of its exhausted named children is reported as
  too many occurrences.
- invoke(): run a program against sys.argv, a shell-like string, or a list of
  strings, surfacing an error through sextant.faults.trigger().

Quick example:
    >>> config = types.SimpleNamespace(file_name="", verbose=False)
    >>> program = Program(
    ...     Option("-o", "--output", dest=Ref(config, "file_name"), hint="filename"),
    ...     Flag("-v", "--verbose", dest=Ref(config, "verbose")),
    ... )
    >>> bool(program.parse(["app", "-o", "f.ext"]))
    True
"""
import os
import shlex
import sys
from collections.abc import Iterable

from .arguments import Literal
from .bindings import Ref, bind
from .faults import FaultCode, trigger
from .groups import Group
from .results import Outcome, Result
from .tokens import OptionStyle, tokenize
from .utils import *


class Command(Group):
    """
    Sub-command: literal name followed by its own arguments.

    Parameters
    - name: the word selecting the sub-command.
    - children: the sub-command's arguments (added to its sub-group).
    - descr: help for the sub-command (carried by its literal).
    - brief: when True, help() lists the name only, not the arguments.
    - callback: called with the command once it matched.
    - cardinality: how many times the command may be given ("?" by default).
    """
    __introspectable__ = (
        "name",
        "brief",
        "cardinality",
        "hidden",
    )

    def __init__(self, name, /, *children, descr=Unset, brief=False, callback=Unset, cardinality="?", hidden=False):
        super().__init__(
            Literal(name, descr),
            Group(*children, cardinality=1),
            sequential=True,
            cardinality=cardinality,
            callback=callback,
            hidden=hidden,
        )
        self._name = name
        self._brief = bool(brief)

    @property
    def literal(self):
        return self._children[0]

    @property
    def arguments(self):
        return self._children[1]

    def add(self, *children):
        """
        append arguments to the sub-command (chainable).
        """
        if len(self._children) < 2:
            return super().add(*children)
        self.arguments.add(*children)
        return self

    def usage(self, style=Unset, /):
        return " ".join(filter(None, (self.literal.usage(style), self.arguments.usage(style))))

    def help(self, style=Unset, /):
        if self._brief:
            return self.literal.help(style)
        return [("", ""), *self.literal.help(style), ("", ""), *self.arguments.help(style)]


class Program(Group):
    """
    Root of a parser tree.

    Parameters
    - children: top-level nodes.
    - executable: Ref | Callable | Unset receiving the first argument.
    - style: the OptionStyle used to classify tokens (POSIX by default).
    - sequential, callback: as for Group.
    - strict: report unclaimed trailing tokens as errors instead of a no-match.
    - shell/fancy/colorful: presentation of faults (see sextant.faults).
    """
    __introspectable__ = (
        "children",
        "style",
        "strict",
        "shell",
        "fancy",
        "colorful",
    )

    def __init__(
            self,
            *children,
            executable=Unset,
            style=Unset,
            sequential=False,
            callback=Unset,
            strict=False,
            shell=False,
            fancy=False,
            colorful=False
    ):
        if not isinstance(executable, Ref | Unset) and not callable(executable):
            raise TypeError(f"{type(self).__typename__} 'executable' must be a ref or a callable")
        if not isinstance(style := coalesce(style, OptionStyle()), OptionStyle):
            raise TypeError(f"{type(self).__typename__} 'style' must be an option-style")
        super().__init__(*children, sequential=sequential, cardinality="?", callback=callback)
        self._executable = bind(executable)
        self._style = style
        self._strict = bool(strict)
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)

    @property
    def options(self):
        return {"shell": self._shell, "fancy": self._fancy, "colorful": self._colorful}

    def parse(self, arguments, /):
        """
        parse an argument vector (the first element being the program name).

        returns the final Result; destinations are written as a side effect.
        """
        if isinstance(arguments, str) or not isinstance(arguments, Iterable):
            raise TypeError("parse() argument must be an iterable of strings")
        arguments = list(arguments)

        options = self.options
        if arguments:
            if not isinstance(arguments[0], str):
                raise TypeError("parse() argument must be an iterable of strings")
            if (bound := self._executable(arguments[0])).failed:
                return bound
            options["prog"] = os.path.basename(arguments[0]) or arguments[0]

        tokens = tokenize(arguments[1:], self._style, offset=1, **options)
        total, counts = self._resolve(tokens, 0)
        if total.failed or total.short_circuit:
            return total

        if total.consumed < len(tokens) and (repeated := self._repeated(tokens, total.consumed, counts)):
            return repeated
        if total.consumed < len(tokens) and self._strict:
            token = tokens[total.consumed]
            return Result.error(
                FaultCode.UNRECOGNIZED_TOKEN,
                f"Unrecognized token: {token.text}",
                index=token.index,
                hint=f"check the {ordinal(token.index)} argument against: {self.usage() or "(no arguments)"}",
            )
        if missing := self._missing(tokens, counts):
            return missing
        if total.consumed < len(tokens) or not total.consumed:
            return Result.ok(Outcome.NO_MATCH)
        return self._accepted(total.consumed)

    def usage(self, style=Unset, /):
        return super().usage(coalesce(style, self._style))

    def help(self, style=Unset, /):
        return super().help(coalesce(style, self._style))

    def __invoke__(self, prompt=Unset):
        """
        Parse a token stream and surface any error.

        Parameters
        - prompt:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; will be split via shlex.split.
          • Iterable[str]: pre-tokenized sequence; each element is trimmed.

        Behavior
        - On error, the matching fault is triggered: raised in library mode,
          printed (then exit status 1) in shell mode.
        - Otherwise the Result is returned.
        """
        if prompt is Unset:
            tokens = sys.argv[1:]
        elif isinstance(prompt, str):
            tokens = shlex.split(prompt)
        elif isinstance(prompt, Iterable):
            def _sanitized(iterable):
                for item in iterable:
                    if not isinstance(item, str):
                        raise TypeError(f"__invoke__() argument must be a string or an iterable of strings")
                    if item := item.strip():
                        yield item
            tokens = list(_sanitized(prompt))
        else:
            raise TypeError(f"__invoke__() argument must be a string or an iterable of strings")

        executable = sys.argv[0] if sys.argv and sys.argv[0] else "sextant"
        result = self.parse([executable, *tokens])
        if result.failed:
            trigger(result.fault(), prog=os.path.basename(executable) or executable, **self.options)
        return result


def invoke(object, prompt=Unset, /):
    """
    Convenience runner for programs.

    Parameters
    - object: an instance providing __invoke__(prompt).
    - prompt: Unset (sys.argv[1:]), a shell-like string, or an iterable of strings.

    Raises
    - TypeError: when 'object' does not implement __invoke__.
    - ParseException: in library mode, when the parse ends with an error.
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        return object.__invoke__(prompt)

    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method") from None


__all__ = (
    "Command",
    "Program",
    "invoke",
)
