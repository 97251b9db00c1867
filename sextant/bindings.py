"""
Sextant destination bindings.

A leaf never owns the storage it writes to. Its destination is one of
- Ref(owner, name): an attribute of an object (or a key of a mapping) owned by
  the caller. Lists accumulate (one append per occurrence), anything else is
  overwritten.
- a callable: invoked with the converted value. It may return a Result to
  reject the value (Result.runtime_error("...")); None or any other value
  counts as accepted. Exceptions escaping the callable are reported as
  runtime errors carrying their message.
- Unset: the value is converted and validated, then dropped.

infer() derives, at construction time, the conversion type and whether the
destination accumulates, so no type resolution happens while parsing.
"""
import builtins
import inspect
from collections.abc import MutableMapping

from .results import Result
from .utils import Unset, coalesce, rename


class Ref:
    """
    reference to a caller-owned attribute (or mapping key).
    """
    __slots__ = ("_owner", "_name")

    def __init__(self, owner, name, /):
        if not isinstance(name, str):
            raise TypeError("ref name must be a string")
        if not isinstance(owner, MutableMapping) and not hasattr(owner, name):
            raise AttributeError(f"ref owner has no attribute {name!r}")
        self._owner = owner
        self._name = name

    @property
    def owner(self):
        return self._owner

    @property
    def name(self):
        return self._name

    @property
    def hint(self):
        return self._name.replace("_", "-")

    @property
    def multiple(self):
        return isinstance(self.get(), list)

    def get(self):
        if isinstance(self._owner, MutableMapping):
            return self._owner.get(self._name)
        return getattr(self._owner, self._name)

    def assign(self, value, /):
        if isinstance(current := self.get(), list):
            current.append(value)
        elif isinstance(self._owner, MutableMapping):
            self._owner[self._name] = value
        else:
            setattr(self._owner, self._name, value)

    def __repr__(self):
        return f"ref({type(self._owner).__name__}.{self._name})"


def infer(target, type=Unset, /):
    """
    return (type, multiple) for a destination.

    - Ref: an explicit type wins, then the type of the current value (str when
      the current value is None). List values accumulate and convert their
      elements with the explicit type (str by default).
    - callable: an explicit type wins, then the annotation of the first
      parameter when it is a class, then str.
    - Unset: the explicit type or str.
    """
    if isinstance(target, Ref):
        current = target.get()
        if isinstance(current, list):
            return coalesce(type, str), True
        if type is not Unset:
            return type, False
        return (str if current is None else builtins.type(current)), False

    if type is not Unset or target is Unset:
        return coalesce(type, str), False

    try:
        parameters = list(inspect.signature(target, eval_str=True).parameters.values())
    except (TypeError, ValueError, NameError):
        return str, False
    if parameters and isinstance(annotation := parameters[0].annotation, builtins.type):
        if annotation is not inspect.Parameter.empty:
            return annotation, False
    return str, False


def bind(target, /, *, presence=False):
    """
    build the binder (value → Result) writing to a destination.

    presence binders are used by flags: callables are then invoked without
    arguments and references receive True.
    """
    if target is Unset:
        return rename(lambda value: Result.ok(), "discard")

    if isinstance(target, Ref):
        @rename("assign")
        def assign(value):
            target.assign(value)
            return Result.ok()

        return assign

    if not callable(target):
        raise TypeError("destination must be a ref or a callable")

    @rename(getattr(target, "__name__", "call"))
    def call(value):
        try:
            result = target() if presence else target(value)
        except Exception as exc:  # delegated failures surface as runtime errors
            return Result.runtime_error(str(exc) or builtins.type(exc).__name__)
        if isinstance(result, Result):
            return result
        return Result.ok()

    return call


__all__ = (
    "Ref",
    "infer",
    "bind",
)
