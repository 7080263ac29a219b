"""Generate builder classes for dataclasses."""

from __future__ import annotations

import copy
import dataclasses
import enum
import inspect
import keyword
import types
import typing
from typing import Any, Callable

_META_KEY = "patternkit.builder"
_RESERVED_NAMES = frozenset({"build", "self", "_values"})
_DEFAULTABLE = frozenset(
    {int, float, complex, bool, str, bytes, bytearray, list, dict, set, frozenset, tuple}
)
_NAMED_DEFAULTS: dict[str, Callable[[], Any]] = {
    "int": int,
    "float": float,
    "complex": complex,
    "bool": bool,
    "str": str,
    "bytes": bytes,
    "bytearray": bytearray,
    "list": list,
    "dict": dict,
    "set": set,
    "frozenset": frozenset,
    "tuple": tuple,
    "List": list,
    "Dict": dict,
    "Set": set,
    "FrozenSet": frozenset,
    "Tuple": tuple,
}


class BuilderError(TypeError):
    """Raised when a builder cannot be generated for a class."""


class BuildBy(str, enum.Enum):
    """How the generated setters treat the builder they are called on."""

    VALUE = "value"
    REFERENCE = "reference"


@dataclasses.dataclass(frozen=True)
class _FieldOptions:
    name: str | None = None
    include: bool | None = None


@dataclasses.dataclass(frozen=True)
class _FieldSpec:
    field: str
    method: str
    include: bool
    default: Callable[[], Any] | None
    init: bool


def _is_identifier(name: object) -> bool:
    return isinstance(name, str) and name.isidentifier() and not keyword.iskeyword(name)


def builder_field(*, name=None, include=None, **kwargs):
    """Declare a dataclass field with builder options.

    ``name`` renames the builder method for the field, ``include`` forces the
    field into or out of the builder. Other keyword arguments go to
    :func:`dataclasses.field`.
    """
    if name is not None and not _is_identifier(name):
        raise BuilderError(f"`name` must be an identifier string, got {name!r}")
    if include is not None and not isinstance(include, bool):
        raise BuilderError(f"`include` must be a bool, got {include!r}")
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[_META_KEY] = _FieldOptions(name=name, include=include)
    return dataclasses.field(metadata=metadata, **kwargs)


def _parse_build_by(build_by: object) -> BuildBy:
    try:
        return BuildBy(build_by)
    except ValueError:
        raise BuilderError(
            "`build_by` attribute can get only one of `reference | value` as parameter."
        ) from None


def _split_top_level(text: str, separator: str) -> list[str]:
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for char in text:
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
        if char == separator and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    parts.append("".join(current).strip())
    return parts


def _strip_typing_prefix(name: str) -> str:
    for prefix in ("typing.", "t."):
        if name.startswith(prefix):
            return name[len(prefix):]
    return name


def _string_default(text: str) -> Callable[[], Any] | None:
    text = text.strip().strip("'\"")
    if text in ("None", "NoneType"):
        return lambda: None
    union_parts = _split_top_level(text, "|")
    if len(union_parts) > 1:
        if "None" in union_parts:
            return lambda: None
        return None
    base, _, rest = text.partition("[")
    base = _strip_typing_prefix(base.strip())
    if base == "Optional":
        return lambda: None
    if base == "Union":
        args = _split_top_level(rest.rstrip().removesuffix("]"), ",")
        if "None" in args:
            return lambda: None
        return None
    return _NAMED_DEFAULTS.get(base)


def _type_default(tp: Any) -> Callable[[], Any] | None:
    if isinstance(tp, str):
        return _string_default(tp)
    if tp is None or tp is type(None):
        return lambda: None
    origin = typing.get_origin(tp)
    if origin is typing.Union or origin is types.UnionType:
        if type(None) in typing.get_args(tp):
            return lambda: None
        return None
    if origin is not None:
        tp = origin
    if tp in _DEFAULTABLE:
        return tp
    if isinstance(tp, type) and dataclasses.is_dataclass(tp):
        for sub in dataclasses.fields(tp):
            if not sub.init:
                continue
            if sub.default is dataclasses.MISSING and sub.default_factory is dataclasses.MISSING:
                return None
        return tp
    return None


def _default_factory(field: dataclasses.Field) -> Callable[[], Any]:
    if field.default is not dataclasses.MISSING:
        value = field.default
        return lambda: value
    if field.default_factory is not dataclasses.MISSING:
        return field.default_factory
    factory = _type_default(field.type)
    if factory is None:
        raise BuilderError(
            f"field {field.name!r} is included in the builder but has no default; "
            "give it a default or exclude it"
        )
    return factory


def _make_setter(method: str, mode: BuildBy) -> Callable[..., Any]:
    if mode is BuildBy.VALUE:

        def setter(self, value):
            clone = type(self).__new__(type(self))
            clone._values = {**self._values, method: value}
            return clone

        setter.__doc__ = f"Return a new builder with `{method}` set."
    else:

        def setter(self, value):
            self._values[method] = value
            return self

        setter.__doc__ = f"Set `{method}` on this builder and return it."
    setter.__name__ = method
    return setter


def _construct(target: type, specs: list[_FieldSpec], values: dict[str, Any]) -> Any:
    instance = target(**{s.field: values[s.field] for s in specs if s.init})
    for spec in specs:
        if not spec.init:
            object.__setattr__(instance, spec.field, values[spec.field])
    return instance


def _make_builder_class(
    target: type, builder_name: str, specs: list[_FieldSpec], mode: BuildBy
) -> type:
    included = [s for s in specs if s.include]
    excluded = [s for s in specs if not s.include]
    kind = inspect.Parameter.POSITIONAL_OR_KEYWORD
    build_signature = inspect.Signature(
        [inspect.Parameter("self", kind)] + [inspect.Parameter(s.method, kind) for s in excluded]
    )

    def __init__(self):
        self._values = {s.method: s.default() for s in included}

    def __repr__(self):
        inner = ", ".join(f"{key}={value!r}" for key, value in self._values.items())
        return f"{builder_name}({inner})"

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._values == other._values

    def build(self, *args, **kwargs):
        """Construct the target; fields left out of the builder are passed here."""
        bound = build_signature.bind(self, *args, **kwargs)
        values = {s.field: copy.deepcopy(self._values[s.method]) for s in included}
        values.update({s.field: bound.arguments[s.method] for s in excluded})
        return _construct(target, specs, values)

    build.__signature__ = build_signature

    namespace: dict[str, Any] = {
        "__slots__": ("_values",),
        "__init__": __init__,
        "__repr__": __repr__,
        "__eq__": __eq__,
        "__hash__": None,
        "build": build,
        "__module__": target.__module__,
        "__qualname__": builder_name,
        "__doc__": f"Builder for `{target.__name__}`.",
    }
    for spec in included:
        namespace[spec.method] = _make_setter(spec.method, mode)
    return type(builder_name, (), namespace)


def _install(target: Any, name: str | None, mode: BuildBy, opt_in: bool) -> type:
    if not isinstance(target, type) or not dataclasses.is_dataclass(target):
        raise BuilderError("`builder` can only be used with dataclasses.")
    fields = dataclasses.fields(target)
    if not fields:
        raise BuilderError("`builder` cannot be used with dataclasses that have no fields.")

    specs: list[_FieldSpec] = []
    seen: set[str] = set()
    for field in fields:
        options = field.metadata.get(_META_KEY, _FieldOptions())
        include = options.include if options.include is not None else not opt_in
        method = options.name or field.name
        if method in _RESERVED_NAMES:
            raise BuilderError(f"{method!r} cannot be used as a builder name")
        if method in seen:
            raise BuilderError(f"builder name {method!r} is used by more than one field")
        seen.add(method)
        default = _default_factory(field) if include else None
        specs.append(_FieldSpec(field.name, method, include, default, field.init))

    builder_cls = _make_builder_class(target, name or f"{target.__name__}Builder", specs, mode)

    def make_builder(cls):
        return builder_cls()

    make_builder.__doc__ = "Create and return a new builder for this class."
    target.builder = classmethod(make_builder)
    return target


def builder(cls=None, *, name=None, build_by=BuildBy.VALUE, opt_in=False):
    """Add a ``builder()`` class method that returns a generated builder.

    ``name`` renames the builder class, ``build_by`` picks whether setters
    return a new builder (``"value"``) or mutate it (``"reference"``), and
    ``opt_in`` leaves out fields not marked ``include=True``.
    """
    mode = _parse_build_by(build_by)
    if name is not None and not _is_identifier(name):
        raise BuilderError(f"`name` must be an identifier string, got {name!r}")

    def decorate(target):
        return _install(target, name, mode, bool(opt_in))

    return decorate if cls is None else decorate(cls)