"""Python-style method calls for chat templates.

Chat templates are written against the Python string/list/dict API
(``content.strip()``, ``text.split('</think>')``...). Templates run in a
sandbox where those calls go through a closed table: a value kind plus a
method name maps to one implementation. Anything outside the table is
undefined, and calling it fails the render.
"""

from __future__ import annotations

import functools
from collections.abc import Callable, Mapping
from typing import Any, Literal

from jinja2.runtime import Undefined
from jinja2.sandbox import ImmutableSandboxedEnvironment

__all__ = [
    "ValueKind",
    "METHODS",
    "PyCompatEnvironment",
    "resolve_method",
    "value_kind",
]

ValueKind = Literal["str", "seq", "map"]

# Builtin values with no methods in the table. Jinja's own runtime objects
# (loop, namespace, macros) keep the regular sandbox lookup.
_SCALARS = (bool, int, float, complex, bytes, bytearray, type(None))

_STR_METHODS: dict[str, Callable[..., Any]] = {
    "capitalize": str.capitalize,
    "count": str.count,
    "endswith": str.endswith,
    "find": str.find,
    "isalnum": str.isalnum,
    "isalpha": str.isalpha,
    "isdigit": str.isdigit,
    "islower": str.islower,
    "isnumeric": str.isnumeric,
    "isspace": str.isspace,
    "isupper": str.isupper,
    "join": str.join,
    "lower": str.lower,
    "lstrip": str.lstrip,
    "replace": str.replace,
    "rfind": str.rfind,
    "rsplit": str.rsplit,
    "rstrip": str.rstrip,
    "split": str.split,
    "splitlines": str.splitlines,
    "startswith": str.startswith,
    "strip": str.strip,
    "title": str.title,
    "upper": str.upper,
}


def _seq_count(seq: Any, value: Any) -> int:
    return sum(1 for item in seq if item == value)


def _seq_index(seq: Any, value: Any) -> int:
    for i, item in enumerate(seq):
        if item == value:
            return i
    raise ValueError(f"{value!r} is not in sequence")


def _map_get(mapping: Mapping[Any, Any], key: Any, default: Any = None) -> Any:
    return mapping.get(key, default)


def _map_items(mapping: Mapping[Any, Any]) -> list[tuple[Any, Any]]:
    return list(mapping.items())


def _map_keys(mapping: Mapping[Any, Any]) -> list[Any]:
    return list(mapping.keys())


def _map_values(mapping: Mapping[Any, Any]) -> list[Any]:
    return list(mapping.values())


METHODS: dict[ValueKind, dict[str, Callable[..., Any]]] = {
    "str": _STR_METHODS,
    "seq": {"count": _seq_count, "index": _seq_index},
    "map": {"get": _map_get, "items": _map_items, "keys": _map_keys, "values": _map_values},
}


def value_kind(obj: Any) -> ValueKind | None:
    if isinstance(obj, str):
        return "str"
    if isinstance(obj, (list, tuple)):
        return "seq"
    if isinstance(obj, Mapping):
        return "map"
    return None


def resolve_method(obj: Any, name: str) -> Callable[..., Any] | None:
    """Return ``name`` bound to ``obj`` if the table supports it, else None."""
    kind = value_kind(obj)
    if kind is None:
        return None
    impl = METHODS[kind].get(name)
    if impl is None:
        return None
    return functools.partial(impl, obj)


class PyCompatEnvironment(ImmutableSandboxedEnvironment):
    """Sandboxed Jinja2 environment that dispatches methods through ``METHODS``."""

    def getattr(self, obj: Any, attribute: str) -> Any:
        kind = value_kind(obj)
        if kind is None:
            if isinstance(obj, _SCALARS) and callable(getattr(obj, attribute, None)):
                return self.undefined(
                    hint=f"unsupported method {attribute!r} on {type(obj).__name__} value",
                    obj=obj,
                    name=attribute,
                )
            return super().getattr(obj, attribute)
        method = resolve_method(obj, attribute)
        if method is not None:
            return method
        if kind == "map":
            try:
                return obj[attribute]
            except (KeyError, TypeError):
                pass
            return self.undefined(obj=obj, name=attribute)
        if hasattr(obj, attribute):
            return self._unsupported(obj, attribute, kind)
        return self.undefined(obj=obj, name=attribute)

    def _unsupported(self, obj: Any, attribute: str, kind: ValueKind) -> Undefined:
        return self.undefined(
            hint=f"unsupported method {attribute!r} on {kind} value",
            obj=obj,
            name=attribute,
        )
