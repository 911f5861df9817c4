"""
Value formatter for log payloads

Renders any runtime value into readable text, similar to what an
interactive console shows: scalars, containers, objects, classes and
functions. Self-referencing structures are labelled instead of recursed
into, e.g. ``<ref1>{ self: [Circular ref1] }``.
"""

import dataclasses
import enum
import inspect
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Set, Tuple

from treelog.formatters.ansi import Ansi

# Sentinels rendered in place of property values that cannot be read
NO_GETTER = "<property has no getter>"
INACCESSIBLE = "<property inaccessible>"

FUNCTION_SOURCE_LIMIT = 100

_SCALARS = (type(None), bool, int, float, str)


class CircularTracker:
    """
    Identity tracker used while formatting a single value.

    Objects are numbered in the order they are first added. That number
    is used both for ``[Circular refN]`` markers and for the ``<refN>``
    prefix on the referenced object itself.
    """

    def __init__(self):
        # id -> object, the object reference keeps the id stable
        self._tracked: Dict[int, Any] = {}
        self._circular: Set[int] = set()

    def add(self, obj: Any) -> None:
        """
        Start tracking an object.

        Raises:
            ValueError: If the object is already tracked
        """
        key = id(obj)
        if key in self._tracked:
            raise ValueError("object must not be added twice")
        self._tracked[key] = obj

    def has(self, obj: Any) -> bool:
        """Check if an object is already tracked."""
        return id(obj) in self._tracked

    def index_of(self, obj: Any) -> int:
        """1-based tracking position of an object, 0 if untracked."""
        try:
            return list(self._tracked).index(id(obj)) + 1
        except ValueError:
            return 0

    def is_circular(self, obj: Any) -> bool:
        """Check if an object is the target of a circular reference."""
        return id(obj) in self._circular

    def set_as_circular(self, obj: Any) -> None:
        """Mark an object as the target of a circular reference."""
        self._circular.add(id(obj))


def format_any(
    value: Any,
    pretty: bool = False,
    colored: bool = False,
    inner: int = 0,
    ct: Optional[CircularTracker] = None,
) -> str:
    """
    Format any value.

    Top-level scalars are rendered as is. Nested strings are quoted so
    they can be told apart from other values.

    Args:
        value: Value to format
        pretty: One entry per line, indented by two spaces per level
        colored: Decorate the output with ANSI colors
        inner: Nesting depth, 0 for a top-level value
        ct: Tracker shared across one top-level call

    Returns:
        Formatted string
    """
    if ct is None:
        ct = CircularTracker()

    if inner == 0 and isinstance(value, _SCALARS) and not isinstance(value, enum.Enum):
        return f"{value}"
    if value is None:
        return Ansi.bold(value) if colored else "None"
    if isinstance(value, enum.Enum):
        text = f"{type(value).__name__}.{value.name}"
        return Ansi.magenta(text) if colored else text
    if isinstance(value, bool):
        return Ansi.dark_yellow(value) if colored else f"{value}"
    if isinstance(value, (int, float)):
        return Ansi.dark_cyan(value) if colored else f"{value}"
    if isinstance(value, str):
        return Ansi.dark_green(f"'{value}'") if colored else f"'{value}'"
    if isinstance(value, (bytes, bytearray, complex)):
        return repr(value)
    if isinstance(value, (list, tuple, set, frozenset)):
        return _format_collection(value, pretty, colored, inner, ct)
    if isinstance(value, Mapping):
        return _format_mapping(value, pretty, colored, inner, ct)
    if inspect.isclass(value):
        result = get_class_hierarchy(value)
        return Ansi.dark_magenta(result) if colored else result
    if inspect.isroutine(value):
        return _format_function(value, colored)
    return _format_object(value, pretty, colored, inner, ct)


def _format_member(value: Any, pretty: bool, colored: bool, inner: int, ct: CircularTracker) -> str:
    if ct.has(value):
        ct.set_as_circular(value)
        ref = ct.index_of(value)
        if colored:
            return f"[{Ansi.cyan('Circular')} {Ansi.blue(f'ref{ref}')}]"
        return f"[Circular ref{ref}]"
    return format_any(value, pretty, colored, inner + 1, ct)


def _ref_prefix(obj: Any, colored: bool, ct: CircularTracker) -> str:
    if not ct.is_circular(obj):
        return ""
    ref = f"<ref{ct.index_of(obj)}>"
    return Ansi.blue(ref) if colored else ref


def _join(prefix: str, opening: str, closing: str, results: List[str], pretty: bool, inner: int) -> str:
    if not results:
        return f"{prefix}{opening}{closing}"
    if pretty:
        indent = "  " * (inner + 1)
        body = f",\n{indent}".join(results)
        return f"{prefix}{opening}\n{indent}{body}\n{'  ' * inner}{closing}"
    return f"{prefix}{opening} {', '.join(results)} {closing}"


def _format_collection(collection, pretty: bool, colored: bool, inner: int, ct: CircularTracker) -> str:
    # Immutable collections can only close a cycle through a mutable member,
    # which is tracked itself.
    if not isinstance(collection, (tuple, frozenset)):
        ct.add(collection)
    results = [_format_member(elem, pretty, colored, inner, ct) for elem in collection]

    if isinstance(collection, list):
        opening, closing = "[", "]"
    elif isinstance(collection, tuple):
        opening, closing = "(", ")"
    else:
        opening, closing = f"{type(collection).__name__}({len(collection)}) {{", "}"
    return _join(_ref_prefix(collection, colored, ct), opening, closing, results, pretty, inner)


def _format_mapping(mapping: Mapping, pretty: bool, colored: bool, inner: int, ct: CircularTracker) -> str:
    ct.add(mapping)
    plain = type(mapping) is dict
    results = []
    for key, elem in list(mapping.items()):
        if plain and isinstance(key, str):
            label = key
        else:
            label = _format_member(key, pretty, colored, inner, ct)
        rendered = _format_member(elem, pretty, colored, inner, ct)
        results.append(f"{label}: {rendered}" if plain else f"{label} => {rendered}")

    if plain:
        opening = "{"
    else:
        opening = f"{type(mapping).__name__}({len(mapping)}) {{"
    return _join(_ref_prefix(mapping, colored, ct), opening, "}", results, pretty, inner)


def _format_object(obj: Any, pretty: bool, colored: bool, inner: int, ct: CircularTracker) -> str:
    entries = get_all_entries(obj)
    if entries is None:
        try:
            return repr(obj)
        except Exception:
            return f"<{type(obj).__name__} object>"

    ct.add(obj)
    results = [
        f"{key}: {_format_member(elem, pretty, colored, inner, ct)}"
        for key, elem in entries
    ]
    opening = f"{type(obj).__name__} {{"
    return _join(_ref_prefix(obj, colored, ct), opening, "}", results, pretty, inner)


def _format_function(func: Any, colored: bool) -> str:
    try:
        source = inspect.getsource(func).strip()
    except (OSError, TypeError):
        source = getattr(func, "__qualname__", None) or repr(func)
    lines = source.split("\n")
    first = lines[0][:FUNCTION_SOURCE_LIMIT]
    ellipsis = "..." if len(lines) > 1 or len(lines[0]) > FUNCTION_SOURCE_LIMIT else ""
    label = Ansi.blue("Function") if colored else "Function"
    return f"[{label} {first}{ellipsis}]"


def get_all_entries(obj: Any) -> Optional[List[Tuple[Any, Any]]]:
    """
    Get the fields to show for an object.

    Objects can take control by implementing ``describe_fields()``,
    returning (name, value) pairs. Otherwise instance attributes, slots
    and the properties of every class in the MRO are collected.

    Attention: a property overridden in a subclass shows up once per
    class that defines it, each read through that class's getter.

    Returns:
        List of (name, value) pairs, or None if the object should be
        rendered with its own repr()
    """
    try:
        describe = getattr(obj, "describe_fields", None)
    except Exception:
        describe = None
    if callable(describe):
        try:
            return list(describe())
        except Exception:
            return [("describe_fields", INACCESSIBLE)]

    if isinstance(obj, Mapping):
        return list(obj.items())
    if isinstance(obj, BaseException):
        return [("args", obj.args)] + _instance_attributes(obj) + _properties(obj)
    if dataclasses.is_dataclass(obj):
        fields = [(f.name, getattr(obj, f.name, INACCESSIBLE)) for f in dataclasses.fields(obj)]
        return fields + _properties(obj)
    if type(obj).__repr__ is object.__repr__:
        return _instance_attributes(obj) + _properties(obj)
    return None


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def _instance_attributes(obj: Any) -> List[Tuple[str, Any]]:
    entries = []
    try:
        attributes = vars(obj)
    except TypeError:
        attributes = {}
    entries.extend((k, v) for k, v in attributes.items() if not _is_dunder(k))

    for klass in type(obj).__mro__:
        for name, attr in vars(klass).items():
            if _is_dunder(name) or not inspect.ismemberdescriptor(attr):
                continue
            try:
                entries.append((name, attr.__get__(obj, klass)))
            except AttributeError:
                continue  # unset slot
    return entries


def _properties(obj: Any) -> List[Tuple[str, Any]]:
    entries = []
    for klass in type(obj).__mro__[:-1]:
        for name, attr in vars(klass).items():
            if not isinstance(attr, property):
                continue
            if attr.fget is None:
                entries.append((name, NO_GETTER))
                continue
            try:
                entries.append((name, attr.fget(obj)))
            except Exception:
                entries.append((name, INACCESSIBLE))
    return entries


def get_class_hierarchy(klass: Any) -> str:
    """
    Text representation of a class and its bases, e.g.
    ``[class ClassB extends ClassA]``. ``object`` is left out.
    """
    if not inspect.isclass(klass):
        return "no class"

    names = []
    while klass is not None and klass is not object:
        names.append(klass.__name__)
        klass = klass.__base__
    return f"[class {' extends '.join(names)}]"
