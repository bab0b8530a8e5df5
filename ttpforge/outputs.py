"""Extraction of named output values from a step's standard output."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import yaml


class OutputError(ValueError):
    """An output specification is invalid or could not be applied."""


class _RawNumber(str):
    """A JSON number kept in its original textual form."""


_MISSING = object()


def _keep_first(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in pairs:
        result.setdefault(key, value)
    return result


def _split_path(path: str) -> list[str]:
    parts: list[str] = []
    current: list[str] = []
    escaped = False
    for ch in path:
        if escaped:
            current.append(ch)
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch == ".":
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
    parts.append("".join(current))
    return parts


def _lookup(value: Any, parts: list[str]) -> Any:
    if not parts:
        return value
    head, rest = parts[0], parts[1:]
    if not head:
        return _MISSING
    if isinstance(value, list):
        if head == "#":
            if not rest:
                return _RawNumber(str(len(value)))
            return [r for r in (_lookup(item, rest) for item in value) if r is not _MISSING]
        if head.isascii() and head.isdigit():
            index = int(head)
            return _lookup(value[index], rest) if index < len(value) else _MISSING
        return _MISSING
    if isinstance(value, dict):
        return _lookup(value[head], rest) if head in value else _MISSING
    return _MISSING


def _dump(value: Any) -> str:
    if isinstance(value, _RawNumber):
        return str(value)
    if value is True:
        return "true"
    if value is False:
        return "false"
    if value is None:
        return "null"
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, list):
        return "[" + ",".join(_dump(v) for v in value) + "]"
    return "{" + ",".join(f"{_dump(str(k))}:{_dump(v)}" for k, v in value.items()) + "}"


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str) and not isinstance(value, _RawNumber):
        return value
    return _dump(value)


@dataclass
class JSONFilter:
    """Select the value at a dotted path in a JSON document."""

    path: str = ""

    def apply(self, in_str: str) -> str:
        """Return the value at this filter's path as text."""
        try:
            document = json.loads(
                in_str,
                parse_int=_RawNumber,
                parse_float=_RawNumber,
                object_pairs_hook=_keep_first,
            )
        except ValueError:
            document = _MISSING
        found = _MISSING if document is _MISSING else _lookup(document, _split_path(self.path))
        if found is _MISSING:
            raise OutputError(f"json path not found: {self.path}")
        return _as_text(found)


@dataclass
class Spec:
    """An output value, produced by applying a chain of filters in order."""

    filters: list[JSONFilter] = field(default_factory=list)

    def apply(self, in_str: str) -> str:
        """Run every filter in turn, each on the previous one's result."""
        current = in_str
        for output_filter in self.filters:
            current = output_filter.apply(current)
        return current

    @classmethod
    def from_dict(cls, data: Any) -> Spec:
        """Build a spec from its decoded YAML mapping."""
        if not isinstance(data, Mapping):
            raise OutputError("output spec must be a mapping")
        nodes = data.get("filters") or []
        if not isinstance(nodes, list):
            raise OutputError("output spec `filters` must be a list")
        filters = []
        for node in nodes:
            if not isinstance(node, Mapping):
                continue
            raw_path = node.get("json_path", "")
            if isinstance(raw_path, (Mapping, list)):
                continue
            filters.append(JSONFilter(path="" if raw_path is None else str(raw_path)))
        if not filters:
            raise OutputError("no valid filters found in output spec")
        return cls(filters=filters)

    @classmethod
    def from_yaml(cls, text: str) -> Spec:
        """Build a spec from YAML text."""
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise OutputError(f"invalid output spec: {exc}") from exc
        return cls.from_dict(data)


def parse(specs: Mapping[str, Spec], in_str: str) -> dict[str, str]:
    """Extract every named output described by ``specs`` from ``in_str``."""
    return {name: spec.apply(in_str) for name, spec in specs.items()}