"""Early linting and splitting of raw TTP documents."""

from __future__ import annotations

import re
from dataclasses import dataclass

_STEPS_TOP_LEVEL_KEY = re.compile(rb"(?m)^steps:")
_TOP_LEVEL_KEY = re.compile(rb"(?m)^[^\s]+:")


class PreprocessError(ValueError):
    """The TTP document's top-level layout is not acceptable."""


@dataclass(frozen=True)
class PreprocessResult:
    """A TTP document divided into the part before ``steps:`` and the key itself."""

    preamble_bytes: bytes
    steps_bytes: bytes


def parse(ttp_bytes: bytes | str) -> PreprocessResult:
    """Lint a raw TTP and split it at its single, final ``steps:`` key."""
    data = ttp_bytes.encode("utf-8") if isinstance(ttp_bytes, str) else bytes(ttp_bytes)

    steps_matches = list(_STEPS_TOP_LEVEL_KEY.finditer(data))
    if len(steps_matches) != 1:
        raise PreprocessError("the top-level key `steps:` should occur exactly once")
    steps = steps_matches[0]

    if any(m.start() > steps.start() for m in _TOP_LEVEL_KEY.finditer(data)):
        raise PreprocessError(
            "the top-level key `steps:` should always be the last top-level key in the file"
        )
    return PreprocessResult(
        preamble_bytes=data[: steps.start()],
        steps_bytes=data[steps.start() : steps.end()],
    )