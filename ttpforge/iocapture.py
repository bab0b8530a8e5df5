"""Run a command while streaming and capturing its output."""

from __future__ import annotations

import codecs
import subprocess
import sys
import threading
from collections.abc import Mapping, Sequence
from functools import partial
from typing import IO, TextIO

from .results import ActResult


def _pump(pipe: IO[bytes], sink: TextIO, parts: list[str]) -> None:
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    for chunk in iter(partial(pipe.read1, 65536), b""):
        _emit(decoder.decode(chunk), sink, parts)
    _emit(decoder.decode(b"", final=True), sink, parts)


def _emit(text: str, sink: TextIO, parts: list[str]) -> None:
    if not text:
        return
    parts.append(text)
    sink.write(text)
    flush = getattr(sink, "flush", None)
    if flush is not None:
        flush()


def stream_and_capture(
    args: Sequence[str],
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
) -> ActResult:
    """Run ``args``, copying its output to the given streams and returning it.

    Raises ``subprocess.CalledProcessError`` if the command exits non-zero.
    """
    out_sink = stdout if stdout is not None else sys.stdout
    err_sink = stderr if stderr is not None else sys.stderr
    command = list(args)
    out_parts: list[str] = []
    err_parts: list[str] = []
    with subprocess.Popen(
        command,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        env=dict(env) if env is not None else None,
        cwd=cwd or None,
    ) as proc:
        pumps = [
            threading.Thread(target=_pump, args=(proc.stdout, out_sink, out_parts)),
            threading.Thread(target=_pump, args=(proc.stderr, err_sink, err_parts)),
        ]
        for pump in pumps:
            pump.start()
        for pump in pumps:
            pump.join()
        returncode = proc.wait()

    out_text, err_text = "".join(out_parts), "".join(err_parts)
    if returncode != 0:
        raise subprocess.CalledProcessError(
            returncode, command, output=out_text, stderr=err_text
        )
    return ActResult(stdout=out_text, stderr=err_text)