"""Results produced by running steps and their cleanup actions."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass
class ActResult:
    """Output of one action: captured streams and extracted outputs."""

    stdout: str = ""
    stderr: str = ""
    outputs: dict[str, str] = field(default_factory=dict)


@dataclass
class ExecutionResult(ActResult):
    """Result of executing a step, with the result of its cleanup once run."""

    cleanup: ActResult | None = None


@dataclass
class StepResultsRecord:
    """Step results, reachable both by step name and by execution order."""

    by_name: dict[str, ExecutionResult] = field(default_factory=dict)
    by_index: list[ExecutionResult] = field(default_factory=list)

    def add(self, name: str, result: ExecutionResult) -> None:
        """Record ``result`` under ``name`` and at the next index."""
        self.by_name[name] = result
        self.by_index.append(result)


def aggregate_results(results: Iterable[ActResult | None]) -> ActResult:
    """Concatenate the standard output and error of several results."""
    present = [r for r in results if r is not None]
    return ActResult(
        stdout="".join(r.stdout for r in present),
        stderr="".join(r.stderr for r in present),
    )