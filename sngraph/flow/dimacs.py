"""DIMACS min-cost-flow text format, as read by solvers such as CS2.

Layout::

    c <comments>
    p min <nodes> <arcs>
    n <vertex> <supply>           (source and sink only)
    a <tail> <head> <low> <cap> <cost>
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Union

from sngraph.errors import NetworkWriteError
from sngraph.flow.problem import FlowProblem
from sngraph.logging import get_logger

LOGGER = get_logger(__name__)


def format_dimacs(problem: FlowProblem) -> List[str]:
    """Render ``problem`` as DIMACS lines (without trailing newlines)."""
    lines = [
        f"c Min-Cost flow problem with {problem.node_count} nodes and "
        f"{problem.arc_count} arcs (edges)",
        f"p min {problem.node_count} {problem.arc_count}",
        "",
        f'c Supply of {problem.supply} at node {problem.source} ("Source")',
        f"n {problem.source} {problem.supply}",
        "",
        f'c Demand of {-problem.supply} at node {problem.sink} ("Sink")',
        f"n {problem.sink} {-problem.supply}",
        "",
        "c arc list follows",
        "c arc has <tail> <head> <capacity l.b.> <capacity u.b> <cost>",
    ]
    for group in problem.groups:
        if group.title:
            lines.append(f"c {group.title}")
        for arc in group.arcs:
            if arc.comment:
                lines.append(f"c {arc.comment}")
            lines.append(f"a {arc.tail} {arc.head} {arc.lower} {arc.upper} {arc.cost}")
        lines.append("")
    return lines


def write_dimacs(problem: FlowProblem, path: Union[str, Path]) -> None:
    """Write ``problem`` to ``path``.

    Raises:
        NetworkWriteError: If the file cannot be created or written.
    """
    text = "\n".join(format_dimacs(problem)) + "\n"
    try:
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(text)
    except OSError as exc:
        raise NetworkWriteError(path, exc.strerror or str(exc)) from exc
    LOGGER.info(
        "Saved flow network (%d nodes, %d arcs) to '%s'",
        problem.node_count,
        problem.arc_count,
        path,
    )
