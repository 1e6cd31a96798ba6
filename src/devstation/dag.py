# dag.py
from __future__ import annotations

import heapq
from typing import Dict, List, Sequence, Set, Tuple

from .model import Step


class PlanError(ValueError):
    """The step list is not a valid DAG (duplicates, unknown needs, cycles)."""


def build_dag(steps: Sequence[Step]) -> Tuple[Dict[str, Set[str]], Dict[str, int]]:
    """
    Build a DAG from Step objects.

    Requires:
      - step.name: str (unique)
      - step.needs: iterable[str] (names of steps that must run BEFORE this step)

    Returns (adj, indeg) where adj maps a step to the steps that need it.
    """
    names = [s.name for s in steps]
    if len(set(names)) != len(names):
        dupes = sorted({n for n in names if names.count(n) > 1})
        raise PlanError(f"Duplicate step names found: {dupes}")

    name_set = set(names)
    adj: Dict[str, Set[str]] = {n: set() for n in names}
    indeg: Dict[str, int] = {n: 0 for n in names}

    for step in steps:
        for dep in step.needs or []:
            if dep not in name_set:
                raise PlanError(
                    f"Step '{step.name}' needs missing step '{dep}'. "
                    f"Known steps: {sorted(name_set)}"
                )
            if dep == step.name:
                raise PlanError(f"Step '{step.name}' needs itself")
            # edge dep -> step.name
            if step.name not in adj[dep]:
                adj[dep].add(step.name)
                indeg[step.name] += 1

    return adj, indeg


def topo_order(steps: Sequence[Step]) -> List[Step]:
    """
    Order steps so every step comes after the steps it needs.

    Ties are broken by declaration order: among the steps that are ready,
    the one declared first always goes next.
    """
    steps = list(steps)
    adj, indeg = build_dag(steps)
    indeg = dict(indeg)  # copy (we mutate it)

    position = {s.name: i for i, s in enumerate(steps)}

    ready = [position[n] for n, d in indeg.items() if d == 0]
    heapq.heapify(ready)

    ordered: List[Step] = []
    while ready:
        step = steps[heapq.heappop(ready)]
        ordered.append(step)
        for child in adj[step.name]:
            indeg[child] -= 1
            if indeg[child] == 0:
                heapq.heappush(ready, position[child])

    if len(ordered) != len(steps):
        remaining = sorted(n for n, d in indeg.items() if d > 0)
        raise PlanError(f"Step graph has a cycle. Stuck steps: {remaining}")

    return ordered

