"""Solver — best-first k-shortest-path search over the beat × hand-state graph.

Graph:  one layer per playable beat; nodes are ``(combo, hand shape)`` pairs
        for that beat's candidate combos (see
        :meth:`cost_model.ArrangementCostModel.hand_states`).  A note is held
        by one finger for both of its transitions, so the shape is part of
        the node rather than re-chosen per edge.
Edge:   every node in layer i → every node in layer i+1, weighted by
        ``transition_cost + intrinsic_cost(next combo)``.  Unplayable edges
        are dropped.
Start:  every node of the first layer, at ``intrinsic_cost(first combo)``.
Output: the N lowest-cost combo sequences, each priced by its cheapest
        consistent choice of hand shapes, ordered by
        ``(cost, candidate indices)``.

Design choices:
    - A backward pass computes the exact cost-to-go of every node, so the
      best-first search never expands a dead end.
    - Paths that differ only in hand shapes collapse onto one combo
      sequence; a partial path is expanded once per (combo prefix, node).
    - Each first-layer combo is searched independently on a thread pool;
      all workers read the same precomputed tables and nothing is shared
      mutably.  Results are merged only after every worker has finished.
    - Ties break on candidate indices, so identical input always gives the
      same ordered output, and asking for more paths only appends.
"""

from __future__ import annotations

import heapq
import math
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from ..logging import log
from .candidates import BeatCombo
from .cost_model import UNPLAYABLE, ArrangementCostModel, HandShape


@dataclass(frozen=True)
class SolvedPath:
    """One end-to-end route: total cost, the chosen candidate per layer and
    the hand shape holding each chosen combo."""

    cost: int
    indices: tuple[int, ...]
    shapes: tuple[HandShape, ...] = field(default=(), compare=False)


@dataclass(frozen=True)
class _SearchTables:
    # nodes[i][n]: (combo index, hand shape) of node n in layer i
    nodes: list[list[tuple[int, HandShape]]]
    start_costs: list[float]
    # weights[i][a][b]: layer i node a → layer i+1 node b
    weights: list[list[list[float]]]
    # cost_to_go[i][a]: cheapest completion from layer i node a
    cost_to_go: list[list[float]]


def _build_tables(
    layers: Sequence[Sequence[BeatCombo]], cost_model: ArrangementCostModel
) -> _SearchTables:
    nodes = [
        [(c, shape) for c, combo in enumerate(layer) for shape in cost_model.hand_states(combo)]
        for layer in layers
    ]
    start_costs: list[float] = [cost_model.intrinsic_cost(layers[0][c]) for c, _ in nodes[0]]

    weights: list[list[list[float]]] = []
    for i in range(len(layers) - 1):
        curr_layer, next_layer = layers[i], layers[i + 1]
        next_intrinsic = [cost_model.intrinsic_cost(combo) for combo in next_layer]
        weights.append(
            [
                [
                    cost_model.transition_cost(curr_layer[a], next_layer[b], a_shape, b_shape)
                    + next_intrinsic[b]
                    for b, b_shape in nodes[i + 1]
                ]
                for a, a_shape in nodes[i]
            ]
        )

    # ── Backward pass ─────────────────────────────────────────
    cost_to_go: list[list[float]] = [[] for _ in layers]
    cost_to_go[-1] = [0] * len(nodes[-1])
    for i in range(len(layers) - 2, -1, -1):
        downstream = cost_to_go[i + 1]
        cost_to_go[i] = [
            min((w + h for w, h in zip(row, downstream)), default=UNPLAYABLE)
            for row in weights[i]
        ]

    return _SearchTables(nodes, start_costs, weights, cost_to_go)


def _search_from(start: int, tables: _SearchTables, num_paths: int) -> list[SolvedPath]:
    """Enumerate up to *num_paths* cheapest combo sequences beginning at combo *start*.

    Best-first on ``cost so far + exact cost-to-go``.  A (combo prefix, node)
    pair is expanded once, and each node at most *num_paths* times, which is
    enough to yield the *num_paths* cheapest distinct combo sequences
    through it.
    """
    last_layer = len(tables.nodes) - 1

    # (f, combo prefix, node path, g)
    heap: list[tuple[float, tuple[int, ...], tuple[int, ...], float]] = []
    for n, (c, _) in enumerate(tables.nodes[0]):
        if c != start:
            continue
        g0 = tables.start_costs[n]
        f0 = g0 + tables.cost_to_go[0][n]
        if not math.isinf(f0):
            heap.append((f0, (c,), (n,), g0))
    heapq.heapify(heap)

    expanded: set[tuple[tuple[int, ...], int]] = set()
    expansions: dict[tuple[int, int], int] = {}
    seen: set[tuple[int, ...]] = set()
    found: list[SolvedPath] = []

    while heap and len(found) < num_paths:
        _, combos, path, g = heapq.heappop(heap)
        layer = len(path) - 1
        node = path[-1]
        if (combos, node) in expanded:
            continue
        expanded.add((combos, node))
        count = expansions.get((layer, node), 0)
        if count >= num_paths:
            continue
        expansions[(layer, node)] = count + 1

        if layer == last_layer:
            if combos not in seen:
                seen.add(combos)
                shapes = tuple(tables.nodes[i][n][1] for i, n in enumerate(path))
                found.append(SolvedPath(int(g), combos, shapes))
            continue

        next_nodes = tables.nodes[layer + 1]
        downstream = tables.cost_to_go[layer + 1]
        for b, w in enumerate(tables.weights[layer][node]):
            f = g + w + downstream[b]
            if math.isinf(f):
                continue
            heapq.heappush(heap, (f, combos + (next_nodes[b][0],), path + (b,), g + w))

    return found


def solve(
    layers: Sequence[Sequence[BeatCombo]],
    cost_model: ArrangementCostModel,
    num_paths: int,
    max_workers: int | None = None,
) -> list[SolvedPath]:
    """Find the *num_paths* lowest-cost combo sequences through the layers.

    Args:
        layers: Candidate combos per playable beat, in beat order.  Every
            layer must be non-empty (validated upstream).
        cost_model: Supplies hand states, intrinsic and transition costs.
        num_paths: How many distinct combo sequences to return at most.
        max_workers: Thread-pool size for the per-start searches.
            ``1`` searches sequentially; ``None`` uses the executor default.

    Returns:
        Up to *num_paths* :class:`SolvedPath` objects sorted by
        ``(cost, indices)``.  Fewer (possibly none) when fewer playable
        routes exist.  With no layers, a single empty path of cost 0.
    """
    if num_paths < 1:
        return []
    if not layers:
        return [SolvedPath(0, ())]
    if any(not layer for layer in layers):
        raise ValueError("Every layer needs at least one candidate combo.")

    log.debug("search_start", layers=len(layers), starts=len(layers[0]), num_paths=num_paths)
    tables = _build_tables(layers, cost_model)
    starts = range(len(layers[0]))

    if max_workers == 1:
        per_start = [_search_from(s, tables, num_paths) for s in starts]
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            per_start = list(pool.map(lambda s: _search_from(s, tables, num_paths), starts))

    # ── Deterministic merge ───────────────────────────────────
    # each start owns the sequences beginning with its combo, so none repeat
    merged = [path for paths in per_start for path in paths]
    ranked = sorted(merged, key=lambda p: (p.cost, p.indices))[:num_paths]
    log.debug("search_done", found=len(ranked), best_cost=ranked[0].cost if ranked else None)
    return ranked
