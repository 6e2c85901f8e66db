"""Crossing reduction within generations (median/barycenter sweeps)."""

from bisect import bisect_right, insort
from collections import defaultdict
from itertools import groupby
import logging
from operator import itemgetter
from statistics import mean, median

import networkx as nx

from models import Bend

logger = logging.getLogger(__name__)

# A person id, or the slot a long lineage line takes in an intermediate rank
Slot = str | Bend


def lineage_chain(parent: str, child: str, ranks: dict[str, int]) -> list[Slot]:
    """Slots a ranked lineage line passes through, parent first and child last."""
    return [parent, *(Bend(parent, child, r) for r in range(ranks[parent] + 1, ranks[child])), child]


def count_crossings(layers: list[list[Slot]], edges: list[tuple[str, str]], ranks: dict[str, int]) -> int:
    """
    Count pairs of segments between adjacent ranks whose endpoints interleave.

    An edge spanning several ranks is followed through its Bend slots, which
    must be present in `layers`. Edges that do not point downwards are not
    counted.
    """
    position = {nid: i for layer in layers for i, nid in enumerate(layer)}

    segments_by_rank: dict[int, list[tuple[int, int]]] = defaultdict(list)
    for u, v in edges:
        if ranks[v] <= ranks[u]:
            continue
        chain = lineage_chain(u, v, ranks)
        for r, (a, b) in enumerate(zip(chain, chain[1:]), start=ranks[u]):
            segments_by_rank[r].append((position[a], position[b]))

    return sum(_count_inversions(segments) for segments in segments_by_rank.values())


def _count_inversions(segments: list[tuple[int, int]]) -> int:
    # Two segments cross when one starts strictly left of the other and ends strictly right.
    seen: list[int] = []
    crossings = 0
    for _, group in groupby(sorted(segments), key=itemgetter(0)):
        lowers = [lower for _, lower in group]
        for lower in lowers:
            crossings += len(seen) - bisect_right(seen, lower)
        for lower in lowers:
            insort(seen, lower)
    return crossings


def _sort_id(nid: Slot) -> tuple:
    if isinstance(nid, Bend):
        return (nid.parent, nid.child, nid.rank)
    return (nid,)


def _centered_positions(layer: list[Slot]) -> dict[Slot, float]:
    # Proportional to the final x coordinate, so comparable across ranks
    offset = (len(layer) - 1) / 2
    return {nid: i - offset for i, nid in enumerate(layer)}


def _sweep(
    layers: list[list[Slot]],
    neighbours: dict[Slot, list[Slot]],
    rank_indices: range,
    position: dict[Slot, float],
) -> None:
    """Reorder each rank in `rank_indices` by the median position of its fixed neighbours."""
    for r in rank_indices:
        current = _centered_positions(layers[r])

        def key(nid: Slot) -> tuple:
            values = sorted(position[n] for n in neighbours[nid])
            if not values:
                return (current[nid], current[nid], _sort_id(nid))
            return (median(values), mean(values), _sort_id(nid))

        layers[r] = sorted(layers[r], key=key)
        position.update(_centered_positions(layers[r]))


def order_ranks(
    G: nx.DiGraph,
    ranks: dict[str, int],
    affinity: list[tuple[str, str]] | None = None,
    excluded: list[tuple[str, str]] | None = None,
    passes: int = 8,
    tolerance: int = 0,
) -> list[list[Slot]]:
    """
    Order the people of every generation to reduce crossing lineage lines.

    A lineage line spanning several generations gets a Bend slot in every
    rank it passes through, so it is ordered and counted like a person there.
    Starts from slots sorted by id within each rank, then runs up to `passes`
    rounds of a downward sweep (keyed by parents) followed by an upward sweep
    (keyed by children), keeping the latest ordering with the fewest
    crossings. Finally spouses of the same generation are pulled next to each
    other when that costs at most `tolerance` extra crossings.

    Args:
        G: Parent->child graph
        ranks: Generation of every person
        affinity: Spouse pairs
        excluded: Edges left out of ranking; ignored here too
        passes: Maximum number of down+up rounds
        tolerance: Extra crossings allowed for the spouse pass

    Returns:
        One list per rank, left to right: person ids and the Bend slots of
        long lineage lines crossing that rank
    """
    skip = set(excluded or ())
    edges = sorted(e for e in G.edges if e not in skip)

    slot_rank: dict[Slot, int] = dict(ranks)
    parents: dict[Slot, list[Slot]] = {nid: [] for nid in ranks}
    children: dict[Slot, list[Slot]] = {nid: [] for nid in ranks}
    family: dict[Slot, tuple[str, ...]] = {nid: () for nid in ranks}
    for u, v in edges:
        family[v] += (u,)
        chain = lineage_chain(u, v, ranks)
        for a, b in zip(chain, chain[1:]):
            children.setdefault(a, []).append(b)
            parents.setdefault(b, []).append(a)
        for bend in chain[1:-1]:
            slot_rank[bend] = bend.rank

    depth = max(ranks.values()) + 1 if ranks else 0
    layers: list[list[Slot]] = [[] for _ in range(depth)]
    for nid in sorted(slot_rank, key=_sort_id):
        layers[slot_rank[nid]].append(nid)

    best = [list(layer) for layer in layers]
    best_crossings = count_crossings(best, edges, ranks)

    for i in range(passes):
        if best_crossings == 0:
            break
        before = [list(layer) for layer in layers]
        position: dict[Slot, float] = {}
        for layer in layers:
            position.update(_centered_positions(layer))

        _sweep(layers, parents, range(1, depth), position)
        _sweep(layers, children, range(depth - 2, -1, -1), position)

        crossings = count_crossings(layers, edges, ranks)
        logger.debug("Ordering pass %d: %d crossings", i + 1, crossings)
        # Ties go to the later sweep
        if crossings <= best_crossings:
            best = [list(layer) for layer in layers]
            best_crossings = crossings
        if layers == before:
            break

    return _pull_spouses_together(best, affinity or [], ranks, edges, family, best_crossings + tolerance)


def _slide_toward(layer: list[Slot], mover: str, anchor: str, family: dict[Slot, tuple[str, ...]]) -> list[Slot]:
    """Move `mover` to the end of its run of full siblings that faces `anchor`."""
    if not family[mover]:
        return list(layer)
    i, j = layer.index(mover), layer.index(anchor)
    step = 1 if j > i else -1
    k = i
    while layer[k + step] != anchor and family.get(layer[k + step]) == family[mover]:
        k += step
    moved = list(layer)
    moved.pop(i)
    moved.insert(k, mover)
    return moved


def _pull_spouses_together(
    layers: list[list[Slot]],
    affinity: list[tuple[str, str]],
    ranks: dict[str, int],
    edges: list[tuple[str, str]],
    family: dict[Slot, tuple[str, ...]],
    limit: int,
) -> list[list[Slot]]:
    """Move same-rank spouses next to each other without exceeding `limit` crossings."""
    pairs = [(a, b) for a, b in affinity if ranks[a] == ranks[b]]
    if not pairs:
        return layers

    def adjacent_pairs(candidate: list[list[Slot]]) -> int:
        pos = {nid: i for layer in candidate for i, nid in enumerate(layer)}
        return sum(1 for a, b in pairs if abs(pos[a] - pos[b]) == 1)

    satisfied = adjacent_pairs(layers)

    for a, b in pairs:
        r = ranks[a]
        layer = layers[r]
        if abs(layer.index(a) - layer.index(b)) == 1:
            continue

        candidates = []
        for mover, anchor in ((b, a), (a, b)):
            for side in (0, 1):  # left of anchor, right of anchor
                moved = [nid for nid in layer if nid != mover]
                moved.insert(moved.index(anchor) + side, mover)
                candidates.append(moved)
        # Siblings can swap freely above, so slide one or both spouses within their sibling run
        slid = _slide_toward(layer, a, b, family)
        candidates += [slid, _slide_toward(layer, b, a, family), _slide_toward(slid, b, a, family)]

        chosen = None
        for moved in candidates:
            trial = layers[:r] + [moved] + layers[r + 1 :]
            crossings = count_crossings(trial, edges, ranks)
            score = adjacent_pairs(trial)
            if crossings > limit or score <= satisfied:
                continue
            if chosen is None or (crossings, -score) < chosen[0]:
                chosen = ((crossings, -score), trial, score)

        if chosen is not None:
            logger.debug("Placed spouses %s and %s side by side", a, b)
            _, layers, satisfied = chosen

    return layers
