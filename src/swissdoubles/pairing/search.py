"""Ordered pairing search shared by team and match formation.

Both formation steps walk a ranked list and pair each unpaired item with the
nearest-ranked later item it is allowed to meet. A plain greedy walk can
paint itself into a corner: the last two items left over may be a forbidden
pair even though a repeat-free pairing of the whole list existed. The search
below keeps the greedy preference order but backtracks, so it returns the
lexicographically first repeat-free pairing when there is one.
"""

# Swiss Doubles
# Copyright (C) 2025  Swiss Doubles developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

from swissdoubles.constants import SEARCH_NODE_BUDGET, SEARCH_NODES_PER_ITEM
from swissdoubles.utils import setup_logger

logger = setup_logger(__name__)

T = TypeVar("T")


class _SearchExhausted(Exception):
    pass


def has_odd_component(items: Sequence[T], compatible: Callable[[T, T], bool]) -> bool:
    """True when some group of mutually reachable items has odd size.

    Items are linked when they are compatible. A group of odd size cannot be
    split into pairs, so no repeat-free pairing of ``items`` exists.
    """
    unseen = set(range(len(items)))
    while unseen:
        start = unseen.pop()
        stack = [start]
        size = 1
        while stack:
            current = stack.pop()
            linked = [j for j in unseen if compatible(items[current], items[j])]
            for j in linked:
                unseen.discard(j)
            stack.extend(linked)
            size += len(linked)
        if size % 2:
            return True
    return False


def find_repeat_free_pairing(
    items: Sequence[T],
    compatible: Callable[[T, T], bool],
    node_budget: Optional[int] = None,
) -> Optional[List[Tuple[T, T]]]:
    """Pair ``items`` in order without any incompatible pair.

    The first unpaired item is always paired next, trying partners nearest
    in list order first.

    Args:
        items: Items in preference order (even count)
        compatible: Returns True when two items may be paired
        node_budget: Maximum number of tentative pairs to try; scales with
            the number of items when omitted

    Returns:
        List of pairs in walk order, or None if no repeat-free pairing
        exists or the budget ran out
    """
    nodes = 0

    def has_dead_end(remaining: Sequence[T]) -> bool:
        # Somebody with no allowed partner left means this branch is lost
        for idx, item in enumerate(remaining):
            if not any(
                compatible(item, other)
                for jdx, other in enumerate(remaining)
                if jdx != idx
            ):
                return True
        return False

    def extend(remaining: List[T]) -> Optional[List[Tuple[T, T]]]:
        nonlocal nodes
        if not remaining:
            return []
        first, rest = remaining[0], remaining[1:]
        for idx, candidate in enumerate(rest):
            if not compatible(first, candidate):
                continue
            nodes += 1
            if nodes > node_budget:
                raise _SearchExhausted()
            leftover = rest[:idx] + rest[idx + 1 :]
            if leftover and has_dead_end(leftover):
                continue
            tail = extend(leftover)
            if tail is not None:
                return [(first, candidate)] + tail
        return None

    if len(items) % 2:
        raise ValueError(f"Cannot pair an odd number of items ({len(items)})")
    if node_budget is None:
        node_budget = min(SEARCH_NODE_BUDGET, SEARCH_NODES_PER_ITEM * len(items))
    if has_odd_component(items, compatible):
        logger.debug("No repeat-free pairing: an odd group of compatible items")
        return None

    try:
        return extend(list(items))
    except _SearchExhausted:
        logger.warning(
            f"Repeat-free pairing search gave up after {node_budget} candidates"
        )
        return None


def greedy_pairing(
    items: Sequence[T], compatible: Callable[[T, T], bool]
) -> List[Tuple[T, T, bool]]:
    """Pair ``items`` greedily, relaxing the constraint when stuck.

    Each unpaired item takes the nearest later compatible item; if none is
    left it takes the nearest later item regardless.

    Returns:
        List of ``(first, second, relaxed)`` triples in walk order
    """
    if len(items) % 2:
        raise ValueError(f"Cannot pair an odd number of items ({len(items)})")

    pairs: List[Tuple[T, T, bool]] = []
    used = [False] * len(items)
    for i, first in enumerate(items):
        if used[i]:
            continue
        open_slots = [j for j in range(i + 1, len(items)) if not used[j]]
        chosen = next((j for j in open_slots if compatible(first, items[j])), None)
        relaxed = chosen is None
        if relaxed:
            chosen = open_slots[0]
        used[i] = used[chosen] = True
        pairs.append((first, items[chosen], relaxed))
    return pairs


def skipped_over(items: Sequence[T], pairs: Sequence[Tuple[T, T]]) -> List[List[T]]:
    """For each pair, the still-unpaired items ranked between its two members.

    ``pairs`` must be in walk order, as returned by the functions above.
    """
    remaining = list(items)
    skipped = []
    for first, second in pairs:
        start = next(i for i, item in enumerate(remaining) if item is first)
        end = next(i for i, item in enumerate(remaining) if item is second)
        skipped.append(remaining[start + 1 : end])
        remaining = [
            item for item in remaining if item is not first and item is not second
        ]
    return skipped
