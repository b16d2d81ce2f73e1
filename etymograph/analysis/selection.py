"""
Selection of a display subset from a ranked connection pool.

Selection is randomized on purpose so that repeated expansions of the same
word show different neighbors, while a few reconstructed roots are always
included when available.
"""

import random
from typing import List, Optional

from etymograph.analysis.validator import is_reconstructed_target
from etymograph.config import SELECTOR_CONFIG
from etymograph.models import Connection


def is_root_connection(connection: Connection) -> bool:
    return is_reconstructed_target(connection.word.text, connection.word.language)


def select_connections(
    pool: List[Connection],
    max_count: int,
    prioritize_roots: bool = True,
    rng: Optional[random.Random] = None
) -> List[Connection]:
    """
    Choose up to ``max_count`` connections from a ranked pool.

    When the pool fits, it is returned whole and in rank order. Otherwise up
    to three reconstructed-root connections are drawn at random, then the
    remaining slots are filled at random from the other connections.

    Args:
        pool: Ranked connections
        max_count: Maximum number of connections to return
        prioritize_roots: Reserve slots for reconstructed roots
        rng: Random source (injectable for tests)

    Returns:
        Exactly min(max_count, len(pool)) connections
    """
    if max_count <= 0:
        return []
    if len(pool) <= max_count:
        return list(pool)

    rng = rng or random.Random()

    if prioritize_roots:
        roots = [connection for connection in pool if is_root_connection(connection)]
        others = [connection for connection in pool if not is_root_connection(connection)]
    else:
        roots, others = [], list(pool)

    rng.shuffle(roots)
    reserved = min(len(roots), SELECTOR_CONFIG["reserved_root_slots"], max_count)
    selected = roots[:reserved]

    rng.shuffle(others)
    selected.extend(others[:max_count - len(selected)])

    # Not enough non-root connections: top up with the remaining roots
    if len(selected) < max_count:
        selected.extend(roots[reserved:reserved + max_count - len(selected)])

    return selected
