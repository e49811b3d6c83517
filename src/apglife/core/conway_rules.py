"""
Conway's Game of Life Rules

Cell states and the B3/S23 transition rule. No grid access here, just the
mapping from (current state, live neighbor count) to the next state.
"""

from enum import IntEnum
from typing import Iterable, Set


class CellState(IntEnum):
    """Two-valued Life cell state."""
    DEAD = 0
    ALIVE = 1


# Standard Conway rules
SURVIVAL_SET: Set[int] = {2, 3}  # Live cells survive with 2-3 neighbors
BIRTH_SET: Set[int] = {3}        # Dead cells born with exactly 3 neighbors


def next_state(state: CellState, live_neighbors: int) -> CellState:
    """Apply Conway's rules to determine next cell state.

    Fewer than 2 or more than 3 live neighbors kill the cell, exactly 3
    bring a dead cell to life, anything else leaves the state unchanged.

    Args:
        state: Current cell state
        live_neighbors: Number of live neighbors (0-8)

    Returns:
        Next cell state
    """
    if live_neighbors < min(SURVIVAL_SET) or live_neighbors > max(SURVIVAL_SET):
        return CellState.DEAD
    if state == CellState.DEAD and live_neighbors in BIRTH_SET:
        return CellState.ALIVE
    return CellState(state)


def count_alive(states: Iterable[CellState]) -> int:
    """Count live cells in a sequence of states."""
    return sum(1 for state in states if state == CellState.ALIVE)


def get_rule_table() -> dict:
    """Get the complete rule table.

    Returns:
        Dictionary mapping (current_state, neighbor_count) to next_state
    """
    return {(state, neighbors): next_state(state, neighbors)
            for state in CellState
            for neighbors in range(9)}
