"""
environments/resource_grid.py

The ground the foragers walk on.

Every cell holds exactly one thing: nothing, a tree, a rock, or food.
Trees and food are eaten and come back. Rocks stay.

Inspired by:
- Sugarscape resource lattices
- Cellular automata spaces
"""

from __future__ import annotations
from enum import IntEnum
from typing import Dict, Optional
import logging

import numpy as np

logger = logging.getLogger(__name__)


class CellKind(IntEnum):
    """What a grid cell holds."""
    EMPTY = 0
    TREE = 1
    ROCK = 2
    FOOD = 3


# Reading for a neighbor outside the grid; never a valid CellKind code
WALL_SENTINEL = -1

# Attempts allowed per requested placement before scatter gives up
SCATTER_ATTEMPTS_PER_CELL = 10

CONSUMABLE = (CellKind.TREE, CellKind.FOOD)


class ResourceGrid:
    """
    Square grid of resource cells.

    Cells are stored row-major as grid[y, x]. Dimensions are fixed for the
    life of the instance; `reset` reallocates.

    Owns the resource lifecycle:
    - scatter: place resources on empty cells
    - consume: take a tree or food, leaving the cell empty
    """

    def __init__(self, size: int, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.size = 0
        self._cells = np.zeros((0, 0), dtype=np.int8)
        self.reset(size)

    def reset(self, size: int) -> None:
        """Allocate a size x size grid with every cell empty."""
        if size <= 0:
            raise ValueError(f"Grid size must be positive, got {size}")
        self.size = int(size)
        self._cells = np.full((self.size, self.size), CellKind.EMPTY, dtype=np.int8)

    # ==================== Access ====================

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def at(self, x: int, y: int) -> CellKind:
        """
        Kind of the cell at (x, y).

        Out-of-range coordinates are a caller error; negative indices are
        not allowed to wrap around.
        """
        if not self.in_bounds(x, y):
            raise IndexError(f"Cell ({x}, {y}) outside {self.size}x{self.size} grid")
        return CellKind(int(self._cells[y, x]))

    @property
    def cells(self) -> np.ndarray:
        """Copy of the cell-kind matrix, indexed [y, x]."""
        return self._cells.copy()

    # ==================== Lifecycle ====================

    def scatter(self, kind: CellKind, count: int) -> int:
        """
        Place `count` cells of `kind` on distinct empty cells.

        Cells are drawn uniformly at random. The search stops after
        SCATTER_ATTEMPTS_PER_CELL * count draws, so a crowded grid
        receives fewer resources instead of stalling.

        Returns the number of cells actually placed.
        """
        kind = CellKind(kind)
        if count <= 0:
            return 0

        placed = 0
        attempts = 0
        budget = SCATTER_ATTEMPTS_PER_CELL * count

        while placed < count and attempts < budget:
            attempts += 1
            x, y = self.rng.integers(0, self.size, size=2)
            if self._cells[y, x] == CellKind.EMPTY:
                self._cells[y, x] = kind
                placed += 1

        if placed < count:
            logger.debug(
                f"Scatter placed {placed}/{count} {kind.name} cells "
                f"after {attempts} attempts"
            )
        return placed

    def consume(self, x: int, y: int) -> Optional[CellKind]:
        """
        Take the resource at (x, y).

        Trees and food are removed and their kind returned.
        Rocks and empty cells are left alone and yield None.
        """
        kind = self.at(x, y)
        if kind in CONSUMABLE:
            self._cells[y, x] = CellKind.EMPTY
            return kind
        return None

    def place(self, x: int, y: int, kind: CellKind) -> None:
        """Set a single cell directly (world setup and scenarios)."""
        if not self.in_bounds(x, y):
            raise IndexError(f"Cell ({x}, {y}) outside {self.size}x{self.size} grid")
        self._cells[y, x] = CellKind(kind)

    # ==================== Queries ====================

    def count(self, kind: CellKind) -> int:
        return int(np.count_nonzero(self._cells == CellKind(kind)))

    def counts(self) -> Dict[str, int]:
        """Number of cells of each kind, keyed by lowercase kind name."""
        return {kind.name.lower(): self.count(kind) for kind in CellKind}

    def empty_cells(self) -> np.ndarray:
        """(x, y) coordinates of every empty cell, shape (n, 2)."""
        ys, xs = np.nonzero(self._cells == CellKind.EMPTY)
        return np.stack([xs, ys], axis=1)

    def __repr__(self) -> str:
        counts = self.counts()
        return (
            f"ResourceGrid(size={self.size}, "
            f"trees={counts['tree']}, rocks={counts['rock']}, food={counts['food']})"
        )
