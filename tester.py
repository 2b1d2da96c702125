#!/usr/bin/env python3
"""Simple validator for the maze generator.

The script runs :class:`generator.MazeGenerator` with the provided
parameters and performs a series of sanity checks on the result:

* Exactly ``size**2 - 1`` passages are carved and they connect every cell.
* Every passage removes both walls of the shared edge.
* One left wall on column 0 and one right wall on the last column are open.
* Every cell is visited exactly once.
* The main loop ran at most ``2 * size**2`` times.
"""

from __future__ import annotations

import argparse
from collections import deque
from typing import Sequence

import generator
from render_maze import WallGrid


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Validate generated maze")
    parser.add_argument("size", help="Maze size (clamped to 1-100)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    return parser.parse_args(argv)


def reachable_cells(result: generator.MazeResult) -> set:
    adjacency: dict = {}
    for a, b in result.passages:
        adjacency.setdefault(a, []).append(b)
        adjacency.setdefault(b, []).append(a)

    seen = {result.start}
    queue = deque([result.start])
    while queue:
        cell = queue.popleft()
        for neighbor in adjacency.get(cell, []):
            if neighbor not in seen:
                seen.add(neighbor)
                queue.append(neighbor)
    return seen


def check_maze(result: generator.MazeResult) -> None:
    """Assert the structural properties of a generated maze."""
    size = result.size
    cell_count = size * size

    # n-1 edges that reach all n cells form a spanning tree
    assert len(result.passages) == cell_count - 1, (
        f"expected {cell_count - 1} passages, got {len(result.passages)}"
    )
    assert len(reachable_cells(result)) == cell_count, "maze is not connected"

    carves = result.removals[:-2]
    assert len(carves) == 2 * len(result.passages)
    for first, second in zip(carves[::2], carves[1::2]):
        dx, dy = dict(generator.DIRECTION_OFFSETS)[first.edge]
        assert second.cell == (first.x + dx, first.y + dy), (
            f"{first} and {second} are not adjacent"
        )
        assert second.edge == generator.OPPOSITE_EDGES[first.edge], (
            f"{first} is not paired with its opposite wall"
        )

    grid = WallGrid()
    generator.MazeGenerator.apply(result, grid)
    left_open = [y for y in range(size) if not grid.has_wall(0, y, "left")]
    right_open = [y for y in range(size) if not grid.has_wall(size - 1, y, "right")]
    assert left_open == [result.entrance[1]], f"left openings: {left_open}"
    assert right_open == [result.exit[1]], f"right openings: {right_open}"
    for x in range(size):
        assert grid.has_wall(x, 0, "top") and grid.has_wall(x, size - 1, "bottom")

    assert len(result.visit_order) == cell_count
    assert len(set(result.visit_order)) == cell_count, "a cell was visited twice"
    assert result.iterations <= 2 * cell_count, (
        f"{result.iterations} iterations exceeds bound {2 * cell_count}"
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    size = generator.parse_size(args.size)
    result = generator.MazeGenerator(size, seed=args.seed).generate()

    try:
        check_maze(result)
    except AssertionError as e:
        print(f"Check failed: {e}")
        return 1

    print("All checks passed. Carved", len(result.passages), "passages in",
          result.iterations, "iterations.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
