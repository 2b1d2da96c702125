from pathlib import Path
import random
import sys

import pytest

# Ensure the project root is on the Python path
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from MazeGeneration import MazeGenerator, generate
from generator import OPPOSITE_EDGES, WallRemoval
from tester import check_maze


def fixed_rng(values):
    """Return a random source replaying ``values`` then 0.0 forever."""
    draws = iter(values)
    return lambda: next(draws, 0.0)


def test_two_by_two_example():
    """Start at (0,0) and go right first; the walk must still cover all cells."""
    result = generate(2, fixed_rng([0.0, 0.0, 0.0]))

    assert result.start == (0, 0)
    assert result.removals[:2] == [WallRemoval(0, 0, "right"), WallRemoval(1, 0, "left")]
    assert result.removals == [
        WallRemoval(0, 0, "right"), WallRemoval(1, 0, "left"),
        WallRemoval(1, 0, "bottom"), WallRemoval(1, 1, "top"),
        WallRemoval(1, 1, "left"), WallRemoval(0, 1, "right"),
        WallRemoval(0, 0, "left"), WallRemoval(1, 0, "right"),
    ]
    assert len(result.passages) == 3
    assert result.visit_order == [(0, 0), (1, 0), (1, 1), (0, 1)]
    assert result.iterations == 7
    check_maze(result)


def test_direction_draw_is_uniform_by_index():
    # (0,0) in a 2x2 grid has candidates [right, bottom]; a high draw picks the last
    result = generate(2, fixed_rng([0.0, 0.0, 0.99]))
    assert result.removals[:2] == [WallRemoval(0, 0, "bottom"), WallRemoval(0, 1, "top")]


def test_single_cell():
    result = generate(1, fixed_rng([]))

    assert result.passages == []
    assert result.removals == [WallRemoval(0, 0, "left"), WallRemoval(0, 0, "right")]
    assert result.entrance == result.exit == (0, 0)
    assert result.iterations == 1
    check_maze(result)


@pytest.mark.parametrize("size", [1, 2, 3, 5, 8, 13, 21])
@pytest.mark.parametrize("seed", [0, 1, 42])
def test_spanning_tree(size, seed):
    result = MazeGenerator(size, seed=seed).generate()
    check_maze(result)
    assert result.iterations == 2 * size * size - 1


def test_largest_maze():
    check_maze(MazeGenerator(100, seed=7).generate())


class RecordingGenerator(MazeGenerator):
    """Snapshot the visited and closed sets every time neighbors are looked up."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.snapshots = []

    def find_neighbors(self, cell, visited, closed):
        neighbors = super().find_neighbors(cell, visited, closed)
        self.snapshots.append((cell, set(visited), set(closed), neighbors))
        return neighbors


@pytest.mark.parametrize("size, seed", [(1, 0), (4, 5), (9, 17)])
def test_visited_and_closed_stay_disjoint(size, seed):
    mg = RecordingGenerator(size, seed=seed)
    result = mg.generate()

    previous_closed = set()
    for cell, visited, closed, neighbors in mg.snapshots:
        assert not visited & closed
        # the current cell is on the stack, never closed
        assert mg.cell_key(cell) in visited
        # closed only grows
        assert previous_closed <= closed
        assert len(closed - previous_closed) <= 1
        for _, neighbor in neighbors:
            assert mg.cell_key(neighbor) not in closed
            assert mg.cell_key(neighbor) not in visited
        previous_closed = closed

    assert len(mg.snapshots) == result.iterations


def test_cells_move_unvisited_visited_closed_once():
    mg = RecordingGenerator(6, seed=8)
    result = mg.generate()

    push_keys = [mg.cell_key(c) for c in result.visit_order]
    assert len(set(push_keys)) == 36

    closed_order = []
    seen_closed = set()
    for _, visited, closed, _ in mg.snapshots:
        touched = visited | closed
        # cells leave Unvisited strictly in push order
        assert touched == set(push_keys[:len(touched)])
        # only cells already pushed can be closed
        assert closed <= touched
        closed_order.extend(sorted(closed - seen_closed))
        seen_closed = closed

    # the start cell is closed in the final iteration, after the last lookup
    remaining = set(push_keys) - seen_closed
    assert remaining == {mg.cell_key(result.start)}
    closed_order.extend(remaining)
    assert len(closed_order) == len(set(closed_order)) == 36


def test_carves_are_paired_with_opposite_walls():
    result = MazeGenerator(6, seed=3).generate()
    carves = result.removals[:-2]
    for (a, b), first, second in zip(result.passages, carves[::2], carves[1::2]):
        assert first.cell == a and second.cell == b
        assert second.edge == OPPOSITE_EDGES[first.edge]


def test_boundary_openings():
    # start (0,0), then carving draws, then rows 0.5 -> 1 and 0.9 -> 2 of a 3x3
    values = [0.0, 0.0] + [0.0] * 8 + [0.5, 0.9]
    result = generate(3, fixed_rng(values))
    assert result.removals[-2:] == [WallRemoval(0, 1, "left"), WallRemoval(2, 2, "right")]
    assert result.entrance == (0, 1)
    assert result.exit == (2, 2)


def test_deterministic_with_same_random_source():
    first = MazeGenerator(10, random.Random(123).random).generate()
    second = MazeGenerator(10, random.Random(123).random).generate()
    assert first.removals == second.removals
    assert first.start == second.start


def test_seed_changes_layout():
    first = MazeGenerator(10, seed=1).generate()
    second = MazeGenerator(10, seed=2).generate()
    assert first.removals != second.removals


def test_random_index_stays_in_range():
    mg = MazeGenerator(4, fixed_rng([0.999999, 1.0]))
    assert mg.random_index(4) == 3
    # a source misbehaving at 1.0 is clamped to the last index
    assert mg.random_index(4) == 3


def test_find_neighbors_filters_visited_and_closed():
    mg = MazeGenerator(3)
    visited = {mg.cell_key((1, 1)), mg.cell_key((2, 1))}
    closed = {mg.cell_key((0, 1))}
    neighbors = mg.find_neighbors((1, 1), visited, closed)
    assert neighbors == [("bottom", (1, 2)), ("top", (1, 0))]


def test_find_neighbors_at_corner():
    mg = MazeGenerator(3)
    assert mg.find_neighbors((0, 0), set(), set()) == [("right", (1, 0)), ("bottom", (0, 1))]


def test_cell_key_is_unique():
    mg = MazeGenerator(5)
    keys = {mg.cell_key((x, y)) for x in range(5) for y in range(5)}
    assert keys == set(range(25))


def test_is_in_bounds():
    mg = MazeGenerator(4)
    assert mg.is_in_bounds((0, 0))
    assert mg.is_in_bounds((3, 3))
    assert not mg.is_in_bounds((4, 0))
    assert not mg.is_in_bounds((0, -1))


@pytest.mark.parametrize("size", [0, -3, 2.5, "5", True])
def test_invalid_size_rejected(size):
    with pytest.raises(ValueError):
        MazeGenerator(size)
