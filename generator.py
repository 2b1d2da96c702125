#!/usr/bin/env python3

import argparse
import json
import math
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Protocol, Sequence, Set, Tuple

JSON_PATH = Path("maze_layout.json")

# 迷宫尺寸范围，输入无效时使用默认值
MIN_SIZE = 1
MAX_SIZE = 100
DEFAULT_SIZE = 10

EDGES = ("top", "bottom", "left", "right")

# 候选方向的固定顺序及坐标偏移 (dx, dy)，y 轴向下
DIRECTION_OFFSETS: List[Tuple[str, Tuple[int, int]]] = [
    ("right", (1, 0)),
    ("left", (-1, 0)),
    ("bottom", (0, 1)),
    ("top", (0, -1)),
]

OPPOSITE_EDGES: Dict[str, str] = {
    "top": "bottom",
    "bottom": "top",
    "left": "right",
    "right": "left",
}

Cell = Tuple[int, int]
RandomSource = Callable[[], float]


class OutOfBoundsAccess(IndexError):
    """访问了网格范围之外的格子"""


class GridRenderer(Protocol):
    """迷宫显示层需要提供的两个操作"""

    def initialize_grid(self, size: int) -> None:
        """清空旧状态并创建 size x size 的网格，每个格子四面墙都存在"""

    def remove_wall(self, x: int, y: int, edge: str) -> None:
        """移除 (x, y) 格子的某一面墙，重复调用无副作用"""


@dataclass
class MazeConfig:
    """迷宫生成配置"""
    size: int = DEFAULT_SIZE          # 迷宫边长（格子数）
    seed: Optional[int] = None        # 随机种子，None 表示每次不同
    output: Path = JSON_PATH          # 布局导出路径


@dataclass(frozen=True)
class WallRemoval:
    """一次拆墙操作"""
    x: int
    y: int
    edge: str

    @property
    def cell(self) -> Cell:
        return (self.x, self.y)


@dataclass
class MazeResult:
    """一次生成的完整结果"""
    size: int
    start: Cell
    removals: List[WallRemoval] = field(default_factory=list)
    # 内部通道，每项为 (当前格子, 相邻格子)
    passages: List[Tuple[Cell, Cell]] = field(default_factory=list)
    visit_order: List[Cell] = field(default_factory=list)
    entrance: Optional[Cell] = None
    exit: Optional[Cell] = None
    iterations: int = 0


def parse_size(raw, default: int = DEFAULT_SIZE) -> int:
    """将用户输入转换为合法的迷宫尺寸。

    非数字、空值或 NaN 返回默认值；其余数值截断到 [MIN_SIZE, MAX_SIZE]
    后取整。该函数不会抛出异常。

    Args:
        raw: 原始输入（字符串、数字或 None）
        default: 输入无效时使用的尺寸

    Returns:
        合法的迷宫尺寸
    """
    if isinstance(raw, bool):
        return default
    if isinstance(raw, int):
        # 超大整数无法转换为 float，直接截断
        return max(MIN_SIZE, min(raw, MAX_SIZE))
    try:
        value = float(raw)
    except (TypeError, ValueError, OverflowError):
        return default
    if math.isnan(value):
        return default
    value = max(MIN_SIZE, min(value, MAX_SIZE))
    return int(value)


class MazeGenerator:
    """随机深度优先回溯迷宫生成器。

    从随机格子出发，每一步在未访问的相邻格子中随机选一个前进并拆掉两者
    之间的墙；无路可走时把当前格子移入关闭集合并回退。栈清空时所有格子
    都已访问，拆出的通道构成整个网格的生成树。
    """

    def __init__(self, size: int, rng: Optional[RandomSource] = None,
                 seed: Optional[int] = None):
        if not isinstance(size, int) or isinstance(size, bool):
            raise ValueError(f"迷宫尺寸必须是整数，收到 {size!r}")
        if size < MIN_SIZE:
            raise ValueError(f"迷宫尺寸必须不小于 {MIN_SIZE}，收到 {size}")
        self.size = size
        self.rng: RandomSource = rng if rng is not None else random.Random(seed).random

    def is_in_bounds(self, cell: Cell) -> bool:
        x, y = cell
        return 0 <= x < self.size and 0 <= y < self.size

    def cell_key(self, cell: Cell) -> int:
        """把坐标编码为唯一整数，用于集合查找"""
        x, y = cell
        return y * self.size + x

    def random_index(self, count: int) -> int:
        """在 [0, count) 中均匀抽取一个下标"""
        return min(int(self.rng() * count), count - 1)

    def random_cell(self) -> Cell:
        x = self.random_index(self.size)
        y = self.random_index(self.size)
        return (x, y)

    def find_neighbors(self, cell: Cell, visited: Set[int],
                       closed: Set[int]) -> List[Tuple[str, Cell]]:
        """返回可以前进的 (方向, 格子) 列表。

        排除网格外、已关闭以及仍在访问栈中的格子。
        """
        x, y = cell
        candidates = [(direction, (x + dx, y + dy))
                      for direction, (dx, dy) in DIRECTION_OFFSETS]
        return [
            (direction, neighbor) for direction, neighbor in candidates
            if self.is_in_bounds(neighbor)
            and self.cell_key(neighbor) not in closed
            and self.cell_key(neighbor) not in visited
        ]

    def generate(self) -> MazeResult:
        """运行回溯算法，返回拆墙序列及统计信息"""
        start = self.random_cell()
        result = MazeResult(size=self.size, start=start)

        visited_stack: List[Cell] = [start]
        visited: Set[int] = {self.cell_key(start)}
        closed: Set[int] = set()
        result.visit_order.append(start)

        while visited_stack:
            result.iterations += 1
            cell = visited_stack[-1]
            neighbors = self.find_neighbors(cell, visited, closed)

            if not neighbors:
                # 死路，回退
                visited_stack.pop()
                visited.discard(self.cell_key(cell))
                closed.add(self.cell_key(cell))
                continue

            direction, next_cell = neighbors[self.random_index(len(neighbors))]
            assert self.is_in_bounds(next_cell), f"{next_cell} 超出网格范围"

            visited_stack.append(next_cell)
            visited.add(self.cell_key(next_cell))
            result.visit_order.append(next_cell)

            # 每个格子各自保存四面墙，通道两侧都要拆
            result.removals.append(WallRemoval(cell[0], cell[1], direction))
            result.removals.append(
                WallRemoval(next_cell[0], next_cell[1], OPPOSITE_EDGES[direction]))
            result.passages.append((cell, next_cell))

        # 入口在最左列，出口在最右列，行号各自随机
        result.entrance = (0, self.random_index(self.size))
        result.exit = (self.size - 1, self.random_index(self.size))
        result.removals.append(WallRemoval(result.entrance[0], result.entrance[1], "left"))
        result.removals.append(WallRemoval(result.exit[0], result.exit[1], "right"))
        return result

    @staticmethod
    def apply(result: MazeResult, renderer: GridRenderer) -> None:
        """重置显示网格并逐条执行拆墙操作"""
        renderer.initialize_grid(result.size)
        for removal in result.removals:
            renderer.remove_wall(removal.x, removal.y, removal.edge)


def generate(size: int, rng: Optional[RandomSource] = None) -> MazeResult:
    """生成 size x size 迷宫的便捷函数"""
    return MazeGenerator(size, rng).generate()


def build_maze(renderer: GridRenderer, raw_size,
               rng: Optional[RandomSource] = None) -> MazeResult:
    """解析尺寸输入、生成迷宫，再重置 renderer 并逐条拆墙。

    Args:
        renderer: 实现 initialize_grid / remove_wall 的显示对象
        raw_size: 用户输入的尺寸，无效时使用默认值
        rng: 返回 [0, 1) 浮点数的随机源

    Returns:
        本次生成的结果
    """
    size = parse_size(raw_size)
    result = generate(size, rng)
    MazeGenerator.apply(result, renderer)
    return result


def log_summary(result: MazeResult) -> None:
    """打印生成结果摘要"""
    print(f"\n=== 迷宫生成完成 ===")
    print(f"迷宫尺寸: {result.size} x {result.size}")
    print(f"起始格子: {result.start}")
    print(f"拆除通道: {len(result.passages)} 条")
    print(f"循环次数: {result.iterations}")
    print(f"入口: {result.entrance} (left)")
    print(f"出口: {result.exit} (right)")


def export_maze_layout(result: MazeResult, path: Path = JSON_PATH) -> None:
    """将迷宫布局导出为JSON文件"""
    layout_data = {
        "size": result.size,
        "start": list(result.start),
        "entrance": list(result.entrance) if result.entrance else None,
        "exit": list(result.exit) if result.exit else None,
        "iterations": result.iterations,
        "removals": [[r.x, r.y, r.edge] for r in result.removals],
    }

    # 保存到文件（不换行）
    with open(path, "w", encoding="utf8") as f:
        json.dump(layout_data, f, separators=(',', ':'))

    print(f"迷宫布局已导出到 {path}，共 {len(result.removals)} 次拆墙")


def load_maze_layout(path: Path = JSON_PATH) -> Dict:
    """读取 export_maze_layout 写出的布局。

    文件结构不符合 {"size": 正整数, "removals": [[x, y, edge], ...]}
    时抛出 ValueError。
    """
    with open(path, "r", encoding="utf8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"布局必须是JSON对象，实际为 {type(data).__name__}")
    size = data.get("size")
    if not isinstance(size, int) or isinstance(size, bool) or size < MIN_SIZE:
        raise ValueError(f"布局中的迷宫尺寸无效: {size!r}")
    removals = data.get("removals")
    if not isinstance(removals, list):
        raise ValueError("布局缺少 removals 列表")
    for removal in removals:
        if not isinstance(removal, list) or len(removal) != 3:
            raise ValueError(f"无效的拆墙记录: {removal!r}")
        x, y, edge = removal
        if not isinstance(x, int) or not isinstance(y, int):
            raise ValueError(f"拆墙坐标必须是整数: {removal!r}")
        if edge not in EDGES:
            raise ValueError(f"布局中包含未知的墙: {edge!r}")
    return data


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a random maze")
    parser.add_argument("size", nargs="?", default=str(DEFAULT_SIZE),
                        help=f"Maze size ({MIN_SIZE}-{MAX_SIZE}, default {DEFAULT_SIZE})")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--output", type=Path, default=JSON_PATH,
                        help="Path of the exported JSON layout")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    config = MazeConfig(size=parse_size(args.size), seed=args.seed, output=args.output)

    print("=== 迷宫生成器 ===")
    try:
        requested = float(args.size)
    except (TypeError, ValueError, OverflowError):
        requested = None
    if requested != config.size:
        print(f"输入尺寸 {args.size!r} 已调整为 {config.size}")
    print(f"迷宫尺寸: {config.size}, 随机种子: {config.seed}")

    try:
        result = MazeGenerator(config.size, seed=config.seed).generate()
        log_summary(result)
        export_maze_layout(result, config.output)
    except OSError as e:
        print(f"写入布局文件失败: {e}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
