#!/usr/bin/env python3
"""迷宫网格的显示层。

`WallGrid` 在内存中保存每个格子的四面墙，实现生成器所需的
``initialize_grid`` / ``remove_wall`` 接口。读取 `generator.py` 导出的
JSON 文件后，可以用 ASCII 或 matplotlib 的方式绘制迷宫。
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Sequence

import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection
import numpy as np

from generator import EDGES, JSON_PATH, OutOfBoundsAccess, load_maze_layout

EDGE_INDEX = {edge: i for i, edge in enumerate(EDGES)}


class WallGrid:
    """size x size 网格，墙的状态存放在 (size, size, 4) 的布尔数组中，
    下标为 [y, x, edge]，True 表示墙存在。"""

    def __init__(self, size: Optional[int] = None):
        self.size = 0
        self.walls: Optional[np.ndarray] = None
        if size is not None:
            self.initialize_grid(size)

    def initialize_grid(self, size: int) -> None:
        # 丢弃旧网格，重新建立全部有墙的网格
        self.size = size
        self.walls = np.ones((size, size, len(EDGES)), dtype=bool)

    def _check(self, x: int, y: int, edge: str) -> None:
        if self.walls is None:
            raise RuntimeError("网格尚未初始化，请先调用 initialize_grid")
        if not (0 <= x < self.size and 0 <= y < self.size):
            raise OutOfBoundsAccess(f"格子 ({x}, {y}) 超出 {self.size}x{self.size} 网格")
        if edge not in EDGE_INDEX:
            raise ValueError(f"未知的墙: {edge!r}")

    def remove_wall(self, x: int, y: int, edge: str) -> None:
        self._check(x, y, edge)
        self.walls[y, x, EDGE_INDEX[edge]] = False

    def has_wall(self, x: int, y: int, edge: str) -> bool:
        self._check(x, y, edge)
        return bool(self.walls[y, x, EDGE_INDEX[edge]])

    def open_edges(self, x: int, y: int) -> List[str]:
        """返回 (x, y) 格子已被拆掉的墙"""
        return [edge for edge in EDGES if not self.has_wall(x, y, edge)]

    def wall_count(self) -> int:
        if self.walls is None:
            return 0
        return int(self.walls.sum())


def grid_from_layout(data: Dict) -> WallGrid:
    """根据导出的布局数据重建网格"""
    grid = WallGrid(int(data["size"]))
    for x, y, edge in data["removals"]:
        grid.remove_wall(int(x), int(y), edge)
    return grid


def _vertical_wall(grid: WallGrid, x: int, y: int) -> bool:
    """第 x 列格子左侧的竖线，x == size 时为最右侧边界"""
    if x == 0:
        return grid.has_wall(0, y, "left")
    if x == grid.size:
        return grid.has_wall(grid.size - 1, y, "right")
    return grid.has_wall(x - 1, y, "right") or grid.has_wall(x, y, "left")


def _horizontal_wall(grid: WallGrid, x: int, y: int) -> bool:
    """第 y 行格子上方的横线，y == size 时为最下方边界"""
    if y == 0:
        return grid.has_wall(x, 0, "top")
    if y == grid.size:
        return grid.has_wall(x, grid.size - 1, "bottom")
    return grid.has_wall(x, y - 1, "bottom") or grid.has_wall(x, y, "top")


def render_ascii(grid: WallGrid) -> str:
    """以 ``+---+`` 的形式绘制网格。相邻两个格子只要有一侧的墙还在就画出来。"""
    lines = []
    for y in range(grid.size + 1):
        row = "+"
        for x in range(grid.size):
            row += ("---" if _horizontal_wall(grid, x, y) else "   ") + "+"
        lines.append(row)
        if y == grid.size:
            break
        row = ""
        for x in range(grid.size + 1):
            row += "|" if _vertical_wall(grid, x, y) else " "
            if x < grid.size:
                row += "   "
        lines.append(row)
    return "\n".join(lines)


def wall_segments(grid: WallGrid) -> List[List[tuple]]:
    """返回所有存在的墙的线段坐标，单位为格子边长"""
    segments = []
    for y in range(grid.size + 1):
        for x in range(grid.size):
            if _horizontal_wall(grid, x, y):
                segments.append([(x, y), (x + 1, y)])
    for y in range(grid.size):
        for x in range(grid.size + 1):
            if _vertical_wall(grid, x, y):
                segments.append([(x, y), (x, y + 1)])
    return segments


def render_plot(grid: WallGrid, data: Optional[Dict] = None):
    """用 matplotlib 绘制迷宫，返回 figure 对象"""
    fig, ax = plt.subplots(figsize=(8, 8))
    ax.add_collection(LineCollection(wall_segments(grid), colors="black", linewidths=2))

    # 标出起点、入口和出口（格子中心）
    if data:
        for key, color, label in (("start", "blue", "起点"),
                                  ("entrance", "green", "入口"),
                                  ("exit", "red", "出口")):
            if data.get(key) is not None:
                x, y = data[key]
                ax.scatter([x + 0.5], [y + 0.5], c=color, s=60, label=label)
        ax.legend(loc="upper right")

    ax.set_xlim(-0.5, grid.size + 0.5)
    ax.set_ylim(-0.5, grid.size + 0.5)
    ax.invert_yaxis()  # 第 0 行在最上方
    ax.set_aspect("equal")
    ax.axis("off")
    ax.set_title(f"迷宫 {grid.size} x {grid.size}")
    return fig


def _load_grid(path: Path):
    if not path.exists():
        print(f"错误：找不到文件 {path}")
        print("请先运行 python3 generator.py 生成迷宫")
        return None, None
    data = load_maze_layout(path)
    return grid_from_layout(data), data


def render_ascii_maze(path: Path = JSON_PATH) -> int:
    """读取 JSON 布局并以 ASCII 形式输出迷宫

    Returns:
        0 表示成功，其他值表示错误
    """
    try:
        grid, _ = _load_grid(path)
        if grid is None:
            return 1
        print(f"\n=== 迷宫ASCII渲染 ({grid.size}x{grid.size}) ===")
        print(render_ascii(grid))
        return 0
    except (OSError, ValueError, TypeError, KeyError, IndexError) as e:
        print(f"ASCII渲染过程中发生错误: {e}")
        return 1


def render_plot_maze(path: Path = JSON_PATH) -> int:
    """读取 JSON 布局并用 matplotlib 显示迷宫

    Returns:
        0 表示成功，其他值表示错误
    """
    try:
        grid, data = _load_grid(path)
        if grid is None:
            return 1
        render_plot(grid, data)
        print(f"\n=== 迷宫图形渲染统计 ===")
        print(f"迷宫尺寸: {grid.size} x {grid.size}")
        print(f"剩余墙数: {grid.wall_count()}")
        plt.tight_layout()
        plt.show()
        return 0
    except (OSError, ValueError, TypeError, KeyError, IndexError) as e:
        print(f"渲染过程中发生错误: {e}")
        return 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    """主函数：提供ASCII和图形两种渲染选项。

    Returns:
        0 表示成功，其他值表示错误
    """
    import sys

    args = list(sys.argv[1:] if argv is None else argv)
    if args:
        choice = args[0]
    elif sys.stdin.isatty():
        print("=== 迷宫渲染工具 ===")
        print("1. ASCII俯视图")
        print("2. 图形显示")
        print("3. 两种都显示")
        try:
            choice = input("请选择渲染方式 (1/2/3，默认为1): ").strip() or "1"
        except (KeyboardInterrupt, EOFError):
            print("\n使用默认ASCII渲染")
            choice = "1"
    else:
        choice = "1"
        print("非交互模式，使用默认ASCII渲染")

    path = Path(args[1]) if len(args) > 1 else JSON_PATH

    try:
        if choice == "1":
            return render_ascii_maze(path)
        elif choice == "2":
            return render_plot_maze(path)
        elif choice == "3":
            result1 = render_ascii_maze(path)
            result2 = render_plot_maze(path)
            return max(result1, result2)
        else:
            print("无效选择，使用默认ASCII渲染")
            return render_ascii_maze(path)
    except KeyboardInterrupt:
        print("\n用户取消操作")
        return 0


if __name__ == "__main__":
    raise SystemExit(main())
