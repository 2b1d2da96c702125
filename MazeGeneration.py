"""
兼容性导入模块。

早期脚本通过 ``MazeGeneration`` 模块使用迷宫生成器。为保持这些脚本
继续工作，此文件从 ``generator`` 模块导入 :class:`MazeGenerator`
与 :func:`generate` 并在 ``__all__`` 中导出。
"""

from generator import MazeGenerator, generate  # 核心生成器及便捷函数

# 控制 ``from MazeGeneration import *`` 的导出内容
__all__ = ["MazeGenerator", "generate"]
