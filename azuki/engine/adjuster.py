"""
分节边界调整模块

交互式地把第 index 个分节与下一个分节之间的边界移动一个字符：
- shrink: 当前分节末字移给下一个分节
- extend: 下一个分节首字并入当前分节

非法请求（越界、最后一个分节、移动后长度为 0）原样返回输入列表。
"""

from typing import List, Union

from .config import AdjustDirection, Segment
from .errors import InvalidDirectionError
from .resolver import CandidateResolver


def parse_direction(value: Union[str, AdjustDirection]) -> AdjustDirection:
    """解析方向字符串，无法识别时抛出 InvalidDirectionError"""
    if isinstance(value, AdjustDirection):
        return value
    try:
        return AdjustDirection(value)
    except ValueError:
        raise InvalidDirectionError(value) from None


class BoundaryAdjuster:
    """分节边界调整器"""

    def __init__(self, resolver: CandidateResolver):
        self.resolver = resolver

    def is_legal(self, segments: List[Segment], index: int, direction: AdjustDirection) -> bool:
        # 必须存在下一个分节
        if index < 0 or index >= len(segments) - 1:
            return False
        if direction is AdjustDirection.SHRINK:
            return segments[index].length > 1
        return segments[index + 1].length > 1

    def adjust(
        self,
        reading: str,
        segments: List[Segment],
        index: int,
        direction: AdjustDirection,
    ) -> List[Segment]:
        """
        移动一个分节边界并重建全部候选

        Args:
            reading: 完整读音
            segments: 当前分节列表（应覆盖完整读音）
            index: 目标分节下标（0 起）
            direction: SHRINK / EXTEND

        Returns:
            新的分节列表；非法请求时返回 segments 本身
        """
        direction = parse_direction(direction)
        if not self.is_legal(segments, index, direction):
            return segments

        lengths = [seg.length for seg in segments]
        delta = -1 if direction is AdjustDirection.SHRINK else 1
        lengths[index] += delta
        lengths[index + 1] -= delta

        rebuilt = []
        start = 0
        for length in lengths:
            if length > 0:
                span = reading[start:start + length]
                rebuilt.append(Segment(span, start, length, []))
            start += length

        # 全量重建候选，未移动边界的分节也重新查询
        return self.resolver.rebuild(rebuilt)
