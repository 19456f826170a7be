"""
读音切分模块

贪心最长匹配：在每个位置从不超过最长词条长度的子串开始尝试，
第一个命中 okuri-nasi 词条的子串即为一个分节；都不命中则单字成节。
切分阶段只查 okuri-nasi，不查 okuri-ari。
"""

from typing import List, Optional

from .config import Segment
from .dictionary import Lexicon


class ReadingSegmenter:
    """读音切分器"""

    def __init__(self, lexicon: Optional[Lexicon] = None):
        self.lexicon = lexicon

    @property
    def passthrough(self) -> bool:
        return self.lexicon is None or self.lexicon.is_empty()

    def segment(self, reading: str) -> List[Segment]:
        """
        切分读音

        Args:
            reading: 平假名读音（如 "きょうは"）

        Returns:
            按 start 升序、首尾相接的分节列表
        """
        if not reading:
            return []

        if self.passthrough:
            return [Segment(reading, 0, len(reading), [reading])]

        segments = []
        pos = 0
        n = len(reading)

        while pos < n:
            length = self._longest_match(reading, pos)
            if length:
                span = reading[pos:pos + length]
                candidates = self.lexicon.lookup_with_fallback(span)
            else:
                length = 1
                span = reading[pos]
                candidates = [span]
            segments.append(Segment(span, pos, length, candidates))
            pos += length

        return segments

    def _longest_match(self, reading: str, pos: int) -> int:
        """返回从 pos 开始最长命中词条的长度，无命中返回 0"""
        # 超过最长词条的子串不可能命中
        limit = min(len(reading), pos + self.lexicon.max_key_length)
        for end in range(limit, pos, -1):
            if self.lexicon.lookup(reading[pos:end]) is not None:
                return end - pos
        return 0
