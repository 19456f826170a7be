from typing import List, Optional

from .config import ConversionResult, Segment
from .dictionary import Lexicon
from .segmenter import ReadingSegmenter


class CandidateResolver:
    """候选解析器：分节候选、整句候选"""

    def __init__(self, lexicon: Optional[Lexicon] = None):
        self.lexicon = lexicon
        self.segmenter = ReadingSegmenter(lexicon)

    def convert(self, reading: str) -> ConversionResult:
        """
        分节转换

        首选为各分节首选候选的拼接；与读音不同时追加读音本身。
        这里不查 okuri-ari，活用形只能通过 resolve_whole 得到。
        """
        if not reading:
            return ConversionResult()

        segments = self.segmenter.segment(reading)
        combined = ''.join(seg.candidates[0] for seg in segments)

        candidates = [combined]
        if combined != reading:
            candidates.append(reading)
        return ConversionResult(combined_candidates=candidates, segments=segments)

    def resolve_whole(self, reading: str) -> List[str]:
        """整句查询（含 okuri-ari 活用形）"""
        if self.lexicon is None:
            return [reading] if reading else []
        return self.lexicon.lookup_combined(reading)

    def candidates_for(self, reading: str) -> List[str]:
        """单个分节的候选"""
        if self.lexicon is None:
            return [reading]
        return self.lexicon.lookup_with_fallback(reading)

    def rebuild(self, segments: List[Segment]) -> List[Segment]:
        """为每个分节重新生成候选"""
        return [
            Segment(seg.reading, seg.start, seg.length, self.candidates_for(seg.reading))
            for seg in segments
        ]
