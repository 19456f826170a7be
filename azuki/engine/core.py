import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Dict, List, Optional

from .adjuster import BoundaryAdjuster
from .cache import LRUCache
from .config import AdjustDirection, ConversionResult, EngineConfig, Segment
from .dictionary import Lexicon
from .errors import NeuralSourceError
from .logging import get_engine_logger
from .neural import CandidateSource, NullCandidateSource
from .resolver import CandidateResolver

logger = get_engine_logger()


class AzukiEngine:
    """
    假名汉字转换引擎

    核心思路：词典为主，神经网络候选为辅
    - 分节始终来自词典切分
    - 神经网络候选（若可用）排在前面，词典候选去重后追加
    - 神经网络失败、超时或未启用时静默回退到纯词典结果
    """

    def __init__(
        self,
        lexicon: Optional[Lexicon] = None,
        config: EngineConfig = None,
        candidate_source: Optional[CandidateSource] = None,
    ):
        self.config = config or EngineConfig()
        self.lexicon = lexicon
        self.resolver = CandidateResolver(lexicon)
        self.adjuster = BoundaryAdjuster(self.resolver)
        self.candidate_source = candidate_source or NullCandidateSource()

        # 神经网络候选缓存
        self.cache = LRUCache(self.config.cache_size)
        self._executor = None

        self.stats = {'total': 0, 'adjust': 0, 'neural_calls': 0, 'neural_failures': 0, 'total_ms': 0.0}

        self._log_status()

    def _log_status(self):
        logger.info("=" * 50)
        logger.info("azuki 引擎 (词典 + 神经网络)")
        if self.has_dictionary:
            logger.info(f"  词典: ✓ ({len(self.lexicon)} 条)")
        else:
            logger.info("  词典: ✗ (直通模式)")
        logger.info(f"  神经网络: {'✓' if self.neural_enabled else '✗'}")
        logger.info("=" * 50)

    @property
    def has_dictionary(self) -> bool:
        return self.lexicon is not None and not self.lexicon.is_empty()

    @property
    def neural_enabled(self) -> bool:
        return not isinstance(self.candidate_source, NullCandidateSource)

    def set_candidate_source(self, source: CandidateSource):
        """替换神经网络候选源（清空候选缓存）"""
        self.candidate_source = source or NullCandidateSource()
        self.cache = LRUCache(self.config.cache_size)
        logger.info(f"神经网络候选源: {type(self.candidate_source).__name__}")

    def convert(self, reading: str, context: Optional[str] = None) -> ConversionResult:
        """主处理入口"""
        start = time.perf_counter()
        self.stats['total'] += 1

        result = self.resolver.convert(reading)

        if reading and self.neural_enabled:
            neural = self._neural_candidates(reading, context)
            if neural:
                merged = list(neural)
                for candidate in result.combined_candidates:
                    if candidate not in merged:
                        merged.append(candidate)
                result = ConversionResult(combined_candidates=merged, segments=result.segments)

        elapsed = (time.perf_counter() - start) * 1000
        self.stats['total_ms'] += elapsed
        logger.debug(f"转换: '{reading}' -> {result.combined_candidates[:3]} | {elapsed:.2f}ms")
        return result

    def convert_whole(self, reading: str) -> List[str]:
        """整句查询（含活用形）"""
        return self.resolver.resolve_whole(reading)

    def adjust_segment(
        self,
        reading: str,
        segments: List[Segment],
        index: int,
        direction: AdjustDirection,
    ) -> List[Segment]:
        """调整分节边界"""
        self.stats['adjust'] += 1
        adjusted = self.adjuster.adjust(reading, segments, index, direction)
        if adjusted is segments:
            logger.debug(f"分节调整无效: index={index}, direction={direction}")
        return adjusted

    def _neural_candidates(self, reading: str, context: Optional[str]) -> List[str]:
        cache_key = f"{reading}|{(context or '')[-10:]}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return list(cached)

        self.stats['neural_calls'] += 1
        try:
            candidates = self._call_source(reading, context)
        except NeuralSourceError as e:
            self.stats['neural_failures'] += 1
            logger.debug(f"神经网络候选不可用: {e}")
            return []
        except FutureTimeoutError:
            self.stats['neural_failures'] += 1
            logger.warning(f"神经网络推理超时 ({self.config.neural_timeout_ms}ms): '{reading}'")
            return []
        except Exception as e:
            self.stats['neural_failures'] += 1
            logger.error(f"神经网络候选源异常: {type(e).__name__}: {e}")
            return []

        self.cache.put(cache_key, tuple(candidates))
        return candidates

    def _call_source(self, reading: str, context: Optional[str]) -> List[str]:
        timeout_ms = self.config.neural_timeout_ms
        if not timeout_ms or timeout_ms <= 0:
            return self.candidate_source.convert(reading, context)

        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix='azuki-neural')
        future = self._executor.submit(self.candidate_source.convert, reading, context)
        try:
            return future.result(timeout=timeout_ms / 1000)
        finally:
            future.cancel()

    def close(self):
        """释放推理线程"""
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None

    def get_stats(self) -> Dict:
        """获取统计"""
        total = self.stats['total'] or 1
        calls = self.stats['neural_calls'] or 1
        return {
            'total_requests': self.stats['total'],
            'adjust_requests': self.stats['adjust'],
            'neural_calls': self.stats['neural_calls'],
            'neural_failure_rate': self.stats['neural_failures'] / calls,
            'cache_hit_rate': self.cache.hit_rate,
            'avg_latency_ms': self.stats['total_ms'] / total,
        }
