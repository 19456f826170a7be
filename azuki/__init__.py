"""
azuki - 日语假名汉字转换引擎

SKK 词典 + 可选神经网络候选源
"""

__version__ = "0.1.0"

from azuki.engine import (
    AzukiEngine,
    create_engine,
    EngineConfig,
    NeuralConfig,
    Segment,
    ConversionResult,
    AdjustDirection,
    Lexicon,
    load_lexicon,
    find_dictionary,
    ReadingSegmenter,
    CandidateResolver,
    BoundaryAdjuster,
)

__all__ = [
    "__version__",
    # 引擎
    "AzukiEngine",
    "create_engine",
    "EngineConfig",
    "NeuralConfig",
    "Segment",
    "ConversionResult",
    "AdjustDirection",
    # 词典
    "Lexicon",
    "load_lexicon",
    "find_dictionary",
    # 组件
    "ReadingSegmenter",
    "CandidateResolver",
    "BoundaryAdjuster",
]
