from .config import EngineConfig, NeuralConfig, Segment, ConversionResult, AdjustDirection
from .core import AzukiEngine
from .dictionary import (
    Lexicon,
    okuri_symbol,
    parse_entry,
    decode_content,
    load_lexicon,
    find_dictionary,
)
from .segmenter import ReadingSegmenter
from .resolver import CandidateResolver
from .adjuster import BoundaryAdjuster, parse_direction
from .neural import CandidateSource, NullCandidateSource, TorchCandidateSource, create_candidate_source
from .errors import (
    AzukiError,
    DictionaryLoadError,
    InvalidDirectionError,
    ProtocolError,
    NeuralSourceError,
    NeuralSourceUnavailable,
    NeuralSourceNotInitialized,
    NeuralInferenceError,
)
from .logging import setup_logging, set_log_level, log_execution_time, get_logger, get_api_logger, get_engine_logger, get_server_logger


def create_engine(config: EngineConfig = None, lexicon: Lexicon = None) -> AzukiEngine:
    """
    创建引擎

    Args:
        config: 引擎配置（默认读取环境变量）
        lexicon: 已加载的词典（可选，默认按配置查找词典文件）

    Returns:
        AzukiEngine 实例
    """
    config = config or EngineConfig.from_env()
    set_log_level(config.log_level)
    if lexicon is None:
        lexicon = find_dictionary(config.dictionary_path)
    source = create_candidate_source(config.neural)
    return AzukiEngine(lexicon, config, source)


__all__ = [
    # 引擎
    'AzukiEngine',
    'create_engine',
    'EngineConfig',
    'NeuralConfig',
    'Segment',
    'ConversionResult',
    'AdjustDirection',
    # 词典
    'Lexicon',
    'okuri_symbol',
    'parse_entry',
    'decode_content',
    'load_lexicon',
    'find_dictionary',
    # 切分 / 候选 / 调整
    'ReadingSegmenter',
    'CandidateResolver',
    'BoundaryAdjuster',
    'parse_direction',
    # 神经网络
    'CandidateSource',
    'NullCandidateSource',
    'TorchCandidateSource',
    'create_candidate_source',
    # 异常
    'AzukiError',
    'DictionaryLoadError',
    'InvalidDirectionError',
    'ProtocolError',
    'NeuralSourceError',
    'NeuralSourceUnavailable',
    'NeuralSourceNotInitialized',
    'NeuralInferenceError',
    # 日志
    'setup_logging',
    'set_log_level',
    'log_execution_time',
    'get_logger',
    'get_api_logger',
    'get_engine_logger',
    'get_server_logger',
]
