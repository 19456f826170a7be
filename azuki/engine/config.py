import os
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class NeuralConfig:
    """神经网络候选源配置"""
    enabled: bool = False
    model_path: Optional[str] = None
    inference_limit: int = 10     # 推理候选上限
    contextual: bool = False      # 是否把上下文传给模型
    device: str = "cpu"


@dataclass
class EngineConfig:
    """引擎配置"""
    dictionary_path: Optional[str] = None
    neural: NeuralConfig = field(default_factory=NeuralConfig)
    neural_timeout_ms: int = 200
    cache_size: int = 2000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """从环境变量读取配置"""
        neural = NeuralConfig(
            enabled=_env_bool("AZUKI_NEURAL_ENABLED"),
            model_path=os.getenv("AZUKI_NEURAL_MODEL") or None,
            contextual=_env_bool("AZUKI_NEURAL_CONTEXTUAL"),
        )
        return cls(
            dictionary_path=os.getenv("AZUKI_DICTIONARY") or None,
            neural=neural,
            neural_timeout_ms=int(os.getenv("AZUKI_NEURAL_TIMEOUT_MS", "200")),
            log_level=os.getenv("AZUKI_LOG_LEVEL", "INFO"),
        )


class AdjustDirection(str, Enum):
    """分节边界移动方向"""
    SHRINK = "shrink"
    EXTEND = "extend"


@dataclass
class Segment:
    """分节：原读音的一段连续子串"""
    reading: str
    start: int
    length: int
    candidates: List[str] = field(default_factory=list)

    @property
    def end(self) -> int:
        return self.start + self.length


@dataclass
class ConversionResult:
    """转换结果"""
    combined_candidates: List[str] = field(default_factory=list)
    segments: List[Segment] = field(default_factory=list)
