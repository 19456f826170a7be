"""
神经网络候选源

运行时注入：
- NullCandidateSource: 始终可用的空实现，调用即报 NeuralSourceUnavailable
- TorchCandidateSource: 加载 TorchScript 模型，forward(reading, context, limit) -> List[str]

引擎把候选源的任何异常都视为"无神经网络候选"。
"""

import os
from pathlib import Path
from typing import List, Optional, Protocol

import torch

from .config import NeuralConfig
from .errors import (
    NeuralInferenceError,
    NeuralSourceNotInitialized,
    NeuralSourceUnavailable,
)
from .logging import get_engine_logger

logger = get_engine_logger()

MODEL_FILENAMES = ('zenz.pt', 'zenz-small.pt')


class CandidateSource(Protocol):
    """候选源接口"""

    @property
    def is_ready(self) -> bool: ...

    def convert(self, reading: str, context: Optional[str] = None) -> List[str]: ...


class NullCandidateSource:
    """未启用神经网络时使用的空候选源"""

    @property
    def is_ready(self) -> bool:
        return False

    def convert(self, reading: str, context: Optional[str] = None) -> List[str]:
        raise NeuralSourceUnavailable("神经网络候选源未启用")


def default_model_paths() -> List[Path]:
    """默认模型搜索路径"""
    dirs = []
    data_home = os.getenv('XDG_DATA_HOME')
    if data_home:
        dirs.append(Path(data_home) / 'azuki' / 'models')
    home = os.getenv('HOME')
    if home:
        dirs.append(Path(home) / '.local' / 'share' / 'azuki' / 'models')
        dirs.append(Path(home) / '.azuki' / 'models')
    return [d / name for d in dirs for name in MODEL_FILENAMES]


class TorchCandidateSource:
    """TorchScript 模型候选源（首次调用时加载）"""

    def __init__(self, config: NeuralConfig):
        self.config = config
        self.device = torch.device(config.device)
        self.model = None

    def get_model_path(self) -> Optional[Path]:
        """显式指定路径时只用该路径；未指定时搜索默认目录"""
        if self.config.model_path:
            path = Path(self.config.model_path)
            return path if path.exists() else None
        return next((p for p in default_model_paths() if p.exists()), None)

    def is_usable(self) -> bool:
        return self.config.enabled and self.get_model_path() is not None

    @property
    def is_ready(self) -> bool:
        return self.model is not None

    def initialize(self):
        """加载模型"""
        if self.model is not None:
            return
        if not self.config.enabled:
            raise NeuralSourceUnavailable("神经网络候选源未启用")

        model_path = self.get_model_path()
        if model_path is None:
            raise NeuralSourceUnavailable("模型文件不存在")

        logger.info(f"加载神经网络模型: {model_path}")
        try:
            model = torch.jit.load(str(model_path), map_location=self.device)
        except (RuntimeError, ValueError, OSError) as e:
            raise NeuralSourceUnavailable(f"模型加载失败: {e}") from e
        model.eval()
        self.model = model
        logger.info(f"✓ 模型加载成功 (设备: {self.device})")

    def convert(self, reading: str, context: Optional[str] = None) -> List[str]:
        """推理生成候选"""
        if self.model is None:
            self.initialize()
        if self.model is None:
            raise NeuralSourceNotInitialized("模型未初始化")

        context = context if self.config.contextual and context else ""
        try:
            with torch.no_grad():
                output = self.model(reading, context, self.config.inference_limit)
        except Exception as e:
            raise NeuralInferenceError(str(e)) from e

        candidates = []
        for text in output:
            if text and text not in candidates:
                candidates.append(str(text))
        return candidates[:self.config.inference_limit]


def create_candidate_source(config: NeuralConfig):
    """根据配置选择候选源实现"""
    if not config.enabled:
        return NullCandidateSource()
    source = TorchCandidateSource(config)
    if not source.is_usable():
        logger.warning("⚠ 神经网络模型未找到，仅使用词典")
        return NullCandidateSource()
    return source
