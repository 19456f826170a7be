"""
azuki 异常类型

核心转换逻辑对结构合法的输入不抛异常；这里的异常只用于
词典加载、传输层校验和神经网络候选源。
"""


class AzukiError(Exception):
    """azuki 异常基类"""


class DictionaryLoadError(AzukiError):
    """词典文件读取失败"""


class InvalidDirectionError(AzukiError, ValueError):
    """无法识别的分节调整方向"""

    def __init__(self, direction: str):
        super().__init__(f"Invalid direction: {direction}")
        self.direction = direction


class ProtocolError(AzukiError):
    """消息帧格式错误"""


class NeuralSourceError(AzukiError):
    """神经网络候选源异常基类"""


class NeuralSourceUnavailable(NeuralSourceError):
    """候选源未启用、模型缺失或加载失败"""


class NeuralSourceNotInitialized(NeuralSourceError):
    """候选源尚未初始化"""


class NeuralInferenceError(NeuralSourceError):
    """推理失败"""
