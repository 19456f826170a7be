"""
请求 / 响应消息定义

请求按 type 字段区分：init / convert / commit / shutdown / adjust_segment
"""

from typing import Annotated, List, Literal, Optional, Union

import orjson
from pydantic import BaseModel, Field, TypeAdapter

from azuki.engine import NeuralConfig, Segment


class NeuralOptions(BaseModel):
    """init 请求携带的神经网络配置"""
    enabled: bool = False
    model_path: Optional[str] = None
    inference_limit: int = Field(10, ge=1)
    contextual: bool = False

    def to_config(self) -> NeuralConfig:
        return NeuralConfig(
            enabled=self.enabled,
            model_path=self.model_path,
            inference_limit=self.inference_limit,
            contextual=self.contextual,
        )


class ConvertOptions(BaseModel):
    live: bool = False


class SegmentInfo(BaseModel):
    """分节信息"""
    reading: str
    start: int = Field(..., ge=0)
    length: int = Field(..., ge=0)
    candidates: List[str] = Field(default_factory=list)

    @classmethod
    def from_segment(cls, segment: Segment) -> "SegmentInfo":
        return cls(
            reading=segment.reading,
            start=segment.start,
            length=segment.length,
            candidates=list(segment.candidates),
        )

    def to_segment(self) -> Segment:
        return Segment(self.reading, self.start, self.length, list(self.candidates))


# ===== 请求 =====

class InitRequest(BaseModel):
    type: Literal["init"]
    seq: int
    session_id: Optional[str] = None
    neural: Optional[NeuralOptions] = None


class ConvertRequest(BaseModel):
    type: Literal["convert"]
    seq: int
    session_id: str
    reading: str
    cursor: Optional[int] = None
    context: Optional[str] = None
    options: Optional[ConvertOptions] = None


class CommitRequest(BaseModel):
    type: Literal["commit"]
    seq: int
    session_id: str
    reading: str
    candidate: str


class ShutdownRequest(BaseModel):
    type: Literal["shutdown"]
    seq: int
    session_id: Optional[str] = None


class AdjustSegmentRequest(BaseModel):
    type: Literal["adjust_segment"]
    seq: int
    session_id: str
    reading: str
    segments: List[SegmentInfo]
    segment_index: int
    direction: str


Request = Annotated[
    Union[InitRequest, ConvertRequest, CommitRequest, ShutdownRequest, AdjustSegmentRequest],
    Field(discriminator="type"),
]

_request_adapter = TypeAdapter(Request)


def parse_request(raw: Union[str, bytes]) -> Request:
    """解析请求，格式错误时抛出 pydantic.ValidationError"""
    return _request_adapter.validate_json(raw)


def extract_seq(raw: Union[str, bytes]) -> int:
    """从无法解析的请求中尽量取出 seq"""
    try:
        value = orjson.loads(raw)
    except orjson.JSONDecodeError:
        return 0
    if isinstance(value, dict):
        seq = value.get("seq")
        if isinstance(seq, int) and not isinstance(seq, bool) and seq >= 0:
            return seq
    return 0


# ===== 响应 =====

class InitResult(BaseModel):
    type: Literal["init_result"] = "init_result"
    seq: int
    session_id: str
    version: str
    has_dictionary: bool
    neural_enabled: bool = False


class ConvertResult(BaseModel):
    type: Literal["convert_result"] = "convert_result"
    seq: int
    session_id: str
    candidates: List[str]
    segments: List[SegmentInfo]


class AdjustSegmentResult(BaseModel):
    type: Literal["adjust_segment_result"] = "adjust_segment_result"
    seq: int
    session_id: str
    segments: List[SegmentInfo]


class CommitResult(BaseModel):
    type: Literal["commit_result"] = "commit_result"
    seq: int
    session_id: str
    success: bool


class ShutdownResult(BaseModel):
    type: Literal["shutdown_result"] = "shutdown_result"
    seq: int


class ErrorResponse(BaseModel):
    type: Literal["error"] = "error"
    seq: int
    session_id: Optional[str] = None
    error: str


Response = Union[InitResult, ConvertResult, AdjustSegmentResult, CommitResult, ShutdownResult, ErrorResponse]


def dump_response(response: Response) -> bytes:
    """序列化响应（省略为空的 session_id）"""
    return orjson.dumps(response.model_dump(exclude_none=True))
