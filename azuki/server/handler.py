"""请求分发"""

import time

from azuki import __version__
from azuki.engine import (
    AzukiEngine,
    InvalidDirectionError,
    create_candidate_source,
    get_server_logger,
    parse_direction,
)

from .messages import (
    AdjustSegmentRequest,
    AdjustSegmentResult,
    CommitRequest,
    CommitResult,
    ConvertRequest,
    ConvertResult,
    ErrorResponse,
    InitRequest,
    InitResult,
    Request,
    Response,
    SegmentInfo,
    ShutdownRequest,
    ShutdownResult,
)

logger = get_server_logger()


class RequestHandler:
    """按请求类型分发到引擎"""

    def __init__(self, engine: AzukiEngine):
        self.engine = engine

    def handle(self, request: Request) -> Response:
        if isinstance(request, InitRequest):
            return self._handle_init(request)
        if isinstance(request, ConvertRequest):
            return self._handle_convert(request)
        if isinstance(request, CommitRequest):
            return self._handle_commit(request)
        if isinstance(request, ShutdownRequest):
            return ShutdownResult(seq=request.seq)
        if isinstance(request, AdjustSegmentRequest):
            return self._handle_adjust(request)
        raise TypeError(f"Unhandled request type: {type(request).__name__}")

    def _handle_init(self, request: InitRequest) -> InitResult:
        session_id = request.session_id or f"session_{int(time.time() * 1000)}"

        if request.neural is not None and request.neural.enabled and not self.engine.neural_enabled:
            config = request.neural.to_config()
            config.device = self.engine.config.neural.device
            self.engine.set_candidate_source(create_candidate_source(config))

        logger.info(f"初始化会话: {session_id}")
        return InitResult(
            seq=request.seq,
            session_id=session_id,
            version=__version__,
            has_dictionary=self.engine.has_dictionary,
            neural_enabled=self.engine.neural_enabled,
        )

    def _handle_convert(self, request: ConvertRequest) -> ConvertResult:
        result = self.engine.convert(request.reading, request.context)
        return ConvertResult(
            seq=request.seq,
            session_id=request.session_id,
            candidates=result.combined_candidates,
            segments=[SegmentInfo.from_segment(s) for s in result.segments],
        )

    def _handle_commit(self, request: CommitRequest) -> CommitResult:
        logger.debug(f"确定: '{request.reading}' -> '{request.candidate}'")
        return CommitResult(seq=request.seq, session_id=request.session_id, success=True)

    def _handle_adjust(self, request: AdjustSegmentRequest) -> Response:
        try:
            direction = parse_direction(request.direction)
        except InvalidDirectionError as e:
            return ErrorResponse(seq=request.seq, session_id=request.session_id, error=str(e))

        segments = self.engine.adjust_segment(
            request.reading,
            [s.to_segment() for s in request.segments],
            request.segment_index,
            direction,
        )
        return AdjustSegmentResult(
            seq=request.seq,
            session_id=request.session_id,
            segments=[SegmentInfo.from_segment(s) for s in segments],
        )
