"""
azuki FastAPI 服务

提供 RESTful API 接口
"""

import os
import time
import uuid
from typing import List, Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from azuki.engine import AzukiEngine, InvalidDirectionError, create_engine, get_api_logger, parse_direction
from azuki.server.messages import SegmentInfo

logger = get_api_logger()


# ===== 请求/响应模型 =====

class ConvertRequest(BaseModel):
    """转换请求"""
    reading: str = Field(..., description="平假名读音")
    context: str = Field("", description="上下文（已确定的文本）")


class ConvertResponse(BaseModel):
    """转换响应"""
    reading: str
    candidates: List[str]
    segments: List[SegmentInfo]


class AdjustRequest(BaseModel):
    """分节调整请求"""
    reading: str
    segments: List[SegmentInfo]
    segment_index: int
    direction: str = Field(..., description="shrink / extend")


class AdjustResponse(BaseModel):
    reading: str
    segments: List[SegmentInfo]


class HealthResponse(BaseModel):
    """健康检查响应"""
    status: str
    version: str
    has_dictionary: bool = False
    neural_enabled: bool = False


# ===== 全局引擎实例 =====
engine: Optional[AzukiEngine] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    global engine

    logger.info("=" * 50)
    logger.info("azuki API 服务启动")
    if engine is None:
        engine = create_engine()
    logger.info("=" * 50)

    yield

    logger.info("正在关闭引擎...")
    engine.close()
    engine = None
    logger.info("azuki API 服务已停止")


app = FastAPI(
    title="azuki API",
    description="日语假名汉字转换引擎 API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """记录请求日志"""
    request_id = str(uuid.uuid4())[:8]
    start_time = time.perf_counter()

    logger.info(f"[{request_id}] --> {request.method} {request.url.path}")

    try:
        response = await call_next(request)
    except Exception as e:
        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.error(f"[{request_id}] <-- ERROR | {elapsed_ms:.2f}ms | {type(e).__name__}: {e}")
        raise

    elapsed_ms = (time.perf_counter() - start_time) * 1000
    status_code = response.status_code
    log_level = "info" if status_code < 400 else "warning" if status_code < 500 else "error"
    getattr(logger, log_level)(f"[{request_id}] <-- {status_code} | {elapsed_ms:.2f}ms")

    response.headers["X-Request-ID"] = request_id
    response.headers["X-Response-Time"] = f"{elapsed_ms:.2f}ms"
    return response


def _require_engine() -> AzukiEngine:
    if engine is None:
        logger.error("引擎未就绪，拒绝请求")
        raise HTTPException(status_code=503, detail="引擎未就绪")
    return engine


# ===== API 路由 =====

@app.get("/health", response_model=HealthResponse)
async def health_check():
    """健康检查"""
    from azuki import __version__
    if engine is None:
        return HealthResponse(status="not_ready", version=__version__)
    return HealthResponse(
        status="healthy",
        version=__version__,
        has_dictionary=engine.has_dictionary,
        neural_enabled=engine.neural_enabled,
    )


@app.post("/convert", response_model=ConvertResponse)
async def convert(request: ConvertRequest):
    """读音转换，返回整句候选与分节"""
    current = _require_engine()

    result = current.convert(request.reading, request.context or None)
    return ConvertResponse(
        reading=request.reading,
        candidates=result.combined_candidates,
        segments=[SegmentInfo.from_segment(s) for s in result.segments],
    )


@app.post("/adjust", response_model=AdjustResponse)
async def adjust(request: AdjustRequest):
    """移动分节边界"""
    current = _require_engine()

    try:
        direction = parse_direction(request.direction)
    except InvalidDirectionError as e:
        raise HTTPException(status_code=400, detail=str(e))

    segments = current.adjust_segment(
        request.reading,
        [s.to_segment() for s in request.segments],
        request.segment_index,
        direction,
    )
    return AdjustResponse(
        reading=request.reading,
        segments=[SegmentInfo.from_segment(s) for s in segments],
    )


@app.get("/convert/simple")
async def simple_convert(reading: str):
    """简单查询接口"""
    current = _require_engine()
    result = current.convert(reading)
    logger.debug(f"简单查询: '{reading}' -> {result.combined_candidates[:3]}")
    return {"reading": reading, "candidates": result.combined_candidates}


@app.get("/dict/{reading}")
async def query_dict(reading: str):
    """整句词典查询（含活用形）"""
    current = _require_engine()
    return {"reading": reading, "candidates": current.convert_whole(reading)}


@app.get("/stats")
async def get_stats():
    """获取引擎统计信息"""
    return _require_engine().get_stats()


# ===== 启动入口 =====

def main():
    import uvicorn

    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "3000"))
    log_level = os.getenv("LOG_LEVEL", "info").lower()

    logger.info(f"启动 azuki API 服务: http://{host}:{port}")
    logger.info(f"API 文档: http://{host}:{port}/docs")

    uvicorn.run(
        "azuki.api.server:app",
        host=host,
        port=port,
        reload=False,
        workers=1,
        log_level=log_level,
    )


if __name__ == "__main__":
    main()
