"""
azuki stdio 服务

通过 stdin/stdout 以长度前缀 JSON 协议通信，日志只写 stderr。
"""

import sys
from typing import BinaryIO

from pydantic import ValidationError

from azuki import __version__
from azuki.engine import EngineConfig, ProtocolError, create_engine, get_server_logger

from .handler import RequestHandler
from .messages import ErrorResponse, ShutdownRequest, dump_response, extract_seq, parse_request
from .protocol import read_message, write_message

logger = get_server_logger()


def serve(handler: RequestHandler, reader: BinaryIO, writer: BinaryIO) -> int:
    """
    请求循环：一次处理一个请求，直到 EOF 或 shutdown

    Returns:
        进程退出码
    """
    while True:
        try:
            raw = read_message(reader)
        except ProtocolError as e:
            logger.error(f"协议错误，停止服务: {e}")
            return 1

        if raw is None:
            logger.info("收到 EOF，关闭服务")
            return 0

        try:
            request = parse_request(raw)
        except ValidationError as e:
            response = ErrorResponse(
                seq=extract_seq(raw),
                error=f"Failed to parse request: {e}",
            )
            write_message(writer, dump_response(response))
            continue

        response = handler.handle(request)
        write_message(writer, dump_response(response))

        if isinstance(request, ShutdownRequest):
            logger.info("收到 shutdown 请求，退出")
            return 0


def main(config: EngineConfig = None) -> int:
    logger.info(f"azuki-server v{__version__} 启动")
    engine = create_engine(config)
    try:
        return serve(RequestHandler(engine), sys.stdin.buffer, sys.stdout.buffer)
    finally:
        engine.close()


if __name__ == "__main__":
    sys.exit(main())
