"""
stdio 长度前缀 JSON 协议

消息格式: [u32 大端长度][UTF-8 JSON]
"""

import struct
from typing import BinaryIO, Optional

from azuki.engine.errors import ProtocolError

# 单条消息上限 4MB
MAX_MESSAGE_SIZE = 4 * 1024 * 1024

_HEADER = struct.Struct('>I')


def _read_exact(reader: BinaryIO, size: int) -> bytes:
    chunks = []
    remaining = size
    while remaining > 0:
        chunk = reader.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b''.join(chunks)


def read_message(reader: BinaryIO) -> Optional[str]:
    """读取一条消息，EOF 时返回 None"""
    header = _read_exact(reader, _HEADER.size)
    if len(header) < _HEADER.size:
        return None

    (length,) = _HEADER.unpack(header)
    if length > MAX_MESSAGE_SIZE:
        raise ProtocolError(f"Message too large: {length} bytes")

    body = _read_exact(reader, length)
    if len(body) < length:
        raise ProtocolError(f"Truncated message: expected {length} bytes, got {len(body)}")

    try:
        return body.decode('utf-8')
    except UnicodeDecodeError as e:
        raise ProtocolError(f"Invalid UTF-8: {e}") from e


def write_message(writer: BinaryIO, message) -> None:
    """写入一条消息（str 或 bytes）"""
    data = message.encode('utf-8') if isinstance(message, str) else message
    if len(data) > MAX_MESSAGE_SIZE:
        raise ProtocolError(f"Message too large: {len(data)} bytes")
    writer.write(_HEADER.pack(len(data)))
    writer.write(data)
    writer.flush()
