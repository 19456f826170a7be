# stdio 传输层

from azuki.server.protocol import MAX_MESSAGE_SIZE, read_message, write_message
from azuki.server.handler import RequestHandler
from azuki.server.main import serve

__all__ = [
    'MAX_MESSAGE_SIZE',
    'read_message',
    'write_message',
    'RequestHandler',
    'serve',
]
