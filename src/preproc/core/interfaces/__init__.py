from .classifier import LineClassifierProtocol
from .fetcher import FileSourceProtocol
from .logging import LoggerFactoryProtocol, LoggerLikeProtocol

__all__ = [
    'FileSourceProtocol',
    'LineClassifierProtocol',
    'LoggerFactoryProtocol',
    'LoggerLikeProtocol',
]
