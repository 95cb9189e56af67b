from .filesystem import FilesystemFetcher
from .memory import MemoryFetcher

__all__ = ['FilesystemFetcher', 'MemoryFetcher']
