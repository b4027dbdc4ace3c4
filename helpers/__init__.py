"""
Helper modules for bili-client.
"""

from .unified_logger import UnifiedLogger, get_logger, get_client_logger

__all__ = [
    'UnifiedLogger',
    'get_logger',
    'get_client_logger',
]
