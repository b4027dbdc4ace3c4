"""
Unified logging for bili-client

Provides consistent, colored logging for the vendor clients (bilibili).

Based on loguru with component-specific context. Handlers are installed
once per process; every logger binds its own ``component_id``.
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger as _logger


class UnifiedLogger:
    """
    Unified logger that provides consistent formatting across all components.

    Features:
    - Colored console output (stderr) with source location
    - Component-specific context (client, account, etc.)
    - Optional file logging with rotation when ``LOG_DIR`` is set
    """

    def __init__(
        self,
        component_type: str,  # "client", etc.
        component_name: str,  # "bilibili", "networking", etc.
        context: Optional[Dict[str, Any]] = None,
        log_to_console: bool = True,
        log_level: str = "INFO",
    ):
        self.component_type = component_type.upper()
        self.component_name = component_name.upper()
        self.context = context or {}
        self.log_level = log_level.upper()
        self.log_to_console = log_to_console

        self.component_id = f"{self.component_type}:{self.component_name}"
        if self.context:
            context_str = ":".join([f"{k}={v}" for k, v in self.context.items()])
            self.component_id = f"{self.component_id}:{context_str}"

        self._setup_logger(log_to_console)

    def _setup_logger(self, log_to_console: bool):
        """Install the shared loguru handlers on first use."""
        if not hasattr(_logger, "_bili_console_setup"):
            _logger.remove()

            if log_to_console:
                console_format = (
                    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
                    "<level>{level: <8}</level> | "
                    "<cyan>{extra[component_id]}</cyan> | "
                    "<cyan>{name}:{function}:{line}</cyan> | "
                    "<level>{message}</level>"
                )
                _logger.add(
                    sys.stderr,
                    format=console_format,
                    level=self.log_level,
                    colorize=True,
                    filter=lambda record: "component_id" in record["extra"],
                    backtrace=True,
                    diagnose=False,
                )

            _logger._bili_console_setup = True

        log_dir = os.getenv("LOG_DIR")
        if log_dir and not hasattr(_logger, "_bili_file_setup"):
            logs_path = Path(log_dir)
            logs_path.mkdir(parents=True, exist_ok=True)

            def ensure_component(record):
                if "component_id" not in record["extra"]:
                    record["extra"]["component_id"] = "UNKNOWN"
                return True

            _logger.add(
                str(logs_path / "bili_client.log"),
                format="{time:YYYY-MM-DD HH:mm:ss} | {level:<8} | {extra[component_id]:<30} | {message}",
                level="DEBUG",
                filter=ensure_component,
                rotation="10 MB",
                retention=5,
                enqueue=True,
                catch=True,
            )
            _logger._bili_file_setup = True

        self._logger = _logger.bind(component_id=self.component_id)

    def debug(self, message: str, **kwargs):
        self._logger.opt(depth=1).debug(message, **kwargs)

    def info(self, message: str, **kwargs):
        self._logger.opt(depth=1).info(message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._logger.opt(depth=1).warning(message, **kwargs)

    def error(self, message: str, **kwargs):
        self._logger.opt(depth=1).error(message, **kwargs)

    def with_context(self, **context) -> "UnifiedLogger":
        """
        Create a new logger instance with additional context.

        Useful for adding temporary context like an endpoint or request id.
        """
        new_context = {**self.context, **context}
        return UnifiedLogger(
            component_type=self.component_type.lower(),
            component_name=self.component_name.lower(),
            context=new_context,
            log_to_console=self.log_to_console,
            log_level=self.log_level,
        )


def get_logger(
    component_type: str,
    component_name: str,
    context: Optional[Dict[str, Any]] = None,
    log_to_console: bool = True,
    log_level: Optional[str] = None,
) -> UnifiedLogger:
    """
    Factory function to create unified loggers.

    Args:
        component_type: Type of component (client, service)
        component_name: Name of specific component
        context: Additional context (account, etc.)
        log_to_console: Whether to log to console
        log_level: Log level (defaults to env LOG_LEVEL or INFO)

    Examples:
        logger = get_logger("client", "bilibili", {"account": "main"})
    """
    if log_level is None:
        log_level = os.getenv("LOG_LEVEL", "INFO")

    return UnifiedLogger(
        component_type=component_type,
        component_name=component_name,
        context=context,
        log_to_console=log_to_console,
        log_level=log_level,
    )


def get_client_logger(client_name: str, **context) -> UnifiedLogger:
    """Get logger for vendor API clients."""
    return get_logger("client", client_name, context)

