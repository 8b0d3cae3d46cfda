"""
Centralized logging configuration for the Azure Subscriptions service
"""
import logging
import os
import sys
from typing import Optional


# Azure SDK loggers are very chatty at INFO (one line per HTTP request)
AZURE_SDK_LOGGERS = (
    "azure.core.pipeline.policies.http_logging_policy",
    "azure.identity",
    "azure.core",
    "urllib3.connectionpool",
)


class ColoredFormatter(logging.Formatter):
    """Custom formatter to add colors to log messages"""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
        'RESET': '\033[0m'
    }

    def format(self, record):
        if record.levelname in self.COLORS:
            record.levelname = f"{self.COLORS[record.levelname]}{record.levelname}{self.COLORS['RESET']}"
        return super().format(record)


def running_in_azure() -> bool:
    """True when hosted on Azure App Service or Azure Container Apps"""
    return (
        os.environ.get('WEBSITE_SITE_NAME') is not None
        or os.environ.get('CONTAINER_APP_NAME') is not None
    )


def setup_logger(name: str, level: str = "INFO") -> logging.Logger:
    """
    Set up a logger with consistent formatting optimized for Azure App Service

    Args:
        name: Logger name (typically __name__)
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    # Azure log viewers pick up stderr reliably and don't render ANSI colors
    use_plain_formatter = running_in_azure()

    if use_plain_formatter:
        handler = logging.StreamHandler(sys.stderr)
        formatter = logging.Formatter(
            '%(asctime)s [%(name)s] %(levelname)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
    else:
        handler = logging.StreamHandler(sys.stdout)
        formatter = ColoredFormatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    handler.setLevel(numeric_level)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        root_logger.addHandler(handler)
    else:
        for existing_handler in root_logger.handlers:
            existing_handler.setLevel(numeric_level)
            if use_plain_formatter:
                existing_handler.setFormatter(formatter)
    root_logger.setLevel(numeric_level)

    for azure_logger_name in AZURE_SDK_LOGGERS:
        logging.getLogger(azure_logger_name).setLevel(logging.WARNING)

    # Propagate to root so there is exactly one handler per record
    logger.handlers.clear()
    logger.setLevel(numeric_level)
    logger.propagate = True

    return logger


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get or create a logger instance

    Args:
        name: Logger name
        level: Optional log level override

    Returns:
        Logger instance
    """
    if level:
        return setup_logger(name, level)
    return logging.getLogger(name)
