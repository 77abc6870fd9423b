"""
Unified Logger System.

JSON-only structured logging for the flyout server and client runtime.
Every record carries ``customDimensions`` with the component that emitted
it plus any panel/action correlation the caller attached.

Exports:
    ComponentType: Enum of logging components
    LogLevel: Enum of log levels
    LogContext: Correlation fields for a remote action round trip
    JSONFormatter: One JSON object per record
    LoggerFactory: Builds component loggers

Dependencies:
    Standard library only (logging, enum, dataclasses, json)
"""

from enum import Enum
from typing import Optional, Dict, Any
from datetime import datetime, timezone
from dataclasses import dataclass
import logging
import sys
import os
import json


# ============================================================================
# COMPONENT TYPES
# ============================================================================

class ComponentType(Enum):
    """Layers of the panel architecture that log separately."""
    PANEL = "panel"            # Panel model and markup assembly
    DISPATCHER = "dispatcher"  # Remote action dispatch and security gate
    REGISTRY = "registry"      # Panel registry and bootstrap assembly
    TRIGGER = "trigger"        # HTTP entry point layer
    CLIENT = "client"          # Client panel manager runtime
    SYNC = "sync"              # Table sync reconciler


# ============================================================================
# LOG LEVELS
# ============================================================================

class LogLevel(Enum):
    """Standard Python log levels as enum for type safety."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    def to_python_level(self) -> int:
        return getattr(logging, self.value)

    @classmethod
    def from_string(cls, level: str) -> 'LogLevel':
        """Case-insensitive lookup; raises KeyError for unknown names."""
        return cls[level.strip().upper()]


def level_from_environment() -> LogLevel:
    """
    Resolve the default level.

    DEBUG_LOGGING=true wins; otherwise LOG_LEVEL, falling back to INFO when
    unset or unknown.
    """
    if os.getenv('DEBUG_LOGGING', '').lower() == 'true':
        return LogLevel.DEBUG
    try:
        return LogLevel.from_string(os.getenv('LOG_LEVEL', 'INFO'))
    except KeyError:
        return LogLevel.INFO


# ============================================================================
# LOG CONTEXT
# ============================================================================

@dataclass
class LogContext:
    """Correlation for a remote action round trip."""
    panel_id: Optional[str] = None
    action: Optional[str] = None  # wire name, e.g. products_load
    request_id: Optional[str] = None
    user_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Non-empty fields only."""
        fields = {
            'panel_id': self.panel_id,
            'action': self.action,
            'request_id': self.request_id,
            'user_id': self.user_id,
        }
        return {k: v for k, v in fields.items() if v is not None}


# ============================================================================
# DIMENSION FILTER
# ============================================================================

class _DimensionFilter(logging.Filter):
    """
    Merges component identity and bound context into record.custom_dimensions.

    Dimensions passed per call via ``extra={'custom_dimensions': ...}`` take
    precedence over the bound context.
    """

    def __init__(self, component_type: ComponentType, name: str, context: Optional[LogContext]):
        super().__init__()
        self.base = {'component_type': component_type.value, 'component_name': name}
        if context is not None:
            self.base.update(context.to_dict())

    def filter(self, record: logging.LogRecord) -> bool:
        dims = dict(self.base)
        dims.update(getattr(record, 'custom_dimensions', None) or {})
        record.custom_dimensions = dims
        return True


# ============================================================================
# JSON FORMATTER
# ============================================================================

class JSONFormatter(logging.Formatter):
    """JSON formatter: one object per record so log shippers can parse it directly."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name,
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        custom_dimensions = getattr(record, 'custom_dimensions', None)
        if custom_dimensions:
            log_obj['customDimensions'] = custom_dimensions

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            log_obj['exception'] = {
                'type': exc_type.__name__ if exc_type else None,
                'message': str(exc_value) if exc_value else None,
                'traceback': self.formatException(record.exc_info),
            }

        return json.dumps(log_obj, default=str)


# ============================================================================
# LOGGER FACTORY
# ============================================================================

class LoggerFactory:
    """
    Factory for component loggers.

    Loggers are named ``{component}.{name}`` and get exactly one stdout JSON
    handler and one dimension filter however often they are requested.

    Example:
        logger = LoggerFactory.create_logger(ComponentType.DISPATCHER, "ActionDispatcher")
        logger.info("Dispatching products_load")
    """

    @classmethod
    def create_logger(
        cls,
        component_type: ComponentType,
        name: str,
        context: Optional[LogContext] = None,
        level: Optional[LogLevel] = None,
    ) -> logging.Logger:
        """
        Create (or fetch) a logger for a component.

        Args:
            component_type: Layer emitting the records
            name: Component name (e.g., "ActionDispatcher")
            context: Correlation bound to every record
            level: Override for the environment default

        Returns:
            Configured Python logger
        """
        logger = logging.getLogger(f"{component_type.value}.{name}")
        python_level = (level or level_from_environment()).to_python_level()
        logger.setLevel(python_level)

        if not any(isinstance(h.formatter, JSONFormatter) for h in logger.handlers):
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(JSONFormatter())
            logger.addHandler(handler)
        for handler in logger.handlers:
            if isinstance(handler.formatter, JSONFormatter):
                handler.setLevel(python_level)

        for old in [f for f in logger.filters if isinstance(f, _DimensionFilter)]:
            logger.removeFilter(old)
        logger.addFilter(_DimensionFilter(component_type, name, context))

        return logger
