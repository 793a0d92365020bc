"""Logging setup for the holdfix command and its repair loop."""
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, MutableMapping, Tuple

from ..configuration.settings import LoggingSettings

# Loggers that narrate individual repair attempts
REPAIR_LOGGERS = (
    'holdfix.domain.services.repair_scheduler',
    'holdfix.domain.services.wirelength',
    'holdfix.infrastructure.routing.maze_router',
)


def setup_logging(settings: LoggingSettings) -> None:
    """Configure the root logger for one holdfix run.

    ``repair_trace`` drops the repair loggers to DEBUG so every attempt,
    avoid set size and rerouted length is shown; explicit
    ``component_levels`` entries still win.
    """
    level = getattr(logging, settings.level.upper())
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    formatter = logging.Formatter(fmt=settings.format_string, datefmt=settings.date_format)
    handlers = []
    if settings.console_output:
        handlers.append(logging.StreamHandler(sys.stdout))
    if settings.file_output:
        log_path = Path(settings.log_file)
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.handlers.RotatingFileHandler(
                filename=str(log_path),
                maxBytes=settings.max_file_size_mb * 1024 * 1024,
                backupCount=settings.backup_count,
                encoding='utf-8'
            ))
        except OSError as e:
            root_logger.error(f"Cannot write log file {log_path}: {e}")

    # Handlers stay at NOTSET; logger levels alone decide what is emitted
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    component_levels = {}
    if settings.repair_trace:
        component_levels.update((name, 'DEBUG') for name in REPAIR_LOGGERS)
    component_levels.update(settings.component_levels)
    for component, component_level in component_levels.items():
        logging.getLogger(component).setLevel(getattr(logging, component_level.upper()))

    root_logger.debug(f"holdfix logging at {settings.level}, repair trace {'on' if settings.repair_trace else 'off'}")


class ContextLogger(logging.LoggerAdapter):
    """Prefixes records with the connection being repaired, e.g. ``[net=n1 sink=S.A1]``."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        if not self.extra:
            return msg, kwargs
        context = " ".join(f"{k}={v}" for k, v in self.extra.items())
        return f"[{context}] {msg}", kwargs


def get_context_logger(name: str, **context) -> ContextLogger:
    return ContextLogger(logging.getLogger(name), context)
