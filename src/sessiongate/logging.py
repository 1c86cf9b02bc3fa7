import logging

import structlog

from sessiongate.config import Config

# Store drivers log every connection and command at DEBUG
DRIVER_LOGGERS = ("pymongo", "redis")


def uses_console_renderer(config: Config) -> bool:
    if config.log_format is not None:
        return config.log_format == "console"
    return config.debug


def setup_logging(config: Config) -> None:
    """Route structlog through stdlib logging with one renderer for the whole process."""
    log_level = logging.DEBUG if config.debug else logging.INFO
    logging.basicConfig(level=log_level, format="%(message)s", force=True)

    for name in DRIVER_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    processors: list[structlog.types.Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if uses_console_renderer(config):
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors += [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
