"""Uvicorn launch with access logging tuned for a polled health endpoint."""

import copy
import logging
from typing import Any

import uvicorn
from uvicorn.config import LOGGING_CONFIG

from sessiongate.app import App
from sessiongate.config import Config
from sessiongate.web.server import HEALTH_PATH, create_fastapi_app

ACCESS_FORMAT = '%(asctime)s - %(client_addr)s - "%(request_line)s" %(status_code)s'
DEFAULT_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


class HealthProbeFilter(logging.Filter):
    """Drop access lines for passing health probes. Failing probes are still logged."""

    def filter(self, record: logging.LogRecord) -> bool:
        # uvicorn.access args: (client_addr, method, path, http_version, status_code)
        if record.name != "uvicorn.access" or not isinstance(record.args, tuple) or len(record.args) != 5:
            return True
        _, method, path, _, status_code = record.args
        return not (method == "GET" and path == HEALTH_PATH and status_code == 200)


def build_log_config(config: Config) -> dict[str, Any]:
    """Uvicorn dictConfig derived from its defaults, without mutating them."""
    log_config = copy.deepcopy(LOGGING_CONFIG)
    log_config["filters"] = {"health_probe": {"()": HealthProbeFilter}}
    log_config["handlers"]["access"]["filters"] = ["health_probe"]
    log_config["formatters"]["access"]["fmt"] = ACCESS_FORMAT
    log_config["formatters"]["default"]["fmt"] = DEFAULT_FORMAT
    log_config["loggers"]["uvicorn"]["level"] = "DEBUG" if config.debug else "INFO"
    return log_config


def run_server(app: App, config: Config) -> None:
    uvicorn.run(
        create_fastapi_app(app, config),
        host=config.host,
        port=config.port,
        log_config=build_log_config(config),
        access_log=True,
    )
