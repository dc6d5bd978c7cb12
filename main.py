#!/usr/bin/env python3
"""
Conferidor FastAPI Application Entrypoint

The application is built in conferidor/api.py; this file only loads .env,
configures logging and starts uvicorn with the host, port and log level from AppConfig.
"""
from dotenv import load_dotenv

load_dotenv()

from conferidor.api import app  # noqa: E402
from conferidor.config import configure_logging  # noqa: E402

UVICORN_LOG_LEVELS = {"critical", "error", "warning", "info", "debug", "trace"}

configure_logging(app.state.config)


def uvicorn_log_level(level: str) -> str:
    level = level.lower()
    return level if level in UVICORN_LOG_LEVELS else "info"


if __name__ == "__main__":
    import uvicorn

    config = app.state.config
    uvicorn.run(app, host=config.host, port=config.port, log_level=uvicorn_log_level(config.log_level))
