from __future__ import annotations

import argparse
import logging
import sys

import uvicorn

from intake.internal_core.config import ConfigurationError, load_config

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the intake draft backend.")
    parser.add_argument("--host", default=None, help="Bind host (default: INTAKE_HOST).")
    parser.add_argument("--port", type=int, default=None, help="Bind port (default: INTAKE_PORT).")
    parser.add_argument("--log-level", default=None, help="Log level (default: INTAKE_LOG_LEVEL).")
    args = parser.parse_args()

    try:
        config = load_config()
    except ConfigurationError as exc:
        logging.basicConfig(level=logging.ERROR, format=LOG_FORMAT)
        logging.getLogger("intake").error("config_invalid name=%s detail=%s", exc.name, exc.message)
        sys.exit(2)

    level = (args.log_level or config.INTAKE_LOG_LEVEL).upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)

    host = args.host or config.INTAKE_HOST
    port = args.port or config.INTAKE_PORT
    logging.getLogger("intake").info("listening host=%s port=%s", host, port)
    uvicorn.run("intake.api.main:app", host=host, port=port, log_level=level.lower())


if __name__ == "__main__":
    main()
