"""btcchecker entrypoint.

Run with:
  python -m btcchecker --config-path configs/btcchecker.yml
"""

import argparse
import logging

import uvicorn

from btcchecker.app import create_app
from btcchecker.config import DEFAULT_CONFIG_PATH, load_config
from btcchecker.observability import setup_logging

logger = logging.getLogger("btcchecker")


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(prog="btcchecker")
    parser.add_argument("--config-path", default=None, help=f"path to config file (default: {DEFAULT_CONFIG_PATH})")
    args = parser.parse_args(argv)

    config = load_config(args.config_path)
    setup_logging(config.log_level, config.log_format)
    host, port = config.host_port()

    app = create_app(config)
    logger.info("starting server on %s:%s", host, port)
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
