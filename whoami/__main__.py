# -*- coding: utf-8 -*-

from __future__ import annotations
import sys
import logging
from typing import List, Optional

from werkzeug.serving import make_server

from whoami.app import create_app
from whoami.config import build_parser, load_config
from whoami.version import version_banner

logger = logging.getLogger("whoami")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.version:
        sys.stdout.write(version_banner())
        return 0

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )
    config = load_config(args)
    if config.verbose:
        logger.info("Starting whoami server on port %d", config.port)
        logger.info("Name: %s", config.name)
        logger.info("Verbose logging enabled")

    app = create_app(config)
    try:
        server = make_server("0.0.0.0", config.port, app, threaded=True)
    except (OSError, SystemExit) as exc:
        # werkzeug reports bind errors itself and raises SystemExit
        logger.error("Server failed to start on port %d: %s", config.port, exc)
        return 1

    logger.info("Server listening on :%d", config.port)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        server.server_close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
