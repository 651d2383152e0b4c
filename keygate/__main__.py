"""keygate entry point: configure logging and serve the forward-auth app."""

import logging
import sys

from aiohttp import web

from keygate.config import load_config
from keygate.server import create_app

log = logging.getLogger(__name__)


def main() -> None:
    config = load_config()

    logging.basicConfig(
        level=getattr(logging, config["logging"]["level"].upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    server = config["server"]
    log.info(
        "Starting keygate on %s:%s (forward header %s)",
        server["host"],
        server["port"],
        config["auth"]["forward_header"],
    )
    web.run_app(create_app(config), host=server["host"], port=server["port"], print=None)


if __name__ == "__main__":
    main()
