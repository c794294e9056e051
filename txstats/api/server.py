"""
Server entry point.

    $ txstats-server
    $ TXSTATS_SERVER_PORT=8080 txstats-server
"""

import uvicorn

from txstats.api.app import create_app
from txstats.audit import configure_logging
from txstats.config import get_settings


def main() -> None:
    settings = get_settings()
    server = settings.server

    configure_logging(server.log_level)

    uvicorn.run(
        create_app(settings=settings),
        host=server.host,
        port=server.port,
        log_level=server.log_level,
    )


if __name__ == "__main__":
    main()
