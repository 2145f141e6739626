"""Entry point for the notable events dashboard backend."""

import logging
import sys

from notables.app import create_app
from notables.config import Config


def main():
    config = Config.from_env()
    logging.basicConfig(
        level=getattr(logging, str(config["logging"]["level"]).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
        stream=sys.stderr,
    )

    app = create_app(config)
    server = config["server"]
    logging.getLogger(__name__).info("Dashboard API listening on %s:%d", server["host"], server["port"])
    app.run(host=server["host"], port=server["port"], debug=server["debug"], use_reloader=False)


# For gunicorn: `gunicorn 'notables.app:create_app()'`
if __name__ == "__main__":
    main()
