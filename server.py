import logging

import uvicorn

from Intentive.app import create_app
from Intentive.config import load_settings
from Intentive.telemetry import configure_logging

# ------------------ Settings + log config ------------------
# Credentials and port are read from the environment exactly once, here.
settings = load_settings()
logger = configure_logging(settings)

app = create_app(settings)


def main() -> None:
    # Serverless hosts (VERCEL=1) import `app` and bind the socket themselves.
    if settings.serverless:
        logging.getLogger("intentive.server").info("serverless mode, not binding a port")
        return
    logger.info("Local server listening at http://localhost:%d", settings.port)
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":       # Run locally: python server.py  (or: uvicorn server:app --port 3001)
    main()
