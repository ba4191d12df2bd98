"""Simple server runner that keeps uvicorn alive."""
import logging
import os
import signal
import sys

import uvicorn

logger = logging.getLogger("run_server")


def handle_signal(sig, frame):
    logger.info(f"Received signal {sig}, shutting down")
    sys.exit(0)


signal.signal(signal.SIGINT, handle_signal)
signal.signal(signal.SIGTERM, handle_signal)

if __name__ == "__main__":
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Starting Customer Image API on {host}:{port}")
    uvicorn.run("app.main:app", host=host, port=port, log_level="info")
