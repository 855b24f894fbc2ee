"""Run the pagecraft API with ``python -m server``."""

import os

import uvicorn

from pagecraft.utils.logging_config import configure_logging, get_logger

logger = get_logger(__name__)


def main() -> None:
    """Serve ``server.main:app``; HOST, PORT and RELOAD come from the environment."""
    configure_logging()
    bind_host = os.getenv("HOST", "127.0.0.1")
    bind_port = int(os.getenv("PORT", "8000"))
    auto_reload = os.getenv("RELOAD", "").lower() in {"1", "true", "yes"}

    logger.info("Serving pagecraft", extra={"host": bind_host, "port": bind_port, "reload": auto_reload})
    # uvicorn's own dictConfig would replace the root handler.
    uvicorn.run("server.main:app", host=bind_host, port=bind_port, reload=auto_reload, log_config=None)


if __name__ == "__main__":
    main()
