"""Run the API with uvicorn: python -m msls."""

import logging

import uvicorn

from msls.core.config import get_settings
from msls.shared.logging import setup_logging
from msls.shared.utils.durations import format_duration

logger = logging.getLogger("msls")


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log)
    server = settings.server
    logger.info(
        "Starting %s on %s (env=%s, idle timeout %s, request timeout %s)",
        settings.app.name,
        server.address,
        settings.app.env,
        format_duration(server.idle_timeout),
        format_duration(server.request_timeout),
    )
    logger.info(
        "Read timeout %s and write timeout %s are not enforced by uvicorn; "
        "set them on the fronting proxy",
        format_duration(server.read_timeout),
        format_duration(server.write_timeout),
    )
    uvicorn.run(
        "msls.main:app",
        host=server.host,
        port=server.port,
        timeout_keep_alive=max(1, int(server.idle_timeout.total_seconds())),
        log_config=None,
        proxy_headers=True,
    )


if __name__ == "__main__":
    main()
