"""Run the API server with Uvicorn: ``python -m wikipedia_potd``."""

import uvicorn

from wikipedia_potd.server.core.config import settings


def main() -> None:
    uvicorn.run(
        "wikipedia_potd.server.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
