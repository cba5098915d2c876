"""
Process entry point: `python -m notekeeper` (or the `notekeeper` script).

Serves the application with uvicorn on the configured host and port.
"""

import uvicorn

from notekeeper.config import settings


def main() -> None:
    uvicorn.run(
        "notekeeper.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
