#!/usr/bin/env python3
"""Start the DevTyper API under uvicorn.

Logging and Logfire are configured before the app module is imported so
that startup failures are reported.
"""

import sys
import logfire
import uvicorn

from devtyper.config import Settings
from devtyper.util.logging import setup_logging
from devtyper.util.observability import configure_logfire


def main() -> int:
    """Start the application and log any startup errors to Logfire."""
    settings = Settings()

    setup_logging(settings)
    configure_logfire(settings)

    try:
        logfire.info(
            "Starting DevTyper API",
            environment=settings.environment,
            port=settings.port,
            git_sha=settings.git_sha,
        )

        uvicorn.run(
            "devtyper.interface.api.app:app",
            host="0.0.0.0",
            port=settings.port,
            log_level="debug" if settings.debug else "info",
            proxy_headers=settings.environment not in ("test", "development"),
        )

        return 0

    except Exception as e:
        logfire.error(
            "Application startup failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        # Re-raise so the container fails properly
        raise


if __name__ == "__main__":
    sys.exit(main())
