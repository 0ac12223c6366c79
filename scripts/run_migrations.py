#!/usr/bin/env python3
"""Apply DevTyper schema migrations.

Upgrades to ``head`` by default; pass a revision to target another one.
"""

import sys
import logfire
from alembic import command
from alembic.config import Config

from devtyper.config import Settings
from devtyper.util.observability import configure_logfire


def main(argv: list[str]) -> int:
    """Run migrations and log any errors to Logfire."""
    settings = Settings()
    configure_logfire(settings)

    revision = argv[0] if argv else "head"

    try:
        logfire.info("Applying migrations", revision=revision)

        # alembic.ini points at migrations/; the URL comes from settings
        alembic_cfg = Config("alembic.ini")
        command.upgrade(alembic_cfg, revision)

        logfire.info("Migrations applied", revision=revision)
        return 0

    except Exception as e:
        logfire.error(
            "Database migration failed",
            revision=revision,
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        # Re-raise so the container fails and doesn't start with broken schema
        raise


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
