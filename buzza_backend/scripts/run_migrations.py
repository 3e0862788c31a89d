"""Run database migrations.

Usage:
    python -m buzza_backend.scripts.run_migrations [upgrade|downgrade|current|history] [--revision REV]
"""

from __future__ import annotations

import argparse
from pathlib import Path

from alembic import command
from alembic.config import Config

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _config() -> Config:
    alembic_cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(PROJECT_ROOT / "buzza_backend" / "migrations"))
    return alembic_cfg


def upgrade(revision: str = "head") -> None:
    """Run migrations up to ``revision``."""
    command.upgrade(_config(), revision)
    print(f"Upgraded to {revision}")


def downgrade(revision: str = "-1") -> None:
    """Downgrade to a specific revision."""
    command.downgrade(_config(), revision)
    print(f"Downgraded to {revision}")


def current() -> None:
    command.current(_config(), verbose=True)


def history() -> None:
    command.history(_config(), verbose=True)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run database migrations")
    parser.add_argument(
        "command",
        choices=["upgrade", "downgrade", "current", "history"],
        default="upgrade",
        nargs="?",
        help="Migration command to run",
    )
    parser.add_argument("--revision", default=None, help="Target revision")
    args = parser.parse_args(argv)

    if args.command == "upgrade":
        upgrade(args.revision or "head")
    elif args.command == "downgrade":
        downgrade(args.revision or "-1")
    elif args.command == "current":
        current()
    elif args.command == "history":
        history()


if __name__ == "__main__":
    main()
