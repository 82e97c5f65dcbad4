"""Management commands for the mentorship backend."""

from __future__ import annotations

import dataclasses
import logging
import os
from typing import Optional

import click

from mentorship.core.config import load_settings
from mentorship.db.session import SessionLocal, configure_database, create_tables
from mentorship.domain.entities import UserRole
from mentorship.repositories.user_repo import UserRepository
from mentorship.services.auth_service import normalize_email

logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@click.group()
def cli() -> None:
    """Entry point for management commands."""
    configure_database(load_settings().database_url)


@cli.command("init-db")
def init_db() -> None:
    """Create all tables that do not exist yet."""
    create_tables()
    logging.info("Database tables created.")


@cli.command("ensure-admin")
@click.option(
    "--email",
    "email_override",
    default=None,
    help="Email of the user to promote. Overrides ADMIN_EMAIL environment variable.",
)
def ensure_admin(email_override: Optional[str]) -> None:
    """Promote an existing registered user to the admin role."""
    target_email = normalize_email(email_override or os.getenv("ADMIN_EMAIL"))
    if not target_email:
        raise click.ClickException(
            "ADMIN_EMAIL environment variable is not set and no --email provided."
        )

    session = SessionLocal()
    try:
        repo = UserRepository(session)
        user = repo.get_by_email(target_email)
        if user is None:
            raise click.ClickException(
                f"No user found with email '{target_email}'. Register it first."
            )

        if user.is_admin:
            logging.info("User %s already has admin role. No changes made.", target_email)
            return

        repo.update(dataclasses.replace(user, role=UserRole.ADMIN))
        logging.info("Promoted user %s (id=%s) to admin role.", target_email, user.id)
    finally:
        session.close()


if __name__ == "__main__":
    cli()
