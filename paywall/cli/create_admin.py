"""Create the platform's admin account, or promote an existing account to admin.

This is the only way to grant the admin role; the HTTP API never changes roles.

Usage:
    paywall-create-admin --email admin@example.com --name "Admin Name"
    (prompts for the password when --password is omitted)
"""

import logging
from typing import Optional

import click
from dotenv import load_dotenv

from paywall.app.passwords import hash_password
from paywall.db.connection import get_provider
from paywall.db.users import create_user, get_user_by_email, set_user_role
from paywall.models.user import User

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def ensure_admin(email: str, name: str, password: str) -> tuple[User, bool]:
    """Make sure an admin account exists for `email`.

    An existing account keeps its password and is promoted if needed.

    Returns:
        The admin user and whether it was newly created.
    """
    existing = get_user_by_email(email)
    if existing is not None:
        if existing.is_admin:
            logger.info(f"Admin user already exists: {email}")
            return existing, False
        promoted = set_user_role(existing.id, "admin")
        logger.info(f"Promoted existing user id={existing.id} to admin")
        return promoted or existing, False

    user = create_user(
        email=email,
        name=name,
        password_hash=hash_password(password),
        role="admin",
        login_method="email",
    )
    return user, True


@click.command("create-admin")
@click.option("--email", required=True)
@click.option("--name", required=True)
@click.option(
    "--password",
    help="Password for a new account (prompted when omitted; ignored for existing accounts)",
)
def main(email: str, name: str, password: Optional[str]) -> None:
    """Create or promote the platform admin."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s - %(message)s")
    load_dotenv(".env.dev")

    if not get_provider().available:
        raise click.ClickException("DATABASE_URL is not set")

    if get_user_by_email(email) is None:
        if password is None:
            password = click.prompt("Password", hide_input=True)
        if len(password) < MIN_PASSWORD_LENGTH:
            raise click.ClickException(
                f"password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
    elif password is not None:
        click.echo(f"{email} already exists; its password was left unchanged")

    user, created = ensure_admin(email, name, password or "")
    if created:
        click.echo(f"Admin user created: {user.email} (id={user.id})")
    else:
        click.echo(f"Admin user ready: {user.email} (id={user.id})")


if __name__ == "__main__":
    main()
