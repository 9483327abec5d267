"""
Create an additional admin account. Run from project root:
  python -m app.scripts.create_admin
Prompts for any of --username/--email/--password not given on the command line.
Example:
  python -m app.scripts.create_admin --username ops --email ops@energy.com
"""
import argparse
import getpass
import logging
import sys

from app.core.database import SessionLocal
from app.models.user import Role
from app.services.errors import DuplicateEmailError, StoreError, ValidationFailedError
from app.services.users import create_user

MISSING_TABLE_MARKERS = ("no such table", "does not exist")


def _prompt(value: str | None, label: str, secret: bool = False) -> str:
    if value is not None:
        return value
    if secret:
        return getpass.getpass(f"Enter admin {label}: ")
    return input(f"Enter admin {label}: ")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an Energy Tracker admin user.")
    parser.add_argument("--username", help="Display name (non-empty)")
    parser.add_argument("--email", help="Login email (must contain '@')")
    parser.add_argument("--password", help="Password (min 6 characters)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s %(message)s")

    print("This script will create a new admin user for the Energy Tracker.\n")
    try:
        username = _prompt(args.username, "username")
        email = _prompt(args.email, "email")
        password = _prompt(args.password, "password (min 6 characters)", secret=True)
    except (EOFError, KeyboardInterrupt):
        print("\nAborted.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        user = create_user(
            db,
            username=username,
            email=email,
            password=password,
            location=None,
            role=Role.ADMIN,
        )
    except ValidationFailedError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except DuplicateEmailError:
        print(
            f"Error: email '{email}' already exists. Use a different email address.",
            file=sys.stderr,
        )
        return 1
    except StoreError as e:
        print(f"Error creating admin: {e.message}", file=sys.stderr)
        cause = str(e.__cause__ or "").lower()
        if any(marker in cause for marker in MISSING_TABLE_MARKERS):
            print(
                "Database tables not found. Start the API once or run "
                "'alembic upgrade head' to initialize the database.",
                file=sys.stderr,
            )
        return 1
    finally:
        db.close()

    # One-time echo of the credentials to the operator; never logged.
    print("Admin user created successfully.")
    print(f"  Username: {user.username}")
    print(f"  Email:    {user.email}")
    print(f"  Password: {password}")
    print(f"  Role:     {user.role.value.upper()}")
    print("Keep these credentials secure.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
