"""
Create an account from the command line (e.g. the first admin). Run from project root:
  python -m designhub.scripts.create_user EMAIL PASSWORD [--admin] [--user-type client|designer]
Example:
  python -m designhub.scripts.create_user admin@example.com your-secure-password --admin
"""
import argparse
import logging
import sys

from designhub.core.database import SessionLocal
from designhub.core.errors import MarketplaceError
from designhub.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from designhub.models.user import ROLE_ADMIN, ROLE_USER, USER_TYPES, USER_TYPE_CLIENT
from designhub.services import identity

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a DesignHub account.")
    parser.add_argument("email", help="Email address (login)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("--admin", action="store_true", help="Grant the admin role")
    parser.add_argument("--user-type", default=USER_TYPE_CLIENT, choices=USER_TYPES)
    parser.add_argument("--first-name")
    parser.add_argument("--last-name")
    parser.add_argument("--username", help="Designer handle")
    args = parser.parse_args(argv)

    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    role = ROLE_ADMIN if args.admin else ROLE_USER
    db = SessionLocal()
    try:
        user = identity.register(
            db,
            email=args.email,
            password=args.password,
            user_type=args.user_type,
            profile={
                "first_name": args.first_name,
                "last_name": args.last_name,
                "username": args.username,
            },
            role=role,
        )
    except MarketplaceError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created {user.user_type} '{user.email}' with role '{role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
