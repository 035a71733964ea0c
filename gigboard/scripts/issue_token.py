"""
Mint a bearer token for a profile (sign-in itself is handled by the auth provider).
Usage: python -m gigboard.scripts.issue_token <profile_id> [--create --name "Full Name" --username handle]
"""
import argparse
import sys

from gigboard.core.security import create_access_token
from gigboard.database import SessionLocal, ensure_tables_exist
from gigboard.repos.profile_repo import create, get_by_id


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Issue an API token for a profile.")
    parser.add_argument("profile_id")
    parser.add_argument("--create", action="store_true", help="create the profile if it does not exist")
    parser.add_argument("--name", default=None)
    parser.add_argument("--username", default=None)
    parser.add_argument("--minutes", type=int, default=None, help="token lifetime override")
    args = parser.parse_args(argv)

    ensure_tables_exist()
    db = SessionLocal()
    try:
        profile = get_by_id(db, args.profile_id)
        if not profile:
            if not args.create:
                print(f"Profile not found: {args.profile_id} (pass --create to add it)")
                return 1
            profile = create(db, args.profile_id, full_name=args.name, username=args.username)
            print(f"Created profile {profile.id}")
        print(create_access_token(profile.id, expires_minutes=args.minutes))
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
