"""Create the bootstrap administrator so the first admin can sign in.

Usage: python scripts/seed_db.py [--name NAME] [--email EMAIL] [--department DEPT]
"""

from __future__ import annotations

import argparse
import importlib

from dotenv import load_dotenv

from recognition_system.config import get_settings_module
from recognition_system.container import build_container
from recognition_system.core.enums import Role


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--name", default="System Administrator")
    parser.add_argument("--email", default="admin@company.com")
    parser.add_argument("--department", default="System Administration")
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=dict(settings.DB_CONFIG), backend=settings.STORAGE_BACKEND)

    existing = container.users_repo.get_by_email(args.email.lower())
    if existing:
        print(f"OK: {existing.email} already exists (user_id={existing.user_id}, role={existing.role.value})")
        return

    admin = container.user_service.add_user(
        name=args.name,
        email=args.email,
        department=args.department,
        role=Role.ADMIN,
    )
    print(f"OK: Created administrator {admin.email} (user_id={admin.user_id})")


if __name__ == "__main__":
    main()
