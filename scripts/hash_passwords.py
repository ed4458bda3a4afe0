#!/usr/bin/env python3
"""
Rewrite plaintext passwords in users.json as Argon2 hashes.

Login keeps accepting both forms, so the file can be migrated at any time.

Usage:
  python scripts/hash_passwords.py [--users-file Data/users.json] [--dry-run]
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from taskboard.core.config import get_settings
from taskboard.core.security import hash_password, is_hashed
from taskboard.repositories.json_storage import UserStore


def migrate(store: UserStore, *, dry_run: bool = False) -> int:
    """Hash every plaintext password in ``store``. Returns how many were converted."""
    users = store.load()
    converted = 0
    for user in users:
        if user.password and not is_hashed(user.password):
            user.password = hash_password(user.password)
            converted += 1
    if converted and not dry_run:
        store.save(users)
    return converted


def main() -> None:
    ap = argparse.ArgumentParser(description="Hash plaintext passwords in users.json")
    ap.add_argument("--users-file", help="Path to users.json (default: from TASKBOARD_DATA_DIR)")
    ap.add_argument("--dry-run", action="store_true", help="Only report how many records would change")
    args = ap.parse_args()

    path = Path(args.users_file) if args.users_file else get_settings().users_path
    if not path.exists():
        raise SystemExit(f"File '{path}' does not exist")
    converted = migrate(UserStore(path), dry_run=args.dry_run)
    verb = "would be hashed" if args.dry_run else "hashed"
    print(f"OK: {converted} password(s) {verb} in {path}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
