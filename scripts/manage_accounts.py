#!/usr/bin/env python3
"""Account maintenance helper for bjjfed.

Creates login accounts for existing members and resets passwords, for
example when the default admin password has been lost.
"""
from __future__ import annotations

import argparse
import getpass
import os
import sqlite3

import bcrypt

from bjjfed.config import Config
from bjjfed.db import init_db, make_db_factory
from bjjfed.models import VALID_ROLES
from bjjfed.repositories import AccountRepository


def resolve_db_path(cli_path: str | None) -> str:
    if cli_path:
        return cli_path
    return os.getenv("DATABASE_PATH", Config.DATABASE_PATH)


def ensure_parent_dir(path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def read_password(cli_password: str | None) -> str:
    if cli_password:
        return cli_password
    password = getpass.getpass("New password: ")
    if password != getpass.getpass("Repeat password: "):
        raise SystemExit("Passwords do not match")
    return password


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def create_account(repo: AccountRepository, args) -> int:
    try:
        account_id = repo.create(args.username, hash_password(read_password(args.password)), args.role, args.member_id)
    except sqlite3.IntegrityError:
        print(f"Username {args.username} already exists.")
        return 1
    print(f"Account {args.username} created (id {account_id}).")
    return 0


def reset_password(repo: AccountRepository, args) -> int:
    row = repo.get_for_login(args.username)
    if not row:
        print(f"No account named {args.username}.")
        return 1
    repo.update_password(row[0], hash_password(read_password(args.password)))
    print(f"Password for {args.username} updated.")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="bjjfed account helper")
    parser.add_argument(
        "--db",
        dest="db_path",
        default=None,
        help="Path to SQLite DB (defaults to DATABASE_PATH or config)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    create = subparsers.add_parser("create", help="Create a login account for a member")
    create.add_argument("username")
    create.add_argument("--role", choices=VALID_ROLES, required=True)
    create.add_argument("--member-id", required=True)
    create.add_argument("--password", default=None)

    reset = subparsers.add_parser("reset-password", help="Reset an account password")
    reset.add_argument("username")
    reset.add_argument("--password", default=None)

    args = parser.parse_args()

    db_path = resolve_db_path(args.db_path)
    ensure_parent_dir(db_path)
    init_db(db_path)
    repo = AccountRepository(make_db_factory(db_path))

    if args.command == "create":
        return create_account(repo, args)
    return reset_password(repo, args)


if __name__ == "__main__":
    raise SystemExit(main())
