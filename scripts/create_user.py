#!/usr/bin/env python3
from __future__ import annotations

import argparse
from getpass import getpass

from btcchecker.app import build_store
from btcchecker.config import load_config
from btcchecker.errors import ConflictError, ValidationError


def main() -> None:
    parser = argparse.ArgumentParser(description="Register a btcchecker user")
    parser.add_argument("--config-path", default=None)
    args = parser.parse_args()

    config = load_config(args.config_path)
    store = build_store(config)

    email = input("Email: ").strip()
    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")

    try:
        store.add_user(email, pw1)
    except ConflictError:
        raise SystemExit(f"{email} is already registered")
    except ValidationError as e:
        raise SystemExit(str(e))

    print(f"OK -> {store.path} ({len(store)} users)")


if __name__ == "__main__":
    main()
