"""CLI entrypoint for mail_auth_inspector."""

from __future__ import annotations

from mail_auth_inspector.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
