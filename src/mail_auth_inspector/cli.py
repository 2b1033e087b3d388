"""Command line runner: analyze one message file and print the JSON report."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys

from mail_auth_inspector.config.settings import AppConfig, load_config
from mail_auth_inspector.core.errors import InspectorError, MessageLoadError
from mail_auth_inspector.domain.email.parse import parse_input_payload
from mail_auth_inspector.orchestrator.pipeline import analyze_message


def read_message_file(path: str | Path) -> str:
    p = Path(path)
    try:
        return p.read_bytes().decode("utf-8", errors="replace")
    except OSError as exc:
        raise MessageLoadError(f"cannot read {p}: {exc}") from exc


def run_once(raw: str, *, config: AppConfig | None = None, decoded_author: str | None = None) -> str:
    message = parse_input_payload(raw)
    report = analyze_message(message, decoded_author=decoded_author, config=config)
    return json.dumps(report.model_dump(mode="json", by_alias=True), ensure_ascii=True, indent=2)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mail-auth-inspector")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", help="Path to an .eml file or a JSON full-message record.")
    source.add_argument("--stdin", action="store_true", help="Read the message from standard input.")
    parser.add_argument("--profile", help="Config profile to use, e.g. strict.")
    parser.add_argument("--config", help="Path to a YAML config file.")
    parser.add_argument("--author", help="Pre-decoded From value to prefer over the raw header.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg, _ = load_config(args.config, profile_override=args.profile)
        logging.basicConfig(level=cfg.log_level, format="%(levelname)s %(name)s: %(message)s")
        raw = sys.stdin.read() if args.stdin else read_message_file(args.file)
        print(run_once(raw, config=cfg, decoded_author=args.author))
    except InspectorError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    return 0
