"""Bootstrap a local .env file with fresh secrets."""

from __future__ import annotations

import argparse
import os
import secrets
import sys
from pathlib import Path

GENERATED_SECRETS = ("ADMIN_TOKEN", "POSTGRES_PASSWORD")


def _is_placeholder(value: str) -> bool:
    return "CHANGE_ME" in value or value.strip() == ""


def _parse_kv_line(line: str) -> tuple[str, str] | None:
    if "=" not in line or line.lstrip().startswith("#"):
        return None
    key, _, value = line.partition("=")
    return key.strip(), value.strip()


def build_values(
    template_lines: list[str],
    *,
    db_host: str,
    db_port: str,
    force_rotate: bool,
) -> dict[str, str]:
    existing = dict(filter(None, (_parse_kv_line(line) for line in template_lines)))

    values: dict[str, str] = {}
    for key in GENERATED_SECRETS:
        current = existing.get(key, "")
        values[key] = secrets.token_urlsafe(32) if force_rotate or _is_placeholder(current) else current

    user = existing.get("POSTGRES_USER", "postgres")
    database = existing.get("POSTGRES_DB", "synthgate")
    values["DATABASE_URL"] = (
        f"postgresql+asyncpg://{user}:{values['POSTGRES_PASSWORD']}@{db_host}:{db_port}/{database}"
    )
    return values


def write_env(template_lines: list[str], values: dict[str, str]) -> str:
    rendered: list[str] = []
    for line in template_lines:
        parsed = _parse_kv_line(line)
        if parsed and parsed[0] in values:
            rendered.append(f"{parsed[0]}={values[parsed[0]]}\n")
        else:
            rendered.append(line)
    return "".join(rendered)


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate a .env file from .env.example")
    parser.add_argument("--path", default=None, help="Output path (default: repo root/.env)")
    parser.add_argument("--db-host", default="localhost", help="Database host (default: localhost)")
    parser.add_argument("--db-port", default="5432", help="Database port (default: 5432)")
    parser.add_argument("--rotate", action="store_true", help="Regenerate secrets already set")
    parser.add_argument("--force", action="store_true", help="Overwrite an existing .env")
    args = parser.parse_args()

    repo_root = Path(__file__).resolve().parents[2]
    template_path = repo_root / ".env.example"
    if not template_path.exists():
        print(f"Template not found: {template_path}", file=sys.stderr)
        return 1

    env_path = Path(args.path) if args.path else repo_root / ".env"
    if env_path.exists() and not args.force:
        print(f"{env_path} already exists. Use --force to overwrite.", file=sys.stderr)
        return 1

    template_lines = template_path.read_text(encoding="utf-8").splitlines(keepends=True)
    values = build_values(
        template_lines,
        db_host=args.db_host,
        db_port=args.db_port,
        force_rotate=args.rotate,
    )
    env_path.write_text(write_env(template_lines, values), encoding="utf-8")

    if os.name != "nt":
        try:
            env_path.chmod(0o600)
        except OSError:
            pass

    print(f"Wrote {env_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
