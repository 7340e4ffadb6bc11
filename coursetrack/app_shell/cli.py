import argparse
import getpass
import json
import logging
import sys
from pathlib import Path
from uuid import UUID

from coursetrack.adapters.auth.crypto import Argon2JWTAuthAdapter
from coursetrack.adapters.sqlite.migrator import SQLiteMigrator
from coursetrack.adapters.sqlite.repos import SQLitePrincipalRepo, SQLiteProgressRepo
from coursetrack.api.deps import Settings
from coursetrack.app_shell.config import ConfigurationError, validate_ops_rules
from coursetrack.domain.entities import Principal
from coursetrack.rules.loader import load_rules

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("cli")


def handle_migrate(settings: Settings, args: argparse.Namespace) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    migrator = SQLiteMigrator(settings.db_path, settings.migrations_dir)
    if args.dry_run:
        for filename in migrator.pending():
            print(f"pending: {filename}")
        return
    applied = migrator.run_migrations()
    print(f"Applied {len(applied)} migration(s) to {settings.db_path}")


def handle_add_user(settings: Settings, args: argparse.Namespace) -> None:
    repo = SQLitePrincipalRepo(settings.db_path)
    if repo.get_by_username(args.username):
        logger.error("Principal %s already exists.", args.username)
        sys.exit(1)

    password = args.password or getpass.getpass(f"Password for {args.username}: ")
    if not password:
        logger.error("Password must not be empty.")
        sys.exit(1)

    principal = Principal(
        username=args.username,
        password_hash=Argon2JWTAuthAdapter().hash_password(password),
        role=args.role,
    )
    repo.save(principal)
    print(f"Created {principal.role} '{principal.username}' ({principal.id})")


def handle_show(settings: Settings, args: argparse.Namespace) -> None:
    principal_repo = SQLitePrincipalRepo(settings.db_path)
    principal = principal_repo.get_by_username(args.principal)
    if principal is None:
        try:
            principal = principal_repo.get_by_id(UUID(args.principal))
        except ValueError:
            principal = None
    if principal is None:
        logger.error("Principal %s not found.", args.principal)
        sys.exit(1)

    record = SQLiteProgressRepo(settings.db_path).get_record(principal.id)
    if record is None:
        logger.error("No progress record for %s.", principal.id)
        sys.exit(1)
    print(json.dumps(record.model_dump(mode="json", by_alias=True), indent=2))


def handle_serve(settings: Settings, args: argparse.Namespace) -> None:
    import uvicorn

    uvicorn.run("coursetrack.api.main:app", host=args.host, port=args.port, reload=args.reload)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Course progress tracker CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # migrate
    migrate_parser = subparsers.add_parser("migrate", help="Apply pending schema migrations")
    migrate_parser.add_argument("--dry-run", action="store_true", help="Only list pending files")

    # add-user
    add_parser = subparsers.add_parser("add-user", help="Create a principal")
    add_parser.add_argument("username")
    add_parser.add_argument("--password", help="Prompted for when omitted")
    add_parser.add_argument("--role", choices=["student", "admin"], default="student")

    # show
    show_parser = subparsers.add_parser("show", help="Print a learner record as JSON")
    show_parser.add_argument("principal", help="Username or principal id")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.add_argument("--reload", action="store_true")

    args = parser.parse_args(argv)

    settings = Settings()
    if not Path(settings.rules_path).exists():
        logger.error("Rules file %s not found.", settings.rules_path)
        sys.exit(1)
    try:
        validate_ops_rules(load_rules(settings.rules_path))
    except (ConfigurationError, ValueError) as e:
        logger.error("%s", e)
        sys.exit(1)

    handlers = {
        "migrate": handle_migrate,
        "add-user": handle_add_user,
        "show": handle_show,
        "serve": handle_serve,
    }
    handlers[args.command](settings, args)


if __name__ == "__main__":
    main()
