import os

from coursetrack.adapters.auth.crypto import Argon2JWTAuthAdapter
from coursetrack.adapters.sqlite.migrator import SQLiteMigrator
from coursetrack.adapters.sqlite.repos import SQLitePrincipalRepo
from coursetrack.domain.entities import Principal

SEED_PRINCIPALS = [
    ("student", "changeme", "student"),
    ("admin", "changeme", "admin"),
]


def seed() -> None:
    data_dir = os.environ.get("COURSETRACK_DATA_DIR", "./data")
    os.makedirs(data_dir, exist_ok=True)

    db_path = f"{data_dir}/coursetrack.db"
    print(f"Seeding to {db_path}")

    SQLiteMigrator(db_path, "migrations").run_migrations()

    repo = SQLitePrincipalRepo(db_path)
    hasher = Argon2JWTAuthAdapter()
    for username, password, role in SEED_PRINCIPALS:
        if repo.get_by_username(username):
            print(f"Principal {username} already exists")
            continue
        repo.save(
            Principal(
                username=username,
                password_hash=hasher.hash_password(password),
                role=role,
            )
        )
        print(f"Created {role}: {username} / {password}")


if __name__ == "__main__":
    seed()
