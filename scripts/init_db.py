from __future__ import annotations

from onduty.container import build_container
from onduty.database.bootstrap import apply_schema, list_tables
from onduty.database.connection import DBConfig, DatabaseConnection
from onduty.main import load_settings


def main() -> None:
    settings = load_settings({"STORE_BACKEND": "mysql", "AUTO_INIT_DB": False})
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(settings["DB_CONFIG"]))

    apply_schema(conn)
    # Building the container seeds the default admin when none exists.
    build_container(settings=settings)

    cfg = conn.config
    print(f"OK: Applied schema.sql -> {cfg.user}@{cfg.host}:{cfg.port}/{cfg.database} (tables={len(list_tables(conn))})")


if __name__ == "__main__":
    main()
