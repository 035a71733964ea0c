"""
Create missing tables without touching existing data.
Usage: python -m gigboard.scripts.ensure_tables
"""
from gigboard.database import ensure_tables_exist
from gigboard.logging_config import setup_logging


def main():
    setup_logging()
    ensure_tables_exist()
    print("DB table check complete: created only missing tables.")


if __name__ == "__main__":
    main()
