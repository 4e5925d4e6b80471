# toolbox/main.py
import os, sys
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from dataclasses import replace

from core.logs import configure_logging, ensure_logger
from core.settings import BACKUP, DB_PATH
from services.commands import CommandBridge, serve_stdio
from services.store import RecordStore
from storage.config import load_config


def main() -> int:
    config = load_config()
    configure_logging(level=config.log_level, sql_echo=config.sql_echo)
    logger = ensure_logger()

    backup = replace(BACKUP, enabled=config.backup_enabled, keep_days=config.backup_keep_days)
    store = RecordStore.open(DB_PATH, backup=backup)
    logger.info("Serving %d commands on stdio", len(store.commands))
    try:
        serve_stdio(CommandBridge(store), sys.stdin, sys.stdout)
    finally:
        store.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
