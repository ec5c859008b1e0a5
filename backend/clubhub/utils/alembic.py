import fcntl
from pathlib import Path

from alembic.config import Config
from alembic.script import ScriptDirectory

from alembic import command
from clubhub.utils.logging import logger

BACKEND_DIR = Path(__file__).resolve().parents[2]


def clubhub_alembic_config() -> Config:
    alembic_config = Config(str(BACKEND_DIR / "alembic.ini"))
    alembic_config.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    return alembic_config


def head_revision(alembic_config: Config) -> str | None:
    return ScriptDirectory.from_config(alembic_config).get_current_head()


def upgrade_database(lock_path: Path) -> None:
    """
    Upgrade the schema to the newest revision.

    Worker processes of one host share `lock_path`: the first one migrates, the others wait
    for it and then find the schema already at head.
    """
    alembic_config = clubhub_alembic_config()
    with lock_path.open("w", encoding="utf-8") as lock_file:
        fcntl.lockf(lock_file, fcntl.LOCK_EX)
        logger.info(f"Upgrading database schema to revision {head_revision(alembic_config)}")
        command.upgrade(alembic_config, "head")
