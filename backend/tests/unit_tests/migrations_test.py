from pathlib import Path

import pytest
from alembic.config import Config

from clubhub.utils import alembic as clubhub_alembic


def test_head_revision_is_latest_migration() -> None:
    alembic_config = clubhub_alembic.clubhub_alembic_config()

    assert clubhub_alembic.head_revision(alembic_config) == "8b2f6d4e1c57"
    assert alembic_config.get_main_option("script_location") == str(
        clubhub_alembic.BACKEND_DIR / "alembic"
    )


def test_upgrade_database_runs_upgrade_to_head(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    upgrades: list[str] = []

    def fake_upgrade(_: Config, revision: str) -> None:
        upgrades.append(revision)

    monkeypatch.setattr(clubhub_alembic.command, "upgrade", fake_upgrade)
    lock_path = tmp_path / "migrations.lock"

    clubhub_alembic.upgrade_database(lock_path)
    clubhub_alembic.upgrade_database(lock_path)

    assert upgrades == ["head", "head"]
    assert lock_path.exists()
