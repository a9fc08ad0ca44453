"""
Alembic revision for the tastings table, run against a temporary SQLite file.
"""

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

ROOT = Path(__file__).resolve().parents[2]


@pytest.fixture
def alembic_cfg(tmp_path):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    cfg = Config(str(ROOT / "alembic.ini"))
    cfg.set_main_option("sqlalchemy.url", url)
    return cfg, url


class TestInitialRevision:

    def test_upgrade_creates_indexed_table(self, alembic_cfg):
        cfg, url = alembic_cfg
        command.upgrade(cfg, "head")

        engine = create_engine(url)
        try:
            insp = inspect(engine)
            assert "tastings" in insp.get_table_names()
            indexed = {tuple(ix["column_names"]) for ix in insp.get_indexes("tastings")}
            for column in ("type", "name", "overall_score", "created_at"):
                assert (column,) in indexed
        finally:
            engine.dispose()

    def test_migrated_schema_matches_models(self, alembic_cfg):
        cfg, url = alembic_cfg
        command.upgrade(cfg, "head")

        from sipscribe.db import setup_db
        from sipscribe.records import add_tasting, list_all

        setup_db(url)
        add_tasting(
            type="whisky", name="Peated", nose_notes="smoke", palate_notes="",
            finish_notes="", color_notes="amber", pairing_suggestions="",
            aroma_score=9, palate_score=8, finish_score=9, overall_score=26 / 3,
            mash_bill={"barley": 100},
        )
        assert [t.name for t in list_all()] == ["Peated"]

    def test_downgrade_drops_table(self, alembic_cfg):
        cfg, url = alembic_cfg
        command.upgrade(cfg, "head")
        command.downgrade(cfg, "base")

        engine = create_engine(url)
        try:
            assert "tastings" not in inspect(engine).get_table_names()
        finally:
            engine.dispose()
