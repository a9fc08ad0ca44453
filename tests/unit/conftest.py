"""Shared fixtures: a fresh SQLite file per test and a tasting field factory."""

import pytest


@pytest.fixture
def database(tmp_path):
    """Point sipscribe at a new SQLite database under tmp_path and return its URL."""
    from sipscribe.db import setup_db
    url = f"sqlite:///{tmp_path / 'tastings.db'}"
    setup_db(url)
    return url


@pytest.fixture
def make_fields():
    """Return a factory for valid add_tasting() keyword arguments."""

    def _make(**overrides):
        fields = dict(
            type="wine",
            name="Château Test 2015",
            nose_notes="blackcurrant, cedar",
            palate_notes="firm tannins",
            finish_notes="long",
            color_notes="deep ruby",
            pairing_suggestions="lamb",
            aroma_score=8,
            palate_score=7,
            finish_score=9,
            overall_score=8.0,
        )
        fields.update(overrides)
        return fields

    return _make
