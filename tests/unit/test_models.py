"""
Unit tests for sipscribe/models.py — field mapping and display helpers.
"""


def _tasting(**overrides):
    from sipscribe.models import Tasting
    fields = dict(
        id="t1",
        type="wine",
        name="Barolo",
        nose_notes="tar, roses",
        palate_notes="",
        finish_notes="",
        color_notes="",
        pairing_suggestions="",
        aroma_score=8,
        palate_score=8,
        finish_score=8,
        overall_score=8.0,
        created_at="2024-01-01T00:00:00.000Z",
        updated_at="2024-01-01T00:00:00.000Z",
    )
    fields.update(overrides)
    return Tasting(**fields)


class TestFieldMaps:

    def test_maps_are_inverse(self):
        from sipscribe.models import ATTR_MAP, FIELD_MAP
        assert {v: k for k, v in ATTR_MAP.items()} == FIELD_MAP

    def test_attrs_from_dict_drops_unknown_keys(self):
        from sipscribe.models import attrs_from_dict
        attrs = attrs_from_dict({"noseNotes": "smoke", "rating": 5})
        assert attrs == {"nose_notes": "smoke"}


class TestTasting:

    def test_to_dict_omits_unset_optional_fields(self):
        d = _tasting().to_dict()
        assert d["overallScore"] == 8.0
        assert d["palateNotes"] == ""
        assert "vintage" not in d
        assert "imageBase64" not in d

    def test_wine_title_shows_vintage_and_region(self):
        t = _tasting(vintage=2016, region="Piedmont")
        assert t.title == "[wine] Barolo (2016, Piedmont)"

    def test_whisky_title_shows_distillery_and_age(self):
        t = _tasting(type="whisky", name="Cask Strength", distillery="Lagavulin", age_statement=16)
        assert t.title == "[whisky] Cask Strength (Lagavulin, 16 yo)"

    def test_title_without_extras(self):
        assert _tasting().title == "[wine] Barolo"
