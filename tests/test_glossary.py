"""Unit tests for ui/glossary.py content."""

from ui.glossary import COLUMN_DEFINITIONS, RATING_EXPLAINER, _direction_icon, glossary_df


class TestGlossary:
    def test_every_definition_complete(self):
        for column, info in COLUMN_DEFINITIONS.items():
            assert info["full_name"], column
            assert info["definition"], column
            assert info["direction"], column

    def test_covers_rating_columns(self):
        assert "Rating (μ)" in COLUMN_DEFINITIONS
        assert "Rating (σ)" in COLUMN_DEFINITIONS
        assert "σ" in RATING_EXPLAINER

    def test_glossary_df(self):
        df = glossary_df()
        assert list(df.columns) == ["Column", "Meaning", "Better"]
        assert len(df) == len(COLUMN_DEFINITIONS)
        assert df.loc[df["Column"] == "Win Rate", "Better"].iloc[0].startswith("↑")

    def test_direction_icon(self):
        assert _direction_icon("Higher is better") == "↑"
        assert _direction_icon("Lower is more certain") == "↓"
        assert _direction_icon("Context-dependent") == "•"
