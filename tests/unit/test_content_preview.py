"""Unit tests for alert message previews."""

from newsgate.adapters.telegram import content_preview


class TestContentPreview:
    def test_short_content_unchanged(self):
        assert content_preview("Rain closes the road.") == "Rain closes the road."

    def test_long_content_truncated_to_word_limit(self):
        text = " ".join(f"w{i}" for i in range(150))
        preview = content_preview(text)
        assert preview.endswith("...")
        assert len(preview[:-3].split()) == 100

    def test_missing_content(self):
        assert content_preview(None) == ""

    def test_custom_limit(self):
        assert content_preview("one two three", limit=2) == "one two..."
