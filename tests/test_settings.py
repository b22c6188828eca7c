"""
Settings tests
"""

import pytest
from pydantic import ValidationError

from livemark.config import AppSettings
from livemark.models import ImagePolicy


class TestAppSettings:
    """Test defaults, derived sizes and environment loading"""

    def test_defaults(self):
        """Inline policy, visible syntax without focus"""
        settings = AppSettings()
        assert settings.image_policy is ImagePolicy.INLINE
        assert settings.syntax_visible_without_focus is True
        assert settings.default_font_size == 16.0

    def test_line_height(self):
        """Line height is font size times 1.4"""
        assert AppSettings().lineHeight_compute(10) == pytest.approx(14.0)

    def test_line_height_default_font(self):
        """None falls back to the default font size"""
        assert AppSettings().lineHeight_compute(None) == pytest.approx(22.4)

    def test_inline_image_height(self):
        """Five lines tall"""
        assert AppSettings().inlineImageHeight_compute(10) == pytest.approx(70.0)

    def test_spacing_newlines(self):
        """ceil(200 / 22.4) at the default font"""
        assert AppSettings().spacingNewlines_compute() == 9

    def test_spacing_newlines_exact(self):
        """An exact multiple does not round up"""
        settings = AppSettings(block_image_height=28)
        assert settings.spacingNewlines_compute(10) == 2

    def test_env_override(self, monkeypatch):
        """LIVEMARK_ environment variables configure the engine"""
        monkeypatch.setenv("LIVEMARK_IMAGE_POLICY", "block")
        monkeypatch.setenv("LIVEMARK_SYNTAX_VISIBLE_WITHOUT_FOCUS", "false")
        settings = AppSettings()
        assert settings.image_policy is ImagePolicy.BLOCK
        assert settings.syntax_visible_without_focus is False

    def test_glyph_length(self):
        """Glyphs must be exactly one character"""
        with pytest.raises(ValidationError):
            AppSettings(bullet_glyph="->")

    def test_invalid_policy(self):
        """Unknown policy values are rejected"""
        with pytest.raises(ValidationError):
            AppSettings(image_policy="floating")
