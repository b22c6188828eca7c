"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use LIVEMARK_ prefix (e.g., LIVEMARK_IMAGE_POLICY=block).

Settings can also be loaded from a .env file in the project root.
"""

import math

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..models.segments import ImagePolicy


class AppSettings(BaseSettings):
    """
    Engine configuration via environment variables.

    Environment variables use LIVEMARK_ prefix.

    Examples:
        LIVEMARK_DEFAULT_FONT_SIZE=14
        LIVEMARK_IMAGE_POLICY=block
        LIVEMARK_SYNTAX_VISIBLE_WITHOUT_FOCUS=false
    """

    model_config = SettingsConfigDict(
        env_prefix="LIVEMARK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Layout configuration
    default_font_size: float = Field(
        default=16.0,
        gt=0,
        description="Font size assumed when the base style does not set one",
    )

    line_height_factor: float = Field(
        default=1.4,
        gt=0,
        description="Line height as a multiple of the font size",
    )

    # Image configuration
    image_policy: ImagePolicy = Field(
        default=ImagePolicy.INLINE,
        description="inline: embed replaces the '!'; block: embed on dedicated spaced lines",
    )

    inline_image_lines: int = Field(
        default=5,
        ge=1,
        description="Height of inline image embeds, in lines",
    )

    block_image_height: float = Field(
        default=200.0,
        gt=0,
        description="Fixed height of block image embeds in logical pixels",
    )

    block_image_width: float = Field(
        default=300.0,
        gt=0,
        description="Fixed width of block image embeds in logical pixels",
    )

    # Syntax visibility
    syntax_visible_without_focus: bool = Field(
        default=True,
        description="Show markdown syntax on every line when no line is focused",
    )

    # Glyphs (each exactly one character so offsets stay aligned)
    bullet_glyph: str = Field(default="•", min_length=1, max_length=1)
    rule_glyph: str = Field(default="─", min_length=1, max_length=1)
    embed_glyph: str = Field(default="\ufffc", min_length=1, max_length=1)

    # Logging
    verbosity: int = Field(
        default=0,
        ge=0,
        description="Render log verbosity (0 silent, 1 summary, 2 stages, 3 trace)",
    )

    def lineHeight_compute(self, font_size: float | None = None) -> float:
        """
        Compute the line height for a font size.

        Args:
            font_size: Font size, or None for default_font_size

        Returns:
            Line height in logical pixels

        Example:
            >>> AppSettings().lineHeight_compute(10)
            14.0
        """
        size = font_size if font_size else self.default_font_size
        return size * self.line_height_factor

    def inlineImageHeight_compute(self, font_size: float | None = None) -> float:
        """
        Compute the height of an inline image embed.

        Example:
            >>> AppSettings().inlineImageHeight_compute(10)
            70.0
        """
        return self.lineHeight_compute(font_size) * self.inline_image_lines

    def spacingNewlines_compute(self, font_size: float | None = None) -> int:
        """
        Number of newlines needed on each side of a block image.

        Example:
            >>> AppSettings().spacingNewlines_compute(16)   # ceil(200 / 22.4)
            9
        """
        return math.ceil(self.block_image_height / self.lineHeight_compute(font_size))


# Singleton instance - import this in your code
appsettings = AppSettings()
