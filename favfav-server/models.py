"""
Build Options
Caller-supplied mode and platform flags for one pipeline run
"""
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from config import settings
from errors import InvalidOptionsError


class BuildMode(str, Enum):
    SINGLE_SOURCE = "single-source"
    PER_SIZE_SOURCE = "per-size-source"

    @classmethod
    def parse(cls, value) -> "BuildMode":
        """Accept canonical names plus the web form's 'simple'/'advanced'"""
        if isinstance(value, cls):
            return value
        aliases = {"simple": cls.SINGLE_SOURCE, "advanced": cls.PER_SIZE_SOURCE}
        key = str(value or "").strip().lower()
        if key in aliases:
            return aliases[key]
        try:
            return cls(key)
        except ValueError:
            raise InvalidOptionsError(f"Unknown build mode: {value!r}") from None


class PlatformOptions(BaseModel):
    """Platform flags and PWA metadata, immutable for one build"""

    model_config = ConfigDict(frozen=True)

    include_apple: bool = False
    include_android: bool = False
    include_windows: bool = False
    app_name: str = Field(default_factory=lambda: settings.default_app_name)
    short_name: str = Field(default_factory=lambda: settings.default_short_name)
    theme_color: str = Field(default_factory=lambda: settings.default_theme_color)
    core_includes_512: bool = Field(default_factory=lambda: settings.core_includes_512)

    def validate_for_build(self):
        """Raise InvalidOptionsError when a requested manifest lacks its metadata"""
        if (self.include_android or self.include_windows) and not self.theme_color.strip():
            raise InvalidOptionsError("theme_color is required for Android or Windows output")
        if self.include_android:
            if not self.app_name.strip():
                raise InvalidOptionsError("app_name is required for Android output")
            if not self.short_name.strip():
                raise InvalidOptionsError("short_name is required for Android output")
