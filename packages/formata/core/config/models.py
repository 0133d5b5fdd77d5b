"""Configuration models for Formata."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_PALETTE: tuple[str, ...] = (
    "#EF4444",  # Red
    "#3B82F6",  # Blue
    "#10B981",  # Green
    "#F59E0B",  # Yellow
    "#8B5CF6",  # Purple
    "#EC4899",  # Pink
    "#06B6D4",  # Cyan
    "#F97316",  # Orange
)


class EditorConfig(BaseModel):
    """Formation editing defaults.

    Example:
        >>> editor = EditorConfig()
        >>> editor.default_frame_duration_ms
        2000
        >>> editor.min_frame_duration_ms
        500
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    default_x: float = Field(default=50.0, description="Default x for new placements (%)")
    default_y: float = Field(default=50.0, description="Default y for new placements (%)")

    default_frame_duration_ms: int = Field(
        default=2000, ge=0, description="Hold length of newly captured frames"
    )
    min_frame_duration_ms: int = Field(
        default=500, ge=0, description="Floor applied when resizing a frame"
    )
    duplicate_frame_gap_ms: int = Field(
        default=1000, ge=0, description="Gap between a frame and its duplicate"
    )

    paste_offset: float = Field(
        default=2.0, description="Offset applied to both axes of pasted performers"
    )
    stage_min: float = Field(default=0.0, description="Lower stage bound (%)")
    stage_max: float = Field(default=100.0, description="Upper stage bound (%)")
    preset_min: float = Field(default=2.0, description="Lower clamp for preset coordinates")
    preset_max: float = Field(default=98.0, description="Upper clamp for preset coordinates")

    palette: tuple[str, ...] = Field(
        default=DEFAULT_PALETTE, min_length=1, description="Colors cycled for new performers"
    )

    @model_validator(mode="after")
    def _validate_bounds(self) -> EditorConfig:
        if self.stage_min >= self.stage_max:
            raise ValueError("stage_min must be < stage_max")
        if self.preset_min > self.preset_max:
            raise ValueError("preset_min must be <= preset_max")
        return self


class PlaybackConfig(BaseModel):
    """Playback clock limits."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    trailing_pad_ms: int = Field(
        default=2000, ge=0, description="Playback continues this long past the last hold"
    )
    min_auto_stop_ms: int = Field(
        default=10000,
        ge=0,
        description="Auto-stop only applies once the computed end exceeds this length",
    )


class TimelineConfig(BaseModel):
    """Visible timeline extent."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    display_padding_ms: int = Field(default=10000, ge=0)
    min_display_ms: int = Field(default=30000, ge=0)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Root log level",
    )
    structured: bool = Field(default=False, description="Emit JSON log lines")
    filename: str | None = Field(default=None, description="Log file (stdout if unset)")


class AppConfig(BaseModel):
    """Top-level application configuration.

    All sections have defaults, so an empty file (or no file) is valid.
    """

    model_config = ConfigDict(extra="forbid")

    project_name: str = Field(default="Formata Project", min_length=1)
    editor: EditorConfig = Field(default_factory=EditorConfig)
    playback: PlaybackConfig = Field(default_factory=PlaybackConfig)
    timeline: TimelineConfig = Field(default_factory=TimelineConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
