"""Configuration management with Pydantic models."""

from pathlib import Path

from pydantic import BaseModel, Field

# Delays used by the interactive session so each status stays visible.
INTERACTIVE_READ_DELAY = 0.4
INTERACTIVE_CONVERT_DELAY = 0.6


class PipelineConfig(BaseModel):
    """Configuration for the per-file intake pipeline."""

    read_delay_seconds: float = Field(default=0.0, ge=0.0, le=10.0)
    convert_delay_seconds: float = Field(default=0.0, ge=0.0, le=10.0)
    encoding: str = "utf-8"


class IntakeConfig(BaseModel):
    """Configuration for accepting submitted files."""

    accepted_suffixes: list[str] = Field(default_factory=lambda: [".html", ".htm"])
    accepted_media_types: list[str] = Field(default_factory=lambda: ["text/html"])
    report_dropped: bool = True


class OutputConfig(BaseModel):
    """Configuration for saving Markdown files."""

    directory: Path = Path(".")
    overwrite: bool = False
    preview_chars: int = Field(default=500, ge=1)


class AppConfig(BaseModel):
    """Main application configuration."""

    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    intake: IntakeConfig = Field(default_factory=IntakeConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    verbose: bool = False

    @classmethod
    def from_toml(cls, path: Path) -> "AppConfig":
        """Load config from a TOML file."""
        try:
            import tomllib  # type: ignore[import-not-found]
        except ModuleNotFoundError:
            import tomli as tomllib  # type: ignore[import-not-found]
        with open(path, "rb") as f:
            data = tomllib.load(f)
        return cls.model_validate(data)

    def to_toml(self) -> str:
        """Serialize config to TOML format."""
        data = self.model_dump(mode="json", exclude_defaults=True)
        return _dict_to_toml(data)

    def interactive(self) -> "AppConfig":
        """Return a copy with the cosmetic pipeline delays switched on."""
        pipeline = self.pipeline.model_copy(
            update={
                "read_delay_seconds": INTERACTIVE_READ_DELAY,
                "convert_delay_seconds": INTERACTIVE_CONVERT_DELAY,
            }
        )
        return self.model_copy(update={"pipeline": pipeline})


def _toml_value(v: object) -> str:
    """Format a Python value as a TOML literal."""
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, (int, float)):
        return str(v)
    if isinstance(v, str):
        escaped = v.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    if isinstance(v, list):
        return "[" + ", ".join(_toml_value(i) for i in v) + "]"
    return f'"{v}"'


def _dict_to_toml(data: dict) -> str:
    """Convert a config dict (one level of tables) to a TOML string."""
    lines: list[str] = [
        f"{k} = {_toml_value(v)}" for k, v in data.items() if not isinstance(v, dict)
    ]
    for section, values in data.items():
        if isinstance(values, dict) and values:
            lines.append(f"\n[{section}]")
            lines.extend(f"{k} = {_toml_value(v)}" for k, v in values.items())
    return "\n".join(lines) + "\n"
