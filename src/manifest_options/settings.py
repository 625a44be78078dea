from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from manifest_options.options import PlatformSpec, parse_platform


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, extra="allow"
    )

    # Comma separated, e.g. "linux/amd64,linux/arm/v7"
    platforms: str = ""
    include_metadata: bool = False

    @field_validator("include_metadata", mode="before")
    @classmethod
    def _parse_bool(cls, v: str | bool) -> bool:
        return v if isinstance(v, bool) else v.lower() == "true"

    @property
    def platform_specs(self) -> list[PlatformSpec]:
        return [
            parse_platform(item) for item in self.platforms.split(",") if item.strip()
        ]
