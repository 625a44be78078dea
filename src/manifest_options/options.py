from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from loguru import logger as default_logger

if TYPE_CHECKING:
    from loguru import Logger

    from manifest_options.settings import Settings


def platform_key(os: str, architecture: str, variant: str = "") -> str:
    """Canonical string form of a platform, e.g. ``linux/arm/v7``."""
    if not variant:
        return f"{os}/{architecture}"
    return f"{os}/{architecture}/{variant}"


@dataclass(frozen=True)
class PlatformSpec:
    """An os/architecture/variant triple. An empty variant means "any variant"."""

    os: str
    architecture: str
    variant: str = ""

    @property
    def key(self) -> str:
        return platform_key(self.os, self.architecture, self.variant)

    def matches(self, os: str, architecture: str, variant: str = "") -> bool:
        if self.os != os or self.architecture != architecture:
            return False
        # A filter without a variant accepts any variant, not the other way around
        return not self.variant or self.variant == variant

    def __str__(self) -> str:
        return self.key


def parse_platform(value: str) -> PlatformSpec:
    """Parse ``os/arch`` or ``os/arch/variant`` into a PlatformSpec."""
    parts = [part.strip() for part in value.split("/")]
    if len(parts) not in (2, 3) or not parts[0] or not parts[1]:
        raise ValueError(
            f"Invalid platform '{value}', expected os/arch or os/arch/variant"
        )
    return PlatformSpec(*parts)


@dataclass(frozen=True)
class ManifestOptions:
    """Options for selecting manifests out of a manifest list.

    Values are immutable: every ``with_*`` method returns a new instance and
    leaves the receiver untouched, so callers must reassign. The zero value
    ``ManifestOptions()`` wants every platform and no metadata.
    """

    platform_filters: tuple[PlatformSpec, ...] = ()
    include_metadata: bool = False
    log: Logger = field(default_factory=lambda: default_logger, compare=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> ManifestOptions:
        options = cls().with_metadata(settings.include_metadata)
        for spec in settings.platform_specs:
            options = options.with_platform(spec.os, spec.architecture, spec.variant)
        return options

    def with_platform(
        self, os: str, architecture: str, variant: str = ""
    ) -> ManifestOptions:
        spec = PlatformSpec(os, architecture, variant)
        if spec in self.platform_filters:
            return self
        return replace(self, platform_filters=(*self.platform_filters, spec))

    def platforms(self) -> list[str]:
        return [spec.key for spec in self.platform_filters]

    def wants_platform(self, os: str, architecture: str, variant: str = "") -> bool:
        if not self.platform_filters:
            return True
        return any(
            spec.matches(os, architecture, variant) for spec in self.platform_filters
        )

    def with_metadata(self, want: bool) -> ManifestOptions:
        return replace(self, include_metadata=want)

    def wants_metadata(self) -> bool:
        return self.include_metadata

    def with_logger(self, logger: Logger) -> ManifestOptions:
        return replace(self, log=logger)

    def logger(self) -> Logger:
        return self.log
