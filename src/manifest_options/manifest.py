"""Platform selection over decoded manifest lists."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from loguru import logger

from manifest_options.options import ManifestOptions, PlatformSpec

MANIFEST_LIST_MEDIA_TYPES = (
    "application/vnd.docker.distribution.manifest.list.v2+json",
    "application/vnd.oci.image.index.v1+json",
)


@dataclass
class ManifestDescriptor:
    """A single entry of a manifest list / image index."""

    digest: str
    media_type: str
    platform: PlatformSpec | None
    annotations: dict[str, str] = field(default_factory=dict)


def _get_short_digest(digest: str) -> str:
    digest = digest.replace("sha256:", "")
    return digest[:12] if len(digest) > 12 else digest


def parse_manifest_list(manifest: dict[str, Any]) -> list[ManifestDescriptor]:
    """Read the descriptors of an already-decoded manifest list.

    Accepts Docker manifest list v2 and OCI image index documents. The media type
    may be missing (OCI makes it optional) as long as a ``manifests`` array is present.
    """
    media_type = manifest.get("mediaType", "")
    if media_type not in MANIFEST_LIST_MEDIA_TYPES and "manifests" not in manifest:
        raise ValueError(
            f"Not a manifest list or image index (mediaType: '{media_type}')"
        )

    descriptors = []
    for entry in manifest.get("manifests") or []:
        digest = entry.get("digest")
        if not digest:
            logger.debug(f"Skipping manifest entry without digest: {entry}")
            continue

        platform = entry.get("platform")
        spec = (
            PlatformSpec(
                os=platform.get("os") or "",
                architecture=platform.get("architecture") or "",
                variant=platform.get("variant") or "",
            )
            if platform
            else None
        )
        descriptors.append(
            ManifestDescriptor(
                digest=digest,
                media_type=entry.get("mediaType", ""),
                platform=spec,
                annotations=dict(entry.get("annotations") or {}),
            )
        )
    return descriptors


def select_manifests(
    descriptors: list[ManifestDescriptor], options: ManifestOptions
) -> list[ManifestDescriptor]:
    """Keep the descriptors whose platform is wanted by ``options``.

    Descriptors without a platform are only kept when no platform filter is set.
    Annotations are dropped from the result unless metadata is wanted.
    """
    log = options.logger()
    selected = []

    for descriptor in descriptors:
        short_digest = _get_short_digest(descriptor.digest)
        spec = descriptor.platform

        if spec is None:
            wanted = not options.platforms()
            label = "no platform"
        else:
            wanted = options.wants_platform(spec.os, spec.architecture, spec.variant)
            label = spec.key

        log.debug(f"[{short_digest}] {'KEEP' if wanted else 'SKIP'}: {label}")
        if not wanted:
            continue

        if not options.wants_metadata() and descriptor.annotations:
            descriptor = replace(descriptor, annotations={})
        selected.append(descriptor)

    log.info(
        f"Selected {len(selected)} of {len(descriptors)} manifest(s) "
        f"(platforms: {', '.join(options.platforms()) or 'all'})"
    )
    return selected
