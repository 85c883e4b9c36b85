"""
Business entities representing the catalog.

Exports:
- Performer, Studio, Tag: Rateable artifacts
- Scene: A media item with its associations
- VideoFile: File attached to a scene
- Gender: Performer gender
- ArtifactKind: Kind of artifact (performer, studio, tag)
"""

from stash_curator.core.entities.catalog import (
    ArtifactKind,
    Gender,
    Performer,
    Scene,
    Studio,
    Tag,
    VideoFile,
)

__all__ = [
    "ArtifactKind",
    "Gender",
    "Performer",
    "Scene",
    "Studio",
    "Tag",
    "VideoFile",
]
