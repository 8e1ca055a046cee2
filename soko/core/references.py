"""Parsing of ``<project>[:<tagOrId>]`` references."""

from __future__ import annotations

from soko.core.errors import ArtifactValidationError
from soko.models.releases import ArtifactReference, is_valid_segment
from soko.storage.local import GENERATED_DIRECTORY

RESERVED_PROJECT_NAMES = frozenset({GENERATED_DIRECTORY})


def validate_segment(value: str, kind: str) -> str:
    """Reject values that are unusable as a path segment or object key part.

    Project names additionally may not collide with the local store's
    reserved directories.
    """
    if not is_valid_segment(value):
        raise ArtifactValidationError(
            f"Invalid {kind} {value!r}: use letters, digits, '.', '_' or '-', "
            "starting with a letter or digit."
        )
    if kind == "project" and value in RESERVED_PROJECT_NAMES:
        raise ArtifactValidationError(
            f"Invalid project {value!r}: the name is reserved for generated output."
        )
    return value


def parse_reference(text: str, *, require_artifact: bool = False) -> ArtifactReference:
    """Parse a reference string.

    ``"my-project"`` designates every artifact of the project,
    ``"my-project:v1.2.0"`` a single artifact (tag checked before id).
    """
    project, sep, tag_or_id = text.partition(":")
    validate_segment(project, "project")
    if not sep:
        if require_artifact:
            raise ArtifactValidationError(
                f"Reference {text!r} must designate an artifact: <project>:<tagOrId>"
            )
        return ArtifactReference(project=project)
    validate_segment(tag_or_id, "tag or id")
    return ArtifactReference(project=project, tag_or_id=tag_or_id)
