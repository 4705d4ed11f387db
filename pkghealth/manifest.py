"""``package.json`` reader: the project's declared dependency set."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from pkghealth.exceptions import ManifestError

MANIFEST_FILENAME = "package.json"


class PackageManifest(BaseModel):
    """Parsed ``package.json``; unknown keys are kept but ignored."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = Field(min_length=1)
    version: str = Field(min_length=1)
    dependencies: dict[str, str] = Field(default_factory=dict)
    dev_dependencies: dict[str, str] = Field(default_factory=dict, alias="devDependencies")
    peer_dependencies: dict[str, str] = Field(default_factory=dict, alias="peerDependencies")
    optional_dependencies: dict[str, str] = Field(
        default_factory=dict, alias="optionalDependencies"
    )

    @classmethod
    def load(cls, directory: str | Path = ".") -> PackageManifest:
        """Read ``package.json`` from *directory* (or a direct path to the file)."""
        if "\x00" in str(directory):
            raise ManifestError("Invalid directory: contains forbidden characters")
        path = Path(directory).resolve()
        if path.is_dir():
            path = path / MANIFEST_FILENAME

        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise ManifestError(f"{MANIFEST_FILENAME} not found in {path.parent}") from exc
        except OSError as exc:
            raise ManifestError(f"Failed to read {path}: {exc}") from exc

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ManifestError(f"Invalid JSON in {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ManifestError(f"Invalid {MANIFEST_FILENAME}: expected a JSON object")
        if not data.get("name") or not data.get("version"):
            raise ManifestError(f"Invalid {MANIFEST_FILENAME}: missing name or version")

        try:
            return cls.model_validate(data)
        except PydanticValidationError as exc:
            raise ManifestError(f"Invalid {MANIFEST_FILENAME}: {exc.errors()[0]['msg']}") from exc

    def get_all_dependencies(self, include_dev: bool = False) -> dict[str, str]:
        """Production deps, then dev deps (when asked), then peer and optional ones.

        Dev ranges override production ranges for the same name; peer and
        optional entries never override anything already present.
        """
        merged = dict(self.dependencies)
        if include_dev:
            merged.update(self.dev_dependencies)
        for extra in (self.peer_dependencies, self.optional_dependencies):
            for name, version_range in extra.items():
                merged.setdefault(name, version_range)
        return merged
