"""
Remote manifest schema.

The manifest is the JSON document published next to each release. Parsing is
the only place raw JSON enters the system; everything downstream works with a
validated, frozen RemoteManifest.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from updater.exceptions import ManifestParseError


class Sections(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    description: str = Field("", description="HTML shown on the Description tab.")
    installation: str = Field("", description="HTML shown on the Installation tab.")
    changelog: str = Field("", description="HTML shown on the Changelog tab.")


class Banners(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    low: Optional[str] = Field(None, description="772x250 banner URL.")
    high: Optional[str] = Field(None, description="1544x500 banner URL.")


class RemoteManifest(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "name": "CodeWing Updater",
                "slug": "codewing-updater",
                "version": "1.2",
                "tested": "6.4",
                "requires": "5.0",
                "requires_php": "7.4",
                "download_url": "https://example.com/codewing-updater-1.2.zip",
                "author": "CodeWing",
                "author_profile": "https://example.com",
                "last_updated": "2024-10-01 10:00:00",
                "sections": {
                    "description": "<p>Automates updates.</p>",
                    "installation": "<p>Upload and activate.</p>",
                    "changelog": "<h4>1.2</h4><p>Fixes.</p>",
                },
            }
        },
    )

    version: str = Field(..., title="Version", description="Latest released version.")
    tested: str = Field("", title="Tested", description="Highest host version tested against.")
    requires: Optional[str] = Field(None, title="Requires", description="Minimum host version.")
    requires_php: Optional[str] = Field(None, title="Requires runtime", description="Minimum runtime version.")
    download_url: str = Field("", title="Download URL", description="Package archive URL.")
    name: str = Field("", title="Name")
    slug: str = Field("", title="Slug")
    author: str = Field("", title="Author")
    author_profile: str = Field("", title="Author profile URL")
    last_updated: str = Field("", title="Last updated")
    sections: Sections = Field(default_factory=Sections)
    banners: Optional[Banners] = None

    @field_validator("version", "tested", "requires", "requires_php", mode="before")
    @classmethod
    def _coerce_numeric_versions(cls, value: Any) -> Any:
        # Hand-edited manifests often carry versions as bare JSON numbers (7.4)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("banners", mode="before")
    @classmethod
    def _empty_banners_are_absent(cls, value: Any) -> Any:
        if not value:
            return None
        return value

    @classmethod
    def from_json(cls, body: str | bytes) -> "RemoteManifest":
        """Parse a raw response body, raising ManifestParseError on any failure."""
        try:
            return cls.model_validate_json(body)
        except ValidationError as exc:
            raise ManifestParseError(
                message="Manifest body is not a valid manifest document",
                errors=[
                    {"loc": ".".join(str(p) for p in err["loc"]), "msg": err["msg"]}
                    for err in exc.errors()
                ],
            ) from exc

    @classmethod
    def from_cached(cls, data: Any) -> "RemoteManifest":
        """Rebuild a manifest from the JSON-compatible form stored in the cache."""
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ManifestParseError(message="Cached manifest is corrupt") from exc

    def to_cache(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
