"""Data models for DanubeData API responses."""

from dataclasses import asdict, dataclass
from typing import Any, Optional


@dataclass
class User:
    """Authenticated user."""

    id: int
    name: str
    email: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        return cls(
            id=data.get("id", 0),
            name=data.get("name", ""),
            email=data.get("email", ""),
        )


@dataclass
class Team:
    """Team the user belongs to."""

    id: int
    name: str
    personal_team: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Team":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            personal_team=bool(data.get("personal_team", False)),
        )


@dataclass
class StaticSite:
    """Static site belonging to a team."""

    id: int
    team_id: int
    name: str
    slug: str = ""
    default_domain: str = ""
    output_directory: Optional[str] = None
    status: str = ""
    current_deployment_id: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StaticSite":
        return cls(
            id=data["id"],
            team_id=data.get("team_id", 0),
            name=data.get("name", ""),
            slug=data.get("slug", ""),
            default_domain=data.get("default_domain", ""),
            output_directory=data.get("output_directory"),
            status=data.get("status", ""),
            current_deployment_id=data.get("current_deployment_id"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class StaticSiteBuild:
    """Build of an uploaded archive.

    Status moves through pending, uploading, processing and deploying until
    it ends as either live or failed.
    """

    status: str
    id: Optional[int] = None
    static_site_id: Optional[int] = None
    revision: Optional[int] = None
    error_message: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StaticSiteBuild":
        return cls(
            status=str(data.get("status", "")),
            id=data.get("id"),
            static_site_id=data.get("static_site_id"),
            revision=data.get("revision"),
            error_message=data.get("error_message"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )


@dataclass
class StaticSiteDeployment:
    """Activatable deployment produced by a successful build."""

    id: int
    revision: int
    is_active: bool = False
    static_site_id: Optional[int] = None
    static_site_build_id: Optional[int] = None
    activated_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StaticSiteDeployment":
        return cls(
            id=data["id"],
            revision=int(data.get("revision", 0)),
            is_active=bool(data.get("is_active", False)),
            static_site_id=data.get("static_site_id"),
            static_site_build_id=data.get("static_site_build_id"),
            activated_at=data.get("activated_at"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class StaticSiteDomain:
    """Domain attached to a static site."""

    id: int
    domain: str
    type: str = "custom"
    status: str = "pending"
    static_site_id: Optional[int] = None
    verification_record: Optional[str] = None
    verified_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StaticSiteDomain":
        return cls(
            id=data["id"],
            domain=data.get("domain", ""),
            type=data.get("type", "custom"),
            status=data.get("status", "pending"),
            static_site_id=data.get("static_site_id"),
            verification_record=data.get("verification_record"),
            verified_at=data.get("verified_at"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class DeployResponse:
    """Response of the deploy (upload) endpoint."""

    status: str
    message: str = ""
    site_id: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "DeployResponse":
        data = data or {}
        return cls(
            status=str(data.get("status", "")),
            message=data.get("message", ""),
            site_id=data.get("site_id"),
        )
