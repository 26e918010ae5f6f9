from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LinkMethod(str, Enum):
    HTTP = "http"
    POWERSHELL = "powershell"


class SourceFileRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    build_time_path: str
    checksum: bytes = b""
    algorithm: str | None = None


class LinkOptions(BaseModel):
    """Per-invocation options for linking one PDB."""

    model_config = ConfigDict(frozen=True)

    git_working_directory: Path | None = None
    commit_id: str | None = None
    git_remote_url: str | None = None
    skip_verify: bool = False
    method: LinkMethod = LinkMethod.HTTP


class LinkContext(BaseModel):
    """Everything the srcsrv serializer needs for one PDB."""

    revision: str
    raw_url: str
    method: LinkMethod = LinkMethod.HTTP
    paths: list[tuple[str, str | None]] = Field(default_factory=list)
    extra_metadata: dict[str, str] = Field(default_factory=dict)

    @field_validator("revision", "raw_url")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @property
    def indexed_paths(self) -> list[tuple[str, str]]:
        return [(build_path, repo_path) for build_path, repo_path in self.paths if repo_path is not None]


class LinkResult(BaseModel):
    success: bool
    indexed: int = 0
    total: int = 0
    srcsrv_path: Path | None = None
    error: str | None = None
