"""
Config Models — Pydantic schema for mirror settings.

Field aliases match the camelCase keys of the original config.json, so an
existing file keeps working:

    {
        "repoPathSource": "/work/private-repo",
        "repoPathTarget": "/work/public-shadow",
        "branchName": "main",
        "commitAuthorEmailsSource": ["me@work.example"],
        "commitAuthorNameTarget": "Jane Doe",
        "commitAuthorEmailTarget": "jane@users.noreply.github.com"
    }
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_ARTIFACT_NAME = "shadow-activity.log"

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class MirrorSettings(BaseModel):
    """Everything the engine needs to know about one source/target pair."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    repo_path_source: Path = Field(alias="repoPathSource")
    repo_path_target: Path = Field(alias="repoPathTarget")
    branch_name: str = Field(alias="branchName")
    commit_author_emails_source: List[str] = Field(alias="commitAuthorEmailsSource")
    commit_author_name_target: str = Field(alias="commitAuthorNameTarget")
    commit_author_email_target: str = Field(alias="commitAuthorEmailTarget")
    artifact_name: str = Field(default=DEFAULT_ARTIFACT_NAME, alias="artifactName")

    @field_validator("repo_path_source", "repo_path_target")
    @classmethod
    def _must_be_directory(cls, value: Path) -> Path:
        if not value.is_dir():
            raise ValueError(f"is missing or not a directory: {value}")
        return value

    @field_validator("branch_name", "commit_author_name_target")
    @classmethod
    def _must_not_be_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must be a non-empty string")
        return value

    @field_validator("commit_author_emails_source")
    @classmethod
    def _allow_list(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("must be a non-empty list")
        # Identities are matched verbatim, so values are not stripped
        if any(not email.strip() for email in value):
            raise ValueError("values must be non-empty strings")
        return value

    @field_validator("commit_author_email_target")
    @classmethod
    def _email_shape(cls, value: str) -> str:
        if not EMAIL_PATTERN.match(value):
            raise ValueError(f"is not a valid email address: {value!r}")
        return value

    @field_validator("artifact_name")
    @classmethod
    def _plain_file_name(cls, value: str) -> str:
        if not value.strip() or value in (".", ".."):
            raise ValueError("must be a file name")
        if "/" in value or "\\" in value:
            raise ValueError("must not contain path separators")
        return value

    def to_display_dict(self) -> Dict[str, Any]:
        """Field values keyed by their config-file name."""
        return {
            "repoPathSource": str(self.repo_path_source),
            "repoPathTarget": str(self.repo_path_target),
            "branchName": self.branch_name,
            "commitAuthorEmailsSource": list(self.commit_author_emails_source),
            "commitAuthorNameTarget": self.commit_author_name_target,
            "commitAuthorEmailTarget": self.commit_author_email_target,
            "artifactName": self.artifact_name,
        }
