"""
API Request Models - Pydantic models for request validation.
"""

from typing import Optional, List
from pydantic import Field, field_validator
from enum import Enum
import re

from review_assistant.models.schemas import CamelModel, ChatMessage


_REPO_NAME_PATTERN = re.compile(r"^[\w.\-]+/[\w.\-]+$")


def _validate_repo_name(v: str) -> str:
    v = v.strip()
    if not _REPO_NAME_PATTERN.match(v):
        raise ValueError("Repository name must be in the form 'owner/repo'")
    return v


def split_repo_name(full_name: str) -> tuple:
    """Split ``owner/repo`` into its two parts."""
    owner, repo = full_name.split("/", 1)
    return owner, repo


class AnalyzeRequest(CamelModel):
    """
    Request to fetch a repository's file tree.

    Example:
        {
            "repositoryName": "octocat/hello-world",
            "branch": "main"
        }
    """
    repository_name: str = Field(
        ...,
        description="Full repository name",
        examples=["octocat/hello-world"]
    )
    branch: str = Field(
        ...,
        min_length=1,
        description="Branch, tag or commit to read from"
    )

    @field_validator("repository_name")
    @classmethod
    def validate_repository_name(cls, v: str) -> str:
        return _validate_repo_name(v)


class ChatAction(str, Enum):
    CHAT = "chat"
    ANALYZE = "analyze"


class ChatContext(CamelModel):
    """File context a chat message refers to."""
    repo_name: Optional[str] = None
    file_path: str = Field(..., min_length=1)
    content: Optional[str] = None
    action: ChatAction = ChatAction.CHAT


class ChatRequest(CamelModel):
    """
    Chat or single-file analysis request.

    For ``action == "analyze"`` the message carries the file content.

    Example:
        {
            "message": "Can you add type hints?",
            "context": {
                "repoName": "octocat/hello-world",
                "filePath": "src/app.py",
                "content": "def main(): ...",
                "action": "chat"
            }
        }
    """
    message: str = Field(..., min_length=1)
    context: ChatContext
    history: List[ChatMessage] = Field(default_factory=list)


class UpdateFileRequest(CamelModel):
    """
    Request to write new content to a repository file.

    Example:
        {
            "repositoryName": "octocat/hello-world",
            "filePath": "README.md",
            "content": "# Hello",
            "message": "Update code based on AI suggestions"
        }
    """
    repository_name: str
    file_path: str = Field(..., min_length=1)
    content: str
    message: str = Field(..., min_length=1, description="Commit message")
    branch: Optional[str] = Field(
        default=None,
        description="Target branch (repository default when omitted)"
    )
    sha: Optional[str] = Field(
        default=None,
        description="Version marker the client last saw; read fresh when omitted"
    )

    @field_validator("repository_name")
    @classmethod
    def validate_repository_name(cls, v: str) -> str:
        return _validate_repo_name(v)


class SelectRepositoryRequest(CamelModel):
    """Request to select a repository and list its root."""
    repo_name: str

    @field_validator("repo_name")
    @classmethod
    def validate_repo_name(cls, v: str) -> str:
        return _validate_repo_name(v)


class FileInput(CamelModel):
    path: str = Field(..., min_length=1)
    content: str


class BatchAnalysisRequest(CamelModel):
    """
    Request to analyze several files at once and persist the result.

    Example:
        {
            "repoName": "octocat/hello-world",
            "files": [{"path": "app.py", "content": "print('hi')"}]
        }
    """
    repo_name: str
    files: List[FileInput] = Field(..., min_length=1)

    @field_validator("repo_name")
    @classmethod
    def validate_repo_name(cls, v: str) -> str:
        return _validate_repo_name(v)
