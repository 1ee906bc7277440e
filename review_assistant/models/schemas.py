"""
Core Domain Schemas - Shared data models used across the application.

Wire format is camelCase (``filePath``, ``defaultBranch``); attributes are
snake_case. Both spellings are accepted on input.
"""

from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from datetime import datetime
from enum import Enum


class CamelModel(BaseModel):
    """Base model serializing with camelCase aliases."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NodeKind(str, Enum):
    """Kind of a repository tree node."""
    FILE = "file"
    DIRECTORY = "directory"


class TreeNode(CamelModel):
    """
    A node of a fetched repository tree.

    Directories carry children and no content; files carry decoded content
    (and their version marker) and no children.
    """
    path: str
    kind: NodeKind
    content: Optional[str] = None
    sha: Optional[str] = None
    children: List["TreeNode"] = Field(default_factory=list)


TreeNode.model_rebuild()


class AnalysisResult(CamelModel):
    """Sections of a structured review response. Absent sections are empty."""
    overview: str = ""
    analysis: str = ""
    changes: str = ""
    risks: str = ""


class CodeChange(CamelModel):
    """A proposed edit located between the CODE_START/CODE_END markers."""
    content: str
    description: str


class ChatRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(CamelModel):
    """One turn of a chat thread."""
    role: ChatRole
    content: str


class AnalysisStatus(str, Enum):
    """Lifecycle of a stored analysis."""
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class SuggestedChange(CamelModel):
    """LLM suggestion for a single file of a batch analysis."""
    file_path: str
    suggestion: str
    kind: str = "improvement"


class StoredAnalysis(CamelModel):
    """Persisted batch analysis as returned to clients."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: int
    user_id: int
    repo_name: str
    changes: List[SuggestedChange] = Field(default_factory=list)
    status: AnalysisStatus
    created_at: datetime


class Repository(CamelModel):
    """A repository the authenticated user can access."""
    id: int
    name: str
    description: Optional[str] = None
    url: str
    default_branch: str = "main"


class UserProfile(CamelModel):
    """Public view of the signed-in user. Never includes the access token."""
    id: int
    github_id: str
    name: Optional[str] = None
    email: Optional[str] = None
