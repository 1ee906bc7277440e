"""
Repository Service - Reads and writes repository contents through GitHub.

Handles:
- Listing the user's repositories
- Recursively fetching a repository tree with decoded file bodies
- Writing a file back with optimistic concurrency (blob sha)
"""

import asyncio
import base64
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from review_assistant.api.middleware.error_handler import (
    FileConflictError,
    GitHubAPIError,
    TreeTooLargeError,
    UpstreamServiceError,
)
from review_assistant.models.schemas import NodeKind, Repository, TreeNode
from review_assistant.services.github_client import GitHubClient


logger = logging.getLogger(__name__)


@dataclass
class RepoServiceConfig:
    """Configuration for repository service."""
    max_depth: int = 20
    max_files: int = 2000
    max_concurrency: int = 8


@dataclass
class _TreeWalk:
    """Per-fetch bookkeeping shared by every level of the recursion."""
    semaphore: asyncio.Semaphore
    max_files: int
    files_seen: int = 0
    skipped: List[str] = field(default_factory=list)

    def count_file(self, path: str) -> None:
        self.files_seen += 1
        if self.files_seen > self.max_files:
            raise TreeTooLargeError(
                f"Repository has more than {self.max_files} files (stopped at {path})",
                limit="max_files",
            )


def decode_content(payload: Any) -> str:
    """Decode the base64 body of a contents-API file object into text."""
    if not isinstance(payload, dict) or payload.get("content") is None:
        raise ValueError("Response does not carry inline file content")
    encoding = payload.get("encoding", "base64")
    if encoding != "base64":
        raise ValueError(f"Unsupported content encoding: {encoding}")
    # GitHub wraps the base64 body at 60 columns; b64decode drops the newlines
    raw = base64.b64decode(payload["content"])
    return raw.decode("utf-8", errors="replace")


def encode_content(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


class RepoService:
    """
    Repository operations for one authenticated user.

    The GitHub client is passed in, so tests can substitute a fake.
    """

    def __init__(self, client: GitHubClient, config: Optional[RepoServiceConfig] = None):
        self.client = client
        self.config = config or RepoServiceConfig()

    async def list_repositories(self) -> List[Repository]:
        """Repositories the user owns or collaborates on, most recently updated first."""
        data = await self.client.list_user_repos(
            sort="updated", per_page=100, affiliation="owner,collaborator"
        )
        logger.info("Found %d repositories", len(data))
        return [
            Repository(
                id=repo["id"],
                name=repo["full_name"],
                description=repo.get("description"),
                url=repo["html_url"],
                default_branch=repo.get("default_branch") or "main",
            )
            for repo in data
        ]

    async def list_directory(
        self, owner: str, repo: str, path: str = "", ref: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Raw listing of one directory (a single file yields a one-item list)."""
        data = await self.client.get_contents(owner, repo, path, ref=ref)
        return data if isinstance(data, list) else [data]

    async def fetch_tree(self, owner: str, repo: str, branch: str, path: str = "") -> TreeNode:
        """
        Fetch the tree below ``path`` at ``branch``.

        Files whose content cannot be fetched or decoded are logged and left
        out. A failing directory listing fails the whole fetch.

        Raises:
            GitHubAPIError: If a directory listing fails.
            TreeTooLargeError: If the tree exceeds the depth or file limit.
        """
        walk = _TreeWalk(
            semaphore=asyncio.Semaphore(self.config.max_concurrency),
            max_files=self.config.max_files,
        )
        logger.info("Fetching tree of %s/%s@%s", owner, repo, branch)
        children = await self._walk_directory(owner, repo, branch, path, 0, walk)
        if walk.skipped:
            logger.warning(
                "Tree of %s/%s@%s omits %d file(s): %s",
                owner, repo, branch, len(walk.skipped), ", ".join(walk.skipped),
            )
        return TreeNode(path=path, kind=NodeKind.DIRECTORY, children=children)

    async def _walk_directory(
        self,
        owner: str,
        repo: str,
        branch: str,
        path: str,
        depth: int,
        walk: _TreeWalk,
    ) -> List[TreeNode]:
        if depth > self.config.max_depth:
            raise TreeTooLargeError(
                f"Directory nesting deeper than {self.config.max_depth} at {path}",
                limit="max_depth",
            )

        async with walk.semaphore:
            listing = await self.client.get_contents(owner, repo, path, ref=branch)
        entries = listing if isinstance(listing, list) else [listing]

        for entry in entries:
            if entry.get("type") == "file":
                walk.count_file(entry["path"])

        pending = []
        for entry in entries:
            entry_type = entry.get("type")
            if entry_type == "dir":
                pending.append(self._directory_node(owner, repo, branch, entry["path"], depth + 1, walk))
            elif entry_type == "file":
                pending.append(self._file_node(owner, repo, branch, entry["path"], walk))
            else:
                logger.debug("Skipping %s entry %s", entry_type, entry.get("path"))

        results = await asyncio.gather(*pending, return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return [node for node in results if node is not None]

    async def _directory_node(
        self, owner: str, repo: str, branch: str, path: str, depth: int, walk: _TreeWalk
    ) -> TreeNode:
        children = await self._walk_directory(owner, repo, branch, path, depth, walk)
        return TreeNode(path=path, kind=NodeKind.DIRECTORY, children=children)

    async def _file_node(
        self, owner: str, repo: str, branch: str, path: str, walk: _TreeWalk
    ) -> Optional[TreeNode]:
        try:
            async with walk.semaphore:
                payload = await self.client.get_contents(owner, repo, path, ref=branch)
            content = decode_content(payload)
        except (GitHubAPIError, ValueError) as e:
            logger.error("Error fetching content for %s: %s", path, e)
            walk.skipped.append(path)
            return None
        return TreeNode(
            path=path,
            kind=NodeKind.FILE,
            content=content,
            sha=payload.get("sha"),
        )

    async def update_file(
        self,
        owner: str,
        repo: str,
        path: str,
        new_content: str,
        commit_message: str,
        branch: Optional[str] = None,
        sha: Optional[str] = None,
    ) -> str:
        """
        Replace a file's content in a new commit.

        The current version marker is read first unless ``sha`` is given.
        GitHub rejects the write when the marker is stale; that is reported
        as ``FileConflictError`` and never retried.

        Returns:
            The sha of the newly written blob.
        """
        if sha is None:
            current = await self.client.get_contents(owner, repo, path, ref=branch)
            if not isinstance(current, dict) or not current.get("sha"):
                raise UpstreamServiceError("Could not get file SHA", service="github")
            sha = current["sha"]

        try:
            result = await self.client.put_contents(
                owner,
                repo,
                path,
                message=commit_message,
                content_b64=encode_content(new_content),
                sha=sha,
                branch=branch,
            )
        except GitHubAPIError as e:
            if e.http_status == 409:
                logger.warning("Stale sha for %s/%s:%s", owner, repo, path)
                raise FileConflictError(path) from e
            raise

        logger.info("Updated %s/%s:%s", owner, repo, path)
        return (result.get("content") or {}).get("sha", "")
