"""
Repository Endpoints - List, select and update repositories.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from review_assistant.core.auth import AuthContext
from review_assistant.core.dependencies import get_auth_context, get_repo_service
from review_assistant.models.requests import (
    SelectRepositoryRequest,
    UpdateFileRequest,
    split_repo_name,
)
from review_assistant.models.responses import (
    ErrorResponse,
    SelectRepositoryResponse,
    SuccessResponse,
)
from review_assistant.models.schemas import Repository
from review_assistant.services.repo_service import RepoService


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/repositories", tags=["Repositories"])


@router.get(
    "",
    response_model=List[Repository],
    summary="List Repositories",
    description="Repositories the user owns or collaborates on",
    responses={401: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def list_repositories(
    identity: AuthContext = Depends(get_auth_context),
    repo_service: RepoService = Depends(get_repo_service),
) -> List[Repository]:
    return await repo_service.list_repositories()


@router.post(
    "/select",
    response_model=SelectRepositoryResponse,
    summary="Select Repository",
    description="List the root directory of a repository",
)
async def select_repository(
    request: SelectRepositoryRequest,
    identity: AuthContext = Depends(get_auth_context),
    repo_service: RepoService = Depends(get_repo_service),
) -> SelectRepositoryResponse:
    owner, repo = split_repo_name(request.repo_name)
    files = await repo_service.list_directory(owner, repo)
    return SelectRepositoryResponse(repo_name=request.repo_name, files=files)


@router.post(
    "/update",
    response_model=SuccessResponse,
    summary="Update File",
    description="Commit new content for a file; stale versions are rejected",
    responses={
        401: {"model": ErrorResponse},
        409: {"model": ErrorResponse, "description": "File changed remotely"},
        502: {"model": ErrorResponse},
    },
)
async def update_file(
    request: UpdateFileRequest,
    identity: AuthContext = Depends(get_auth_context),
    repo_service: RepoService = Depends(get_repo_service),
) -> SuccessResponse:
    owner, repo = split_repo_name(request.repository_name)
    await repo_service.update_file(
        owner,
        repo,
        request.file_path,
        request.content,
        request.message,
        branch=request.branch,
        sha=request.sha,
    )
    return SuccessResponse(success=True)
