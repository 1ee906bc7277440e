"""
Analysis Endpoints - Tree fetch, chat, and stored batch analyses.

- POST /analyze          fetch a repository's file tree with contents
- POST /chat             single-file review or conversational edit
- POST /analyses         analyze several files and store the result
- GET  /analyses         the caller's stored analyses, newest first
- GET  /analyses/{id}    one stored analysis
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from review_assistant.core.auth import AuthContext
from review_assistant.core.dependencies import (
    get_analysis_service,
    get_auth_context,
    get_repo_service,
)
from review_assistant.models.requests import (
    AnalyzeRequest,
    BatchAnalysisRequest,
    ChatAction,
    ChatRequest,
    split_repo_name,
)
from review_assistant.models.responses import ChatResponse, ErrorResponse, TreeResponse
from review_assistant.models.schemas import StoredAnalysis
from review_assistant.services.analysis_service import AnalysisService
from review_assistant.services.repo_service import RepoService


logger = logging.getLogger(__name__)

router = APIRouter(tags=["Analysis"])


@router.post(
    "/analyze",
    response_model=TreeResponse,
    summary="Fetch Repository Tree",
    description="Recursively fetch a repository's files and their contents",
    responses={
        401: {"model": ErrorResponse},
        413: {"model": ErrorResponse, "description": "Repository too large"},
        502: {"model": ErrorResponse, "description": "GitHub request failed"},
    },
)
async def analyze_repository(
    request: AnalyzeRequest,
    identity: AuthContext = Depends(get_auth_context),
    repo_service: RepoService = Depends(get_repo_service),
) -> TreeResponse:
    """
    Fetch the file tree of a repository at a branch.

    Files that cannot be read are left out; a failing directory listing
    fails the request.
    """
    owner, repo = split_repo_name(request.repository_name)
    tree = await repo_service.fetch_tree(owner, repo, request.branch)
    logger.info("Repository structure of %s fetched", request.repository_name)
    return TreeResponse(files=tree.children)


@router.post(
    "/chat",
    response_model=ChatResponse,
    summary="Chat About a File",
    description="Ask about a file, or (action=analyze) get a structured review",
    responses={401: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def chat(
    request: ChatRequest,
    identity: AuthContext = Depends(get_auth_context),
    analysis_service: AnalysisService = Depends(get_analysis_service),
) -> ChatResponse:
    context = request.context

    if context.action == ChatAction.ANALYZE:
        # The file content travels in the message for reviews
        reply = await analysis_service.review_file(context.file_path, request.message)
    else:
        reply = await analysis_service.chat(
            context.file_path,
            context.content or "",
            request.message,
            history=request.history,
        )

    return ChatResponse(
        message=reply.message,
        analysis=reply.analysis,
        code_change=reply.code_change,
    )


@router.post(
    "/analyses",
    response_model=StoredAnalysis,
    summary="Analyze Files",
    description="Review several files concurrently and store the suggestions",
    responses={401: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def create_analysis(
    request: BatchAnalysisRequest,
    identity: AuthContext = Depends(get_auth_context),
    analysis_service: AnalysisService = Depends(get_analysis_service),
) -> StoredAnalysis:
    return await analysis_service.analyze_files(
        user_id=identity.user_id,
        repo_name=request.repo_name,
        files=request.files,
    )


@router.get(
    "/analyses",
    response_model=List[StoredAnalysis],
    summary="List Analyses",
)
def list_analyses(
    identity: AuthContext = Depends(get_auth_context),
    analysis_service: AnalysisService = Depends(get_analysis_service),
) -> List[StoredAnalysis]:
    return analysis_service.list_analyses(identity.user_id)


@router.get(
    "/analyses/{analysis_id}",
    response_model=StoredAnalysis,
    summary="Get Analysis",
    responses={404: {"model": ErrorResponse}},
)
def get_analysis(
    analysis_id: int,
    identity: AuthContext = Depends(get_auth_context),
    analysis_service: AnalysisService = Depends(get_analysis_service),
) -> StoredAnalysis:
    return analysis_service.get_analysis(analysis_id, identity.user_id)
