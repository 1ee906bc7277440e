"""
Analysis Service - Review single files and whole batches.

FLOW (batch):
1. Store a PROCESSING record for the user
2. Send one prompt per file, concurrently, at most N in flight
3. All succeed  -> record COMPLETED with one suggestion per file (input order)
   Any one fails -> record FAILED, the error propagates to the caller
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional

from review_assistant.db.store import AnalysisStore
from review_assistant.models.requests import FileInput
from review_assistant.models.schemas import (
    AnalysisResult,
    ChatMessage,
    CodeChange,
    StoredAnalysis,
    SuggestedChange,
)
from review_assistant.services.llm_service import LLMService
from review_assistant.services.prompts import (
    build_analysis_prompt,
    build_batch_prompt,
    build_chat_prompt,
)
from review_assistant.services.response_parser import extract_code_change, parse_analysis


logger = logging.getLogger(__name__)


@dataclass
class AnalysisServiceConfig:
    """Configuration for analysis service."""
    max_concurrency: int = 4
    batch_max_tokens: int = 1000


@dataclass
class ReviewReply:
    """Raw model text plus whatever structure could be parsed from it."""
    message: str
    analysis: Optional[AnalysisResult] = None
    code_change: Optional[CodeChange] = None


class AnalysisService:
    """Builds prompts, calls the LLM and parses or persists the results."""

    def __init__(
        self,
        llm: LLMService,
        store: AnalysisStore,
        config: Optional[AnalysisServiceConfig] = None,
    ):
        self.llm = llm
        self.store = store
        self.config = config or AnalysisServiceConfig()

    async def review_file(self, file_path: str, content: str) -> ReviewReply:
        """Structured review of one file."""
        raw = await self.llm.request_analysis(build_analysis_prompt(file_path, content))
        return ReviewReply(message=raw, analysis=parse_analysis(raw))

    async def chat(
        self,
        file_path: str,
        content: str,
        message: str,
        history: Optional[List[ChatMessage]] = None,
    ) -> ReviewReply:
        """Answer a chat message about one file; picks up a proposed edit if present."""
        prompt = build_chat_prompt(file_path, content, message)
        raw = await self.llm.request_analysis(prompt, history=history)
        return ReviewReply(message=raw, code_change=extract_code_change(raw))

    async def analyze_files(
        self, user_id: int, repo_name: str, files: List[FileInput]
    ) -> StoredAnalysis:
        """
        Analyze every file and persist the outcome.

        Raises:
            LLMError: If any single file's request fails (the batch is FAILED).
        """
        record = await asyncio.to_thread(
            self.store.create, user_id=user_id, repo_name=repo_name
        )
        logger.info(
            "Analysis %d: reviewing %d file(s) of %s", record.id, len(files), repo_name
        )
        semaphore = asyncio.Semaphore(self.config.max_concurrency)

        async def suggest(file: FileInput) -> SuggestedChange:
            async with semaphore:
                text = await self.llm.request_analysis(
                    build_batch_prompt(file.path, file.content),
                    max_tokens=self.config.batch_max_tokens,
                )
            return SuggestedChange(file_path=file.path, suggestion=text, kind="improvement")

        results = await asyncio.gather(
            *(suggest(file) for file in files), return_exceptions=True
        )
        failure = next((r for r in results if isinstance(r, BaseException)), None)
        if failure is not None:
            await asyncio.to_thread(self.store.fail, record.id)
            logger.error("Analysis %d failed: %s", record.id, failure)
            raise failure

        completed = await asyncio.to_thread(self.store.complete, record.id, list(results))
        logger.info("Analysis %d completed", record.id)
        return completed

    def list_analyses(self, user_id: int) -> List[StoredAnalysis]:
        return self.store.list_for_user(user_id)

    def get_analysis(self, analysis_id: int, user_id: int) -> StoredAnalysis:
        return self.store.get(analysis_id, user_id)
