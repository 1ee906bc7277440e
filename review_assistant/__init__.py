"""
Repository Review Assistant
===========================

A web backend that lets a GitHub user fetch a repository's files, get
AI-generated reviews and chat-driven edits, and commit those edits back.

Components:
- services: GitHub client, tree fetcher/file updater, LLM, analyses, auth
- db: SQLAlchemy models and stores
- api: FastAPI endpoints and error handling
- models: Pydantic data models
- core: Configuration, auth context and dependencies
"""

__version__ = "1.0.0"
