"""
Core Module - Configuration, authentication context and dependencies.

Import submodules directly (``review_assistant.core.config``,
``review_assistant.core.dependencies``); the dependency module pulls in the
whole service layer.
"""
