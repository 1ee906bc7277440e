"""
API Layer - FastAPI routes and middleware.

Routers live in ``review_assistant.api.routes``; exception classes and
handlers in ``review_assistant.api.middleware``.
"""
