"""
External collaborators of the tutoring engine.

Modules:
- judgment_client: HTTP client for the answer-judging service
- prompts: Prompt text sent to the judging service
- content_provider: Item source protocol and the in-memory ItemBank
"""
from .content_provider import ContentProvider, ItemBank, ItemRecord
from .judgment_client import JudgmentBackend, JudgmentClient, JudgmentRequest

__all__ = [
    "ContentProvider",
    "ItemBank",
    "ItemRecord",
    "JudgmentBackend",
    "JudgmentClient",
    "JudgmentRequest",
]
