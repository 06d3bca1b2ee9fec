"""
Aristotle: adaptive validation-and-session engine for math tutoring.

Components:
- core: Domain models (Item, AnswerAttempt, Verdict, ScoreSummary) and errors
- grading: Validation pipeline with judgment-service and local fallbacks
- adaptive: Score aggregation, difficulty adaptation, remediation detection
- session: Timed, pausable session controller and presets
- integrations: Judgment service client and content providers
"""

__version__ = "1.0.0"
