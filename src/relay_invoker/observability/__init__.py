"""
relay_invoker.observability

Observability package.

Responsibilities:
- Structured logging configuration and the error-logger collaborator.
"""

# Package marker.
