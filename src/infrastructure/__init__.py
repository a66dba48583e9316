"""Infrastructure layer - Adapters and external integrations.

This layer contains implementations of domain protocols (ports):
- logging/: Structured logging adapters (structlog)
"""
