"""Domain layer - Pure business logic.

This layer contains protocols (ports) and domain errors. It has NO dependencies
on any framework or infrastructure - it is pure Python.

Structure:
- errors/: Domain errors (returned inside Failure, never raised)
- protocols/: Domain protocols (rate limiting port, logging port)
"""
