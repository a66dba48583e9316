"""Test suite for the token bucket rate limiter.

Test structure:
- unit/: Unit tests - configuration, buckets, in-process storage, facades
- integration/: Integration tests - Lua script on fakeredis, backend parity,
  real structlog output
"""
