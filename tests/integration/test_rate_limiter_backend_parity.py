"""Integration tests comparing the memory and Redis backends.

Both backends are driven by the same clock through the same sequence of
checks. Their decisions must match step for step.
"""

import pytest

from src.rate_limiter.config import TokenBucketConfig
from src.rate_limiter.storage import MemoryStorage, RedisStorage

# (milliseconds to advance before the check, identifier)
SCENARIO = [
    (0, "a"),
    (0, "a"),
    (0, "a"),
    (0, "a"),  # denied: bucket of 3 is empty
    (0, "b"),
    (250, "a"),  # 0.5 tokens, denied
    (250, "a"),  # 1.0 token, allowed
    (125, "a"),  # 0.25 tokens, denied
    (-2000, "a"),  # clock steps back, denied
    (2375, "a"),  # 0.75 + 0.25 = 1.0, allowed
    (0, "b"),  # refilled to the cap of 3
    (0, "b"),
    (0, "b"),
    (10_000, "a"),  # long gap, capped at 3
    (0, "a"),
    (0, "a"),
    (0, "a"),  # denied
    (500, "b"),
    (500, "b"),
]


@pytest.mark.integration
class TestBackendParity:
    """Test both backends make identical decisions."""

    @pytest.mark.parametrize(
        ("max_tokens", "refill_rate"),
        [(3, 2), (1, 1), (5, 4)],
    )
    async def test_same_decisions_for_same_sequence(
        self, redis_client, clock, max_tokens, refill_rate
    ):
        """Test memory and Redis agree on every check of the scenario."""
        config = TokenBucketConfig(max_tokens=max_tokens, refill_rate=refill_rate)
        memory = MemoryStorage(config, clock=clock.now_ms, monotonic=clock.monotonic)
        redis_storage = RedisStorage(config, redis_client, clock=clock.now_ms)

        memory_decisions = []
        redis_decisions = []
        for advance_ms, identifier in SCENARIO:
            clock.advance(milliseconds=advance_ms)
            memory_decisions.append((await memory.check(identifier)).value)
            redis_decisions.append((await redis_storage.check(identifier)).value)

        assert memory_decisions == redis_decisions

    async def test_expected_decisions(self, redis_client, clock):
        """Test the scenario yields the hand-computed decisions (3 tokens, 2/s)."""
        config = TokenBucketConfig(max_tokens=3, refill_rate=2)
        redis_storage = RedisStorage(config, redis_client, clock=clock.now_ms)

        decisions = []
        for advance_ms, identifier in SCENARIO:
            clock.advance(milliseconds=advance_ms)
            decisions.append((await redis_storage.check(identifier)).value)

        assert decisions == [
            True, True, True, False,
            True,
            False, True, False, False, True,
            True, True, True,
            True, True, True, False,
            True, True,
        ]  # fmt: skip
