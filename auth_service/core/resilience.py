"""
Resilience utilities.

Provides a count-based circuit breaker guarding calls to the identity
backend, and a small registry used to expose breaker state to health checks.
"""

import asyncio
import logging
import time
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CircuitState(Enum):
    """Circuit breaker states"""
    CLOSED = "closed"        # Normal operation
    OPEN = "open"            # Failing fast
    HALF_OPEN = "half_open"  # Admitting a bounded number of trial calls


class CallNotPermittedError(Exception):
    """Raised when the breaker rejects a call without invoking it."""

    def __init__(self, name: str, state: CircuitState):
        self.name = name
        self.state = state
        super().__init__(f"Circuit breaker '{name}' is {state.value}; call not permitted")


@dataclass
class CircuitBreakerConfig:
    """Circuit breaker configuration"""
    name: str = "default"
    sliding_window_size: int = 5
    failure_rate_threshold: float = 100.0  # percent
    wait_duration_in_open_state: float = 10.0  # seconds
    permitted_calls_in_half_open_state: int = 3
    ignored_exceptions: tuple[type[BaseException], ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.sliding_window_size <= 0:
            raise ValueError("sliding_window_size must be positive")
        if self.permitted_calls_in_half_open_state <= 0:
            raise ValueError("permitted_calls_in_half_open_state must be positive")
        if not 0 < self.failure_rate_threshold <= 100:
            raise ValueError("failure_rate_threshold must be in (0, 100]")
        if self.wait_duration_in_open_state < 0:
            raise ValueError("wait_duration_in_open_state must not be negative")


class CircuitBreaker:
    """
    Count-based circuit breaker.

    While CLOSED, outcomes are recorded in a sliding window of the last
    ``sliding_window_size`` calls; once the window is full and its failure
    rate reaches the threshold the breaker OPENs. An OPEN breaker rejects
    calls until ``wait_duration_in_open_state`` has elapsed, then moves to
    HALF_OPEN and admits ``permitted_calls_in_half_open_state`` trial calls.
    When all trials have completed the breaker goes back to OPEN or CLOSED
    depending on their failure rate.

    Exceptions listed in ``ignored_exceptions`` propagate to the caller but
    are recorded neither as success nor failure.
    """

    def __init__(
        self,
        config: CircuitBreakerConfig,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self._clock = clock
        self._lock = asyncio.Lock()
        self.state = CircuitState.CLOSED
        self._window: deque[bool] = deque(maxlen=config.sliding_window_size)
        self._opened_at = 0.0
        self._half_open_admitted = 0
        self._half_open_outcomes: list[bool] = []
        # Bumped on every transition; outcomes from an earlier state are dropped
        self._generation = 0

    @property
    def name(self) -> str:
        return self.config.name

    async def call(self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """
        Invoke ``func`` through the breaker.

        Raises:
            CallNotPermittedError: If the breaker rejects the call
        """
        generation = await self._acquire_permission()
        try:
            result = await func(*args, **kwargs)
        except self.config.ignored_exceptions:
            await self._release(generation)
            raise
        except asyncio.CancelledError:
            await self._release(generation)
            raise
        except Exception:
            await self._record(generation, success=False)
            raise
        await self._record(generation, success=True)
        return result

    async def _acquire_permission(self) -> int:
        async with self._lock:
            if self.state == CircuitState.OPEN:
                if self._clock() - self._opened_at >= self.config.wait_duration_in_open_state:
                    self._transition(CircuitState.HALF_OPEN)
                else:
                    raise CallNotPermittedError(self.name, self.state)

            if self.state == CircuitState.HALF_OPEN:
                if self._half_open_admitted >= self.config.permitted_calls_in_half_open_state:
                    raise CallNotPermittedError(self.name, self.state)
                self._half_open_admitted += 1

            return self._generation

    async def _release(self, generation: int) -> None:
        async with self._lock:
            if generation == self._generation and self.state == CircuitState.HALF_OPEN:
                self._half_open_admitted -= 1

    async def _record(self, generation: int, success: bool) -> None:
        async with self._lock:
            if generation != self._generation:
                return

            if self.state == CircuitState.CLOSED:
                self._window.append(success)
                if len(self._window) == self.config.sliding_window_size:
                    if self._failure_rate(self._window) >= self.config.failure_rate_threshold:
                        self._transition(CircuitState.OPEN)
            elif self.state == CircuitState.HALF_OPEN:
                self._half_open_outcomes.append(success)
                if len(self._half_open_outcomes) >= self.config.permitted_calls_in_half_open_state:
                    if self._failure_rate(self._half_open_outcomes) >= self.config.failure_rate_threshold:
                        self._transition(CircuitState.OPEN)
                    else:
                        self._transition(CircuitState.CLOSED)

    @staticmethod
    def _failure_rate(outcomes) -> float:
        outcomes = list(outcomes)
        if not outcomes:
            return 0.0
        failures = sum(1 for ok in outcomes if not ok)
        return failures * 100.0 / len(outcomes)

    def _transition(self, new_state: CircuitState) -> None:
        previous = self.state
        self.state = new_state
        self._generation += 1
        self._window.clear()
        self._half_open_admitted = 0
        self._half_open_outcomes = []
        if new_state == CircuitState.OPEN:
            self._opened_at = self._clock()
            logger.warning(f"Circuit breaker '{self.name}' OPEN (was {previous.value})")
        else:
            logger.info(f"Circuit breaker '{self.name}' transitioning to {new_state.name}")

    def get_status(self) -> dict[str, Any]:
        """Get a snapshot of the breaker state."""
        if self.state == CircuitState.HALF_OPEN:
            recorded = self._half_open_outcomes
        else:
            recorded = list(self._window)
        return {
            "name": self.name,
            "state": self.state.value,
            "buffered_calls": len(recorded),
            "failed_calls": sum(1 for ok in recorded if not ok),
            "failure_rate": self._failure_rate(recorded),
        }


class ResilienceManager:
    """
    Registry of circuit breakers.

    Provides centralized management and monitoring.
    """

    def __init__(self):
        self.circuit_breakers: dict[str, CircuitBreaker] = {}

    def get_or_create_circuit_breaker(
        self, name: str, config: CircuitBreakerConfig | None = None
    ) -> CircuitBreaker:
        """Get existing circuit breaker or create new one"""
        if name not in self.circuit_breakers:
            self.circuit_breakers[name] = CircuitBreaker(config or CircuitBreakerConfig(name=name))
        return self.circuit_breakers[name]

    def get_all_status(self) -> dict[str, Any]:
        """Get status of all circuit breakers"""
        return {name: cb.get_status() for name, cb in self.circuit_breakers.items()}
