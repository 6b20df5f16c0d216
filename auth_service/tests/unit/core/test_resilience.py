"""Unit tests for the circuit breaker state machine."""

import asyncio

import pytest

from auth_service.core.exceptions import ValidationError
from auth_service.core.resilience import (
    CallNotPermittedError,
    CircuitBreaker,
    CircuitBreakerConfig,
    CircuitState,
    ResilienceManager,
)


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


async def succeed():
    return "ok"


async def fail():
    raise RuntimeError("backend down")


async def invalid():
    raise ValidationError("Username is required")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def breaker(clock):
    config = CircuitBreakerConfig(
        name="test",
        sliding_window_size=5,
        failure_rate_threshold=100.0,
        wait_duration_in_open_state=10.0,
        permitted_calls_in_half_open_state=3,
        ignored_exceptions=(ValidationError,),
    )
    return CircuitBreaker(config, clock=clock)


async def record_failures(breaker, count):
    for _ in range(count):
        with pytest.raises(RuntimeError):
            await breaker.call(fail)


async def open_breaker(breaker):
    await record_failures(breaker, 5)
    assert breaker.state == CircuitState.OPEN


class TestClosedState:
    @pytest.mark.asyncio
    async def test_passes_result_through(self, breaker):
        assert await breaker.call(succeed) == "ok"
        assert breaker.state == CircuitState.CLOSED

    @pytest.mark.asyncio
    async def test_stays_closed_until_window_is_full(self, breaker):
        await record_failures(breaker, 4)

        assert breaker.state == CircuitState.CLOSED

    @pytest.mark.asyncio
    async def test_opens_when_full_window_has_only_failures(self, breaker):
        await record_failures(breaker, 5)

        assert breaker.state == CircuitState.OPEN

    @pytest.mark.asyncio
    async def test_one_success_in_window_keeps_it_closed(self, breaker):
        # Arrange
        await record_failures(breaker, 4)
        await breaker.call(succeed)

        # Act: the success slides out of the window only after five more failures
        await record_failures(breaker, 4)
        assert breaker.state == CircuitState.CLOSED
        await record_failures(breaker, 1)

        # Assert
        assert breaker.state == CircuitState.OPEN

    @pytest.mark.asyncio
    async def test_ignored_exceptions_are_not_recorded(self, breaker):
        for _ in range(10):
            with pytest.raises(ValidationError):
                await breaker.call(invalid)

        assert breaker.state == CircuitState.CLOSED
        assert breaker.get_status()["buffered_calls"] == 0


class TestOpenState:
    @pytest.mark.asyncio
    async def test_rejects_without_invoking(self, breaker):
        await open_breaker(breaker)
        invoked = False

        async def tracked():
            nonlocal invoked
            invoked = True

        with pytest.raises(CallNotPermittedError) as exc_info:
            await breaker.call(tracked)

        assert invoked is False
        assert exc_info.value.state == CircuitState.OPEN
        assert exc_info.value.name == "test"

    @pytest.mark.asyncio
    async def test_rejects_until_wait_duration_elapses(self, breaker, clock):
        await open_breaker(breaker)

        clock.advance(9.5)
        with pytest.raises(CallNotPermittedError):
            await breaker.call(succeed)

        clock.advance(0.5)
        assert await breaker.call(succeed) == "ok"
        assert breaker.state == CircuitState.HALF_OPEN


class TestHalfOpenState:
    @pytest.mark.asyncio
    async def test_closes_after_successful_trials(self, breaker, clock):
        await open_breaker(breaker)
        clock.advance(10)

        for _ in range(3):
            await breaker.call(succeed)

        assert breaker.state == CircuitState.CLOSED

    @pytest.mark.asyncio
    async def test_reopens_when_all_trials_fail(self, breaker, clock):
        await open_breaker(breaker)
        clock.advance(10)

        await record_failures(breaker, 3)

        assert breaker.state == CircuitState.OPEN
        with pytest.raises(CallNotPermittedError):
            await breaker.call(succeed)

    @pytest.mark.asyncio
    async def test_mixed_trials_below_threshold_close(self, breaker, clock):
        await open_breaker(breaker)
        clock.advance(10)

        await record_failures(breaker, 1)
        await breaker.call(succeed)
        assert breaker.state == CircuitState.HALF_OPEN
        await breaker.call(succeed)

        assert breaker.state == CircuitState.CLOSED

    @pytest.mark.asyncio
    async def test_rejects_calls_beyond_permitted_trials(self, breaker, clock):
        # Arrange
        await open_breaker(breaker)
        clock.advance(10)
        gate = asyncio.Event()

        async def slow():
            await gate.wait()
            return "ok"

        trials = [asyncio.create_task(breaker.call(slow)) for _ in range(3)]
        for _ in range(5):
            await asyncio.sleep(0)

        # Act / Assert
        with pytest.raises(CallNotPermittedError) as exc_info:
            await breaker.call(succeed)
        assert exc_info.value.state == CircuitState.HALF_OPEN

        gate.set()
        assert await asyncio.gather(*trials) == ["ok", "ok", "ok"]
        assert breaker.state == CircuitState.CLOSED

    @pytest.mark.asyncio
    async def test_ignored_exception_frees_trial_slot(self, breaker, clock):
        await open_breaker(breaker)
        clock.advance(10)

        with pytest.raises(ValidationError):
            await breaker.call(invalid)
        for _ in range(3):
            await breaker.call(succeed)

        assert breaker.state == CircuitState.CLOSED


class TestStatusAndRegistry:
    @pytest.mark.asyncio
    async def test_status_snapshot(self, breaker):
        await record_failures(breaker, 2)
        await breaker.call(succeed)

        status = breaker.get_status()

        assert status == {
            "name": "test",
            "state": "closed",
            "buffered_calls": 3,
            "failed_calls": 2,
            "failure_rate": pytest.approx(66.666, rel=1e-3),
        }

    def test_manager_returns_same_breaker_by_name(self):
        manager = ResilienceManager()

        first = manager.get_or_create_circuit_breaker("keycloak")
        second = manager.get_or_create_circuit_breaker("keycloak", CircuitBreakerConfig(name="other"))

        assert first is second
        assert set(manager.get_all_status()) == {"keycloak"}
        assert manager.get_all_status()["keycloak"]["state"] == "closed"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"sliding_window_size": 0},
            {"permitted_calls_in_half_open_state": 0},
            {"failure_rate_threshold": 0},
            {"failure_rate_threshold": 101},
            {"wait_duration_in_open_state": -1},
        ],
    )
    def test_config_rejects_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            CircuitBreakerConfig(**kwargs)
