"""
Error Recovery - Retry executor driven by each error's declared policy.

Given a failed operation and the SentimentError describing the failure,
the executor sleeps backoff_ms * 2 ** (attempt - 1) before each retry and
stops on the first success or after max_attempts failed retries.
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Optional, TypeVar

from .exceptions import SentimentError
from .models import RecoveryResult


logger = logging.getLogger(__name__)


T = TypeVar("T")

Operation = Callable[[], Awaitable[T]]
ErrorFactory = Callable[[str, Optional[BaseException]], SentimentError]


class ErrorRecovery:
    """
    Applies exponential-backoff retries to a failed operation.

    Usage:
        recovery = ErrorRecovery("SentimentAnalysis")
        outcome = await recovery.attempt_recovery(error, lambda: provider.call())
        if outcome.success:
            value = outcome.result
    """

    def __init__(self, service: str) -> None:
        self.service = service
        self._stats = {
            "recoveries_attempted": 0,
            "recoveries_succeeded": 0,
            "recoveries_failed": 0,
        }

    async def attempt_recovery(
        self,
        error: SentimentError,
        operation: Operation,
    ) -> RecoveryResult:
        """
        Retry ``operation`` under ``error``'s retry policy.

        Args:
            error: The failure that triggered recovery
            operation: Zero-argument coroutine factory to retry

        Returns:
            RecoveryResult with the operation's value on success, or the
            last retry error on failure. ``metadata["attempts"]`` counts
            retries actually made.
        """
        if not error.should_retry:
            return RecoveryResult(
                success=False,
                error=error,
                metadata=self._metadata(error, "no_retry", attempts=0),
            )

        self._stats["recoveries_attempted"] += 1
        policy = error.retry_policy
        last_error: Optional[BaseException] = None

        for attempt in range(1, policy.max_attempts + 1):
            logger.info(
                f"[{self.service}] Attempting recovery {attempt}/{policy.max_attempts} "
                f"for {error.code.value}: {error.message}"
            )
            await asyncio.sleep(policy.delay_ms(attempt) / 1000)

            try:
                result = await operation()
            except Exception as e:
                last_error = e
                logger.warning(
                    f"[{self.service}] Recovery attempt {attempt} failed: {e}"
                )
                continue

            logger.info(f"[{self.service}] Recovery successful after {attempt} attempt(s)")
            self._stats["recoveries_succeeded"] += 1
            return RecoveryResult(
                success=True,
                result=result,
                metadata=self._metadata(error, "recovered", attempts=attempt),
            )

        logger.error(
            f"[{self.service}] Recovery failed, max attempts reached "
            f"({policy.max_attempts}) for {error.code.value}: {last_error}"
        )
        self._stats["recoveries_failed"] += 1
        return RecoveryResult(
            success=False,
            error=last_error,
            metadata=self._metadata(
                error,
                "max_attempts",
                attempts=policy.max_attempts,
                final_error=str(last_error),
            ),
        )

    async def run(
        self,
        operation: Operation,
        make_error: ErrorFactory,
        description: str,
    ) -> Any:
        """
        Call ``operation`` once and fall back to recovery if it fails.

        Raises:
            SentimentError: built by ``make_error`` when recovery is
                exhausted or the failure kind is not retryable
        """
        try:
            return await operation()
        except Exception as e:
            error = make_error(description, e)

        logger.warning(f"[{self.service}] {description}: {error.cause}")
        outcome = await self.attempt_recovery(error, operation)
        if not outcome.success:
            raise error
        return outcome.result

    def _metadata(
        self,
        error: SentimentError,
        status: str,
        **additional: Any,
    ) -> dict[str, Any]:
        return {
            "timestamp": int(time.time() * 1000),
            "service": self.service,
            "operation": error.code.value,
            "status": status,
            "severity": error.severity.value,
            **additional,
        }

    def get_stats(self) -> dict[str, int]:
        return dict(self._stats)
