"""
Retry configuration.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Sequence

# Observer signature: (attempt just failed, error, delay about to be slept)
RetryObserver = Callable[[int, Exception, float], None]


@dataclass(frozen=True)
class RetryConfig:
    """
    Configuration for retry behavior.

    Attributes:
        max_attempts: Total number of attempts, including the first (default: 3)
        initial_delay: Delay in seconds before the first retry (default: 1.0)
        max_delay: Cap on the pre-jitter delay in seconds (default: 30.0)
        backoff_multiplier: Growth factor applied after each failure (default: 2.0)
        jitter: Extra random delay as fraction of the current delay (default: 0.3)
        retryable_errors: Markers matched against error text and categories.
            Empty means every failure is retryable.
        on_retry: Optional callback(attempt, exception, delay) called before each wait
    """

    max_attempts: int = 3
    initial_delay: float = 1.0
    max_delay: float = 30.0
    backoff_multiplier: float = 2.0
    jitter: float = 0.3
    retryable_errors: Sequence[str] = ()
    on_retry: RetryObserver | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.initial_delay < 0:
            raise ValueError(f"initial_delay must be >= 0, got {self.initial_delay}")
        if self.max_delay < self.initial_delay:
            raise ValueError(
                f"max_delay ({self.max_delay}) must be >= initial_delay ({self.initial_delay})"
            )
        if self.backoff_multiplier <= 1:
            raise ValueError(f"backoff_multiplier must be > 1, got {self.backoff_multiplier}")
        if not 0 <= self.jitter <= 1:
            raise ValueError(f"jitter must be between 0 and 1, got {self.jitter}")
        if isinstance(self.retryable_errors, str):
            raise ValueError("retryable_errors must be a sequence of strings, not a string")
        # frozen: normalise lists to an immutable tuple
        object.__setattr__(self, "retryable_errors", tuple(self.retryable_errors))

    def with_overrides(self, **changes: Any) -> "RetryConfig":
        """Return a copy with the given fields replaced."""
        if not changes:
            return self
        return replace(self, **changes)

    @classmethod
    def aggressive(cls) -> "RetryConfig":
        """Preset for aggressive retry (more attempts, longer delays)."""
        return cls(
            max_attempts=10,
            initial_delay=2.0,
            max_delay=120.0,
        )

    @classmethod
    def conservative(cls) -> "RetryConfig":
        """Preset for conservative retry (fewer waits, shorter delays)."""
        return cls(
            max_attempts=2,
            initial_delay=0.5,
            max_delay=10.0,
        )

    @classmethod
    def no_retry(cls) -> "RetryConfig":
        """Preset for no retry (single attempt only)."""
        return cls(max_attempts=1)
