"""
Stream Definition Test Factory
"""

from src.core.config.constants import StreamPriority
from src.telemetry.models.stream import AlertThresholds, StreamDefinition


class StreamTestFactory:
    @staticmethod
    def definition(
        stream_id: str = "test-stream",
        source: str = "fake",
        priority: StreamPriority = StreamPriority.MEDIUM,
        poll_interval_ms: int = 100,
        max_retries: int = 3,
        max_response_time_ms: int = 3000,
        max_error_rate: float = 0.5,
        max_data_age_ms: int = 10_000,
        base_confidence: float = 0.9,
        **kwargs,
    ) -> StreamDefinition:
        return StreamDefinition(
            id=stream_id,
            source=source,
            stream_kind=kwargs.pop("stream_kind", "positions"),
            data_type=kwargs.pop("data_type", "test_data"),
            priority=priority,
            poll_interval_ms=poll_interval_ms,
            max_retries=max_retries,
            alert_thresholds=AlertThresholds(
                max_response_time_ms=max_response_time_ms,
                max_error_rate=max_error_rate,
                max_data_age_ms=max_data_age_ms,
            ),
            base_confidence=base_confidence,
            **kwargs,
        )
