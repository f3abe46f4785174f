from .logger import (
    clear_stream_id,
    get_logger,
    get_stream_id,
    log_stage,
    set_stream_id,
    setup_logging,
)

__all__ = [
    "clear_stream_id",
    "get_logger",
    "get_stream_id",
    "log_stage",
    "set_stream_id",
    "setup_logging",
]
