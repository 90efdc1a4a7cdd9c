from pathlib import Path

from ._logging import setup_logging
from ._metrics_shared import ErrorType, get_shared_metrics
from ._service_info import get_service_commit, get_service_name, get_service_version


def init_observability(
    log_level: int,
    data_dir: Path | None,
) -> None:
    setup_logging(
        log_level=log_level,
        data_dir=data_dir,
    )


__all__ = [
    "ErrorType",
    "get_service_commit",
    "get_service_name",
    "get_service_version",
    "get_shared_metrics",
    "init_observability",
]
