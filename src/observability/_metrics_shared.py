from enum import Enum

from prometheus_client import Counter


class ErrorType(Enum):
    IDENTIFIER_PARSE = "identifier-parse"
    NOT_FOUND = "not-found"
    OTHER = "other"


ERRORS_METRIC = Counter(
    "errors",
    "Number of errors",
    labelnames=["error_type"],
)
for enum_type in ErrorType:
    ERRORS_METRIC.labels(enum_type.value).reset()


def get_shared_metrics() -> tuple[Counter]:
    return (ERRORS_METRIC,)
