from .beacon_query import BeaconQueryService

__all__ = [
    "BeaconQueryService",
]
