import schemas.beacon_api as SchemaBeaconAPI
import schemas.validator as SchemaValidator

__all__ = [
    "SchemaBeaconAPI",
    "SchemaValidator",
]
