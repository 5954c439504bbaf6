"""Application constants."""

DEFAULT_SOURCE = "osm"
DEFAULT_TYPE = "venue"
WGS84_EPSG = 4326

ADDRESS_TYPE = "address"
POI_ADDRESS_TYPE = "poi-address"
HOUSE_NUMBER_DELIMITER = ";"

ADDRESS_FIELDS = ("name", "number", "street", "zip")
ADMIN_FIELDS = (
    "admin0",
    "admin1",
    "admin1_abbr",
    "admin2",
    "local_admin",
    "locality",
    "neighborhood",
)
META_FIELDS = ("nodes", "tags")

STAGES = (
    "construct",
    "extract-addresses",
)
EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "source",
    "event",
    "status",
    "record_id",
    "rows_in",
    "rows_out",
    "error_code",
    "document",
    "message",
)
