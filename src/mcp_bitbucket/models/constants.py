"""Default values used by the data models when a field is missing."""

EMPTY_STRING = ""
UNKNOWN = "Unknown"
