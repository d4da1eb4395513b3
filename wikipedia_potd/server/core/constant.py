"""Constants shared by the server package."""

PROJECT_NAME = "Wikipedia Picture of the Day"
API_PREFIX = "/api/potd"
VERSION = "1.0.0"

# TRMNL e-ink panel resolution
TRMNL_WIDTH = 800
TRMNL_HEIGHT = 480

# Upper bound for requested image sides
MAX_IMAGE_DIMENSION = 4096
