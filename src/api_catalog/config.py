"""Console-wide settings."""

from pathlib import Path

# Where the catalog REST API would live; the simulated service never calls it.
BASE_URL = "https://api.example.com/v1"

SAMPLE_CATALOG = Path(__file__).parent / "data" / "sample_catalog.yaml"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
