"""Configuration settings for the pathfinder."""

import os
from dotenv import load_dotenv

load_dotenv()

# Network dataset endpoints
DATASET_URL = os.getenv("PATHFINDER_DATASET_URL", "https://tjt.winsanmwtv.me/api/dataset.json")
DATANODES_URL = os.getenv("PATHFINDER_DATANODES_URL", "https://tjt.winsanmwtv.me/api/datanodes.json")

# Optional local copies (read instead of fetching when set)
DATASET_PATH = os.getenv("PATHFINDER_DATASET_PATH")
DATANODES_PATH = os.getenv("PATHFINDER_DATANODES_PATH")

HTTP_TIMEOUT = float(os.getenv("PATHFINDER_HTTP_TIMEOUT", "30"))

# Outbound redirect to the routing service
TRIPQUERY_URL = os.getenv("PATHFINDER_TRIPQUERY_URL", "https://tjt.winsanmwtv.me/mytripquery/")
REDIRECT_SOURCE = os.getenv("PATHFINDER_REDIRECT_SOURCE", "limaru.net")

# Service status feed
STATUS_URL = os.getenv(
    "PATHFINDER_STATUS_URL",
    "https://script.google.com/macros/s/AKfycbwwRXuVfw8rIlqiWcUV9LLnCXJdhypmyVCs-J4njJuRv5jZd3NOXegTbiZcjo3uYlLaug/exec",
)
STATUS_CACHE_TTL = 30  # seconds

# Line codes for walking/transfer links; these never mark a station as served.
# Set PATHFINDER_EXCLUDED_LINES="" to keep every code.
EXCLUDED_LINES = frozenset(
    code.strip()
    for code in os.getenv("PATHFINDER_EXCLUDED_LINES", "0,1").split(",")
    if code.strip()
)

DEFAULT_LINE_COLOR = "#cbd5e0"

LOG_LEVEL = os.getenv("PATHFINDER_LOG_LEVEL", "WARNING")
