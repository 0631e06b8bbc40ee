# config.py
"""
Application configuration constants for the JPEG compressor
"""

APP_NAME = "JPEG Compressor"
WINDOW_TITLE = "Image Compressor, Resizer & Base64 Encoder"

# Settings defaults
DEFAULT_QUALITY = 0.8
DEFAULT_MAX_WIDTH = 800
DEFAULT_MAX_HEIGHT = 600

# Settings bounds
QUALITY_MIN = 0.1
QUALITY_MAX = 1.0
QUALITY_STEP = 0.05
MIN_DIMENSION = 1
MAX_DIMENSION = 10000  # Upper bound offered by the width/height inputs

# Delay before settings edits trigger reprocessing
DEBOUNCE_MS = 500

# Accepted input
JPEG_EXTENSIONS = ("jpg", "jpeg")
OUTPUT_MIME_TYPE = "image/jpeg"

# Result cache settings
MAX_CACHE_SIZE = 24
MAX_CACHE_BYTES = 64 << 20  # JPEG bytes plus data URL text

# Performance monitor settings
MEMORY_THRESHOLD_BYTES = 500 << 20  # 500 MB
MEMORY_CHECK_INTERVAL_SECS = 60

# Logging
LOG_FILE_NAME = "jpeg_compressor.log"
LOG_MAX_BYTES = 1_048_576
LOG_BACKUP_COUNT = 5

# Shortcuts
OPEN_SHORTCUT = "Ctrl+O"
COPY_SHORTCUT = "Ctrl+Shift+C"

# Preview
PREVIEW_MAX_DISPLAY = 640  # Largest on-screen preview edge in pixels
