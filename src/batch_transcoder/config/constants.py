"""
System constants that should never change.

These are technical limits of the converter, not user preferences.
User-configurable values should go in config.yaml instead.
"""

# Accepted prompt/argument ranges (inclusive)
SCALE_MIN = 0.25
SCALE_MAX = 3.0
FPS_MIN = 8
FPS_MAX = 60

# Sentinel meaning "keep the source value"
AUTO = "auto"

# Output formats, in menu order ("1" selects the first entry)
OUTPUT_FORMATS = ("gif", "mp4", "webm", "mov", "avi")
FORMAT_MENU = {str(index): fmt for index, fmt in enumerate(OUTPUT_FORMATS, start=1)}

# Extension sets per workflow mode
MEDIA_EXTENSIONS = (".mp4", ".avi", ".jpg", ".jpeg", ".png")
VIDEO_EXTENSIONS = (".mp4",)

# Size formatting
BYTES_PER_KB = 1024

VERBOSE_LOGGING_THRESHOLD = 2  # -vv enables debug output
ERROR_MESSAGE_TRUNCATE_LENGTH = 100  # Maximum length for error message display
