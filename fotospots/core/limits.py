# fotospots/core/limits.py
"""Business limits shared by the upload endpoint, the listing and the client."""

MAX_PHOTOS_PER_SPOT = 5
MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024  # 10 MiB

ALLOWED_MIME_TYPES = ("image/jpeg", "image/png", "image/webp")
DEFAULT_EXTENSION = "jpg"

# Listing pagination
DEFAULT_LIMIT = 50
MAX_LIMIT = 100
