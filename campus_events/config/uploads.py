"""Upload limits and accepted image formats."""

# 5 MiB ceiling per image
MAX_IMAGE_BYTES = 5 * 1024 * 1024

ALLOWED_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.gif'}

ALLOWED_CONTENT_TYPES = {'image/jpeg', 'image/jpg', 'image/png', 'image/gif'}

# Formats as reported by Pillow after decoding the header
ALLOWED_IMAGE_FORMATS = {'JPEG', 'PNG', 'GIF'}

# Stored blobs are served read-only under this prefix
UPLOAD_URL_PREFIX = '/uploads'
