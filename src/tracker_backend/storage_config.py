"""
Image upload limits and naming defaults.
"""
import os

# Size limits
MAX_IMAGE_UPLOAD_SIZE = int(os.environ.get('IMAGE_MAX_UPLOAD_SIZE', 10 * 1024 * 1024))  # 10 MiB default

# Uploads without an explicit folder land here
DEFAULT_IMAGE_FOLDER = 'avatar'

IMAGE_CONTENT_TYPE_PREFIX = 'image/'

DEFAULT_FILE_EXTENSION = 'bin'


def format_bytes(bytes_size: int) -> str:
    """Format bytes to human readable string"""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if bytes_size < 1024.0:
            return f"{bytes_size:.2f} {unit}"
        bytes_size /= 1024.0
    return f"{bytes_size:.2f} TB"
