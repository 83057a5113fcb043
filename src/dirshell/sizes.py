"""Human-readable file size formatting and parsing."""

from humanfriendly import format_size, parse_size


def format_file_size(num_bytes: int) -> str:
    """Format a byte count using binary multiples.

    Args:
        num_bytes: Size in bytes.

    Returns:
        Size string such as '10 bytes' or '1.5 KiB'.

    Example:
        >>> format_file_size(1536)
        '1.5 KiB'
    """
    return str(format_size(num_bytes, binary=True))


def parse_file_size(size_str: str) -> int:
    """Parse human-readable file size to bytes.

    Args:
        size_str: Size string like '1GB', '500MB', '2.5K', or just '1024'

    Returns:
        Size in bytes

    Raises:
        ValueError: If size_str is not a valid size format
    """
    try:
        return int(parse_size(size_str))
    except Exception as e:
        raise ValueError(f"Invalid size format '{size_str}': {e}")
