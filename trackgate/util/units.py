import re

FILESIZE_UNITS = ("B", "KB", "MB", "GB")


def raw_seconds_short(string: str) -> float:
    """Formats a human-readable M:SS string as a float (number of seconds).

    Minutes may have one to three digits, seconds must be two digits below
    60. Raises ValueError if the conversion cannot take place due to
    `string` not being in the right format.
    """
    match = re.match(r"^(\d{1,3}):([0-5]\d)$", string.strip())
    if not match:
        raise ValueError("String not in M:SS format")
    minutes, seconds = map(int, match.groups())
    return float(minutes * 60 + seconds)


def human_seconds_short(interval):
    """Formats a number of seconds as a short human-readable M:SS
    string.
    """
    interval = int(interval)
    return f"{interval // 60}:{interval % 60:02d}"


def human_filesize(size):
    """Formats size, a number of bytes, with two decimals and the largest
    unit up to GB that keeps the value below 1024.
    """
    size = float(max(size, 0))
    unit = FILESIZE_UNITS[0]
    for unit in FILESIZE_UNITS[:-1]:
        if size < 1024:
            break
        size /= 1024.0
    else:
        unit = FILESIZE_UNITS[-1]
    return f"{size:.2f} {unit}"
