"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
"""
import re

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


class ConvertUtils:
    @staticmethod
    def duration_to_seconds(duration_str: str) -> float:
        """
        Convert a Go-style duration string to seconds.
        Supports formats: '0', '0s', '1.5s', '300ms', '30m', '1h30m', '-2m'.
        A unit is required for every number except a bare '0'.
        Raises ValueError for invalid formats.
        """
        text = duration_str.strip()
        if not text:
            raise ValueError("Empty duration")

        sign = 1.0
        if text[0] in "+-":
            if text[0] == "-":
                sign = -1.0
            text = text[1:]

        if text == "0":
            return 0.0
        if not text:
            raise ValueError(f"Invalid duration: '{duration_str}'")

        total = 0.0
        pos = 0
        while pos < len(text):
            match = _DURATION_PART.match(text, pos)
            if not match:
                raise ValueError(
                    f"Invalid duration: '{duration_str}'. "
                    f"Supported formats: 0s, 1.5s, 300ms, 30m, 1h30m, etc."
                )
            total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
            pos = match.end()

        return sign * total

    @staticmethod
    def is_valid_duration_format(duration_str: str) -> bool:
        """
        Check if the input string has a valid duration format.
        """
        try:
            ConvertUtils.duration_to_seconds(duration_str)
            return True
        except ValueError:
            return False

    @staticmethod
    def seconds_to_human(seconds: float) -> str:
        """
        Convert seconds to a compact string (e.g., 450ms, 12.30s, 5m03s, 1h02m).
        """
        if seconds < 0:
            return "0s"
        if seconds < 1:
            return f"{int(seconds * 1000)}ms"
        if seconds < 60:
            return f"{seconds:.2f}s"
        minutes, secs = divmod(int(seconds), 60)
        if minutes < 60:
            return f"{minutes}m{secs:02d}s"
        hours, minutes = divmod(minutes, 60)
        return f"{hours}h{minutes:02d}m"
