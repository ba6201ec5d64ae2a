from __future__ import annotations

__all__: list[str] = ["StringUtils"]


class StringUtils:
    """Small string helpers shared by the text pipeline and the voice catalog."""

    @staticmethod
    def ensure_str(value: str | None) -> str:
        """Return the value as a string, or an empty string for None.

        Does not strip, so callers keep control over significant whitespace.
        """
        if not isinstance(value, str):
            value = str(value) if value is not None else ""
        return value

    @staticmethod
    def compress_blanks(value: str) -> str:
        """Collapse runs of whitespace to single spaces and trim both ends.

        Args:
            value (str): The string to compress.

        Returns:
            str: The compressed string. Applying it twice gives the same result.
        """
        value = StringUtils.ensure_str(value)
        return " ".join(value.split())

    @staticmethod
    def capitalize_first(value: str) -> str:
        """Upper-case the first character only, leaving the rest untouched.

        Unlike str.capitalize(), "hQ" stays "HQ" rather than becoming "Hq".
        """
        value = StringUtils.ensure_str(value)
        return value[:1].upper() + value[1:]
