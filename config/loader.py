"""Configuration file loader and validator.

Reads the INI file into the Config dataclasses, applies command-line overrides and validates
the result. String values are Python literals, so they must be quoted in the file.
Raises exceptions for any issues encountered during loading.
"""

from __future__ import annotations

import ast
import configparser
from configparser import ConfigParser
from dataclasses import fields
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final

from models.config_models import Config
from models.re_models import CONFIG_CONTEXT_PATTERN
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable
    from dataclasses import Field as DataclassField
else:
    from dataclasses import Field as DataclassField

__all__: list[str] = [
    "AUTO_CONTEXT",
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "ConfigLoader",
    "ConfigLoaderError",
    "ConfigTypeError",
    "ConfigValueError",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

AUTO_CONTEXT: Final[str] = "auto"
KNOWN_ENGINES: Final[list[str]] = ["pyttsx3"]
# Rates outside this range are accepted but clamped when playback applies them
RECOMMENDED_RATE_RANGE: Final[tuple[float, float]] = (0.5, 3.0)


class ConfigLoaderError(Exception):
    """An error occurred while processing the configuration file."""


class ConfigFileNotFoundError(ConfigLoaderError):
    """The specified configuration file does not exist."""


class ConfigFormatError(ConfigLoaderError):
    """The configuration file is not formatted correctly."""


class ConfigValueError(ConfigFormatError):
    """The configuration file contains an invalid value."""


class ConfigTypeError(ConfigFormatError):
    """The configuration file contains an invalid type."""


class ConfigLoader:
    """Handles loading and validation of configuration settings.

    Args:
        config_filename (str): INI file name to load.
        script_name (str): Executing script name, used in error messaging.
        **args: Command-line overrides. Recognized keys are debug, rate, voice and context;
            None values are ignored.

    Raises:
        ConfigFileNotFoundError: If the configuration file does not exist.
        ConfigFormatError: If the file cannot be parsed or contains invalid values/types.
    """

    def __init__(
        self,
        *,
        config_filename: str,
        script_name: str,
        **args,
    ) -> None:
        config_path = Path(config_filename)
        msg: str
        if not config_path.exists():
            msg = (
                f"Configuration file '{config_filename}' not found. "
                f"Please create '{config_filename}' in the same directory as '{script_name}'."
            )
            raise ConfigFileNotFoundError(msg)

        parser: ConfigParser = ConfigParser()

        try:
            parser.read(config_filename, encoding="utf-8")
        except configparser.Error as err:
            msg = f"Failed to parse configuration file '{config_filename}': {err}"
            raise ConfigFormatError(msg) from None

        self.config = Config()
        self.config.GENERAL.SCRIPT_NAME = script_name
        self._convert_settings(parser)
        self._apply_overrides(args)
        self._validate_settings()

    def _convert_settings(self, parser: ConfigParser) -> None:
        """Convert every known section of the parser into the Config object.

        Raises:
            ConfigFormatError: If a value cannot be parsed or coerced to the expected type.
        """
        formatter = _ConfigFormatter(self.config, parser)
        for section in fields(self.config):
            if not parser.has_section(section.name):
                logger.debug("Section '%s' not defined, using defaults", section.name)
                continue
            self._convert_section_field(parser, formatter, section)

    def _convert_section_field(
        self, parser: ConfigParser, formatter: _ConfigFormatter, section: DataclassField[Any]
    ) -> None:
        """Convert all fields of one configuration section.

        Keys missing from the file keep their dataclass defaults.
        """
        for key in fields(getattr(self.config, section.name)):
            if not parser.has_option(section.name, key.name):
                logger.debug("Skipping undefined setting: '%s.%s'", section.name, key.name)
                continue

            formatted_value = formatter.apply_format(section, key)
            setattr(getattr(self.config, section.name), key.name, formatted_value)

    def _apply_overrides(self, args: dict[str, Any]) -> None:
        if args.get("debug", False):
            self.config.GENERAL.DEBUG = True
        if args.get("rate") is not None:
            self.config.SPEECH.RATE = float(args["rate"])
        if args.get("voice") is not None:
            self.config.SPEECH.VOICE = args["voice"]
        if args.get("context") is not None:
            self.config.SPEECH.CONTEXT = args["context"]

    def _validate_settings(self) -> None:
        """Validate speech and engine settings.

        Raises:
            ConfigFormatError: If validation fails for any setting.
        """
        self._validate_context("SPEECH", "CONTEXT")
        self._validate_rate("SPEECH", "RATE")
        self._validate_base_rate("ENGINE", "BASE_RATE")
        self._inspect_defined_item("ENGINE", "NAME", KNOWN_ENGINES)

    def _validate_context(self, section_name: str, key_name: str) -> None:
        """Normalize the document context setting to lower case.

        Raises:
            ConfigTypeError: If the value is not a string.
            ConfigValueError: If the value is not auto, technical, medical or general.
        """
        value: Any = getattr(getattr(self.config, section_name), key_name)
        field_name: str = f"{section_name}.{key_name}"
        if not isinstance(value, str):
            msg: str = f"Unsupported type used for '{field_name}': {type(value)}"
            raise ConfigTypeError(msg)
        if not CONFIG_CONTEXT_PATTERN.match(value.strip()):
            msg = f"Unsupported value used for '{field_name}': {value!r}"
            raise ConfigValueError(msg)
        setattr(getattr(self.config, section_name), key_name, value.strip().lower())

    def _validate_rate(self, section_name: str, key_name: str) -> None:
        """Reject non-positive rates; warn about rates that will be clamped.

        Raises:
            ConfigValueError: If the rate is zero or negative.
        """
        value: float = getattr(getattr(self.config, section_name), key_name)
        field_name: str = f"{section_name}.{key_name}"
        if value <= 0:
            msg: str = f"'{field_name}' must be positive: {value}"
            raise ConfigValueError(msg)
        lower, upper = RECOMMENDED_RATE_RANGE
        if not lower <= value <= upper:
            logger.warning("'%s' = %s is outside %s-%s and will be clamped", field_name, value, lower, upper)

    def _validate_base_rate(self, section_name: str, key_name: str) -> None:
        value: int = getattr(getattr(self.config, section_name), key_name)
        if value < 0:
            msg: str = f"'{section_name}.{key_name}' must not be negative: {value}"
            raise ConfigValueError(msg)

    def _inspect_defined_item(self, section_name: str, key_name: str, defined_list: list[str]) -> None:
        """Verify that a configuration value matches the known options.

        Logs a warning for an unrecognized value but does not raise.

        Raises:
            ConfigTypeError: If the configured value is not a str.
        """
        value: Any = getattr(getattr(self.config, section_name), key_name)
        field_name: str = f"{section_name}.{key_name}"

        if not isinstance(value, str):
            msg: str = f"Unsupported type used for '{field_name}': {type(value)}"
            raise ConfigTypeError(msg)
        if value not in defined_list:
            logger.warning("Unknown value '%s' is set for '%s'", value, field_name)


class _ConfigFormatter:
    """Converts INI string values to typed Python objects (bool, int, float, str)."""

    def __init__(self, config: Config, parser: ConfigParser) -> None:
        self.config: Config = config
        self.parser: ConfigParser = parser

    def apply_format(self, section: DataclassField[Any], key: DataclassField[Any]) -> Any:
        """Convert an INI value to the type of the field's default value.

        Raises:
            ConfigValueError: If a value cannot be coerced to the expected type.
            ConfigFormatError: If literal evaluation fails due to invalid syntax.
            ConfigTypeError: If the literal evaluates to an unexpected type.
        """
        formatters: dict[
            type[bool | int | float], Callable[[DataclassField[Any], DataclassField[Any]], bool | int | float]
        ] = {
            bool: self.parse_as_boolean,
            int: self.parse_as_integer,
            float: self.parse_as_float,
        }

        default: Any = getattr(getattr(self.config, section.name), key.name)
        formatter: Callable[[DataclassField[Any], DataclassField[Any]], bool | int | float] | None = formatters.get(
            type(default)
        )
        if formatter:
            try:
                return formatter(section, key)
            except ValueError as err:
                msg = f"Invalid value for {section.name}.{key.name}: {err}"
                raise ConfigValueError(msg) from err
            except TypeError as err:
                msg = f"Invalid value for {section.name}.{key.name}: {err}"
                raise ConfigTypeError(msg) from err

        value_str: str = self.parser[section.name][key.name]
        try:
            value: Any = ast.literal_eval(value_str)
        except ValueError as err:
            msg = f"Invalid literal for {section.name}.{key.name}: {value_str}"
            raise ConfigValueError(msg) from err
        except SyntaxError as err:
            msg = f"Invalid literal for {section.name}.{key.name}: {value_str}"
            raise ConfigFormatError(msg) from err

        if not isinstance(value, type(default)):
            msg = f"Expected {type(default).__name__} for {section.name}.{key.name}, got {type(value).__name__}"
            raise ConfigTypeError(msg)
        return value

    def parse_as_float(self, section: DataclassField[Any], key: DataclassField[Any]) -> float:
        """Convert INI string to float."""
        value: str = self.parser.get(section.name, key.name)
        for char in ("'", '"'):
            value = value.removeprefix(char).removesuffix(char)
        return float(value)

    def parse_as_integer(self, section: DataclassField[Any], key: DataclassField[Any]) -> int:
        """Convert INI string to integer."""
        value: str = self.parser.get(section.name, key.name)
        for char in ("'", '"'):
            value = value.removeprefix(char).removesuffix(char)
        return int(float(value))

    def parse_as_boolean(self, section: DataclassField[Any], key: DataclassField[Any]) -> bool:
        """Convert INI string to boolean."""
        return self.parser.getboolean(section.name, key.name)
