"""
Input validation for values that arrive from the terminal or chat commands.
"""

import re
from pathlib import Path
from typing import Optional, Union

from ..core.constants import GAME_ID_MAX_LENGTH
from .error_handler import ConfigurationError

GAME_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def validate_file_path(file_path: Union[str, Path], must_exist: bool = False) -> Path:
    """
    Validate and normalize a file path.

    Args:
        file_path: File path to validate
        must_exist: Whether the file must already exist

    Returns:
        Normalized Path object

    Raises:
        ConfigurationError: If path is invalid or file doesn't exist when required
    """
    try:
        path = Path(file_path)

        if must_exist and not path.exists():
            raise ConfigurationError(
                f"File does not exist: {path}",
                details={"file_path": str(path), "must_exist": must_exist}
            )

        return path.resolve()

    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(
            f"Invalid file path: {file_path}",
            details={"file_path": str(file_path), "error": str(e)}
        )


def validate_game_id(game_id: Optional[str]) -> str:
    """
    Validate a game id typed by a user.

    Game ids become part of storage keys, so only letters, digits, dash and
    underscore are accepted.

    Raises:
        ConfigurationError: If the id is empty, too long or has other characters
    """
    if not game_id or not game_id.strip():
        raise ConfigurationError("Game id must be a non-empty string", details={"game_id": game_id})

    normalized = game_id.strip()
    if len(normalized) > GAME_ID_MAX_LENGTH:
        raise ConfigurationError(
            f"Game id too long. Maximum length: {GAME_ID_MAX_LENGTH}",
            details={"game_id": normalized, "max_length": GAME_ID_MAX_LENGTH}
        )
    if not GAME_ID_PATTERN.match(normalized):
        raise ConfigurationError(
            f"Game id contains invalid characters: {normalized}",
            details={"game_id": normalized}
        )
    return normalized


def validate_user_id(user_id: Optional[str]) -> str:
    """Validate a user id; surrounding whitespace is dropped."""
    if not user_id or not user_id.strip():
        raise ConfigurationError("User id must be a non-empty string", details={"user_id": user_id})
    return user_id.strip()


def validate_numeric_range(
    value: Union[int, float],
    min_value: Optional[Union[int, float]] = None,
    max_value: Optional[Union[int, float]] = None,
    field_name: str = "value"
) -> Union[int, float]:
    """
    Validate a numeric value is within specified range.

    Args:
        value: Numeric value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive)
        field_name: Name of the field for error messages

    Returns:
        The validated value

    Raises:
        ConfigurationError: If value is outside the allowed range
    """
    if min_value is not None and value < min_value:
        raise ConfigurationError(
            f"{field_name} {value} is below minimum {min_value}",
            details={
                "field_name": field_name,
                "value": value,
                "min_value": min_value,
                "max_value": max_value
            }
        )

    if max_value is not None and value > max_value:
        raise ConfigurationError(
            f"{field_name} {value} is above maximum {max_value}",
            details={
                "field_name": field_name,
                "value": value,
                "min_value": min_value,
                "max_value": max_value
            }
        )

    return value
