import os
from typing import Union


def str2bool(value: Union[str, bool]) -> bool:
    """Convert a string or boolean value to a boolean.

    Args:
        value (Union[str, bool]): 'true'/'false' in any case, or a boolean.

    Returns:
        bool: The parsed flag.

    Raises:
        ValueError: If the input string is not 'true' or 'false' (case-insensitive).
    """
    if isinstance(value, bool):
        return value
    if value.strip().lower() == "true":
        return True
    elif value.strip().lower() == "false":
        return False
    raise ValueError(
        f"Expected a boolean environment variable (true or false) but got '{value}'"
    )


def get_bool_env(name: str, default: bool) -> bool:
    return str2bool(os.getenv(name, str(default)))


def get_int_env(name: str, default: int, min_value: int = 0) -> int:
    """Read an integer environment variable.

    Args:
        name: Name of the environment variable.
        default: Value used when the variable is not set.
        min_value: Smallest accepted value.

    Returns:
        int: The parsed value.

    Raises:
        ValueError: If the variable is not an integer or is below `min_value`.
    """
    raw_value = os.getenv(name, str(default))
    try:
        value = int(raw_value)
    except ValueError as error:
        raise ValueError(
            f"Expected integer in environment variable {name} but got '{raw_value}'"
        ) from error
    if value < min_value:
        raise ValueError(
            f"Environment variable {name} must be >= {min_value}, got {value}"
        )
    return value


def get_float_env(name: str, default: float) -> float:
    raw_value = os.getenv(name, str(default))
    try:
        return float(raw_value)
    except ValueError as error:
        raise ValueError(
            f"Expected number in environment variable {name} but got '{raw_value}'"
        ) from error
