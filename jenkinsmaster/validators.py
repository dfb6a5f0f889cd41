"""
Input validators

Every validator takes the raw answer and returns None when it is acceptable,
or a short reason when it is not. Validators never prompt and never raise.
"""

import ipaddress
import os
import string
import unicodedata
from pathlib import Path
from random import Random
from typing import Callable, Optional

from jenkinsmaster.constants import (
    GENERATED_PASSWORD_LENGTH,
    NO_ANSWERS,
    PASSWORD_MIN_LENGTH,
    YES_ANSWERS,
)

Validator = Callable[[str], Optional[str]]

PASSWORD_ALPHABET = string.ascii_letters + string.digits + string.punctuation


def expand_path(path: str) -> Path:
    """Expand ~ in a user supplied path."""
    return Path(os.path.expanduser(path.strip()))


def validate_non_empty(value: str) -> Optional[str]:
    if not value or not value.strip():
        return "Input cannot be empty"
    return None


def validate_port(value: str) -> Optional[str]:
    """Accept plain ASCII digits in the range 1..65535."""
    digits = (value or "").strip()
    if not (digits.isascii() and digits.isdigit()):
        return "Invalid port number"

    port = int(digits)

    if port < 1 or port > 65535:
        return "Invalid port number (must be between 1 and 65535)"
    return None


def validate_ip_address(value: str) -> Optional[str]:
    try:
        ipaddress.ip_address(value.strip())
    except ValueError:
        return "Invalid IP address"
    return None


def validate_file_path(value: str) -> Optional[str]:
    """Accept paths (with ~) that point to an existing regular file."""
    error = validate_non_empty(value)
    if error:
        return "Path cannot be empty"

    path = expand_path(value)
    if not path.exists():
        return "File does not exist"
    if path.is_dir():
        return "Path is a directory, not a file"
    return None


def validate_yes_no(value: str) -> Optional[str]:
    if value.strip().lower() in YES_ANSWERS + NO_ANSWERS:
        return None
    return "Please enter 'yes' or 'no'"


def _char_class(char: str) -> str:
    if char.isupper():
        return "upper"
    if char.islower():
        return "lower"
    if char.isdigit():
        return "digit"
    # Unicode punctuation (P*) and symbol (S*) categories
    if unicodedata.category(char)[0] in ("P", "S"):
        return "special"
    return "other"


def is_strong_password(password: str) -> bool:
    """
    Check the admin password policy.

    At least PASSWORD_MIN_LENGTH characters with at least one uppercase
    letter, one lowercase letter, one digit and one punctuation or symbol.
    """
    if len(password) < PASSWORD_MIN_LENGTH:
        return False

    classes = {_char_class(char) for char in password}
    return {"upper", "lower", "digit", "special"} <= classes


def validate_password(value: str) -> Optional[str]:
    if is_strong_password(value):
        return None
    return (
        f"Password is not strong enough. It should be at least {PASSWORD_MIN_LENGTH} "
        "characters long, and include uppercase, lowercase, numbers, and special "
        "characters."
    )


def generate_password(rng: Random, length: int = GENERATED_PASSWORD_LENGTH) -> str:
    """
    Generate a strong password.

    Characters are drawn uniformly from letters, digits and punctuation.
    Draws that miss a character class are discarded, so the result always
    passes is_strong_password.

    Args:
        rng: Random source (pass secrets.SystemRandom() outside tests)
        length: Password length
    """
    if length < 4:
        raise ValueError("Password length must be at least 4")

    while True:
        candidate = "".join(rng.choice(PASSWORD_ALPHABET) for _ in range(length))
        if is_strong_password(candidate):
            return candidate


def parse_image_reference(image: str) -> tuple[Optional[str], str, str, str]:
    """
    Split a Docker image reference.

    Returns:
        (registry, namespace, name, tag); registry is None for Docker Hub
    """
    reference = image.strip()
    registry = None

    first, _, rest = reference.partition("/")
    if rest and ("." in first or ":" in first or first == "localhost"):
        registry, reference = first, rest

    # Digest references are pinned; the tag part is ignored for lookups
    reference = reference.split("@", 1)[0]

    path, _, tag = reference.rpartition(":")
    if not path or "/" in tag:
        path, tag = reference, "latest"

    namespace, _, name = path.rpartition("/")
    if not namespace:
        namespace = "library"

    return registry, namespace, name, tag
