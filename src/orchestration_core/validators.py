import os
from typing import List

from .errors import ValidationError
from src.reset_core.models import ServerEnvironment


def validate_environment(env: ServerEnvironment) -> List[str]:
    """
    Raise ValidationError if a reset cannot safely start.

    Returns warnings that should be logged but do not block the reset.
    """
    root = env.root_dir
    if not root.is_dir():
        raise ValidationError(f"Server directory does not exist: {root}")
    if not os.access(root, os.W_OK):
        raise ValidationError(f"Cannot write to server directory: {root}")

    props = env.properties_path
    if not props.is_file():
        raise ValidationError(f"Server properties file not found: {props}")
    if not os.access(props, os.R_OK | os.W_OK):
        raise ValidationError(f"Server properties file is not writable: {props}")

    warnings = []
    if env.server_artifact is None or not env.server_artifact.is_file():
        warnings.append("No server jar found in server directory; the restart step will fail.")
    return warnings


def validate_settings_for_start(env: ServerEnvironment) -> None:
    if not env.root_dir.is_dir():
        raise ValidationError(f"Server directory not found: {env.root_dir}")
    if env.server_artifact is None or not env.server_artifact.is_file():
        raise ValidationError(f"No server jar found in {env.root_dir}")
