"""Settings and workspace file loader with comprehensive error handling.

This module loads JSON settings and workspace files. It handles file system
errors, JSON parsing errors, and Pydantic validation errors with clear,
actionable error messages.
"""

import json
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from stockcut.application.config.schema import StockCutConfiguration, WorkspaceSchema

_ModelT = TypeVar("_ModelT", bound=BaseModel)


class ConfigError(Exception):
    """Exception raised for configuration-related errors.

    Attributes:
        message: The primary error message
        error_type: Category of error (file_not_found, permission_denied,
            file_read_error, json_parse, validation)
        path: Path to the file (if applicable)
        details: Additional error details (line/column for JSON, validation errors, etc.)
    """

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.path = path
        self.details = details or []
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


def _format_json_path(loc: tuple[str | int, ...]) -> str:
    """Format a Pydantic location tuple as a JSON path string.

    Examples:
        >>> _format_json_path(("optimizer", "kerf_inches"))
        'optimizer.kerf_inches'
        >>> _format_json_path(("materials", 0, "batches", 2, "length"))
        'materials[0].batches[2].length'
    """
    parts: list[str] = []
    for segment in loc:
        if isinstance(segment, int):
            if parts:
                parts[-1] = f"{parts[-1]}[{segment}]"
            else:
                parts.append(f"[{segment}]")
        else:
            parts.append(str(segment))
    return ".".join(parts)


def _extract_validation_errors(
    error: PydanticValidationError,
) -> list[dict[str, Any]]:
    """Flatten a Pydantic ValidationError into path/message/value records."""
    details: list[dict[str, Any]] = []
    for err in error.errors():
        details.append(
            {
                "path": _format_json_path(err["loc"]),
                "message": err["msg"],
                "value": err.get("input"),
                "error_type": err["type"],
            }
        )
    return details


def _format_validation_error_message(details: list[dict[str, Any]], what: str) -> str:
    lines = [f"{what} validation failed:"]
    for detail in details:
        path = detail["path"] or "(root)"
        value = detail.get("value")
        if value is not None and not isinstance(value, (dict, list)):
            lines.append(f"  - {path}: {detail['message']} (got: {value!r})")
        else:
            lines.append(f"  - {path}: {detail['message']}")
    return "\n".join(lines)


def _read_json(path: Path, what: str) -> Any:
    if not path.exists():
        raise ConfigError(
            message=f"{what} file not found: {path}",
            error_type="file_not_found",
            path=path,
        )

    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError:
        raise ConfigError(
            message=f"Permission denied reading {what.lower()} file: {path}",
            error_type="permission_denied",
            path=path,
        )
    except OSError as e:
        raise ConfigError(
            message=f"Error reading {what.lower()} file: {path}: {e}",
            error_type="file_read_error",
            path=path,
        )

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(
            message=(
                f"Invalid JSON in {what.lower()} file: {path} "
                f"(line {e.lineno}, column {e.colno}): {e.msg}"
            ),
            error_type="json_parse",
            path=path,
            details=[{"line": e.lineno, "column": e.colno, "message": e.msg}],
        )


def _validate(
    model: type[_ModelT], data: Any, what: str, path: Path | None = None
) -> _ModelT:
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        details = _extract_validation_errors(e)
        raise ConfigError(
            message=_format_validation_error_message(details, what),
            error_type="validation",
            path=path,
            details=details,
        )


def load_config(path: Path) -> StockCutConfiguration:
    """Load and validate settings from a JSON file.

    Args:
        path: Path to the JSON settings file

    Returns:
        A validated StockCutConfiguration instance

    Raises:
        ConfigError: If the file cannot be loaded or validated.
            The error_type attribute indicates the specific error category.

    Example:
        >>> try:
        ...     config = load_config(Path("stockcut.json"))
        ... except ConfigError as e:
        ...     for detail in e.details:
        ...         print(f"  {detail['path']}: {detail['message']}")
    """
    data = _read_json(path, "Config")
    return _validate(StockCutConfiguration, data, "Configuration", path)


def load_config_from_dict(data: dict[str, Any]) -> StockCutConfiguration:
    """Validate settings supplied as a dictionary.

    Raises:
        ConfigError: If the data fails validation.
    """
    return _validate(StockCutConfiguration, data, "Configuration")


def load_workspace(path: Path) -> WorkspaceSchema:
    """Load and validate a workspace (materials and orders) from a JSON file.

    Raises:
        ConfigError: If the file cannot be loaded or validated.
    """
    data = _read_json(path, "Workspace")
    return _validate(WorkspaceSchema, data, "Workspace", path)
