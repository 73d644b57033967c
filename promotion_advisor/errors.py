"""Error types raised by the suggestion engine and its file collaborators."""

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorCode(str, Enum):
    """Stable error codes."""
    ANALYSIS_FAILED = "ANALYSIS_FAILED"
    FORMAT_ERROR = "FORMAT_ERROR"
    YAML_PARSE_ERROR = "YAML_PARSE_ERROR"
    CONFIG_INVALID = "CONFIG_INVALID"
    FILE_READ_ERROR = "FILE_READ_ERROR"


CODE_EXPLANATIONS: Dict[ErrorCode, str] = {
    ErrorCode.ANALYSIS_FAILED: "Failed to analyze file differences",
    ErrorCode.FORMAT_ERROR: "Failed to format suggestions as YAML",
    ErrorCode.YAML_PARSE_ERROR: "File is not valid YAML",
    ErrorCode.CONFIG_INVALID: "Configuration file failed validation",
    ErrorCode.FILE_READ_ERROR: "File could not be read",
}


class AdvisorError(Exception):
    """
    Base error with a code, an optional file path and operator hints.

    The rendered message mirrors what the operator sees on the console:
    the headline, then Path / Reason / Details lines and a hints list.
    """

    error_name = "Advisor Error"

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        path: Optional[str] = None,
        cause: Optional[BaseException] = None,
        hints: Optional[List[str]] = None,
    ):
        self.message = message
        self.code = code
        self.path = path
        self.cause = cause
        self.hints = hints or []
        super().__init__(self._format())

    def _format(self) -> str:
        full_message = f"{self.error_name}: {self.message}"
        if self.path:
            full_message += f"\n  Path: {self.path}"
        if self.code:
            explanation = CODE_EXPLANATIONS.get(self.code, f"Error ({self.code.value})")
            full_message += f"\n  Reason: {explanation}"
        if self.cause is not None:
            full_message += f"\n  Details: {self.cause}"
        if self.hints:
            full_message += "\n\n  Hints:"
            for hint in self.hints:
                full_message += f"\n    - {hint}"
        return full_message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.error_name,
            "code": self.code.value if self.code else None,
            "message": self.message,
            "path": self.path,
            "details": str(self.cause) if self.cause is not None else None,
            "hints": list(self.hints),
        }


class SuggestionEngineError(AdvisorError):
    """Raised when difference analysis or suggestion formatting fails."""
    error_name = "Suggestion Engine Error"


class FileLoadError(AdvisorError):
    """Raised when an input YAML file or the promotion config cannot be loaded."""
    error_name = "File Load Error"


def is_suggestion_engine_error(error: object) -> bool:
    return isinstance(error, SuggestionEngineError)


def is_file_load_error(error: object) -> bool:
    return isinstance(error, FileLoadError)
