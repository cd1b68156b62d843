"""
Custom exceptions for the emoji mapping pipeline.

Fatal errors (bad primary input, failed output writes) propagate to the CLI,
which turns them into a non-zero exit status. Override problems are
recoverable and never leave the override applier.
"""

from typing import Any, Dict, Optional


class EmojiMapperError(Exception):
    """Base pipeline exception."""

    def __init__(
        self,
        message: str,
        error_type: str = "emoji_mapper_error",
        details: Optional[Dict[str, Any]] = None,
        exit_code: int = 1,
    ):
        self.message = message
        self.error_type = error_type
        self.details = details or {}
        self.exit_code = exit_code
        super().__init__(message)


class ConfigError(EmojiMapperError):
    """Settings file is unreadable, not valid YAML, or not a mapping."""

    def __init__(self, path: str, message: str):
        super().__init__(
            message=f"Invalid settings file {path}: {message}",
            error_type="config_error",
            details={"path": path},
        )


class InputArtifactError(EmojiMapperError):
    """Primary input artifact is missing, unreadable or malformed."""

    def __init__(self, path: str, message: str):
        super().__init__(
            message=f"Invalid input artifact {path}: {message}",
            error_type="input_error",
            details={"path": path},
            exit_code=2,
        )


class InvalidProposalError(InputArtifactError):
    """A proposal has no asset identifier; the whole input is untrusted."""

    def __init__(self, index: int, message: str = "missing 'filename'"):
        EmojiMapperError.__init__(
            self,
            message=f"Assignment #{index} is malformed: {message}",
            error_type="invalid_proposal",
            details={"index": index},
            exit_code=2,
        )


class OutputWriteError(EmojiMapperError):
    """One of the output artifacts could not be written."""

    def __init__(self, path: str, message: str):
        super().__init__(
            message=f"Failed to write {path}: {message}",
            error_type="output_error",
            details={"path": path},
            exit_code=3,
        )


class OverrideFormatError(EmojiMapperError):
    """Manual tie-break file does not have the expected shape."""

    def __init__(self, message: str):
        super().__init__(
            message=f"Invalid manual override file: {message}",
            error_type="override_format",
        )
