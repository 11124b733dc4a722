"""
Error taxonomy for the extraction pipeline.

Every failure raised by the core carries a stable ``error_code`` so the HTTP
layer can map it to a status code and log it without inspecting messages.
"""


class ExtractionError(Exception):
    """Base class for extraction failures."""

    default_code = "extraction.failed"

    def __init__(self, message: str, error_code: str | None = None):
        super().__init__(message)
        self.error_code = error_code or self.default_code

    @property
    def kind(self) -> str:
        return type(self).__name__


class UnsupportedPlatform(ExtractionError):
    """The URL does not belong to any supported platform."""

    default_code = "platform.unsupported"

    def __init__(self, url: str):
        super().__init__(f"Unsupported platform: {url}")
        self.url = url


class SpawnFailure(ExtractionError):
    """The extraction tool could not be launched at all."""

    default_code = "tool.spawn_failed"

    def __init__(self, message: str, hint: str | None = None):
        super().__init__(message)
        self.hint = hint


class ToolFailure(ExtractionError):
    """The extraction tool ran but exited non-zero or missed its deadline."""

    default_code = "tool.failed"

    def __init__(
        self,
        message: str,
        stderr: str = "",
        returncode: int | None = None,
        reason: str = "exit",
    ):
        super().__init__(message, error_code="tool.timeout" if reason == "timeout" else None)
        self.stderr = stderr
        self.returncode = returncode
        self.reason = reason


class ParseFailure(ExtractionError):
    """Tool output did not have the expected shape."""

    default_code = "output.malformed"


class PartialResolutionFailure(ExtractionError):
    """A single format tier could not be resolved to a direct URL."""

    default_code = "format.unresolved"

    def __init__(self, format_id: str, cause: ExtractionError):
        super().__init__(f"Failed to get direct URL for format {format_id}: {cause}")
        self.format_id = format_id
        self.cause = cause
