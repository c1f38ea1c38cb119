"""perfreporter exceptions."""


class PerfReporterError(Exception):
    """Base exception for all perfreporter errors."""


class InvalidInputError(PerfReporterError):
    """Input data the pipeline cannot process (e.g. an empty sample list)."""


class InvariantViolationError(PerfReporterError):
    """Internal consistency check failed during processing."""


class LoaderError(PerfReporterError):
    """Run or result file could not be read or validated."""

    def __init__(self, message: str, file_path: str | None = None):
        self.message = message
        self.file_path = file_path

        if file_path:
            full_message = f"File: {file_path}: {message}"
        else:
            full_message = message

        super().__init__(full_message)
