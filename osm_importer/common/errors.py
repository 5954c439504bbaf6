"""Domain errors and failure typing."""


class PipelineError(Exception):
    """Base class for pipeline failures."""

    error_code = "PIPELINE_ERROR"


class ConfigError(PipelineError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class StageError(PipelineError):
    """Raised for stage failures that should halt the run."""

    error_code = "STAGE_ERROR"


class DocumentError(PipelineError):
    """Raised when the document model rejects a value."""

    error_code = "DOCUMENT_ERROR"
