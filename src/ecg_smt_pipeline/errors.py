"""Error types raised by the ECG-SMT pipeline."""


class PipelineError(Exception):
    """Base class for pipeline computation failures."""


class FormatError(PipelineError, ValueError):
    """Raw packet stream does not have the fixed packet layout."""


class DegenerateDataError(PipelineError, ValueError):
    """Data too flat or too short for outlier scoring (e.g. zero IQR)."""
