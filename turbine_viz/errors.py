"""Failures that abort the pipeline. None of them is retried."""


class PipelineError(Exception):
    pass


class DataUnavailable(PipelineError):
    """The source release could not be fetched or read from cache."""


class SchemaMismatch(PipelineError):
    """A required input column is missing."""


class EmptyGroup(PipelineError):
    """Turbine records were given but no project could be formed from them."""


class FrameCountMismatch(PipelineError):
    """The two rendered animations have different frame counts."""


class OutputWriteFailed(PipelineError):
    """The composed animation could not be written."""
