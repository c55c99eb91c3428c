class PipelineError(Exception):
    """Base exception for job pipeline failures."""


class FatalJobError(PipelineError):
    """A step every stage depends on failed; the job ends in ERROR."""


class EmptyDocumentError(FatalJobError):
    """The extracted manuscript text has no pages."""


class EmptyRulesError(FatalJobError):
    """The rule documents of the profile hold no text."""


class InvalidTransitionError(PipelineError):
    """A job status change that the lifecycle does not allow."""


class JobNotFoundError(PipelineError):
    """Raised when a job id is not in the store."""


class JobInProgressError(PipelineError):
    """The operation is not allowed while a job is processing."""
