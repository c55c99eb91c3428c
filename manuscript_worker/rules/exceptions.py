class RuleError(Exception):
    """Base exception for rule profile handling."""


class ProfileNotFoundError(RuleError):
    """Raised when a rule profile id is unknown."""


class RuleDocumentNotFoundError(RuleError):
    """Raised when a profile refers to an unknown rule document."""
