class DizkError(Exception):
    """Base class for errors that abort a proof generation run."""


class ConfigurationError(DizkError, ValueError):
    """Malformed curve selection, key/assignment stream, or proving key."""


class UnsatisfiedAssignmentError(DizkError):
    """The assignment does not satisfy the R1CS relation."""


class DomainSizeError(DizkError, ValueError):
    """The evaluation domain is not a power of two inside the field's 2-adic subgroup."""
