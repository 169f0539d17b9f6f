"""Exception types raised by the motif discovery and alignment core."""


class MotifFinderError(Exception):
    """Base class for all errors raised by motif_finder."""


class InvalidInputError(MotifFinderError, ValueError):
    """Malformed motif set or sequence collection (empty, or inconsistent lengths)."""


class InvalidNucleotideError(MotifFinderError, ValueError):
    """A consensus column could not be resolved to a nucleotide."""


class InvalidMotifLengthError(MotifFinderError, ValueError):
    """Motif length k must be a positive integer."""


class NoMotifsFoundError(MotifFinderError, ValueError):
    """An empty motif set reached consensus derivation or ranking."""


class InvalidNumberOfRunsError(MotifFinderError, ValueError):
    """Number of restarts must be positive."""


class InvalidNumberOfIterationsError(MotifFinderError, ValueError):
    """Number of Gibbs iterations must be positive."""


class InvalidPointerError(MotifFinderError, RuntimeError):
    """Backtracking reached a cell without a direction pointer.

    This never happens for a correctly filled alignment grid and is not
    recoverable.
    """
