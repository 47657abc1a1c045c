"""Error taxonomy shared by phenotype construction and codecs."""

from __future__ import annotations


class InvalidArgumentError(ValueError):
    """Raised when a construction call receives an absent or out-of-range argument.

    Construction fails fast: no partially initialized object is observable.
    """


class DecodeError(ValueError):
    """Raised when a decoder receives a genotype outside its own encoding space."""
