# -*- coding: utf-8 -*-
"""Exception hierarchy for decision problems and engines."""


class MCDMError(ValueError):
    """Base class for all decision-analysis errors."""


class ValidationError(MCDMError):
    """
    Input data violates a structural invariant.

    Raised for weight sums outside tolerance, matrix shapes that do not match
    the alternative/criterion counts, non-numeric or non-finite performance
    values and malformed pairwise comparison matrices.
    """


class ConfigurationError(MCDMError):
    """A parameter lies outside its documented domain."""
