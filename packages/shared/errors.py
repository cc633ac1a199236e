"""
Fatal error taxonomy for the prediction pipeline.
Non-fatal data-quality notices are returned as Warning models instead.
"""
from __future__ import annotations


class PipelineError(Exception):
    """Base class for errors that abort a whole run."""


class ConfigurationError(PipelineError):
    """A required artifact is missing, unreadable or malformed."""


class SchemaError(PipelineError):
    """Input rows or feature vectors do not match the declared schema."""
