"""
Exception hierarchy for the pool export pipeline.

Every component raises one of these and never recovers locally; the CLI is the
only place that catches them and turns them into an exit status.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base exception for all pool export failures."""


class TransportError(PipelineError):
    """Raised for network failures and non-2xx responses on any outbound request."""


class DecodeError(PipelineError):
    """Raised when a response body does not match the expected shape."""


class UpstreamError(PipelineError):
    """Raised when a well-formed response explicitly reports failure."""


class IoError(PipelineError):
    """Raised when the output file cannot be created, written, or flushed."""


__all__ = [
    "PipelineError",
    "TransportError",
    "DecodeError",
    "UpstreamError",
    "IoError",
]
