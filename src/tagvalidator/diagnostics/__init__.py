"""Path tracking and violation collection for validation runs.

Provides the per-call collector that records each violation under the
dotted/bracketed path of the value that failed.
"""

from .error_collector import (
    ErrorCollector,
    PathSegment,
    RuleReporter,
    render_path,
)

__all__ = [
    "ErrorCollector",
    "PathSegment",
    "RuleReporter",
    "render_path",
]
