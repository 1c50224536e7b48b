"""Terminal reporting — Rich rendering of run progress and trust status."""

from releasenotary.report.renderer import ReportRenderer

__all__ = ["ReportRenderer"]
