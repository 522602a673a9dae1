from pinpoint.reporters.result_reporter import build_report, describe, render_outcome, save_report

__all__ = ["build_report", "describe", "render_outcome", "save_report"]
