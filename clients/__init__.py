from clients.report_client import ReportClient

__all__ = ["ReportClient"]
