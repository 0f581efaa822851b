"""
Backend API client: weak-password report delivery.
"""

from backend_vaulthealth.api_client.reporter import HttpReportSender, ReportSender

__all__ = ["HttpReportSender", "ReportSender"]
