"""Monitoring hooks shared by the unique queue and the worker.

- log_event: structured MONITOR_EVENT log lines with secrets redacted
- prometheus_metric: labelled prometheus counters
"""
from .exporters import log_event, prometheus_metric

__all__ = ["log_event", "prometheus_metric"]
