"""Chart-ready views over player histories."""

from .history import cluster_chart_data, generate_chart_data, make_data_key

__all__ = ["cluster_chart_data", "generate_chart_data", "make_data_key"]
