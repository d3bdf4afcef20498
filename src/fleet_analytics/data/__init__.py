"""Warehouse query layer."""

from .query_builder import HeartbeatQueryBuilder, WarehouseQuery, build_query_parameters, pacific_window_clause, utc_bounds

__all__ = ["HeartbeatQueryBuilder", "WarehouseQuery", "build_query_parameters", "pacific_window_clause", "utc_bounds"]
