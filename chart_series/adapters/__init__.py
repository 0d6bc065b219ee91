from chart_series.adapters.records import field_getter, normalize_records

__all__ = ["field_getter", "normalize_records"]
