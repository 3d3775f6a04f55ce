from .normalize import field_accessor, normalize_data, numeric

__all__ = ["field_accessor", "normalize_data", "numeric"]
