from .normalize import coerce_1d, normalize_values, normalize_xy

__all__ = ["coerce_1d", "normalize_values", "normalize_xy"]
