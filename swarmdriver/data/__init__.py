from .parameters import format_parameters, load_parameters, parse_parameters, save_parameters

__all__ = ["format_parameters", "load_parameters", "parse_parameters", "save_parameters"]
