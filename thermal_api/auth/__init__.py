from .units import UnitDirectory, get_unit_directory, require_unit

__all__ = ["UnitDirectory", "get_unit_directory", "require_unit"]
