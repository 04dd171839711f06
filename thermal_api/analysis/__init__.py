"""Ayudas del formulario: conclusión sugerida y temperatura ambiente."""

from .conclusion import rule_based_conclusion, suggest_conclusion
from .weather import fetch_ambient_temperature

__all__ = ["fetch_ambient_temperature", "rule_based_conclusion", "suggest_conclusion"]
