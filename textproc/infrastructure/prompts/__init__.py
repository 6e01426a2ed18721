"""Prompts por operación (mensaje de sistema + plantilla de usuario)."""

from .builder import LANGUAGE_NAMES, build_prompt, language_name, system_message

__all__ = ["LANGUAGE_NAMES", "build_prompt", "language_name", "system_message"]
