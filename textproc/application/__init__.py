"""Capa de aplicación: casos de uso del procesador."""
