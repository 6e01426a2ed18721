"""Crosscutting: configuración, logging, errores, métricas y transporte SSE."""
