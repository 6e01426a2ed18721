"""Adapters de infraestructura: texto, prompts y servicios externos."""
