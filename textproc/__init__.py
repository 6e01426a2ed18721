"""AI Text Processor: segmentación adaptativa + transformación por fragmentos con streaming."""

__version__ = "1.0.0"
