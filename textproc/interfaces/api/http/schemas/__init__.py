"""Schemas HTTP (pydantic)."""

from .process import (
    InfoRes,
    ProcessOptionsReq,
    ProcessTextReq,
    ProcessTextRes,
    ProviderInfoRes,
    SegmentErrorRes,
)

__all__ = [
    "InfoRes",
    "ProcessOptionsReq",
    "ProcessTextReq",
    "ProcessTextRes",
    "ProviderInfoRes",
    "SegmentErrorRes",
]
