"""
Models package for data schemas and validation.
"""
from .schemas import ProductRecord, ResolvedPage, FetchEnvelope, ErrorEnvelope, ErrorResponse

__all__ = ["ProductRecord", "ResolvedPage", "FetchEnvelope", "ErrorEnvelope", "ErrorResponse"]
