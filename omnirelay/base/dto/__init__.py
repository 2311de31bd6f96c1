"""Pydantic DTOs used at construction boundaries."""

from .provider_params import ProviderParams

__all__ = ["ProviderParams"]
