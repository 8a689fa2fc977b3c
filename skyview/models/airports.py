"""Airport directory entries."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Airport(BaseModel):
    """A static airport directory entry, or a best-effort custom ICAO code."""

    code: str = Field(..., description="ICAO airport code")
    iata: str = Field(default="", description="IATA airport code")
    name: str = Field(..., description="Display name")
    lat: Optional[float] = Field(default=None, description="Latitude in decimal degrees")
    lon: Optional[float] = Field(default=None, description="Longitude in decimal degrees")
    keywords: tuple[str, ...] = Field(
        default=(), description="Lower-case keywords for fuzzy matching"
    )
    is_custom: bool = Field(
        default=False, description="True when the code was not found in the directory"
    )

    model_config = ConfigDict(frozen=True)


__all__ = ["Airport"]
