"""Wire models exchanged between envelopes and identity services."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .constants import PARAMS_BUCKET, SIGNED_BUCKET


class EnvelopePayload(BaseModel):
    """Object form of an envelope: the signed bucket and the params bucket."""

    model_config = ConfigDict(populate_by_name=True)

    signed: Dict[str, Any] = Field(default_factory=dict, alias=SIGNED_BUCKET)
    params: Dict[str, Optional[Any]] = Field(default_factory=dict, alias=PARAMS_BUCKET)

    def to_json(self) -> str:
        """Serialize payload to compact JSON using the wire bucket names."""
        return self.model_dump_json(by_alias=True)


class Authorship(BaseModel):
    """Result of resolving the address that produced a signature."""

    alias: Optional[str] = Field(default=None, description="UTF-8 alias label")
    address: Optional[str] = None
    block_number: Optional[int] = None
