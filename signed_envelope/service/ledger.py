"""Snapshot of alias registrations keyed by signing address."""

from __future__ import annotations

import logging
import os
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .keys import normalize_address

logger = logging.getLogger(__name__)


class AliasRecord(BaseModel):
    """An alias linked to an address from ``block_number`` onwards."""

    alias: Optional[str] = None
    address: str
    public_key: str = Field(..., description="Hex-encoded Ed25519 public key")
    block_number: int = 0

    @field_validator("address")
    @classmethod
    def _normalize_address(cls, v: str) -> str:
        if not v:
            raise ValueError("address must be a non-empty string")
        return normalize_address(v)


class AliasLedger(BaseModel):
    """Already-loaded ledger state used for in-process alias lookups.

    ``block_number`` is the height the snapshot was taken at; lookups without
    an explicit height resolve against it.
    """

    records: List[AliasRecord] = Field(default_factory=list)
    block_number: int = 0

    def register(
        self,
        address: str,
        public_key: bytes,
        alias: Optional[str] = None,
        block_number: Optional[int] = None,
    ) -> AliasRecord:
        """Link ``alias`` to ``address`` at ``block_number`` (default: snapshot height)."""
        height = self.block_number if block_number is None else block_number
        record = AliasRecord(
            alias=alias,
            address=address,
            public_key=public_key.hex(),
            block_number=height,
        )
        self.records.append(record)
        self.block_number = max(self.block_number, height)
        logger.debug(f"Registered alias {alias!r} for {record.address} at block {height}")
        return record

    def resolve(
        self, address: Optional[str], block_number: Optional[int] = None
    ) -> Optional[AliasRecord]:
        """Latest record for ``address`` at or below ``block_number``."""
        if not address:
            return None
        target = normalize_address(address)
        height = self.block_number if block_number is None else block_number
        best: Optional[AliasRecord] = None
        for record in self.records:
            if record.address != target or record.block_number > height:
                continue
            # Later registrations at the same height win.
            if best is None or record.block_number >= best.block_number:
                best = record
        return best

    def public_key_for(
        self, address: Optional[str], block_number: Optional[int] = None
    ) -> Optional[bytes]:
        record = self.resolve(address, block_number)
        return bytes.fromhex(record.public_key) if record else None


def load_ledger(path: str) -> AliasLedger:
    """Load a ledger snapshot from a YAML file.

    Example::

        block_number: 120
        records:
          - address: "0x52908400098527886e0f7030069857d2e4169ee7"
            public_key: "3d4017c3e843895a92b70aa74d1b7ebc9c982ccf2ec4968cc0cd55f12af4660c"
            alias: alice
            block_number: 100
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Ledger snapshot not found: {path}")
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    ledger = AliasLedger(**data)
    logger.info(f"Loaded {len(ledger.records)} alias records at block {ledger.block_number}")
    return ledger
