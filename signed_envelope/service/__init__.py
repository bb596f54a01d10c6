"""Identity service factory and implementations."""

from __future__ import annotations

import logging
from typing import Optional

from ..config import EnvelopeConfig, load_config
from .base import IdentityService
from .keys import address_from_public_key, generate_keypair
from .ledger import AliasLedger, AliasRecord, load_ledger
from .local import LocalIdentityService

logger = logging.getLogger(__name__)


def get_identity_service(
    signing_key: Optional[bytes] = None, config: Optional[EnvelopeConfig] = None
) -> IdentityService:
    """Factory function to get the configured identity service."""

    config = config or load_config()
    ledger_conf = config.service.ledger
    ledger = load_ledger(ledger_conf.path) if ledger_conf.path else AliasLedger()
    if ledger_conf.block_number is not None:
        ledger.block_number = ledger_conf.block_number
    logger.debug(f"Using local identity service at block {ledger.block_number}")
    return LocalIdentityService(ledger=ledger, signing_key=signing_key)


__all__ = [
    "IdentityService",
    "LocalIdentityService",
    "AliasLedger",
    "AliasRecord",
    "load_ledger",
    "generate_keypair",
    "address_from_public_key",
    "get_identity_service",
]
