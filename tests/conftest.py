"""Shared fixtures for envelope tests."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

from signed_envelope.service.base import IdentityService

SIG = "abc123" + "0" * 34 + "deadbeef" * 4


class StubIdentityService(IdentityService):
    """Identity service returning canned results and recording calls."""

    def __init__(
        self,
        sig: str = "0x" + SIG,
        address: str = "0x00000000000000000000000000000000000000a1",
        alias: Optional[str] = "alice",
        error: Optional[Exception] = None,
    ) -> None:
        self.sig = sig
        self.address = address
        self.alias = alias
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def sign_data(self, signed, domain):
        self.calls.append({"op": "sign", "signed": signed, "domain": domain})
        if self.error:
            raise self.error
        return {"sig": self.sig, "address": self.address}

    async def verify_data(self, envelope, domain):
        self.calls.append({"op": "verify", "envelope": envelope, "domain": domain})
        if self.error:
            raise self.error
        return {"alias": self.alias}

    def verify_data_sync(self, envelope, block_number, domain):
        self.calls.append(
            {"op": "verify_sync", "envelope": envelope, "block_number": block_number, "domain": domain}
        )
        if self.error:
            raise self.error
        return {"alias": self.alias}


@pytest.fixture
def stub_service() -> StubIdentityService:
    return StubIdentityService()


@pytest.fixture
def make_stub():
    """Factory for stub services with custom behaviour."""
    return StubIdentityService


@pytest.fixture
def signature() -> str:
    return SIG
