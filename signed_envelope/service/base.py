"""Identity & signing service interface consumed by envelopes."""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Sequence, Union

from ..contracts import Authorship

if TYPE_CHECKING:
    from ..envelope import Envelope

AuthorshipResult = Union[Authorship, Mapping[str, Any]]


class IdentityService(metaclass=abc.ABCMeta):
    """Signs data on behalf of a user and resolves signing addresses to aliases.

    ``domain`` scopes a signature to an application or namespace. Envelopes
    pass it through untouched; its meaning belongs to the implementation.
    """

    @abc.abstractmethod
    async def sign_data(
        self, signed: Dict[str, str], domain: Sequence[Any]
    ) -> Mapping[str, Any]:
        """Sign ``signed`` and return params to merge, at least ``sig``."""
        raise NotImplementedError

    @abc.abstractmethod
    async def verify_data(
        self, envelope: "Envelope", domain: Sequence[Any]
    ) -> AuthorshipResult:
        """Resolve the alias linked to the address that signed ``envelope``."""
        raise NotImplementedError

    @abc.abstractmethod
    def verify_data_sync(
        self, envelope: "Envelope", block_number: Optional[int], domain: Sequence[Any]
    ) -> AuthorshipResult:
        """Blocking variant of :meth:`verify_data` at a fixed ledger height."""
        raise NotImplementedError
