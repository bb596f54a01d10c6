"""Tests for configuration loading."""

import pytest
from pydantic import ValidationError

from signed_envelope.config import load_config
from signed_envelope.service import LocalIdentityService, get_identity_service


def test_load_config_defaults(tmp_path):
    config = load_config(str(tmp_path / "missing.yaml"))
    assert config.service.backend == "local"
    assert config.service.ledger.path is None


def test_load_config_from_file(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
service:
  backend: local
  ledger:
    path: ledger.yaml
    block_number: 42
"""
    )

    config = load_config(str(config_path))
    assert config.service.ledger.path == "ledger.yaml"
    assert config.service.ledger.block_number == 42


def test_load_config_from_working_directory(tmp_path, monkeypatch):
    (tmp_path / "signed_envelope.yaml").write_text(
        """
service:
  ledger:
    block_number: 7
"""
    )
    monkeypatch.chdir(tmp_path)

    assert load_config().service.ledger.block_number == 7


def test_get_identity_service_uses_config(tmp_path):
    ledger_path = tmp_path / "ledger.yaml"
    ledger_path.write_text("block_number: 5\nrecords: []\n")
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        f"""
service:
  ledger:
    path: "{ledger_path}"
    block_number: 9
"""
    )

    service = get_identity_service(config=load_config(str(config_path)))
    assert isinstance(service, LocalIdentityService)
    assert service.ledger.block_number == 9
    assert service.address is None


def test_unsupported_backend_rejected(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
service:
  backend: remote
"""
    )

    with pytest.raises(ValidationError):
        load_config(str(config_path))
