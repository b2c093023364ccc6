"""Tests for the ``assay doctor`` command (cli/doctor.py).

The keychain and config store are in-memory fakes — no OS state.

Coverage:
* Individual check functions return (label, value, status) tuples.
* Doctor returns SUCCESS when nothing fails, GENERAL_ERROR otherwise.
* CLI routing dispatches to ``handle_doctor``.
"""

from __future__ import annotations

import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from conftest import FakeSecretStore, MemoryConfigStore

from assay_cli.cli import doctor, exit_codes
from assay_cli.cli.app import main
from assay_cli.cli.context import CliContext
from assay_cli.core.models import Config


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _context(
    *,
    config: Config | None = None,
    secret: str | None = None,
    keychain: bool = True,
    environ: dict[str, str] | None = None,
    config_dir: Path | None = None,
) -> CliContext:
    ctx = CliContext(environ=environ or {})
    ctx.config_store = MemoryConfigStore(config, config_dir=config_dir)
    ctx.secret_store = FakeSecretStore(secret, available=keychain)
    return ctx


# ---------------------------------------------------------------------------
# Individual check functions
# ---------------------------------------------------------------------------

class TestPythonVersionCheck:
    def test_returns_tuple(self) -> None:
        label, value, status = doctor._python_version_check()
        assert label == "Python"
        assert isinstance(value, str)
        assert status == doctor.OK

    def test_old_python_fails(self) -> None:
        with patch.object(doctor.sys, "version_info", (3, 9, 18)):
            _, _, status = doctor._python_version_check()
        assert status == doctor.FAIL


class TestRequestsCheck:
    def test_installed(self) -> None:
        label, _, status = doctor._requests_check()
        assert label == "requests"
        assert status == doctor.OK

    @patch.dict("sys.modules", {"requests": None})
    def test_not_installed(self) -> None:
        _, value, status = doctor._requests_check()
        assert value == "NOT INSTALLED"
        assert status == doctor.FAIL


class TestKeyringCheck:
    def test_usable_backend(self) -> None:
        assert doctor._keyring_check(_context()) == ("keyring", "FakeKeyring", doctor.OK)

    def test_missing_backend_warns(self) -> None:
        _, _, status = doctor._keyring_check(_context(keychain=False))
        assert status == doctor.WARN


class TestConfigDirCheck:
    def test_missing_dir_is_fine(self, tmp_path: Path) -> None:
        _, value, status = doctor._config_dir_check(_context(config_dir=tmp_path / "absent"))
        assert status == doctor.OK
        assert "not created yet" in value

    def test_existing_dir(self, tmp_path: Path) -> None:
        _, value, status = doctor._config_dir_check(_context(config_dir=tmp_path))
        assert status == doctor.OK
        assert value == str(tmp_path)


class TestCredentialCheck:
    def test_env_override(self) -> None:
        ctx = _context(environ={"ASSAY_API_KEY": "ask_live_a_b"})
        assert doctor._credential_check(ctx)[1:] == ("from ASSAY_API_KEY", doctor.OK)

    def test_config_and_keychain(self) -> None:
        ctx = _context(config=Config(key_id="abc"), secret="s3cret")
        assert doctor._credential_check(ctx)[2] == doctor.OK

    def test_not_configured_warns(self) -> None:
        assert doctor._credential_check(_context())[2] == doctor.WARN

    def test_secret_missing_warns(self) -> None:
        ctx = _context(config=Config(key_id="abc"), secret=None)
        assert doctor._credential_check(ctx)[1] == "secret missing from keychain"


# ---------------------------------------------------------------------------
# handle_doctor
# ---------------------------------------------------------------------------

class TestHandleDoctor:
    def test_success(self, capsys: pytest.CaptureFixture[str]) -> None:
        ctx = _context(config=Config(key_id="abc"), secret="s3cret")
        assert doctor.handle_doctor(None, ctx) == exit_codes.SUCCESS  # type: ignore[arg-type]
        assert "All checks passed." in capsys.readouterr().err

    @patch(
        "assay_cli.cli.doctor._python_version_check",
        return_value=("Python", "3.9.0", "FAIL"),
    )
    def test_failure(self, _mock: object, capsys: pytest.CaptureFixture[str]) -> None:
        assert doctor.handle_doctor(None, _context()) == exit_codes.GENERAL_ERROR  # type: ignore[arg-type]
        assert "Some checks failed." in capsys.readouterr().err

    def test_plain_output_without_rich(
        self,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        for name in ("rich", "rich.console", "rich.table", "rich.text"):
            monkeypatch.setitem(sys.modules, name, None)

        doctor.handle_doctor(None, _context())  # type: ignore[arg-type]
        err = capsys.readouterr().err
        assert "assay doctor" in err
        assert "FakeKeyring" in err


class TestDoctorRouting:
    @patch("assay_cli.cli.doctor.handle_doctor", return_value=exit_codes.SUCCESS)
    def test_main_dispatches_doctor(self, mock_doctor: object) -> None:
        with patch("assay_cli.cli.app.build_context", return_value=_context()):
            assert main(["doctor"]) == exit_codes.SUCCESS
