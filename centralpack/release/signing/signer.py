# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Detached ASCII-armored signatures.

For every artifact we produce `<file>.asc` with gpg:

  key configured    gpg --batch --yes --no-tty --local-user KEY
                        [--pinentry-mode loopback --passphrase-fd 0]
                        --armor --detach-sign --output FILE.asc FILE
  no key            the same without --local-user (operator's default key)
  no gpg / failure  a placeholder block, clearly marked as not a signature

Whatever happens, `<file>.asc` exists when `Signer.sign` returns. gpg's
availability is probed once per Signer with `gpg --version`.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from centralpack.config.properties import load_properties
from centralpack.config.schema import SigningConfig
from centralpack.logging.logger import get_logger
from centralpack.release.checksums.integrity import is_checksum_file
from centralpack.utils.filesystem import atomic_write
from centralpack.utils.paths import resolve_path
from centralpack.utils.process import ToolError, ToolRunner, probe_tool, run_external_tool

_logger: logging.Logger = get_logger(__name__)

ANONYMOUS = "ANONYMOUS"
SIGNATURE_EXTENSION = "asc"
PLACEHOLDER_SIGNATURE_MARKER = "PLACEHOLDER - NOT A CRYPTOGRAPHIC SIGNATURE"

# Keys Gradle's signing plugin reads from local.properties.
_PROPERTIES_KEY_ID = "signing.keyId"
_PROPERTIES_PASSWORD = "signing.password"


@dataclass(frozen=True)
class SigningCredentials:
    key_id: str
    passphrase: Optional[str] = field(default=None, repr=False)


@dataclass(frozen=True)
class Signature:
    """The .asc written for one artifact."""

    artifact_path: Path
    signature_path: Path
    signer: str
    is_placeholder: bool


def signature_path_for(file_path: Path) -> Path:
    return file_path.with_name(f"{file_path.name}.{SIGNATURE_EXTENSION}")


def is_signature_file(path: Path) -> bool:
    return path.suffix == f".{SIGNATURE_EXTENSION}"


def placeholder_signature(file_name: str) -> str:
    return (
        "-----BEGIN PGP SIGNATURE-----\n"
        f"Comment: {PLACEHOLDER_SIGNATURE_MARKER}\n"
        "\n"
        f"PLACEHOLDER SIGNATURE FOR {file_name}\n"
        "-----END PGP SIGNATURE-----\n"
    )


def is_placeholder_signature(signature_path: Path) -> bool:
    try:
        return PLACEHOLDER_SIGNATURE_MARKER in signature_path.read_text(
            encoding="utf-8", errors="replace"
        )
    except OSError:
        return False


def resolve_signing_credentials(
    signing: SigningConfig,
    project_root: Path,
) -> Optional[SigningCredentials]:
    """
    Merge YAML credentials with the .properties file; YAML wins.

    Returns None when no key id is configured, which means "sign with the
    default identity".

    Raises:
        ConfigLoadError: If the properties file exists but cannot be read.
    """
    key_id = signing.key_id
    passphrase = signing.passphrase.get_secret_value() if signing.passphrase else None

    if signing.properties_file:
        props = load_properties(resolve_path(signing.properties_file, project_root))
        key_id = key_id or props.get(_PROPERTIES_KEY_ID) or None
        passphrase = passphrase or props.get(_PROPERTIES_PASSWORD) or None

    if not key_id:
        if passphrase:
            _logger.warning("Signing passphrase configured without a key id; ignoring it")
        return None

    return SigningCredentials(key_id=key_id, passphrase=passphrase)


class Signer:
    """
    Signs files with gpg, falling back to placeholder signatures.

    The runner is injectable so tests (and dry runs) never touch a real
    keyring.
    """

    def __init__(
        self,
        gpg_binary: str = "gpg",
        credentials: Optional[SigningCredentials] = None,
        *,
        gnupg_home: Optional[Path] = None,
        enabled: bool = True,
        timeout: Optional[float] = None,
        runner: ToolRunner = run_external_tool,
    ) -> None:
        self._gpg = gpg_binary
        self._credentials = credentials
        self._gnupg_home = gnupg_home
        self._enabled = enabled
        self._timeout = timeout
        self._runner = runner
        self._available: Optional[bool] = None
        self._passphrase_hint_logged = False

    @classmethod
    def from_config(
        cls,
        signing: SigningConfig,
        project_root: Path,
        credentials: Optional[SigningCredentials] = None,
        runner: ToolRunner = run_external_tool,
    ) -> "Signer":
        home = resolve_path(signing.gnupg_home, project_root) if signing.gnupg_home else None
        return cls(
            signing.gpg_binary,
            credentials,
            gnupg_home=home,
            enabled=signing.enabled,
            timeout=signing.timeout_seconds,
            runner=runner,
        )

    @property
    def identity(self) -> str:
        return self._credentials.key_id if self._credentials else ANONYMOUS

    def _common_args(self) -> list[str]:
        args = ["--batch", "--yes", "--no-tty"]
        if self._gnupg_home is not None:
            args += ["--homedir", str(self._gnupg_home)]
        return args

    def is_available(self) -> bool:
        """Probe gpg once; the answer is cached for the Signer's lifetime."""
        if self._available is None:
            if not self._enabled:
                self._available = False
                _logger.info("Signing disabled in config, placeholder signatures will be written")
            else:
                home_args = ["--homedir", str(self._gnupg_home)] if self._gnupg_home else []
                self._available = probe_tool(self._gpg, [*home_args, "--version"], self._runner)
                if not self._available:
                    _logger.warning(
                        "Signing tool not available, placeholder signatures will be written",
                        extra={"tool": self._gpg},
                    )
        return self._available

    def _sign_args(self, file_path: Path, signature_path: Path) -> tuple[list[str], Optional[str]]:
        args = self._common_args()
        stdin_text = None
        if self._credentials is not None:
            args += ["--local-user", self._credentials.key_id]
            if self._credentials.passphrase:
                args += ["--pinentry-mode", "loopback", "--passphrase-fd", "0"]
                stdin_text = self._credentials.passphrase + "\n"
        args += ["--armor", "--detach-sign", "--output", str(signature_path), str(file_path)]
        return args, stdin_text

    def _log_missing_passphrase(self) -> None:
        # --batch cannot prompt, so a protected key fails without loopback pinentry.
        if self._passphrase_hint_logged or self._credentials is None or self._credentials.passphrase:
            return
        self._passphrase_hint_logged = True
        _logger.warning(
            "Signing key has no passphrase configured; a passphrase-protected key cannot sign in batch mode. "
            "Set signing.passphrase or signing.password in the properties file, or preload the key in gpg-agent",
            extra={"key_id": self._credentials.key_id},
        )

    def _write_placeholder(self, file_path: Path, signature_path: Path) -> Signature:
        try:
            atomic_write(signature_path, placeholder_signature(file_path.name))
        except OSError as err:
            _logger.error(
                "Could not write placeholder signature",
                extra={"path": str(signature_path), "error": str(err)},
            )
        return Signature(
            artifact_path=file_path,
            signature_path=signature_path,
            signer=ANONYMOUS,
            is_placeholder=True,
        )

    def sign(self, file_path: Path) -> Signature:
        """Write `<file>.asc`. Never raises for tool problems."""
        signature_path = signature_path_for(file_path)
        signature: Optional[Signature] = None

        if self.is_available():
            args, stdin_text = self._sign_args(file_path, signature_path)
            try:
                self._runner(self._gpg, args, input_text=stdin_text, timeout=self._timeout)
                signature = Signature(
                    artifact_path=file_path,
                    signature_path=signature_path,
                    signer=self.identity,
                    is_placeholder=False,
                )
            except ToolError as err:
                _logger.warning(
                    "Signing failed, writing placeholder signature",
                    extra={"file": file_path.name, "signer": self.identity, "error": err.reason},
                )
                self._log_missing_passphrase()

        if signature is None:
            signature = self._write_placeholder(file_path, signature_path)

        if not signature_path.is_file():
            _logger.warning(
                "Signature file missing after signing, writing placeholder",
                extra={"file": file_path.name},
            )
            signature = self._write_placeholder(file_path, signature_path)

        _logger.info(
            "Signature written",
            extra={
                "file": file_path.name,
                "signer": signature.signer,
                "origin": "placeholder" if signature.is_placeholder else "real",
            },
        )
        return signature

    def verify(self, file_path: Path) -> bool:
        """gpg --verify the .asc against file_path. False if gpg is unavailable."""
        if not self.is_available():
            return False
        args = self._common_args() + ["--verify", str(signature_path_for(file_path)), str(file_path)]
        try:
            self._runner(self._gpg, args, timeout=self._timeout)
        except ToolError as err:
            _logger.warning(
                "Signature did not verify",
                extra={"file": file_path.name, "error": err.reason},
            )
            return False
        return True


def sign_files(paths: Iterable[Path], signer: Signer) -> list[Signature]:
    """Sign each path, skipping checksum and signature files."""
    signatures: list[Signature] = []
    for path in paths:
        if is_checksum_file(path) or is_signature_file(path):
            continue
        signatures.append(signer.sign(path))
    return signatures
