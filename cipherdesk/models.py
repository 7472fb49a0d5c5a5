"""Modes, algorithms and the tagged result values returned by the engine."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Union

from .errors import CipherError, ErrorKind, InputValidationError, error_for_kind


class CipherMode(str, enum.Enum):
    CBC = "CBC"
    CFB = "CFB"
    CTR = "CTR"
    OFB = "OFB"
    ECB = "ECB"

    @property
    def uses_iv(self) -> bool:
        return self is not CipherMode.ECB

    @property
    def is_block_mode(self) -> bool:
        return self in (CipherMode.CBC, CipherMode.ECB)

    @classmethod
    def parse(cls, value: Union[str, "CipherMode"]) -> "CipherMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise CipherError(f"Unsupported cipher mode: {value!r}") from None


class HashAlgorithm(str, enum.Enum):
    MD5 = "MD5"
    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"

    @property
    def hashlib_name(self) -> str:
        return self.value.lower()

    @property
    def hex_length(self) -> int:
        return {"MD5": 32, "SHA1": 40, "SHA256": 64, "SHA512": 128}[self.value]

    @classmethod
    def parse(cls, value: Union[str, "HashAlgorithm"]) -> "HashAlgorithm":
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().upper().replace("-", "").replace("_", "")
        try:
            return cls(normalized)
        except ValueError:
            raise InputValidationError(f"Unsupported hash algorithm: {value!r}") from None


class PaddingPolicy(str, enum.Enum):
    # PAD_ALWAYS reproduces the reference tool, which PKCS#7-pads stream modes too.
    PAD_ALWAYS = "always"
    PAD_BLOCK_MODES_ONLY = "block"

    def applies_to(self, mode: CipherMode) -> bool:
        return self is PaddingPolicy.PAD_ALWAYS or mode.is_block_mode

    @classmethod
    def parse(cls, value: Union[str, "PaddingPolicy"]) -> "PaddingPolicy":
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        aliases = {
            "always": cls.PAD_ALWAYS,
            "pad_always": cls.PAD_ALWAYS,
            "padalways": cls.PAD_ALWAYS,
            "block": cls.PAD_BLOCK_MODES_ONLY,
            "pad_block_modes_only": cls.PAD_BLOCK_MODES_ONLY,
            "padblockmodesonly": cls.PAD_BLOCK_MODES_ONLY,
        }
        if normalized not in aliases:
            raise InputValidationError(f"Unsupported padding policy: {value!r}")
        return aliases[normalized]


class _Ok:
    success = True
    error = None
    kind = None

    def raise_for_error(self):
        return self


@dataclass(frozen=True)
class EncryptOk(_Ok):
    ciphertext: str
    iv: str


@dataclass(frozen=True)
class DecryptOk(_Ok):
    plaintext: str


@dataclass(frozen=True)
class HashOk(_Ok):
    digest: str
    algorithm: HashAlgorithm


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str

    success = False

    @property
    def error(self) -> str:
        return self.message

    def raise_for_error(self):
        raise error_for_kind(self.kind, self.message)


EncryptResult = Union[EncryptOk, Err]
DecryptResult = Union[DecryptOk, Err]
HashResult = Union[HashOk, Err]


@dataclass(frozen=True)
class FileMetadata:
    extension: str = ""
    mime_type: str = ""


@dataclass(frozen=True)
class FileArtifact:
    data: bytes
    mime_type: str
    name: Optional[str] = None


@dataclass(frozen=True)
class FileEnvelope:
    """Everything a caller must keep to get the file back."""

    artifact: FileArtifact
    iv: str
    metadata_token: str

    @property
    def encrypted_artifact(self) -> FileArtifact:
        return self.artifact


__all__ = [
    "CipherMode",
    "DecryptOk",
    "DecryptResult",
    "EncryptOk",
    "EncryptResult",
    "Err",
    "FileArtifact",
    "FileEnvelope",
    "FileMetadata",
    "HashAlgorithm",
    "HashOk",
    "HashResult",
    "PaddingPolicy",
]
