"""Error taxonomy shared by the cipher, digest and file layers."""

import enum


class ErrorKind(str, enum.Enum):
    INPUT_VALIDATION = "InputValidationError"
    IV_FORMAT = "IVFormatError"
    CIPHER = "CipherError"
    METADATA_PARSE = "MetadataParseError"
    UNKNOWN = "UnknownError"


class CipherdeskError(Exception):
    kind = ErrorKind.UNKNOWN

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.kind.value


class InputValidationError(CipherdeskError, ValueError):
    """A required field (text, key, password, file) is missing or empty."""

    kind = ErrorKind.INPUT_VALIDATION


class IVFormatError(CipherdeskError, ValueError):
    """IV missing where the mode needs one, or not 16 bytes of hex."""

    kind = ErrorKind.IV_FORMAT


class CipherError(CipherdeskError, RuntimeError):
    """The AES transform could not run: bad mode, key size, padding, encoding."""

    kind = ErrorKind.CIPHER


class MetadataParseError(CipherdeskError, ValueError):
    kind = ErrorKind.METADATA_PARSE


class UnknownError(CipherdeskError, RuntimeError):
    kind = ErrorKind.UNKNOWN


class MetadataWarning(UserWarning):
    pass


class CompatibilityWarning(UserWarning):
    pass


_ERRORS_BY_KIND = {
    cls.kind: cls
    for cls in (InputValidationError, IVFormatError, CipherError, MetadataParseError, UnknownError)
}


def error_for_kind(kind: ErrorKind, message: str = "") -> CipherdeskError:
    return _ERRORS_BY_KIND.get(ErrorKind(kind), UnknownError)(message)


__all__ = [
    "CipherError",
    "CipherdeskError",
    "CompatibilityWarning",
    "ErrorKind",
    "IVFormatError",
    "InputValidationError",
    "MetadataParseError",
    "MetadataWarning",
    "UnknownError",
    "error_for_kind",
]
