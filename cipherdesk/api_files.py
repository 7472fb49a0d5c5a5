"""File envelope convenience wrappers."""

from .main import cipherdesk


def encrypt_file(
    source,
    password: str,
    mode: str = "CBC",
    *,
    filename: str | None = None,
    mime_type: str | None = None,
    max_bytes: int | None = None,
    padding=None,
):
    return cipherdesk.encrypt_file(
        source,
        password,
        mode,
        filename=filename,
        mime_type=mime_type,
        max_bytes=max_bytes,
        padding=padding,
    )


def decrypt_file(
    source,
    password: str,
    iv,
    mode: str = "CBC",
    metadata_token: str | None = None,
    *,
    filename: str | None = None,
    max_bytes: int | None = None,
    padding=None,
):
    return cipherdesk.decrypt_file(
        source,
        password,
        iv,
        mode,
        metadata_token,
        filename=filename,
        max_bytes=max_bytes,
        padding=padding,
    )


def encrypt_path(
    path: str,
    password: str,
    mode: str = "CBC",
    *,
    output: str | None = None,
    mime_type: str | None = None,
    max_bytes: int | None = None,
    padding=None,
):
    return cipherdesk.encrypt_path(
        path,
        password,
        mode,
        output=output,
        mime_type=mime_type,
        max_bytes=max_bytes,
        padding=padding,
    )


def decrypt_path(
    path: str,
    password: str,
    iv,
    mode: str = "CBC",
    metadata_token: str | None = None,
    *,
    output: str | None = None,
    max_bytes: int | None = None,
    padding=None,
):
    return cipherdesk.decrypt_path(
        path,
        password,
        iv,
        mode,
        metadata_token,
        output=output,
        max_bytes=max_bytes,
        padding=padding,
    )


def encode_metadata(metadata):
    return cipherdesk.encode_metadata(metadata)


def decode_metadata(token: str):
    return cipherdesk.decode_metadata(token)


__all__ = [
    "decode_metadata",
    "decrypt_file",
    "decrypt_path",
    "encode_metadata",
    "encrypt_file",
    "encrypt_path",
]
