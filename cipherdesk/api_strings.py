"""Text cipher, digest and codec convenience wrappers."""

from .main import cipherdesk


def encrypt(plaintext: str, key: str, mode: str = "CBC", iv=None, *, padding=None):
    return cipherdesk.encrypt(plaintext, key, mode, iv, padding=padding)


def decrypt(ciphertext: str, key: str, mode: str = "CBC", iv=None, *, padding=None):
    return cipherdesk.decrypt(ciphertext, key, mode, iv, padding=padding)


def hash(text: str, algorithm: str = "SHA256"):
    return cipherdesk.hash(text, algorithm)


def hmac(text: str, key: str, algorithm: str = "SHA256"):
    return cipherdesk.hmac(text, key, algorithm)


def md5(text: str):
    return cipherdesk.hash(text, "MD5")


def sha1(text: str):
    return cipherdesk.hash(text, "SHA1")


def sha256(text: str):
    return cipherdesk.hash(text, "SHA256")


def sha512(text: str):
    return cipherdesk.hash(text, "SHA512")


def export_bundle(result, mode: str = "CBC"):
    return cipherdesk.export_bundle(result, mode)


def parse_bundle(text: str):
    return cipherdesk.parse_bundle(text)


def b64encode(string: str):
    return cipherdesk.b64encode(string)


def b64decode(string: str):
    return cipherdesk.b64decode(string)


def url_encode(string: str):
    return cipherdesk.url_encode(string)


def url_decode(string: str):
    return cipherdesk.url_decode(string)


def hex_encode(string: str):
    return cipherdesk.hex_encode(string)


def hex_decode(string: str):
    return cipherdesk.hex_decode(string)


def binary_encode(string: str):
    return cipherdesk.binary_encode(string)


def binary_decode(string: str):
    return cipherdesk.binary_decode(string)


__all__ = [
    "b64decode",
    "b64encode",
    "binary_decode",
    "binary_encode",
    "decrypt",
    "encrypt",
    "export_bundle",
    "hash",
    "hex_decode",
    "hex_encode",
    "hmac",
    "md5",
    "parse_bundle",
    "sha1",
    "sha256",
    "sha512",
    "url_decode",
    "url_encode",
]
