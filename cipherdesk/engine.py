# CIPHERDESK SYMMETRIC ENGINE ->

import os as _os_module
import warnings as _warnings_module

from .errors import (
    CipherError,
    CipherdeskError,
    CompatibilityWarning,
    ErrorKind,
    InputValidationError,
    IVFormatError,
    MetadataParseError,
    MetadataWarning,
)
from .models import (
    CipherMode,
    DecryptOk,
    EncryptOk,
    Err,
    FileArtifact,
    FileEnvelope,
    FileMetadata,
    HashAlgorithm,
    HashOk,
    PaddingPolicy,
)


class cipherdesk:
    import base64
    import binascii
    import hashlib
    import hmac as stdlib_hmac
    import json
    import mimetypes
    import pathlib
    import typing
    import urllib.parse
    from cryptography.hazmat.primitives import padding
    from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
    try:
        from cryptography.hazmat.decrepit.ciphers.modes import CFB, OFB
    except ImportError:  # cryptography < 47 keeps them in primitives
        from cryptography.hazmat.primitives.ciphers.modes import CFB, OFB

    @staticmethod
    def _env_int(name: str) -> "cipherdesk.typing.Optional[int]":
        value = _os_module.getenv(name)
        if not value:
            return None
        try:
            parsed = int(value)
        except (TypeError, ValueError):
            return None
        if parsed <= 0:
            return None
        return parsed

    @staticmethod
    def _env_choice(name: str, default: str, choices: "cipherdesk.typing.Iterable[str]") -> str:
        raw = _os_module.getenv(name)
        if not raw:
            return default
        value = raw.strip().lower()
        return value if value in choices else default

    ENGINE_VERSION = "1.0.0"
    BLOCK_SIZE = 16
    IV_SIZE = 16
    AES_KEY_SIZES = (16, 24, 32)
    DEFAULT_MIME_TYPE = "application/octet-stream"
    ENCRYPTED_SUFFIX = ".encrypted"
    DECRYPTED_SUFFIX = ".decrypted"
    META_EXT_KEY = "ext"
    META_TYPE_KEY = "type"
    URL_SAFE_CHARS = "!*'()"  # encodeURIComponent leaves these alone
    MAX_FILE_BYTES = 50 * 1024 * 1024
    STREAM_CHUNK_SIZE = 1024 * 1024
    _MAX_FILE_BYTES_ENV = _env_int("CIPHERDESK_MAX_FILE_BYTES")
    if _MAX_FILE_BYTES_ENV is not None:
        MAX_FILE_BYTES = _MAX_FILE_BYTES_ENV
    PADDING_POLICY = PaddingPolicy.parse(
        _env_choice("CIPHERDESK_PADDING", "block", ("block", "always"))
    )

    # -------------------------------------------------------------- helpers

    @staticmethod
    def _human_readable_size(num_bytes: int) -> str:
        units = ["B", "KiB", "MiB", "GiB"]
        value = float(num_bytes)
        for unit in units:
            if value < 1024.0 or unit == units[-1]:
                return f"{value:.2f} {unit}"
            value /= 1024.0
        return f"{value:.2f} TiB"

    @staticmethod
    def _as_result(func, *args, **kwargs):
        try:
            return func(*args, **kwargs)
        except CipherdeskError as exc:
            return Err(exc.kind, exc.message)
        except Exception as exc:
            return Err(ErrorKind.UNKNOWN, str(exc) or "Unknown error")

    @staticmethod
    def _coerce_text(value: "cipherdesk.typing.Union[str, bytes, bytearray, memoryview]", label: str) -> str:
        if value is None:
            raise InputValidationError(f"{label} is required")
        if isinstance(value, (bytes, bytearray, memoryview)):
            try:
                return bytes(value).decode("utf-8")
            except UnicodeDecodeError:
                raise InputValidationError(f"{label} must be UTF-8 text") from None
        return str(value)

    @staticmethod
    def _coerce_key_bytes(key: "cipherdesk.typing.Union[str, bytes, bytearray, memoryview]") -> bytes:
        """Raw key material, zero-extended to the next AES key size.

        No key derivation happens here: the UTF-8 bytes of the key are the
        AES key. Short keys are right-padded with NUL bytes, keys longer than
        32 bytes are rejected.
        """
        if key is None:
            raise InputValidationError("Key is required")
        if isinstance(key, str):
            raw = key.encode("utf-8")
        elif isinstance(key, (bytes, bytearray, memoryview)):
            raw = bytes(key)
        else:
            raise InputValidationError(f"Unsupported key type: {type(key)!r}")
        if not raw:
            raise InputValidationError("Key is required")
        for size in cipherdesk.AES_KEY_SIZES:
            if len(raw) <= size:
                return raw.ljust(size, b"\x00")
        raise CipherError(
            f"Key is {len(raw)} bytes; AES accepts at most {cipherdesk.AES_KEY_SIZES[-1]}"
        )

    @staticmethod
    def _parse_iv(iv, *, required: bool = True) -> "cipherdesk.typing.Optional[bytes]":
        if iv is None or (isinstance(iv, (str, bytes, bytearray)) and len(iv) == 0):
            if required:
                raise IVFormatError("IV is required for this mode")
            return None
        if isinstance(iv, (bytes, bytearray, memoryview)):
            raw = bytes(iv)
        else:
            text = str(iv).strip()
            if len(text) != cipherdesk.IV_SIZE * 2:
                raise IVFormatError(
                    f"IV must be {cipherdesk.IV_SIZE * 2} hex characters, got {len(text)}"
                )
            try:
                raw = bytes.fromhex(text)
            except ValueError:
                raise IVFormatError("IV is not valid hex") from None
        if len(raw) != cipherdesk.IV_SIZE:
            raise IVFormatError(f"IV must be {cipherdesk.IV_SIZE} bytes, got {len(raw)}")
        return raw

    @staticmethod
    def _iv_for_encrypt(iv, mode: CipherMode) -> bytes:
        if iv is None or (isinstance(iv, (str, bytes, bytearray)) and len(iv) == 0):
            return _os_module.urandom(cipherdesk.IV_SIZE)
        if mode is CipherMode.ECB:
            # accepted but unused; still report a 16-byte value
            try:
                return cipherdesk._parse_iv(iv)
            except IVFormatError:
                return _os_module.urandom(cipherdesk.IV_SIZE)
        return cipherdesk._parse_iv(iv)

    @staticmethod
    def _resolve_padding(padding) -> PaddingPolicy:
        if padding is None:
            return cipherdesk.PADDING_POLICY
        return PaddingPolicy.parse(padding)

    @staticmethod
    def _cipher_for(key: bytes, mode: CipherMode, iv: "cipherdesk.typing.Optional[bytes]"):
        if mode is CipherMode.CBC:
            mode_obj = cipherdesk.modes.CBC(iv)
        elif mode is CipherMode.CFB:
            mode_obj = cipherdesk.CFB(iv)
        elif mode is CipherMode.CTR:
            mode_obj = cipherdesk.modes.CTR(iv)
        elif mode is CipherMode.OFB:
            mode_obj = cipherdesk.OFB(iv)
        elif mode is CipherMode.ECB:
            mode_obj = cipherdesk.modes.ECB()
        else:
            raise CipherError(f"Unsupported cipher mode: {mode!r}")
        return cipherdesk.Cipher(cipherdesk.algorithms.AES(key), mode_obj)

    # -------------------------------------------------------- cipher engine

    @staticmethod
    def _encrypt_text(
        plaintext: str,
        key: "cipherdesk.typing.Union[str, bytes]",
        mode: "cipherdesk.typing.Union[str, CipherMode]" = CipherMode.CBC,
        iv=None,
        *,
        padding=None
    ) -> EncryptOk:
        plaintext = cipherdesk._coerce_text(plaintext, "Plaintext")
        if not plaintext:
            raise InputValidationError("Plaintext is required")
        key_bytes = cipherdesk._coerce_key_bytes(key)
        mode = CipherMode.parse(mode)
        policy = cipherdesk._resolve_padding(padding)
        iv_bytes = cipherdesk._iv_for_encrypt(iv, mode)
        data = plaintext.encode("utf-8")
        if policy.applies_to(mode):
            if not mode.is_block_mode:
                _warnings_module.warn(
                    f"Padding {mode.value} output for compatibility with the reference tool",
                    CompatibilityWarning,
                    stacklevel=4
                )
            padder = cipherdesk.padding.PKCS7(cipherdesk.BLOCK_SIZE * 8).padder()
            data = padder.update(data) + padder.finalize()
        cipher = cipherdesk._cipher_for(key_bytes, mode, iv_bytes if mode.uses_iv else None)
        try:
            encryptor = cipher.encryptor()
            raw = encryptor.update(data) + encryptor.finalize()
        except ValueError as exc:
            raise CipherError(f"Encryption failed: {exc}") from exc
        return EncryptOk(
            ciphertext=cipherdesk.base64.b64encode(raw).decode("ascii"),
            iv=iv_bytes.hex()
        )

    @staticmethod
    def _decrypt_text(
        ciphertext: str,
        key: "cipherdesk.typing.Union[str, bytes]",
        mode: "cipherdesk.typing.Union[str, CipherMode]" = CipherMode.CBC,
        iv=None,
        *,
        padding=None
    ) -> DecryptOk:
        ciphertext = cipherdesk._coerce_text(ciphertext, "Ciphertext").strip()
        if not ciphertext:
            raise InputValidationError("Ciphertext is required")
        key_bytes = cipherdesk._coerce_key_bytes(key)
        mode = CipherMode.parse(mode)
        policy = cipherdesk._resolve_padding(padding)
        iv_bytes = cipherdesk._parse_iv(iv) if mode.uses_iv else None
        try:
            raw = cipherdesk.base64.b64decode(ciphertext, validate=True)
        except (cipherdesk.binascii.Error, ValueError):
            raise CipherError("Ciphertext is not valid base64") from None
        padded = policy.applies_to(mode)
        if padded and (not raw or len(raw) % cipherdesk.BLOCK_SIZE):
            raise CipherError(
                f"Ciphertext length {len(raw)} is not a multiple of the {cipherdesk.BLOCK_SIZE}-byte block"
            )
        cipher = cipherdesk._cipher_for(key_bytes, mode, iv_bytes)
        try:
            decryptor = cipher.decryptor()
            data = decryptor.update(raw) + decryptor.finalize()
            if padded:
                unpadder = cipherdesk.padding.PKCS7(cipherdesk.BLOCK_SIZE * 8).unpadder()
                data = unpadder.update(data) + unpadder.finalize()
        except ValueError as exc:
            raise CipherError(f"Decryption failed: {exc}") from exc
        # no integrity check: a wrong key under a stream mode lands here as garbage
        return DecryptOk(plaintext=data.decode("utf-8", errors="replace"))

    @staticmethod
    def encrypt(
        plaintext: str,
        key: "cipherdesk.typing.Union[str, bytes]",
        mode: "cipherdesk.typing.Union[str, CipherMode]" = CipherMode.CBC,
        iv=None,
        *,
        padding=None
    ) -> "cipherdesk.typing.Union[EncryptOk, Err]":
        """AES-encrypt ``plaintext`` under ``mode``.

        Returns ``EncryptOk(ciphertext, iv)`` with base64 ciphertext and the
        hex IV, or ``Err(kind, message)``. The IV is generated when omitted
        and must be kept by the caller.

        ``key`` is used raw: its UTF-8 bytes are zero-padded to 16, 24 or 32
        bytes. Keys longer than 32 bytes fail with ``CipherError``, so long
        passphrases must be hashed or shortened by the caller.
        """
        return cipherdesk._as_result(
            cipherdesk._encrypt_text, plaintext, key, mode, iv, padding=padding
        )

    @staticmethod
    def decrypt(
        ciphertext: str,
        key: "cipherdesk.typing.Union[str, bytes]",
        mode: "cipherdesk.typing.Union[str, CipherMode]" = CipherMode.CBC,
        iv=None,
        *,
        padding=None,
        allow_bundle: bool = True
    ) -> "cipherdesk.typing.Union[DecryptOk, Err]":
        """Reverse :meth:`encrypt`.

        ``ciphertext`` may also be a JSON bundle produced by
        :meth:`export_bundle`; its iv and mode then take precedence.
        """
        if allow_bundle and isinstance(ciphertext, str):
            bundle = cipherdesk.parse_bundle(ciphertext)
            if bundle is not None:
                ciphertext, iv, bundle_mode = bundle
                mode = bundle_mode or mode
        return cipherdesk._as_result(
            cipherdesk._decrypt_text, ciphertext, key, mode, iv, padding=padding
        )

    @staticmethod
    def export_bundle(
        result: EncryptOk,
        mode: "cipherdesk.typing.Union[str, CipherMode]" = CipherMode.CBC
    ) -> str:
        result = result.raise_for_error()
        return cipherdesk.json.dumps(
            {
                "ciphertext": result.ciphertext,
                "iv": result.iv,
                "mode": CipherMode.parse(mode).value,
            },
            indent=2
        )

    @staticmethod
    def parse_bundle(text: str) -> "cipherdesk.typing.Optional[tuple]":
        candidate = (text or "").strip()
        if not candidate.startswith("{"):
            return None
        try:
            data = cipherdesk.json.loads(candidate)
        except ValueError:
            return None
        if not isinstance(data, dict):
            return None
        ciphertext = data.get("ciphertext")
        iv = data.get("iv")
        if not isinstance(ciphertext, str) or not isinstance(iv, str) or not ciphertext or not iv:
            return None
        mode = data.get("mode")
        return ciphertext, iv, mode if isinstance(mode, str) and mode else None

    # -------------------------------------------------------- digest engine

    @staticmethod
    def _digest(text: str, algorithm) -> HashOk:
        algorithm = HashAlgorithm.parse(algorithm)
        text = cipherdesk._coerce_text(text, "Text")
        digest = cipherdesk.hashlib.new(algorithm.hashlib_name, text.encode("utf-8")).hexdigest()
        return HashOk(digest=digest, algorithm=algorithm)

    @staticmethod
    def _hmac_digest(text: str, key: str, algorithm) -> HashOk:
        algorithm = HashAlgorithm.parse(algorithm)
        text = cipherdesk._coerce_text(text, "Text")
        if key is None or len(key) == 0:
            raise InputValidationError("HMAC key is required")
        key_bytes = key.encode("utf-8") if isinstance(key, str) else bytes(key)
        mac = cipherdesk.stdlib_hmac.new(key_bytes, text.encode("utf-8"), algorithm.hashlib_name)
        return HashOk(digest=mac.hexdigest(), algorithm=algorithm)

    @staticmethod
    def hash(text: str, algorithm="SHA256") -> "cipherdesk.typing.Union[HashOk, Err]":
        return cipherdesk._as_result(cipherdesk._digest, text, algorithm)

    @staticmethod
    def hmac(text: str, key: str, algorithm="SHA256") -> "cipherdesk.typing.Union[HashOk, Err]":
        return cipherdesk._as_result(cipherdesk._hmac_digest, text, key, algorithm)

    # ------------------------------------------------------- metadata codec

    @staticmethod
    def encode_metadata(metadata: FileMetadata) -> str:
        data = cipherdesk.json.dumps(
            {
                cipherdesk.META_EXT_KEY: metadata.extension or "",
                cipherdesk.META_TYPE_KEY: metadata.mime_type or "",
            },
            separators=(',', ':')
        ).encode('utf-8')
        return cipherdesk.base64.b64encode(data).decode('ascii')

    @staticmethod
    def decode_metadata(token: str) -> FileMetadata:
        if not token or not isinstance(token, str):
            raise MetadataParseError("Metadata token is empty")
        try:
            raw = cipherdesk.base64.b64decode(token.strip().encode('ascii'), validate=True)
            data = cipherdesk.json.loads(raw.decode('utf-8'))
        except (ValueError, UnicodeError) as exc:
            raise MetadataParseError(f"Malformed metadata token: {exc}") from None
        if not isinstance(data, dict):
            raise MetadataParseError("Metadata token does not hold an object")
        ext = data.get(cipherdesk.META_EXT_KEY, "")
        mime_type = data.get(cipherdesk.META_TYPE_KEY, "")
        if not isinstance(ext, str) or not isinstance(mime_type, str):
            raise MetadataParseError("Metadata fields must be strings")
        return FileMetadata(extension=ext, mime_type=mime_type)

    @staticmethod
    def resolve_mime_type(metadata_token: "cipherdesk.typing.Optional[str]") -> str:
        if not metadata_token:
            return cipherdesk.DEFAULT_MIME_TYPE
        try:
            metadata = cipherdesk.decode_metadata(metadata_token)
        except MetadataParseError as exc:
            _warnings_module.warn(
                f"Failed to parse file metadata, using {cipherdesk.DEFAULT_MIME_TYPE}: {exc.message}",
                MetadataWarning,
                stacklevel=3
            )
            return cipherdesk.DEFAULT_MIME_TYPE
        return metadata.mime_type or cipherdesk.DEFAULT_MIME_TYPE

    # -------------------------------------------------------- file pipeline

    @staticmethod
    def _normalize_path(path_like: "cipherdesk.typing.Union[str, cipherdesk.pathlib.Path]") -> "cipherdesk.pathlib.Path":
        if isinstance(path_like, cipherdesk.pathlib.Path):
            path = path_like
        else:
            path = cipherdesk.pathlib.Path(_os_module.fspath(path_like))
        path = path.expanduser()
        try:
            return path.resolve(strict=False)
        except OSError:
            return path

    @staticmethod
    def _ensure_existing_file(path: "cipherdesk.pathlib.Path") -> None:
        if not path.exists() or not path.is_file():
            raise InputValidationError(f"Input file not found: {path}")

    @staticmethod
    def _ensure_size(size: int, limit: int, label: str) -> None:
        if size > limit:
            human_size = cipherdesk._human_readable_size(size)
            human_limit = cipherdesk._human_readable_size(limit)
            raise InputValidationError(
                f"{label} is {human_size}, exceeding the {human_limit} limit"
            )

    @staticmethod
    def _read_source(source, max_bytes: "cipherdesk.typing.Optional[int]" = None) -> "tuple[bytes, cipherdesk.typing.Optional[str]]":
        """Read a whole file: bytes-like, a filesystem path, or a binary reader."""
        limit = cipherdesk.MAX_FILE_BYTES if max_bytes is None else max_bytes
        name = None
        if source is None:
            raise InputValidationError("File is required")
        if isinstance(source, (bytes, bytearray, memoryview)):
            data = bytes(source)
        elif isinstance(source, (str, _os_module.PathLike)):
            path = cipherdesk._normalize_path(source)
            cipherdesk._ensure_existing_file(path)
            cipherdesk._ensure_size(path.stat().st_size, limit, path.name)
            data = path.read_bytes()
            name = path.name
        elif hasattr(source, "read"):
            # unbuffered streams may return short reads
            buffer = bytearray()
            while len(buffer) <= limit:
                chunk = source.read(min(cipherdesk.STREAM_CHUNK_SIZE, limit + 1 - len(buffer)))
                if isinstance(chunk, str):
                    raise InputValidationError("File stream must be opened in binary mode")
                if not chunk:
                    break
                buffer.extend(chunk)
            data = bytes(buffer)
            raw_name = getattr(source, "name", None)
            if isinstance(raw_name, str) and raw_name:
                name = cipherdesk.pathlib.Path(raw_name).name
        else:
            raise InputValidationError(f"Unsupported file source: {type(source)!r}")
        cipherdesk._ensure_size(len(data), limit, name or "File")
        if not data:
            raise InputValidationError("File is empty")
        return data, name

    @staticmethod
    def file_extension(filename: "cipherdesk.typing.Optional[str]") -> str:
        if not filename or "." not in filename:
            return ""
        return filename.rsplit(".", 1)[1]

    @staticmethod
    def file_metadata(
        filename: "cipherdesk.typing.Optional[str]",
        mime_type: "cipherdesk.typing.Optional[str]" = None
    ) -> FileMetadata:
        if not mime_type and filename:
            mime_type = cipherdesk.mimetypes.guess_type(filename)[0]
        return FileMetadata(
            extension=cipherdesk.file_extension(filename),
            mime_type=mime_type or cipherdesk.DEFAULT_MIME_TYPE
        )

    @staticmethod
    def encrypted_name(filename: str) -> str:
        return f"{filename}{cipherdesk.ENCRYPTED_SUFFIX}"

    @staticmethod
    def decrypted_name(filename: str) -> str:
        suffix = cipherdesk.ENCRYPTED_SUFFIX
        if filename.endswith(suffix) and len(filename) > len(suffix):
            return filename[:-len(suffix)]
        return f"{filename}{cipherdesk.DECRYPTED_SUFFIX}"

    @staticmethod
    def encrypt_file(
        source,
        password: str,
        mode: "cipherdesk.typing.Union[str, CipherMode]" = CipherMode.CBC,
        *,
        filename: "cipherdesk.typing.Optional[str]" = None,
        mime_type: "cipherdesk.typing.Optional[str]" = None,
        max_bytes: "cipherdesk.typing.Optional[int]" = None,
        padding=None
    ) -> FileEnvelope:
        if not password:
            raise InputValidationError("Password is required")
        mode = CipherMode.parse(mode)
        data, source_name = cipherdesk._read_source(source, max_bytes)
        name = filename or source_name
        token = cipherdesk.encode_metadata(cipherdesk.file_metadata(name, mime_type))
        transcoded = cipherdesk.base64.b64encode(data).decode("ascii")
        result = cipherdesk.encrypt(transcoded, password, mode, padding=padding).raise_for_error()
        artifact = FileArtifact(
            data=result.ciphertext.encode("ascii"),
            mime_type=cipherdesk.DEFAULT_MIME_TYPE,
            name=cipherdesk.encrypted_name(name) if name else None
        )
        return FileEnvelope(artifact=artifact, iv=result.iv, metadata_token=token)

    @staticmethod
    def decrypt_file(
        source,
        password: str,
        iv,
        mode: "cipherdesk.typing.Union[str, CipherMode]" = CipherMode.CBC,
        metadata_token: "cipherdesk.typing.Optional[str]" = None,
        *,
        filename: "cipherdesk.typing.Optional[str]" = None,
        max_bytes: "cipherdesk.typing.Optional[int]" = None,
        padding=None
    ) -> FileArtifact:
        if not password:
            raise InputValidationError("Password is required")
        mode = CipherMode.parse(mode)
        data, source_name = cipherdesk._read_source(source, max_bytes)
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError:
            raise CipherError("Encrypted file does not hold textual ciphertext") from None
        result = cipherdesk.decrypt(
            text, password, mode, iv, padding=padding, allow_bundle=False
        ).raise_for_error()
        try:
            restored = cipherdesk.base64.b64decode(result.plaintext, validate=True)
        except ValueError:
            raise CipherError(
                "Decrypted payload is not valid base64; check the password, IV and mode"
            ) from None
        name = filename or source_name
        return FileArtifact(
            data=restored,
            mime_type=cipherdesk.resolve_mime_type(metadata_token),
            name=cipherdesk.decrypted_name(name) if name else None
        )

    @staticmethod
    def encrypt_path(
        path: "cipherdesk.typing.Union[str, cipherdesk.pathlib.Path]",
        password: str,
        mode: "cipherdesk.typing.Union[str, CipherMode]" = CipherMode.CBC,
        *,
        output: "cipherdesk.typing.Optional[str]" = None,
        mime_type: "cipherdesk.typing.Optional[str]" = None,
        max_bytes: "cipherdesk.typing.Optional[int]" = None,
        padding=None
    ) -> "tuple[str, str, str]":
        src = cipherdesk._normalize_path(path)
        envelope = cipherdesk.encrypt_file(
            src,
            password,
            mode,
            mime_type=mime_type,
            max_bytes=max_bytes,
            padding=padding
        )
        out_path = cipherdesk._normalize_path(output) if output else src.with_name(envelope.artifact.name)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_bytes(envelope.artifact.data)
        return str(out_path), envelope.iv, envelope.metadata_token

    @staticmethod
    def decrypt_path(
        path: "cipherdesk.typing.Union[str, cipherdesk.pathlib.Path]",
        password: str,
        iv,
        mode: "cipherdesk.typing.Union[str, CipherMode]" = CipherMode.CBC,
        metadata_token: "cipherdesk.typing.Optional[str]" = None,
        *,
        output: "cipherdesk.typing.Optional[str]" = None,
        max_bytes: "cipherdesk.typing.Optional[int]" = None,
        padding=None
    ) -> str:
        src = cipherdesk._normalize_path(path)
        artifact = cipherdesk.decrypt_file(
            src,
            password,
            iv,
            mode,
            metadata_token,
            max_bytes=max_bytes,
            padding=padding
        )
        out_path = cipherdesk._normalize_path(output) if output else src.with_name(artifact.name)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_bytes(artifact.data)
        return str(out_path)

    # ---------------------------------------------------------- text codecs

    @staticmethod
    def b64encode(string: str) -> str:
        return cipherdesk.base64.b64encode(string.encode('utf-8')).decode('ascii')

    @staticmethod
    def b64decode(string: str) -> str:
        try:
            return cipherdesk.base64.b64decode(string.strip(), validate=True).decode('utf-8')
        except (ValueError, UnicodeError):
            raise InputValidationError("Input is not valid base64 text") from None

    @staticmethod
    def url_encode(string: str) -> str:
        return cipherdesk.urllib.parse.quote(string, safe=cipherdesk.URL_SAFE_CHARS)

    @staticmethod
    def url_decode(string: str) -> str:
        try:
            return cipherdesk.urllib.parse.unquote(string, errors="strict")
        except UnicodeDecodeError:
            raise InputValidationError("Input is not a valid percent-encoded UTF-8 string") from None

    @staticmethod
    def hex_encode(string: str) -> str:
        return string.encode('utf-8').hex()

    @staticmethod
    def hex_decode(string: str) -> str:
        try:
            return bytes.fromhex(string.strip()).decode('utf-8')
        except (ValueError, UnicodeError):
            raise InputValidationError("Input is not valid hex-encoded UTF-8") from None

    @staticmethod
    def binary_encode(string: str) -> str:
        return " ".join(format(byte, "08b") for byte in string.encode('utf-8'))

    @staticmethod
    def binary_decode(string: str) -> str:
        try:
            raw = bytes(int(chunk, 2) for chunk in string.split())
            return raw.decode('utf-8')
        except (ValueError, UnicodeError):
            raise InputValidationError("Input is not space-separated 8-bit binary") from None

    CODECS = {
        "base64": ("b64encode", "b64decode"),
        "url": ("url_encode", "url_decode"),
        "hex": ("hex_encode", "hex_decode"),
        "binary": ("binary_encode", "binary_decode"),
    }


def cli(argv=None, observer=None) -> int:
    import argparse
    import colorama

    def _cli_config_path() -> "cipherdesk.pathlib.Path":
        cfg = _os_module.getenv("CIPHERDESK_CLI_CONFIG")
        if cfg:
            return cipherdesk.pathlib.Path(cfg).expanduser()
        xdg = _os_module.getenv("XDG_CONFIG_HOME")
        if xdg:
            return cipherdesk.pathlib.Path(xdg) / "cipherdesk" / "cli.conf"
        appdata = _os_module.getenv("APPDATA")
        if appdata:
            return cipherdesk.pathlib.Path(appdata) / "cipherdesk" / "cli.conf"
        return cipherdesk.pathlib.Path("~/.config/cipherdesk/cli.conf").expanduser()

    def _cli_plain_mode() -> bool:
        if _os_module.getenv("CIPHERDESK_CLI_PLAIN"):
            return True
        if _os_module.getenv("NO_COLOR"):
            return True
        style = (_os_module.getenv("CIPHERDESK_CLI_STYLE") or "").strip().lower()
        if style in {"plain", "0", "false", "off"}:
            return True
        if style in {"color", "on"}:
            return False
        cfg_path = _cli_config_path()
        try:
            if cfg_path.exists():
                data = cfg_path.read_text(encoding="utf-8").lower()
                if "plain=1" in data or "plain=true" in data or "style=plain" in data:
                    return True
        except OSError:
            pass
        return False

    class _CliTheme:
        def __init__(self, plain: bool):
            self.plain = plain
            if not plain:
                colorama.just_fix_windows_console()

        def _wrap(self, msg: str, color: str) -> str:
            if self.plain:
                return msg
            return f"{colorama.Style.BRIGHT}{color}{msg}{colorama.Style.RESET_ALL}"

        def ok(self, msg: str) -> str:
            return self._wrap(msg, colorama.Fore.GREEN)

        def warn(self, msg: str) -> str:
            return self._wrap(msg, colorama.Fore.YELLOW)

        def err(self, msg: str) -> str:
            return self._wrap(msg, colorama.Fore.RED)

        def info(self, msg: str) -> str:
            return self._wrap(msg, colorama.Fore.CYAN)

    theme = _CliTheme(_cli_plain_mode())

    def _notify(event: str, **details) -> None:
        if observer is not None:
            observer(event, details)

    mode_choices = [mode.value for mode in CipherMode]
    algo_choices = [algo.value for algo in HashAlgorithm]

    parser = argparse.ArgumentParser(prog="cipherdesk", description="Local AES, hashing and file envelope toolkit")
    parser.add_argument(
        "--padding",
        choices=["block", "always"],
        default=None,
        help="Padding policy; 'always' pads stream modes like the reference tool"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    enc = subparsers.add_parser("encrypt", help="Encrypt text with AES")
    enc.add_argument("text", help="Plaintext")
    enc.add_argument("-k", "--key", required=True, help="Raw key (no key derivation is applied)")
    enc.add_argument("-m", "--mode", default="CBC", type=str.upper, choices=mode_choices)
    enc.add_argument("--iv", default=None, help="32 hex chars; generated when omitted")
    enc.add_argument("--json", action="store_true", help="Print a JSON bundle with ciphertext, iv and mode")

    dec = subparsers.add_parser("decrypt", help="Decrypt AES text or a JSON bundle")
    dec.add_argument("text", help="Base64 ciphertext or JSON bundle")
    dec.add_argument("-k", "--key", required=True)
    dec.add_argument("-m", "--mode", default="CBC", type=str.upper, choices=mode_choices)
    dec.add_argument("--iv", default=None)

    hsh = subparsers.add_parser("hash", help="Digest text")
    hsh.add_argument("text")
    hsh.add_argument("-a", "--algorithm", default="SHA256", type=str.upper, choices=algo_choices)
    hsh.add_argument("--hmac-key", default=None, help="Compute an HMAC with this key instead")

    fenc = subparsers.add_parser("encrypt-file", help="Encrypt a file into a .encrypted artifact")
    fenc.add_argument("path")
    fenc.add_argument("-p", "--password", required=True)
    fenc.add_argument("-m", "--mode", default="CBC", type=str.upper, choices=mode_choices)
    fenc.add_argument("-o", "--output", default=None)
    fenc.add_argument("--mime-type", default=None)

    fdec = subparsers.add_parser("decrypt-file", help="Restore a file from a .encrypted artifact")
    fdec.add_argument("path")
    fdec.add_argument("-p", "--password", required=True)
    fdec.add_argument("--iv", default=None)
    fdec.add_argument("-m", "--mode", default="CBC", type=str.upper, choices=mode_choices)
    fdec.add_argument("--meta", default=None, help="Metadata token printed at encryption time")
    fdec.add_argument("-o", "--output", default=None)

    for name in ("encode", "decode"):
        codec = subparsers.add_parser(name, help=f"{name.capitalize()} text with a simple codec")
        codec.add_argument("codec", choices=sorted(cipherdesk.CODECS))
        codec.add_argument("text")

    args = parser.parse_args(argv)

    def _report(result, label: str) -> int:
        if not result.success:
            print(theme.err(f"{label} failed: {result.error or 'Unknown error'}"))
            _notify(label, success=False, error=result.error)
            return 1
        _notify(label, success=True)
        return 0

    if args.command == "encrypt":
        result = cipherdesk.encrypt(args.text, args.key, args.mode, args.iv, padding=args.padding)
        if _report(result, "encrypt"):
            return 1
        if args.json:
            print(cipherdesk.export_bundle(result, args.mode))
        else:
            print(result.ciphertext)
            print(theme.info(f"IV: {result.iv}"))
        return 0

    if args.command == "decrypt":
        result = cipherdesk.decrypt(args.text, args.key, args.mode, args.iv, padding=args.padding)
        if _report(result, "decrypt"):
            return 1
        print(result.plaintext)
        return 0

    if args.command == "hash":
        if args.hmac_key is not None:
            result = cipherdesk.hmac(args.text, args.hmac_key, args.algorithm)
        else:
            result = cipherdesk.hash(args.text, args.algorithm)
        if _report(result, "hash"):
            return 1
        print(result.digest)
        return 0

    if args.command == "encrypt-file":
        try:
            out_path, iv, token = cipherdesk.encrypt_path(
                args.path,
                args.password,
                args.mode,
                output=args.output,
                mime_type=args.mime_type,
                padding=args.padding
            )
        except CipherdeskError as exc:
            print(theme.err(f"encrypt-file failed: {exc.message}"))
            _notify("encrypt-file", success=False, error=exc.message)
            return 1
        except OSError as exc:
            message = f"{exc.strerror or exc}: {exc.filename}" if exc.filename else str(exc)
            print(theme.err(f"encrypt-file failed: {message}"))
            _notify("encrypt-file", success=False, error=message)
            return 1
        print(theme.ok(f"Wrote {out_path}"))
        print(f"IV: {iv}")
        print(f"Metadata: {token}")
        print(theme.warn("Keep the password, IV and metadata: without them the file cannot be restored."))
        _notify("encrypt-file", success=True)
        return 0

    if args.command == "decrypt-file":
        try:
            with _warnings_module.catch_warnings(record=True) as caught:
                _warnings_module.simplefilter("always", MetadataWarning)
                out_path = cipherdesk.decrypt_path(
                    args.path,
                    args.password,
                    args.iv,
                    args.mode,
                    args.meta,
                    output=args.output,
                    padding=args.padding
                )
        except CipherdeskError as exc:
            print(theme.err(f"decrypt-file failed: {exc.message}"))
            _notify("decrypt-file", success=False, error=exc.message)
            return 1
        except OSError as exc:
            message = f"{exc.strerror or exc}: {exc.filename}" if exc.filename else str(exc)
            print(theme.err(f"decrypt-file failed: {message}"))
            _notify("decrypt-file", success=False, error=message)
            return 1
        for warning in caught:
            print(theme.warn(str(warning.message)))
        print(theme.ok(f"Wrote {out_path}"))
        _notify("decrypt-file", success=True)
        return 0

    if args.command in ("encode", "decode"):
        encoder, decoder = cipherdesk.CODECS[args.codec]
        func = getattr(cipherdesk, encoder if args.command == "encode" else decoder)
        try:
            print(func(args.text))
        except CipherdeskError as exc:
            print(theme.err(f"{args.command} failed: {exc.message}"))
            return 1
        return 0

    return 0


def main(argv=None) -> int:
    try:
        return cli(argv)
    except KeyboardInterrupt:
        print("Exiting...")
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
