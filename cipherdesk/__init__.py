from .main import *
from .api_files import (
    decode_metadata,
    decrypt_file,
    decrypt_path,
    encode_metadata,
    encrypt_file,
    encrypt_path,
)
from .api_strings import (
    b64decode,
    b64encode,
    binary_decode,
    binary_encode,
    decrypt,
    encrypt,
    export_bundle,
    hash,
    hex_decode,
    hex_encode,
    hmac,
    md5,
    parse_bundle,
    sha1,
    sha256,
    sha512,
    url_decode,
    url_encode,
)
from .errors import (
    CipherError,
    CipherdeskError,
    CompatibilityWarning,
    ErrorKind,
    InputValidationError,
    IVFormatError,
    MetadataParseError,
    MetadataWarning,
    UnknownError,
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
from .version import __version__
