import base64
import json
import os
import subprocess
import sys
import unittest
import warnings
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

try:
    from cryptography.hazmat.primitives import padding as crypto_padding
    from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

    from cipherdesk.main import cipherdesk
    from cipherdesk.errors import (
        CompatibilityWarning,
        ErrorKind,
        IVFormatError,
        InputValidationError,
        MetadataParseError,
        UnknownError,
    )
    from cipherdesk.models import CipherMode, Err, FileMetadata, HashAlgorithm, PaddingPolicy
except ModuleNotFoundError as exc:  # pragma: no cover - dependency missing
    cipherdesk = None
    _IMPORT_ERROR = exc
else:
    _IMPORT_ERROR = None


FIXED_IV = "000102030405060708090a0b0c0d0e0f"
STREAM_MODES = ("CFB", "CTR", "OFB")
IV_MODES = ("CBC",) + STREAM_MODES


@unittest.skipIf(cipherdesk is None, f"dependency unavailable: {_IMPORT_ERROR}")
class CipherEngineTests(unittest.TestCase):
    """AES text transforms: round trips, IV handling, padding policy, failure kinds."""

    def test_hello_world_scenario(self):
        result = cipherdesk.encrypt("hello world", "mysecretkey", "CBC")
        self.assertTrue(result.success)
        self.assertIsNone(result.error)
        decrypted = cipherdesk.decrypt(result.ciphertext, "mysecretkey", "CBC", result.iv)
        self.assertTrue(decrypted.success)
        self.assertEqual(decrypted.plaintext, "hello world")

    def test_roundtrip_all_iv_modes(self):
        samples = ["a", "exactly sixteen!", "Grüße aus Köln · ünïcödé ✓", "x" * 1000]
        for mode in IV_MODES:
            for text in samples:
                with self.subTest(mode=mode, length=len(text)):
                    enc = cipherdesk.encrypt(text, "k3y", mode)
                    self.assertTrue(enc.success, enc.error)
                    dec = cipherdesk.decrypt(enc.ciphertext, "k3y", mode, enc.iv)
                    self.assertEqual(dec.plaintext, text)

    def test_ecb_ignores_iv(self):
        first = cipherdesk.encrypt("ecb payload", "key", "ECB", FIXED_IV)
        second = cipherdesk.encrypt("ecb payload", "key", "ECB", "ff" * 16)
        self.assertEqual(first.ciphertext, second.ciphertext)
        for iv in (None, "", "ff" * 16, "not-hex-at-all"):
            with self.subTest(iv=iv):
                dec = cipherdesk.decrypt(first.ciphertext, "key", "ECB", iv)
                self.assertTrue(dec.success, dec.error)
                self.assertEqual(dec.plaintext, "ecb payload")

    def test_iv_is_always_sixteen_bytes_of_lowercase_hex(self):
        for mode in CipherMode:
            with self.subTest(mode=mode):
                result = cipherdesk.encrypt("iv check", "key", mode)
                self.assertEqual(len(result.iv), 32)
                self.assertEqual(result.iv, result.iv.lower())
                self.assertEqual(len(bytes.fromhex(result.iv)), 16)

    def test_supplied_iv_is_echoed_and_deterministic(self):
        first = cipherdesk.encrypt("same input", "key", "CBC", FIXED_IV.upper())
        second = cipherdesk.encrypt("same input", "key", "CBC", bytes.fromhex(FIXED_IV))
        self.assertEqual(first.iv, FIXED_IV)
        self.assertEqual(first.ciphertext, second.ciphertext)
        again = cipherdesk.decrypt(first.ciphertext, "key", "CBC", FIXED_IV)
        self.assertEqual(again, cipherdesk.decrypt(first.ciphertext, "key", "CBC", FIXED_IV))

    def test_generated_ivs_differ(self):
        first = cipherdesk.encrypt("fresh", "key", "CBC")
        second = cipherdesk.encrypt("fresh", "key", "CBC")
        self.assertNotEqual(first.iv, second.iv)
        self.assertNotEqual(first.ciphertext, second.ciphertext)

    def test_ciphertext_matches_raw_key_aes(self):
        result = cipherdesk.encrypt("compat check", "mysecretkey", "CBC", FIXED_IV)
        key = b"mysecretkey".ljust(16, b"\x00")
        padder = crypto_padding.PKCS7(128).padder()
        data = padder.update(b"compat check") + padder.finalize()
        encryptor = Cipher(algorithms.AES(key), modes.CBC(bytes.fromhex(FIXED_IV))).encryptor()
        expected = encryptor.update(data) + encryptor.finalize()
        self.assertEqual(base64.b64decode(result.ciphertext), expected)

    def test_key_sizes(self):
        for key in ("k" * 16, "k" * 17, "k" * 24, "k" * 32, b"\x01\x02\x03"):
            with self.subTest(length=len(key)):
                enc = cipherdesk.encrypt("sized", key, "CTR")
                self.assertTrue(enc.success, enc.error)
                self.assertEqual(cipherdesk.decrypt(enc.ciphertext, key, "CTR", enc.iv).plaintext, "sized")
        too_long = cipherdesk.encrypt("sized", "k" * 33, "CBC")
        self.assertFalse(too_long.success)
        self.assertEqual(too_long.kind, ErrorKind.CIPHER)

    def test_empty_inputs_fail_validation(self):
        for plaintext, key in (("", "key"), ("text", ""), (None, "key")):
            with self.subTest(plaintext=plaintext, key=key):
                result = cipherdesk.encrypt(plaintext, key, "CBC")
                self.assertFalse(result.success)
                self.assertEqual(result.kind, ErrorKind.INPUT_VALIDATION)
                self.assertTrue(result.error)
        result = cipherdesk.decrypt("", "key", "CBC", FIXED_IV)
        self.assertEqual(result.kind, ErrorKind.INPUT_VALIDATION)

    def test_unsupported_mode_is_cipher_error(self):
        result = cipherdesk.encrypt("text", "key", "GCM")
        self.assertFalse(result.success)
        self.assertEqual(result.kind, ErrorKind.CIPHER)
        self.assertIn("GCM", result.error)

    def test_lowercase_mode_is_accepted(self):
        enc = cipherdesk.encrypt("modes", "key", "ofb")
        self.assertTrue(enc.success)
        self.assertEqual(cipherdesk.decrypt(enc.ciphertext, "key", CipherMode.OFB, enc.iv).plaintext, "modes")

    def test_missing_iv_on_decrypt_is_iv_format_error(self):
        for mode in IV_MODES:
            enc = cipherdesk.encrypt("needs iv", "key", mode)
            for bad_iv in (None, "", "abc", "zz" * 16, "00" * 15, b"\x00" * 8):
                with self.subTest(mode=mode, iv=bad_iv):
                    result = cipherdesk.decrypt(enc.ciphertext, "key", mode, bad_iv)
                    self.assertFalse(result.success)
                    self.assertEqual(result.kind, ErrorKind.IV_FORMAT)
                    with self.assertRaises(IVFormatError):
                        result.raise_for_error()

    def test_malformed_iv_on_encrypt_is_iv_format_error(self):
        result = cipherdesk.encrypt("text", "key", "CBC", "1234")
        self.assertEqual(result.kind, ErrorKind.IV_FORMAT)

    def test_wrong_key_stream_modes_yield_garbage(self):
        for mode in STREAM_MODES:
            with self.subTest(mode=mode):
                enc = cipherdesk.encrypt("the quick brown fox", "right key", mode, FIXED_IV, padding="block")
                dec = cipherdesk.decrypt(enc.ciphertext, "wrong key", mode, FIXED_IV, padding="block")
                self.assertTrue(dec.success)
                self.assertNotEqual(dec.plaintext, "the quick brown fox")

    def test_wrong_key_block_modes_hit_padding_check(self):
        original = "attack at dawn, bring the files"
        for mode in ("CBC", "ECB"):
            enc = cipherdesk.encrypt(original, "correct horse", mode, FIXED_IV)
            padding_failures = 0
            for index in range(8):
                dec = cipherdesk.decrypt(enc.ciphertext, f"wrong-key-{index}", mode, FIXED_IV)
                if dec.success:
                    self.assertNotEqual(dec.plaintext, original)
                else:
                    self.assertEqual(dec.kind, ErrorKind.CIPHER)
                    padding_failures += 1
            with self.subTest(mode=mode):
                self.assertGreater(padding_failures, 0)

    def test_corrupted_ciphertext(self):
        result = cipherdesk.decrypt("***not base64***", "key", "CBC", FIXED_IV)
        self.assertEqual(result.kind, ErrorKind.CIPHER)
        short = base64.b64encode(b"\x00" * 10).decode()
        result = cipherdesk.decrypt(short, "key", "CBC", FIXED_IV)
        self.assertEqual(result.kind, ErrorKind.CIPHER)

    def test_block_only_padding_keeps_stream_length(self):
        enc = cipherdesk.encrypt("hello world", "key", "CTR", FIXED_IV, padding=PaddingPolicy.PAD_BLOCK_MODES_ONLY)
        self.assertEqual(len(base64.b64decode(enc.ciphertext)), len("hello world"))
        enc = cipherdesk.encrypt("hello world", "key", "CBC", FIXED_IV, padding="block")
        self.assertEqual(len(base64.b64decode(enc.ciphertext)), 16)

    def test_pad_always_compatibility_shim(self):
        with self.assertWarns(CompatibilityWarning):
            enc = cipherdesk.encrypt("hello world", "key", "OFB", FIXED_IV, padding="always")
        self.assertEqual(len(base64.b64decode(enc.ciphertext)) % 16, 0)
        dec = cipherdesk.decrypt(enc.ciphertext, "key", "OFB", FIXED_IV, padding="always")
        self.assertEqual(dec.plaintext, "hello world")

    def test_unknown_padding_policy(self):
        result = cipherdesk.encrypt("text", "key", "CBC", padding="sometimes")
        self.assertEqual(result.kind, ErrorKind.INPUT_VALIDATION)

    def test_json_bundle_roundtrip(self):
        enc = cipherdesk.encrypt("bundled", "key", "CFB")
        bundle = cipherdesk.export_bundle(enc, "CFB")
        data = json.loads(bundle)
        self.assertEqual(data, {"ciphertext": enc.ciphertext, "iv": enc.iv, "mode": "CFB"})
        dec = cipherdesk.decrypt(bundle, "key")
        self.assertTrue(dec.success, dec.error)
        self.assertEqual(dec.plaintext, "bundled")

    def test_parse_bundle_rejects_non_bundles(self):
        self.assertIsNone(cipherdesk.parse_bundle("plain base64"))
        self.assertIsNone(cipherdesk.parse_bundle("{not json"))
        self.assertIsNone(cipherdesk.parse_bundle('{"ciphertext": "abc"}'))
        self.assertEqual(
            cipherdesk.parse_bundle('{"ciphertext": "abc", "iv": "def"}'),
            ("abc", "def", None),
        )


@unittest.skipIf(cipherdesk is None, f"dependency unavailable: {_IMPORT_ERROR}")
class DigestEngineTests(unittest.TestCase):
    def test_empty_string_vectors(self):
        vectors = {
            "MD5": "d41d8cd98f00b204e9800998ecf8427e",
            "SHA1": "da39a3ee5e6b4b0d3255bfef95601890afd80709",
            "SHA256": "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855",
            "SHA512": (
                "cf83e1357eefb8bdf1542850d66d8007d620e4050b5715dc83f4a921d36ce9ce"
                "47d0d13c5d85f2b0ff8318d2877eec2f63b931bd47417a81a538327af927da3e"
            ),
        }
        for algorithm, expected in vectors.items():
            with self.subTest(algorithm=algorithm):
                result = cipherdesk.hash("", algorithm)
                self.assertTrue(result.success)
                self.assertEqual(result.digest, expected)

    def test_abc_vectors(self):
        self.assertEqual(cipherdesk.hash("abc", "MD5").digest, "900150983cd24fb0d6963f7d28e17f72")
        self.assertEqual(
            cipherdesk.hash("abc", "SHA256").digest,
            "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad",
        )

    def test_digest_lengths_and_determinism(self):
        for algorithm in HashAlgorithm:
            with self.subTest(algorithm=algorithm):
                first = cipherdesk.hash("cipherdesk", algorithm)
                second = cipherdesk.hash("cipherdesk", algorithm)
                self.assertEqual(first.digest, second.digest)
                self.assertEqual(len(first.digest), algorithm.hex_length)
                self.assertIs(first.algorithm, algorithm)

    def test_algorithm_spellings(self):
        self.assertEqual(cipherdesk.hash("x", "sha-256").digest, cipherdesk.hash("x", "SHA256").digest)
        self.assertEqual(cipherdesk.hash("x", "sha1").digest, cipherdesk.hash("x", HashAlgorithm.SHA1).digest)

    def test_unsupported_algorithm(self):
        result = cipherdesk.hash("text", "SHA3")
        self.assertFalse(result.success)
        self.assertEqual(result.kind, ErrorKind.INPUT_VALIDATION)
        with self.assertRaises(InputValidationError):
            result.raise_for_error()

    def test_hmac_vectors(self):
        sha256 = cipherdesk.hmac("what do ya want for nothing?", "Jefe", "SHA256")
        self.assertEqual(
            sha256.digest,
            "5bdcc146bf60754e6a042426089575c75a003f089d2739839dec58b964ec3843",
        )
        md5 = cipherdesk.hmac("what do ya want for nothing?", "Jefe", "MD5")
        self.assertEqual(md5.digest, "750c783e6ab0b503eaa86e310a5db738")

    def test_hmac_requires_key(self):
        result = cipherdesk.hmac("text", "", "SHA256")
        self.assertEqual(result.kind, ErrorKind.INPUT_VALIDATION)

    def test_unexpected_failure_maps_to_unknown(self):
        result = cipherdesk.hmac("text", 12345, "SHA256")
        self.assertFalse(result.success)
        self.assertEqual(result.kind, ErrorKind.UNKNOWN)
        self.assertTrue(result.error)
        with self.assertRaises(UnknownError):
            result.raise_for_error()
        with self.assertRaises(UnknownError) as ctx:
            Err(ErrorKind.UNKNOWN, "boom").raise_for_error()
        self.assertEqual(ctx.exception.message, "boom")
        self.assertIsInstance(ctx.exception, RuntimeError)


@unittest.skipIf(cipherdesk is None, f"dependency unavailable: {_IMPORT_ERROR}")
class MetadataCodecTests(unittest.TestCase):
    def test_token_is_base64_json(self):
        token = cipherdesk.encode_metadata(FileMetadata("pdf", "application/pdf"))
        self.assertEqual(
            json.loads(base64.b64decode(token)),
            {"ext": "pdf", "type": "application/pdf"},
        )
        self.assertEqual(cipherdesk.decode_metadata(token), FileMetadata("pdf", "application/pdf"))

    def test_empty_fields_roundtrip(self):
        token = cipherdesk.encode_metadata(FileMetadata())
        self.assertEqual(cipherdesk.decode_metadata(token), FileMetadata("", ""))

    def test_missing_keys_default_to_empty(self):
        token = base64.b64encode(b'{"type":"text/plain"}').decode()
        self.assertEqual(cipherdesk.decode_metadata(token), FileMetadata("", "text/plain"))

    def test_malformed_tokens(self):
        bad_tokens = [
            "",
            "!!!not-base64!!!",
            base64.b64encode(b"not json").decode(),
            base64.b64encode(b"[1, 2]").decode(),
            base64.b64encode(b'{"ext": 1, "type": "x"}').decode(),
            base64.b64encode(b"\xff\xfe").decode(),
        ]
        for token in bad_tokens:
            with self.subTest(token=token):
                with self.assertRaises(MetadataParseError):
                    cipherdesk.decode_metadata(token)

    def test_resolve_mime_type_soft_fails(self):
        self.assertEqual(cipherdesk.resolve_mime_type(None), "application/octet-stream")
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            self.assertEqual(cipherdesk.resolve_mime_type("garbage"), "application/octet-stream")


@unittest.skipIf(cipherdesk is None, f"dependency unavailable: {_IMPORT_ERROR}")
class TextCodecTests(unittest.TestCase):
    def test_base64(self):
        self.assertEqual(cipherdesk.b64encode("héllo"), "aMOpbGxv")
        self.assertEqual(cipherdesk.b64decode("aMOpbGxv"), "héllo")
        with self.assertRaises(InputValidationError):
            cipherdesk.b64decode("%%%")

    def test_url(self):
        self.assertEqual(cipherdesk.url_encode("a b&c/d"), "a%20b%26c%2Fd")
        self.assertEqual(cipherdesk.url_encode("!*'()-_.~"), "!*'()-_.~")
        self.assertEqual(cipherdesk.url_decode("a%20b%26c%2Fd"), "a b&c/d")
        with self.assertRaises(InputValidationError):
            cipherdesk.url_decode("%E0%A4%A")

    def test_hex(self):
        self.assertEqual(cipherdesk.hex_encode("Hi"), "4869")
        self.assertEqual(cipherdesk.hex_decode("4869"), "Hi")
        with self.assertRaises(InputValidationError):
            cipherdesk.hex_decode("4g")

    def test_binary(self):
        self.assertEqual(cipherdesk.binary_encode("Hi"), "01001000 01101001")
        self.assertEqual(cipherdesk.binary_decode("01001000 01101001"), "Hi")
        with self.assertRaises(InputValidationError):
            cipherdesk.binary_decode("0102")


@unittest.skipIf(cipherdesk is None, f"dependency unavailable: {_IMPORT_ERROR}")
class PackageSurfaceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.repo_root = REPO_ROOT

    def _run_cli(self, *args: str) -> subprocess.CompletedProcess:
        env = os.environ.copy()
        env["CIPHERDESK_CLI_PLAIN"] = "1"
        env["PYTHONPATH"] = os.pathsep.join(
            filter(None, [str(self.repo_root), env.get("PYTHONPATH")])
        )
        return subprocess.run(
            [sys.executable, "-m", "cipherdesk", *args],
            cwd=self.repo_root,
            capture_output=True,
            text=True,
            env=env,
        )

    def test_module_level_wrappers(self):
        import cipherdesk as package

        enc = package.encrypt("wrapped", "key", "CTR")
        self.assertEqual(package.decrypt(enc.ciphertext, "key", "CTR", enc.iv).plaintext, "wrapped")
        self.assertEqual(package.md5("").digest, "d41d8cd98f00b204e9800998ecf8427e")
        self.assertEqual(package.__version__, cipherdesk.ENGINE_VERSION)

    def test_cli_module_smoke(self):
        proc = self._run_cli("hash", "", "-a", "md5")
        self.assertEqual(proc.returncode, 0, proc.stderr)
        self.assertEqual(proc.stdout.strip(), "d41d8cd98f00b204e9800998ecf8427e")


if __name__ == "__main__":
    unittest.main()
