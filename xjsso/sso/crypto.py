import base64
from pathlib import Path
from typing import Optional

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from .errors import EncryptionError

RSA_PREFIX = "__RSA__"


def load_public_key(pem: bytes) -> rsa.RSAPublicKey:
    """
    Parse a PEM encoded SubjectPublicKeyInfo RSA key.
    """

    try:
        key = serialization.load_pem_public_key(pem)
    except ValueError as e:
        raise EncryptionError(f"Invalid public key: {e}") from e
    if not isinstance(key, rsa.RSAPublicKey):
        raise EncryptionError("Public key is not an RSA key")
    return key


def load_public_key_file(path: Path) -> rsa.RSAPublicKey:
    try:
        pem = path.read_bytes()
    except OSError as e:
        raise EncryptionError(f"Could not read public key from {str(path)!r}: {e}") from e
    return load_public_key(pem)


def require_public_key(public_key: Optional[rsa.RSAPublicKey]) -> rsa.RSAPublicKey:
    """
    xjsso does not ship the identity provider's key. A login without one would
    only be rejected by the provider after the fact, so refuse it up front.
    """

    if public_key is None:
        raise EncryptionError(
            "No public key configured. Save the RSA public key of the CAS login page "
            "as a PEM file and point the 'public_key' option or --public-key at it"
        )
    return public_key


def encrypt_password(password: str, public_key: rsa.RSAPublicKey) -> str:
    """
    Encrypt a password the way the CAS login page's scripts do:
    RSA with PKCS#1 v1.5 padding, standard base64, prefixed with "__RSA__".

    The padding is randomized, so every call yields a different string. The
    result belongs to exactly one login attempt.
    """

    try:
        ciphertext = public_key.encrypt(password.encode("utf-8"), padding.PKCS1v15())
    except ValueError as e:  # e. g. the password is too long for the key
        raise EncryptionError(f"Failed to encrypt password: {e}") from e
    return RSA_PREFIX + base64.b64encode(ciphertext).decode("ascii")
