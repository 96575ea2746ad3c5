"""
RSA-SHA1 signature method for OAuth 1.0a requests.

Signs the same signature base string as HMAC-SHA1, but with an RSA private
key (RSASSA-PKCS1-v1_5 over SHA-1). The service provider verifies with the
consumer's registered public key, so no token secret enters the signature.
"""

import base64
from typing import Optional

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa


def generate_key_pair(key_size: int = 2048) -> tuple[bytes, bytes]:
    """
    Generate an RSA key pair for RSA-SHA1 signing.

    Args:
        key_size: Key size in bits (2048, 3072, 4096)

    Returns:
        Tuple of (private_key_pem, public_key_pem) as bytes

    Raises:
        ValueError: If an unsupported key size is specified
    """
    if key_size not in (2048, 3072, 4096):
        raise ValueError(f"Invalid RSA key size: {key_size}. Use 2048, 3072, or 4096.")

    private_key = rsa.generate_private_key(
        public_exponent=65537,
        key_size=key_size,
    )

    private_key_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_key_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )

    return private_key_pem, public_key_pem


def compute_rsa_sha1_signature(
    base_string: str,
    private_key_pem: bytes,
    encoding: str = "utf-8",
) -> str:
    """
    Sign an OAuth signature base string with an RSA private key.

    Args:
        base_string: The signature base string
        private_key_pem: PEM-encoded RSA private key
        encoding: Text encoding (default: utf-8)

    Returns:
        Base64-encoded signature

    Raises:
        ValueError: If the key is not an RSA private key
    """
    private_key = serialization.load_pem_private_key(private_key_pem, password=None)
    if not isinstance(private_key, rsa.RSAPrivateKey):
        raise ValueError("Key type mismatch: expected RSA private key")

    signature = private_key.sign(
        base_string.encode(encoding),
        padding.PKCS1v15(),
        hashes.SHA1(),
    )
    return base64.b64encode(signature).decode("ascii")


def verify_rsa_sha1_signature(
    base_string: str,
    public_key_pem: bytes,
    signature: str,
    encoding: str = "utf-8",
) -> tuple[bool, Optional[str]]:
    """
    Verify an RSA-SHA1 signature over a signature base string.

    Args:
        base_string: The signature base string
        public_key_pem: PEM-encoded RSA public key
        signature: Base64-encoded signature to verify
        encoding: Text encoding (default: utf-8)

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        public_key = serialization.load_pem_public_key(public_key_pem)
        if not isinstance(public_key, rsa.RSAPublicKey):
            return False, "Key type mismatch: expected RSA public key"

        public_key.verify(
            base64.b64decode(signature),
            base_string.encode(encoding),
            padding.PKCS1v15(),
            hashes.SHA1(),
        )
        return True, None

    except Exception as e:
        return False, f"Signature verification failed: {str(e)}"
