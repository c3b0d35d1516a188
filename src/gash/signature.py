"""
Signature matching against raw SHA-1 digests.

A signature is a hex string the commit hash must start (or end) with. Hex
encodes one nibble per character, so an odd-length signature cannot be
compared against raw digest bytes directly: the even part is compared as
bytes and the leftover character is checked against a single nibble.

The variant is chosen once in ``SignatureMatcher.compile`` so the hot loop
never re-branches on parity or orientation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from .exceptions import InvalidSignatureError

# SHA-1 digests are 20 bytes, 40 hex characters.
DIGEST_SIZE = 20
MAX_SIGNATURE_LENGTH = DIGEST_SIZE * 2

HEX_CHARACTERS = frozenset("0123456789abcdef")


class Orientation(Enum):
    """Where the signature must appear in the hash."""

    PREFIX = "prefix"
    SUFFIX = "suffix"


def validate_signature(signature: str) -> str:
    """Check that a signature can possibly appear in a SHA-1 hash.

    Args:
        signature: Candidate signature

    Returns:
        The signature unchanged

    Raises:
        InvalidSignatureError: If the signature is too long or not lowercase hex
    """
    if len(signature) > MAX_SIGNATURE_LENGTH:
        raise InvalidSignatureError(
            f"Signature cannot exceed {MAX_SIGNATURE_LENGTH} characters in length!"
        )
    if any(ch not in HEX_CHARACTERS for ch in signature):
        raise InvalidSignatureError(
            f"Signature may only contain [a-z0-9] characters! Got: {signature}"
        )
    return signature


class SignatureMatcher(ABC):
    """Predicate over raw digest bytes."""

    signature: str
    orientation: Orientation

    @classmethod
    def compile(
        cls, signature: str, orientation: Orientation = Orientation.PREFIX
    ) -> "SignatureMatcher":
        """Build the matcher variant for a signature.

        Raises:
            InvalidSignatureError: If the signature is malformed
        """
        validate_signature(signature)

        if len(signature) % 2 == 0:
            chunk = bytes.fromhex(signature)
            if orientation is Orientation.PREFIX:
                return EvenPrefixMatcher(signature, orientation, chunk)
            return EvenSuffixMatcher(signature, orientation, chunk)

        if orientation is Orientation.PREFIX:
            chunk = bytes.fromhex(signature[:-1])
            return OddPrefixMatcher(
                signature, orientation, chunk, int(signature[-1], 16)
            )

        chunk = bytes.fromhex(signature[1:])
        return OddSuffixMatcher(signature, orientation, chunk, int(signature[0], 16))

    @abstractmethod
    def matches(self, digest: bytes) -> bool:
        """Return True if the raw digest carries the signature."""

    def matches_hex(self, hexdigest: str) -> bool:
        """Return True if a hex encoded digest carries the signature."""
        if self.orientation is Orientation.PREFIX:
            return hexdigest.startswith(self.signature)
        return hexdigest.endswith(self.signature)


@dataclass(frozen=True)
class EvenPrefixMatcher(SignatureMatcher):
    signature: str
    orientation: Orientation
    chunk: bytes

    def matches(self, digest: bytes) -> bool:
        return digest.startswith(self.chunk)


@dataclass(frozen=True)
class EvenSuffixMatcher(SignatureMatcher):
    signature: str
    orientation: Orientation
    chunk: bytes

    def matches(self, digest: bytes) -> bool:
        return digest.endswith(self.chunk)


@dataclass(frozen=True)
class OddPrefixMatcher(SignatureMatcher):
    """Even chunk leads the digest, next byte's high nibble is ``nibble``."""

    signature: str
    orientation: Orientation
    chunk: bytes
    nibble: int

    def matches(self, digest: bytes) -> bool:
        if not digest.startswith(self.chunk):
            return False
        index = len(self.chunk)
        return index < len(digest) and digest[index] >> 4 == self.nibble


@dataclass(frozen=True)
class OddSuffixMatcher(SignatureMatcher):
    """Even chunk trails the digest, previous byte's low nibble is ``nibble``."""

    signature: str
    orientation: Orientation
    chunk: bytes
    nibble: int

    def matches(self, digest: bytes) -> bool:
        if not digest.endswith(self.chunk):
            return False
        index = len(digest) - len(self.chunk) - 1
        return index >= 0 and digest[index] & 0x0F == self.nibble
