#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# signature.py
#
# Transaction signatures: DER encoded ECDSA plus one byte of sighash type.
#
from cksign.compat import CT_sig_to_der, CT_der_to_sig
from cksign.constants import N, SIGHASH_ALL, SIGHASH_SINGLE, SIGHASH_ANYONECANPAY
from cksign.exceptions import MalformedInput


class TransactionSignature:
    __slots__ = ('sig', 'hash_type', 'encoded')

    def __init__(self, sig: bytes, hash_type: int = SIGHASH_ALL, encoded: bytes = None):
        # sig is 64 bytes: r|s
        # encoded: bytes as found on the wire, if any; kept so encoding rules can be checked
        assert len(sig) == 64
        assert 0 <= hash_type <= 0xff
        self.sig = bytes(sig)
        self.hash_type = hash_type
        self.encoded = bytes(encoded) if encoded is not None else None

    @classmethod
    def parse(cls, raw: bytes) -> "TransactionSignature":
        # from the form found in script-sig/witness: DER + hashtype
        if len(raw) < 9:
            raise MalformedInput("Signature too short")
        try:
            sig = CT_der_to_sig(raw[:-1])
        except ValueError:
            raise MalformedInput("Signature is not DER encoded")
        return cls(sig, raw[-1], encoded=raw)

    def serialize(self) -> bytes:
        if self.encoded is not None:
            return self.encoded
        return CT_sig_to_der(self.sig) + bytes([self.hash_type])

    def equals(self, other) -> bool:
        return isinstance(other, TransactionSignature) \
                    and self.sig == other.sig and self.hash_type == other.hash_type

    __eq__ = equals

    def __hash__(self):
        return hash((self.sig, self.hash_type))

    def __repr__(self):
        return '<TransactionSignature %s..%s/0x%02x>' % (
                    self.sig[0:4].hex(), self.sig[-4:].hex(), self.hash_type)

    @property
    def s(self) -> int:
        return int.from_bytes(self.sig[32:], 'big')

    def is_low_s(self) -> bool:
        # BIP-62: s must be in lower half of group order
        return 0 < self.s <= N // 2


def is_defined_hashtype(raw: bytes) -> bool:
    # last byte of serialized signature must be a known sighash type
    if not raw:
        return False
    low = raw[-1] & ~SIGHASH_ANYONECANPAY
    return SIGHASH_ALL <= low <= SIGHASH_SINGLE


# A canonical signature exists of: <30> <total len> <02> <len R> <R> <02> <len S> <S> <hashtype>
# Where R and S are not negative (their first byte has its highest bit not set), and not
# excessively padded (do not start with a 0 byte, unless an otherwise negative number follows,
# in which case a single 0 byte is necessary and even required).
#
# This is consensus-critical since BIP66.
#
def is_valid_signature_encoding(sig: bytes) -> bool:
    # Minimum and maximum size constraints.
    if len(sig) < 9 or len(sig) > 73:
        return False

    # A signature is of type 0x30 (compound).
    if sig[0] != 0x30:
        return False

    # Make sure the length covers the entire signature.
    if sig[1] != len(sig) - 3:
        return False

    # Extract the length of the R element.
    lenR = sig[3]

    # Make sure the length of the S element is still inside the signature.
    if 5 + lenR >= len(sig):
        return False

    # Extract the length of the S element.
    lenS = sig[5 + lenR]

    # Verify that the length of the signature matches the sum of the length
    # of the elements.
    if (lenR + lenS + 7) != len(sig):
        return False

    # Check whether the R element is an integer.
    if sig[2] != 0x02:
        return False

    # Zero-length integers are not allowed for R.
    if lenR == 0:
        return False

    # Negative numbers are not allowed for R.
    if sig[4] & 0x80:
        return False

    # Null bytes at the start of R are not allowed, unless R would
    # otherwise be interpreted as a negative number.
    if lenR > 1 and sig[4] == 0x00 and (sig[5] & 0x80) == 0:
        return False

    # Check whether the S element is an integer.
    if sig[lenR + 4] != 0x02:
        return False

    # Zero-length integers are not allowed for S.
    if lenS == 0:
        return False

    # Negative numbers are not allowed for S.
    if sig[lenR + 6] & 0x80:
        return False

    # Null bytes at the start of S are not allowed, unless S would otherwise be
    # interpreted as a negative number.
    if lenS > 1 and sig[lenR + 6] == 0x00 and (not (sig[lenR + 7] & 0x80)):
        return False

    return True

# EOF
