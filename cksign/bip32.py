#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# BIP-32 hierarchical keys. Serialization lives in xkey.py
#
import hmac
import hashlib
from typing import Union, List

from cksign.constants import HARDENED, N
from cksign.compat import hash160, CT_priv_to_pubkey, CT_pubkey_tweak_add
from cksign.utils import big_endian_to_int, int_to_big_endian


Prv_or_PubKeyNode = Union["PrvKeyNode", "PubKeyNode"]


class InvalidKeyError(ValueError):
    """Raised when derived key is invalid"""


class PubKeyNode(object):

    mark: str = "M"

    __slots__ = (
        "parent",
        "key",
        "chain_code",
        "depth",
        "index",
        "parsed_parent_fingerprint",
    )

    def __init__(self, key: bytes, chain_code: bytes, index: int = 0,
                 depth: int = 0, parent: Prv_or_PubKeyNode = None,
                 parent_fingerprint: bytes = None):
        """
        Initializes Pub/PrvKeyNode.

        :param key: public (33 bytes, compressed) or private (32 bytes) key
        :param chain_code: chain code
        :param index: current node derivation index (default=0)
        :param depth: current node depth (default=0)
        :param parent: parent node of the current node (default=None)
        :param parent_fingerprint: fingerprint of parent node (default=None)
        """
        assert len(chain_code) == 32
        assert 0 <= depth <= 255
        assert 0 <= index <= 0xffff_ffff
        self.parent = parent
        self.key = bytes(key)
        self.chain_code = bytes(chain_code)
        self.depth = depth
        self.index = index
        self.parsed_parent_fingerprint = parent_fingerprint

    def __eq__(self, other) -> bool:
        """
        Checks whether two private/public key nodes are equal.

        :param other: other private/public key node
        """
        if type(self) != type(other):
            return False
        return self.key == other.key and \
            self.chain_code == other.chain_code and \
            self.depth == other.depth and \
            self.index == other.index and \
            self.parent_fingerprint == other.parent_fingerprint

    @property
    def parent_fingerprint(self) -> bytes:
        """
        Gets parent fingerprint.

        If node is parsed from extended key, only parsed parent fingerprint
        is available. If node is derived, parent fingerprint is calculated
        from parent node.

        :return: parent fingerprint
        """
        if self.parent:
            fingerprint = self.parent.fingerprint()
        else:
            fingerprint = self.parsed_parent_fingerprint
        # in case there is still None here - it is master
        return fingerprint or b"\x00\x00\x00\x00"

    def __repr__(self) -> str:
        if self.is_master() or self.is_root():
            return self.mark
        if self.is_hardened():
            index = str(self.index - HARDENED) + "'"
        else:
            index = str(self.index)
        parent = str(self.parent) if self.parent else self.mark
        return parent + "/" + index

    def is_private(self) -> bool:
        return False

    def is_hardened(self) -> bool:
        """Check whether current key node is hardened."""
        return self.index >= HARDENED

    def is_master(self) -> bool:
        """Check whether current key node is master node."""
        return self.depth == 0 and self.index == 0 and self.parent is None

    def is_root(self) -> bool:
        """Check whether current key node is root (has no parent)."""
        return self.parent is None

    def sec(self) -> bytes:
        # compressed public key
        assert len(self.key) == 33
        return self.key

    def fingerprint(self) -> bytes:
        """
        Gets current node fingerprint.

        :return: first four bytes of RIPEMD160(SHA256(public key))
        """
        return hash160(self.sec())[:4]

    def public_node(self) -> "PubKeyNode":
        return self

    def ckd(self, index: int) -> "PubKeyNode":
        """
        The function CKDpub((Kpar, cpar), i) → (Ki, ci) computes a child
        extended public key from the parent extended public key.
        It is only defined for non-hardened child keys.

        * Check whether i ≥ 231 (whether the child is a hardened key).
        * If so (hardened child):
            return failure
        * If not (normal child):
            let I = HMAC-SHA512(Key=cpar, Data=serP(Kpar) || ser32(i)).
        * Split I into two 32-byte sequences, IL and IR.
        * The returned child key Ki is point(parse256(IL)) + Kpar.
        * The returned chain code ci is IR.
        * In case parse256(IL) ≥ n or Ki is the point at infinity,
            the resulting key is invalid, and one should proceed with the next
             value for i.

        :param index: derivation index
        :return: derived child
        """
        if index >= HARDENED:
            raise RuntimeError("failure: hardened child for public ckd")
        I = hmac.new(key=self.chain_code, msg=self.sec() + int_to_big_endian(index, 4),
                        digestmod=hashlib.sha512).digest()
        IL, IR = I[:32], I[32:]
        if big_endian_to_int(IL) >= N:
            raise InvalidKeyError(
                "public key {} is greater/equal to curve order".format(
                    big_endian_to_int(IL)
                )
            )
        try:
            Ki = CT_pubkey_tweak_add(self.sec(), IL)
        except ValueError:
            raise InvalidKeyError("public key is a point at infinity")
        return PubKeyNode(
            key=Ki,
            chain_code=IR,
            index=index,
            depth=self.depth + 1,
            parent=self
        )

    def derive_path(self, index_list: List[int]) -> Prv_or_PubKeyNode:
        """
        Derives node from current node.

        :param index_list: specific index list (or index path) for derivation
        :return: derived node
        """
        node = self
        for i in index_list:
            node = node.ckd(index=i)
        return node


class PrvKeyNode(PubKeyNode):

    mark: str = "m"

    def is_private(self) -> bool:
        return True

    def sec(self) -> bytes:
        # compressed public key for our private key
        assert len(self.key) == 32
        return CT_priv_to_pubkey(self.key)

    def public_node(self) -> PubKeyNode:
        # "neuter" to public node; keeps position in tree
        return PubKeyNode(key=self.sec(), chain_code=self.chain_code,
                          index=self.index, depth=self.depth,
                          parent=self.parent,
                          parent_fingerprint=self.parsed_parent_fingerprint)

    @classmethod
    def master_key(cls, bip39_seed: bytes) -> "PrvKeyNode":
        """
        Generates master private key node from bip39 seed.

        * Generate a seed byte sequence S (bip39_seed arg) of a chosen length
          (between 128 and 512 bits; 256 bits is advised) from a (P)RNG.
        * Calculate I = HMAC-SHA512(Key = "Bitcoin seed", Data = S)
        * Split I into two 32-byte sequences, IL and IR.
        * Use parse256(IL) as master secret key, and IR as master chain code.

        :param bip39_seed: bip39_seed
        :return: master private key node
        """
        I = hmac.new(key=b"Bitcoin seed", msg=bip39_seed, digestmod=hashlib.sha512).digest()
        # private key
        IL = I[:32]
        # In case IL is 0 or ≥ n, the master key is invalid
        int_left_key = big_endian_to_int(IL)
        if int_left_key == 0:
            raise InvalidKeyError("master key is zero")
        if int_left_key >= N:
            raise InvalidKeyError(
                "master key {} is greater/equal to curve order".format(
                    int_left_key
                )
            )
        # chain code
        IR = I[32:]
        return cls(key=IL, chain_code=IR)

    def ckd(self, index: int) -> "PrvKeyNode":
        """
        The function CKDpriv((kpar, cpar), i) → (ki, ci) computes
        a child extended private key from the parent extended private key:

        * Check whether i ≥ 2**31 (whether the child is a hardened key).
        * If so (hardened child):
            let I = HMAC-SHA512(Key=cpar, Data=0x00 || ser256(kpar) || ser32(i))
            (Note: The 0x00 pads the private key to make it 33 bytes long.)
        * If not (normal child):
            let I = HMAC-SHA512(Key=cpar, Data=serP(point(kpar)) || ser32(i))
        * Split I into two 32-byte sequences, IL and IR.
        * The returned child key ki is parse256(IL) + kpar (mod n).
        * The returned chain code ci is IR.
        * In case parse256(IL) ≥ n or ki = 0, the resulting key is invalid,
            and one should proceed with the next value for i.
            (Note: this has probability lower than 1 in 2**127.)

        :param index: derivation index
        :return: derived child
        """
        if index >= HARDENED:
            # hardened
            data = b"\x00" + self.key + int_to_big_endian(index, 4)
        else:
            data = self.sec() + int_to_big_endian(index, 4)
        I = hmac.new(key=self.chain_code, msg=data, digestmod=hashlib.sha512).digest()
        IL, IR = I[:32], I[32:]
        if big_endian_to_int(IL) >= N:
            raise InvalidKeyError(
                "private key {} is greater/equal to curve order".format(
                    big_endian_to_int(IL)
                )
            )
        ki = (big_endian_to_int(IL) + big_endian_to_int(self.key)) % N
        if ki == 0:
            raise InvalidKeyError("private key is zero")
        return PrvKeyNode(
            key=int_to_big_endian(ki, 32),
            chain_code=IR,
            index=index,
            depth=self.depth + 1,
            parent=self
        )

# EOF
