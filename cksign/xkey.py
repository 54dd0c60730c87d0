#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# xkey.py
#
# Extended key serialization: the 78-byte binary record from BIP-32.
#
#   prefix(4) | depth(1) | parent fingerprint(4) | child number(4) | chain code(32) | key(33)
#
import base58
from io import BytesIO
from typing import Union

from cksign.bip32 import PrvKeyNode, PubKeyNode, Prv_or_PubKeyNode
from cksign.compat import CT_priv_to_pubkey, CT_pubkey_check
from cksign.constants import EXTENDED_KEY_SIZE, DEFAULT_NETWORK
from cksign.exceptions import InvalidExtendedKey, MalformedInput, PreconditionViolation
from cksign.utils import big_endian_to_int, int_to_big_endian, read_exact


class ExtendedKeySerializer:
    #
    # Encode/decode hierarchical keys for one network. Prefix bytes come
    # from the network given to constructor, never from globals.
    #
    def __init__(self, network=DEFAULT_NETWORK):
        hd_priv = getattr(network, 'hd_priv', None)
        hd_pub = getattr(network, 'hd_pub', None)
        if not hd_priv or not hd_pub:
            raise PreconditionViolation('Network not configured for HD wallets')
        if len(hd_priv) != 4 or len(hd_pub) != 4 or hd_priv == hd_pub:
            raise PreconditionViolation('Network HD version bytes are invalid')

        self.network = network
        self.hd_priv = bytes(hd_priv)
        self.hd_pub = bytes(hd_pub)

    def __repr__(self):
        return '<%s %s>' % (self.__class__.__name__, getattr(self.network, 'name', '?'))

    def serialize(self, key: Prv_or_PubKeyNode) -> bytes:
        """
        Serializes private/public key node to extended key format.

        :param key: node to serialize
        :return: 78 bytes
        """
        if key.is_private():
            prefix, data = self.hd_priv, b'\x00' + key.key
        else:
            prefix, data = self.hd_pub, key.sec()

        # 4 byte: version bytes
        result = prefix
        # 1 byte: depth: 0x00 for master nodes, 0x01 for level-1 derived keys
        result += int_to_big_endian(key.depth, 1)
        # 4 bytes: the fingerprint of the parent key (0x00000000 if master key)
        result += key.parent_fingerprint
        # 4 bytes: child number. This is ser32(i) for i in xi = xpar/i,
        # with xi the key being serialized. (0x00000000 if master key)
        result += int_to_big_endian(key.index, 4)
        # 32 bytes: the chain code
        result += key.chain_code
        # 33 bytes: the public key or private key data
        # (serP(K) for public keys, 0x00 || ser256(k) for private keys)
        result += data

        assert len(result) == EXTENDED_KEY_SIZE
        return result

    def from_parser(self, s: BytesIO) -> Prv_or_PubKeyNode:
        """
        Reads one extended key from a stream. Stream is left just past it.

        :param s: serialized node buffer
        :return: public/private key node
        """
        try:
            version = read_exact(s, 4)
            depth = big_endian_to_int(read_exact(s, 1))
            parent_fingerprint = read_exact(s, 4)
            index = big_endian_to_int(read_exact(s, 4))
            chain_code = read_exact(s, 32)
            key_data = read_exact(s, 33)
        except MalformedInput:
            raise MalformedInput('Failed to extract HierarchicalKey from parser')

        if version == self.hd_priv:
            if key_data[0] != 0:
                raise InvalidExtendedKey('Private key data must start with 0x00')
            try:
                CT_priv_to_pubkey(key_data[1:])
            except ValueError:
                raise InvalidExtendedKey('Private key out of range')
            cls, key = PrvKeyNode, key_data[1:]

        elif version == self.hd_pub:
            try:
                key = CT_pubkey_check(key_data)
            except ValueError:
                raise InvalidExtendedKey('Public key is not on curve')
            if key != key_data:
                # uncompressed keys cannot fit, so this is a bad prefix byte
                raise InvalidExtendedKey('Public key must be compressed')
            cls = PubKeyNode

        else:
            raise InvalidExtendedKey('Unknown extended key version: ' + version.hex())

        return cls(key=key, chain_code=chain_code, index=index, depth=depth,
                    parent_fingerprint=parent_fingerprint)

    def parse(self, data: Union[str, bytes]) -> Prv_or_PubKeyNode:
        """
        Decode from 156 hex digits or 78 raw bytes.

        :param data: serialized node, as hex or bytes
        :return: public/private key node
        """
        if isinstance(data, str):
            if len(data) != EXTENDED_KEY_SIZE * 2:
                raise InvalidExtendedKey('Invalid extended key')
            try:
                data = bytes.fromhex(data)
            except ValueError:
                raise InvalidExtendedKey('Invalid extended key: not hex')
        elif isinstance(data, (bytes, bytearray)):
            if len(data) != EXTENDED_KEY_SIZE:
                raise InvalidExtendedKey('Invalid extended key')
        else:
            raise ValueError("has to be bytes or str")

        return self.from_parser(BytesIO(data))

    def to_string(self, key: Prv_or_PubKeyNode) -> str:
        # Base58 encodes serialized key node: xpub/xprv/tpub/tprv
        return base58.b58encode_check(self.serialize(key)).decode('ascii')

    def from_string(self, text: str) -> Prv_or_PubKeyNode:
        try:
            raw = base58.b58decode_check(text.strip())
        except ValueError as exc:
            raise InvalidExtendedKey(f'Bad base58 extended key: {exc}')
        return self.parse(raw)

    def decode_any(self, text: str) -> Prv_or_PubKeyNode:
        # accept either hex or base58 forms (from command line, etc)
        text = text.strip()
        if len(text) == EXTENDED_KEY_SIZE * 2 and all(c in '0123456789abcdefABCDEF' for c in text):
            return self.parse(text)
        return self.from_string(text)

# EOF
