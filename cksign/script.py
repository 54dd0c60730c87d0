#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# script.py
#
# Just enough bitcoin script to build/recognize the locking conditions we can sign.
#
import enum
import struct
from typing import List, Optional, Tuple

from cksign.constants import *
from cksign.compat import hash160, sha256s
from cksign.exceptions import MalformedInput, NonStandardScript
from cksign.utils import ser_string

# how an output is wrapped: decides sighash algo and where unlock data goes
INPUT_BARE = 'bare'
INPUT_P2SH = 'p2sh'
INPUT_P2WPKH = 'p2wpkh'
INPUT_P2WSH = 'p2wsh'
INPUT_P2SH_P2WPKH = 'p2sh-p2wpkh'
INPUT_P2SH_P2WSH = 'p2sh-p2wsh'

SEGWIT_INPUT_TYPES = { INPUT_P2WPKH, INPUT_P2WSH, INPUT_P2SH_P2WPKH, INPUT_P2SH_P2WSH }


class ScriptType(enum.Enum):
    # the locking conditions a Checksig step understands; closed set
    P2PK = 'pubkey'
    P2PKH = 'pubkeyhash'
    MULTISIG = 'multisig'


def push_data(data: bytes) -> bytes:
    # minimal push encoding
    n = len(data)
    if n == 0:
        return bytes([OP_0])
    if n == 1 and 1 <= data[0] <= 16:
        return bytes([OP_1 + data[0] - 1])
    if data == b'\x81':
        return bytes([OP_1NEGATE])
    if n < OP_PUSHDATA1:
        return bytes([n]) + data
    if n <= 0xff:
        return bytes([OP_PUSHDATA1, n]) + data
    if n <= 0xffff:
        return bytes([OP_PUSHDATA2]) + struct.pack('<H', n) + data
    return bytes([OP_PUSHDATA4]) + struct.pack('<I', n) + data

def small_int(op: int) -> Optional[int]:
    # value of OP_1..OP_16, else None
    if OP_1 <= op <= OP_16:
        return op - OP_1 + 1
    return None


class Script:
    __slots__ = ('raw',)

    def __init__(self, raw: bytes = b''):
        self.raw = bytes(raw)

    @classmethod
    def from_ops(cls, items) -> "Script":
        # ints are opcodes, bytes are data pushes
        rv = b''
        for i in items:
            if isinstance(i, int):
                rv += bytes([i])
            else:
                rv += push_data(bytes(i))
        return cls(rv)

    @classmethod
    def push_items(cls, items: List[bytes]) -> "Script":
        # script-sig style: only data pushes
        return cls(b''.join(push_data(i) for i in items))

    def __bytes__(self):
        return self.raw

    def __len__(self):
        return len(self.raw)

    def __eq__(self, other):
        if isinstance(other, Script):
            return self.raw == other.raw
        if isinstance(other, (bytes, bytearray)):
            return self.raw == other
        return NotImplemented

    def __hash__(self):
        return hash(self.raw)

    def __repr__(self):
        return 'Script(%s)' % self.raw.hex()

    def hex(self) -> str:
        return self.raw.hex()

    def serialize(self) -> bytes:
        # length-prefixed, as found inside transactions
        return ser_string(self.raw)

    def ops(self) -> List[Tuple[int, Optional[bytes]]]:
        # Parse into (opcode, pushed data) tuples; data is None for non-push opcodes
        rv = []
        raw = self.raw
        pos = 0
        while pos < len(raw):
            op = raw[pos]
            pos += 1
            if op <= OP_PUSHDATA4:
                if op < OP_PUSHDATA1:
                    n = op
                else:
                    width = { OP_PUSHDATA1: 1, OP_PUSHDATA2: 2, OP_PUSHDATA4: 4 }[op]
                    if pos + width > len(raw):
                        raise MalformedInput("Script truncated in push length")
                    n = int.from_bytes(raw[pos:pos+width], 'little')
                    pos += width
                if pos + n > len(raw):
                    raise MalformedInput("Script truncated in push data")
                rv.append((op, raw[pos:pos+n]))
                pos += n
            else:
                rv.append((op, None))
        return rv

    def stack_items(self) -> List[bytes]:
        # values a push-only script (ie. script-sig) leaves on the stack
        rv = []
        for op, data in self.ops():
            if data is not None:
                rv.append(data)
            elif small_int(op) is not None:
                rv.append(bytes([small_int(op)]))
            elif op == OP_1NEGATE:
                rv.append(b'\x81')
            else:
                raise MalformedInput("Script is not push-only: opcode 0x%02x" % op)
        return rv


# Templates
#
def p2pk_script(pubkey: bytes) -> Script:
    return Script.from_ops([pubkey, OP_CHECKSIG])

def p2pkh_script(pubkey_hash: bytes) -> Script:
    assert len(pubkey_hash) == 20
    return Script.from_ops([OP_DUP, OP_HASH160, pubkey_hash, OP_EQUALVERIFY, OP_CHECKSIG])

def multisig_script(m: int, pubkeys: List[bytes]) -> Script:
    assert 1 <= m <= len(pubkeys) <= 16
    return Script.from_ops([OP_1 + m - 1] + list(pubkeys)
                                + [OP_1 + len(pubkeys) - 1, OP_CHECKMULTISIG])

def p2sh_script(redeem_script: Script) -> Script:
    return Script.from_ops([OP_HASH160, hash160(bytes(redeem_script)), OP_EQUAL])

def p2wpkh_script(pubkey: bytes) -> Script:
    return Script.from_ops([OP_0, hash160(pubkey)])

def p2wsh_script(witness_script: Script) -> Script:
    return Script.from_ops([OP_0, sha256s(bytes(witness_script))])


# Solution descriptors: what a locking condition wants from us.
#
class PayToPubkey:
    type = ScriptType.P2PK

    def __init__(self, pubkey: bytes, is_verify=False):
        self.pubkey = bytes(pubkey)
        self.is_verify = is_verify

    required_sigs = 1
    key_count = 1

    @property
    def keys(self):
        return [self.pubkey]

    def script(self) -> Script:
        return Script.from_ops([self.pubkey, OP_CHECKSIGVERIFY if self.is_verify else OP_CHECKSIG])

    def __repr__(self):
        return '<PayToPubkey %s>' % self.pubkey.hex()

class PayToPubkeyHash:
    type = ScriptType.P2PKH

    def __init__(self, pubkey_hash: bytes, is_verify=False):
        assert len(pubkey_hash) == 20
        self.pubkey_hash = bytes(pubkey_hash)
        self.is_verify = is_verify

    required_sigs = 1
    key_count = 1

    @property
    def keys(self):
        # not known until someone reveals it
        return [None]

    def script(self) -> Script:
        return Script.from_ops([OP_DUP, OP_HASH160, self.pubkey_hash, OP_EQUALVERIFY,
                                    OP_CHECKSIGVERIFY if self.is_verify else OP_CHECKSIG])

    def __repr__(self):
        return '<PayToPubkeyHash %s>' % self.pubkey_hash.hex()

class Multisig:
    type = ScriptType.MULTISIG

    def __init__(self, m: int, pubkeys: List[bytes], is_verify=False):
        if not (1 <= m <= len(pubkeys) <= MAX_MULTISIG_KEYS):
            raise NonStandardScript(f"Bad multisig M={m} of N={len(pubkeys)}")
        self.m = m
        self.pubkeys = [bytes(k) for k in pubkeys]
        self.is_verify = is_verify

    @property
    def required_sigs(self):
        return self.m

    @property
    def key_count(self):
        return len(self.pubkeys)

    @property
    def keys(self):
        return list(self.pubkeys)

    def script(self) -> Script:
        return Script.from_ops([OP_1 + self.m - 1] + self.pubkeys + [OP_1 + len(self.pubkeys) - 1,
                        OP_CHECKMULTISIGVERIFY if self.is_verify else OP_CHECKMULTISIG])

    def __repr__(self):
        return '<Multisig %d-of-%d>' % (self.m, len(self.pubkeys))


def _is_pubkey_push(op_data):
    op, data = op_data
    return data is not None and len(data) in (33, 65) and op == len(data)

def match_fragment(ops, pos):
    # Try to match a checksig fragment at ops[pos]. Returns (descriptor, next pos) or None.
    rest = ops[pos:]

    # <pubkey> CHECKSIG[VERIFY]
    if len(rest) >= 2 and _is_pubkey_push(rest[0]) \
            and rest[1][0] in (OP_CHECKSIG, OP_CHECKSIGVERIFY):
        return PayToPubkey(rest[0][1], rest[1][0] == OP_CHECKSIGVERIFY), pos+2

    # DUP HASH160 <20 bytes> EQUALVERIFY CHECKSIG[VERIFY]
    if len(rest) >= 5 and rest[0][0] == OP_DUP and rest[1][0] == OP_HASH160 \
            and rest[2][1] is not None and len(rest[2][1]) == 20 \
            and rest[3][0] == OP_EQUALVERIFY \
            and rest[4][0] in (OP_CHECKSIG, OP_CHECKSIGVERIFY):
        return PayToPubkeyHash(rest[2][1], rest[4][0] == OP_CHECKSIGVERIFY), pos+5

    # M <pubkey>... N CHECKMULTISIG[VERIFY]
    m = small_int(rest[0][0]) if rest else None
    if m is not None:
        keys = []
        for od in rest[1:]:
            if not _is_pubkey_push(od):
                break
            keys.append(od[1])
        tail = rest[1+len(keys):]
        if keys and len(tail) >= 2 and small_int(tail[0][0]) == len(keys) \
                and tail[1][0] in (OP_CHECKMULTISIG, OP_CHECKMULTISIGVERIFY) \
                and m <= len(keys):
            return Multisig(m, keys, tail[1][0] == OP_CHECKMULTISIGVERIFY), pos+len(keys)+3

    return None

def classify(script: Script):
    # Return a descriptor for a script that is exactly one checksig fragment
    ops = Script(bytes(script)).ops()
    got = match_fragment(ops, 0)
    if not got or got[1] != len(ops):
        raise NonStandardScript("Script is not P2PK, P2PKH or multisig: " + bytes(script).hex())
    return got[0]

def output_type(script_pubkey: Script) -> str:
    # Wrapping used by an output script. Bare is anything else.
    ops = Script(bytes(script_pubkey)).ops()
    if len(ops) == 3 and ops[0][0] == OP_HASH160 and ops[2][0] == OP_EQUAL \
            and ops[1][1] is not None and len(ops[1][1]) == 20:
        return INPUT_P2SH
    if len(ops) == 2 and ops[0][0] == OP_0 and ops[1][1] is not None:
        if len(ops[1][1]) == 20:
            return INPUT_P2WPKH
        if len(ops[1][1]) == 32:
            return INPUT_P2WSH
    return INPUT_BARE

# EOF
