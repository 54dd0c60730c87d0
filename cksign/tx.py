#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# tx.py
#
# Minimal transaction model: enough to parse, serialize and calculate signature hashes.
#
from io import BytesIO
from typing import List

from cksign.compat import sha256d
from cksign.constants import SIGHASH_ALL, SIGHASH_NONE, SIGHASH_SINGLE, SIGHASH_ANYONECANPAY
from cksign.exceptions import MalformedInput
from cksign.script import Script
from cksign.utils import (read_exact, little_endian_to_int, int_to_little_endian,
                          ser_compact_size, deser_compact_size, ser_string, deser_string,
                          force_bytes)

# value used for SIGHASH_SINGLE without matching output (consensus bug)
SIGHASH_ONE = b'\x01' + bytes(31)


class TxIn:
    def __init__(self, prev_hash, prev_index, script_sig=None, sequence=0xffffffff, witness=None):
        # prev_hash is in wire order (reversed from how txids are shown)
        assert len(prev_hash) == 32
        self.prev_hash = bytes(prev_hash)
        self.prev_index = prev_index
        self.script_sig = Script(bytes(script_sig)) if script_sig is not None else Script()
        self.sequence = sequence
        self.witness = list(witness or [])

    def __repr__(self):
        return '<TxIn %s:%d>' % (self.prev_hash[::-1].hex(), self.prev_index)

    @classmethod
    def parse(cls, s):
        prev_hash = read_exact(s, 32, 'prevout hash')
        prev_index = little_endian_to_int(read_exact(s, 4, 'prevout index'))
        script_sig = Script(deser_string(s))
        sequence = little_endian_to_int(read_exact(s, 4, 'sequence'))
        return cls(prev_hash, prev_index, script_sig, sequence)

    def prevout_bytes(self):
        return self.prev_hash + int_to_little_endian(self.prev_index, 4)

    def serialize(self, script_sig=None):
        script_sig = self.script_sig if script_sig is None else script_sig
        return self.prevout_bytes() + script_sig.serialize() \
                    + int_to_little_endian(self.sequence, 4)

    def serialize_witness(self):
        return ser_compact_size(len(self.witness)) + b''.join(ser_string(w) for w in self.witness)


class TxOut:
    def __init__(self, value: int, script_pubkey):
        self.value = value
        self.script_pubkey = Script(bytes(script_pubkey))

    def __repr__(self):
        return '<TxOut %d: %s>' % (self.value, self.script_pubkey.hex())

    @classmethod
    def parse(cls, s):
        value = little_endian_to_int(read_exact(s, 8, 'value'))
        return cls(value, Script(deser_string(s)))

    def serialize(self):
        return int_to_little_endian(self.value, 8) + self.script_pubkey.serialize()


class Tx:
    def __init__(self, version: int, tx_ins: List[TxIn], tx_outs: List[TxOut], locktime: int = 0):
        self.version = version
        self.tx_ins = tx_ins
        self.tx_outs = tx_outs
        self.locktime = locktime
        self._hash_prevouts = None
        self._hash_sequence = None
        self._hash_outputs = None

    def __repr__(self):
        return '<Tx %s: %d in, %d out>' % (self.txid(), len(self.tx_ins), len(self.tx_outs))

    @classmethod
    def parse_hex(cls, text):
        return cls.parse(BytesIO(force_bytes(text.strip())))

    @classmethod
    def parse(cls, s):
        # we can determine whether something is segwit or legacy by looking
        # at byte 5 (input count can never be zero)
        version = little_endian_to_int(read_exact(s, 4, 'version'))
        count = deser_compact_size(s)
        segwit = False
        if count == 0:
            flag = read_exact(s, 1, 'segwit flag')
            if flag != b'\x01':
                raise MalformedInput(f"Not a segwit transaction {flag!r}")
            segwit = True
            count = deser_compact_size(s)

        tx_ins = [TxIn.parse(s) for _ in range(count)]
        tx_outs = [TxOut.parse(s) for _ in range(deser_compact_size(s))]

        if segwit:
            # there is a witness for each input
            for tx_in in tx_ins:
                tx_in.witness = [deser_string(s) for _ in range(deser_compact_size(s))]

        locktime = little_endian_to_int(read_exact(s, 4, 'locktime'))
        return cls(version, tx_ins, tx_outs, locktime)

    def has_witness(self):
        return any(tx_in.witness for tx_in in self.tx_ins)

    def serialize(self):
        if self.has_witness():
            return self.serialize_segwit()
        return self.serialize_legacy()

    def serialize_legacy(self):
        result = int_to_little_endian(self.version, 4)
        result += ser_compact_size(len(self.tx_ins))
        result += b''.join(tx_in.serialize() for tx_in in self.tx_ins)
        result += ser_compact_size(len(self.tx_outs))
        result += b''.join(tx_out.serialize() for tx_out in self.tx_outs)
        result += int_to_little_endian(self.locktime, 4)
        return result

    def serialize_segwit(self):
        result = int_to_little_endian(self.version, 4)
        # segwit marker + flag
        result += b'\x00\x01'
        result += ser_compact_size(len(self.tx_ins))
        result += b''.join(tx_in.serialize() for tx_in in self.tx_ins)
        result += ser_compact_size(len(self.tx_outs))
        result += b''.join(tx_out.serialize() for tx_out in self.tx_outs)
        result += b''.join(tx_in.serialize_witness() for tx_in in self.tx_ins)
        result += int_to_little_endian(self.locktime, 4)
        return result

    def txid(self):
        # human-readable hexadecimal of the transaction hash
        return sha256d(self.serialize_legacy())[::-1].hex()

    def sig_hash_legacy(self, input_index: int, script_code: Script, hash_type=SIGHASH_ALL) -> bytes:
        """Returns the digest that needs to get signed for input_index (pre-segwit algo)"""

        # consensus bugs related to invalid input indices
        if input_index >= len(self.tx_ins):
            return SIGHASH_ONE
        base_type = hash_type & 0x1f
        if base_type == SIGHASH_SINGLE and input_index >= len(self.tx_outs):
            return SIGHASH_ONE

        if hash_type & SIGHASH_ANYONECANPAY:
            ins = [(input_index, self.tx_ins[input_index])]
        else:
            ins = list(enumerate(self.tx_ins))

        s = int_to_little_endian(self.version, 4)
        s += ser_compact_size(len(ins))
        for i, tx_in in ins:
            sequence = tx_in.sequence
            if i == input_index:
                # our script code takes place of script-sig
                script_sig = script_code
            else:
                script_sig = Script()
                if base_type in (SIGHASH_NONE, SIGHASH_SINGLE):
                    sequence = 0
            s += tx_in.prevout_bytes() + script_sig.serialize() + int_to_little_endian(sequence, 4)

        if base_type == SIGHASH_NONE:
            s += ser_compact_size(0)
        elif base_type == SIGHASH_SINGLE:
            s += ser_compact_size(input_index + 1)
            for i in range(input_index):
                # blank outputs: value -1, empty script
                s += b'\xff' * 8 + b'\x00'
            s += self.tx_outs[input_index].serialize()
        else:
            s += ser_compact_size(len(self.tx_outs))
            s += b''.join(tx_out.serialize() for tx_out in self.tx_outs)

        s += int_to_little_endian(self.locktime, 4)
        s += int_to_little_endian(hash_type, 4)

        return sha256d(s)

    def hash_prevouts(self):
        if self._hash_prevouts is None:
            self._hash_prevouts = sha256d(b''.join(i.prevout_bytes() for i in self.tx_ins))
        return self._hash_prevouts

    def hash_sequence(self):
        if self._hash_sequence is None:
            self._hash_sequence = sha256d(b''.join(int_to_little_endian(i.sequence, 4)
                                                        for i in self.tx_ins))
        return self._hash_sequence

    def hash_outputs(self):
        if self._hash_outputs is None:
            self._hash_outputs = sha256d(b''.join(o.serialize() for o in self.tx_outs))
        return self._hash_outputs

    def sig_hash_bip143(self, input_index: int, script_code: Script, value: int,
                            hash_type=SIGHASH_ALL) -> bytes:
        """Returns the digest that needs to get signed for input_index (BIP-143 segwit v0)"""
        tx_in = self.tx_ins[input_index]
        base_type = hash_type & 0x1f
        anyone = bool(hash_type & SIGHASH_ANYONECANPAY)
        zero = bytes(32)

        s = int_to_little_endian(self.version, 4)
        s += zero if anyone else self.hash_prevouts()
        if anyone or base_type in (SIGHASH_SINGLE, SIGHASH_NONE):
            s += zero
        else:
            s += self.hash_sequence()
        s += tx_in.prevout_bytes()
        s += script_code.serialize()
        s += int_to_little_endian(value, 8)
        s += int_to_little_endian(tx_in.sequence, 4)
        if base_type not in (SIGHASH_SINGLE, SIGHASH_NONE):
            s += self.hash_outputs()
        elif base_type == SIGHASH_SINGLE and input_index < len(self.tx_outs):
            s += sha256d(self.tx_outs[input_index].serialize())
        else:
            s += zero
        s += int_to_little_endian(self.locktime, 4)
        s += int_to_little_endian(hash_type, 4)

        return sha256d(s)

# EOF
