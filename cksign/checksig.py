#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# checksig.py
#
# Steps an InputSigner works through: one Checksig per locking condition
# in the script, and a Conditional for each branch taken.
#
from typing import List, Optional

from cksign.compat import hash160, CT_pubkey_check
from cksign.constants import OP_IF, OP_NOTIF
from cksign.exceptions import IndexOutOfRange, UnsupportedScriptType, PreconditionViolation
from cksign.script import ScriptType
from cksign.signature import TransactionSignature


class Checksig:
    #
    # Signatures and keys collected for one P2PK, P2PKH or multisig condition.
    #
    # - signatures/keys are kept in lists sized to the key count, None where absent
    # - index is the key's position in the script, also for multisig
    #
    def __init__(self, info):
        script_type = getattr(info, 'type', None)

        if script_type == ScriptType.P2PK:
            self.key_count = 1
        elif script_type == ScriptType.P2PKH:
            self.key_count = 1
        elif script_type == ScriptType.MULTISIG:
            self.key_count = info.key_count
        else:
            raise UnsupportedScriptType("Unsupported solution passed to Checksig: %r" % (info,))

        self.script_type = script_type
        self.required_sigs = info.required_sigs
        self.is_verify = info.is_verify
        self.info = info
        self.required = True

        self._signatures = [None] * self.key_count
        self._keys = list(info.keys)

    def __repr__(self):
        return '<Checksig %s %d/%d%s>' % (self.script_type.value, self.signature_count(),
                    self.required_sigs, '' if self.required else ' (not required)')

    def _check_index(self, idx, what):
        if not (0 <= idx < self.key_count):
            raise IndexOutOfRange(f"Out of range {what} index: {idx}", idx)

    def set_required(self, setting: bool):
        if not isinstance(setting, bool):
            raise PreconditionViolation("Invalid input to set_required")
        self.required = setting
        return self

    def is_required(self) -> bool:
        return self.required

    def receives_value(self, conditional):
        # our boolean result feeds a conditional: if that wants False, we must fail
        if not conditional.has_value:
            raise PreconditionViolation("Sanity check, conditional requires value")

        if conditional.get_value() is False:
            self.set_required(False)

    def get_type(self) -> ScriptType:
        return self.script_type

    def solution(self):
        # what the script commits to: key list, single key, or key hash
        if self.script_type == ScriptType.MULTISIG:
            return self.info.keys
        elif self.script_type == ScriptType.P2PK:
            return self.info.pubkey
        else:
            return self.info.pubkey_hash

    # Signatures
    #
    def has_signature(self, idx: int) -> bool:
        self._check_index(idx, 'signature')
        return self._signatures[idx] is not None

    def get_signature(self, idx: int) -> Optional[TransactionSignature]:
        self._check_index(idx, 'signature')
        return self._signatures[idx]

    def accepts_signature(self, idx: int) -> bool:
        # replacing is fine, but never more than required_sigs in total
        self._check_index(idx, 'signature')
        return self._signatures[idx] is not None or self.signature_count() < self.required_sigs

    def set_signature(self, idx: int, signature: TransactionSignature):
        if not self.accepts_signature(idx):
            raise PreconditionViolation("Already have %d signatures, cannot add another"
                                            % self.required_sigs)
        self._signatures[idx] = signature
        return self

    def signatures(self) -> List[Optional[TransactionSignature]]:
        return list(self._signatures)

    def signature_count(self) -> int:
        return sum(1 for s in self._signatures if s is not None)

    # Keys
    #
    def has_key(self, idx: int) -> bool:
        self._check_index(idx, 'key')
        return self._keys[idx] is not None

    def get_key(self, idx: int) -> Optional[bytes]:
        self._check_index(idx, 'key')
        return self._keys[idx]

    def set_key(self, idx: int, key: Optional[bytes]):
        self._check_index(idx, 'key')
        self._keys[idx] = key
        return self

    def keys(self) -> List[Optional[bytes]]:
        return list(self._keys)

    def key_index(self, pubkey: bytes) -> Optional[int]:
        # Where can this (compressed) pubkey sign? Learns the key for P2PKH.
        if self.script_type == ScriptType.P2PKH:
            if hash160(pubkey) != self.info.pubkey_hash:
                return None
            self.set_key(0, pubkey)
            return 0

        for idx, k in enumerate(self._keys):
            if k is None:
                continue
            if k == pubkey or (len(k) == 65 and CT_pubkey_check(k) == pubkey):
                return idx

        return None

    def is_fully_signed(self) -> bool:
        if self.required:
            return self.signature_count() == self.required_sigs
        else:
            return True

    def serialize(self) -> List[bytes]:
        # stack items satisfying this condition, in push order
        result = []

        if self.script_type == ScriptType.P2PK:
            if not self.required:
                result = [b'']
            elif self.has_signature(0):
                result = [self.get_signature(0).serialize()]

        elif self.script_type == ScriptType.P2PKH:
            if self.has_signature(0) and self.has_key(0):
                result = [self.get_signature(0).serialize(), self.get_key(0)]

        elif self.script_type == ScriptType.MULTISIG:
            if not self.required:
                # dummy + one empty sig per required: CHECKMULTISIG fails cleanly
                result = [b''] * (1 + self.required_sigs)
            else:
                # leading dummy for the extra value CHECKMULTISIG pops
                result.append(b'')
                for idx in range(self.key_count):
                    if self.has_signature(idx):
                        result.append(self.get_signature(idx).serialize())

        else:
            raise UnsupportedScriptType('Checksig has a non-standard script type')

        return result


class Conditional:
    #
    # Branch taken by IF/NOTIF. Value is either pushed by us, or is the result of
    # the Checksig step just before it (provided_by = that step's index).
    #
    def __init__(self, opcode=OP_IF, provided_by=None):
        assert opcode in (OP_IF, OP_NOTIF)
        self.opcode = opcode
        self.provided_by = provided_by
        self.has_value = False
        self.value = None

    def __repr__(self):
        op = 'IF' if self.opcode == OP_IF else 'NOTIF'
        val = repr(self.value) if self.has_value else '?'
        return f'<Conditional {op}={val}>'

    def set_value(self, value: bool):
        if not isinstance(value, bool):
            raise PreconditionViolation("Conditional value must be bool")
        self.value = value
        self.has_value = True
        return self

    def get_value(self) -> bool:
        if not self.has_value:
            raise PreconditionViolation("Conditional has no value yet")
        return self.value

    def branch_taken(self) -> bool:
        # True means the IF side runs; NOTIF inverts
        return self.get_value() if self.opcode == OP_IF else not self.get_value()

    def receives_value(self, checksig: Checksig):
        # push our value down into the checksig step which provides it
        if not self.has_value:
            raise PreconditionViolation("Sanity check, conditional requires value")

        checksig.receives_value(self)

    def is_fully_signed(self) -> bool:
        return True

    def serialize(self) -> List[bytes]:
        if self.provided_by is not None:
            # value comes from checksig result
            return []
        return [b'\x01' if self.get_value() else b'']

# EOF
