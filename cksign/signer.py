#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# signer.py
#
# Sign one input of a transaction: work out which script must be satisfied,
# break it into steps (Checksig/Conditional), collect signatures, and produce
# the script-sig and witness which unlock it.
#
import cbor2
from collections import namedtuple
from typing import List, Optional

from cksign.bip32 import PrvKeyNode
from cksign.checksig import Checksig, Conditional
from cksign.compat import hash160, sha256s, CT_priv_to_pubkey, CT_sign, CT_sig_verify
from cksign.constants import *
from cksign.exceptions import (InvalidStep, KeyNotFound, PreconditionViolation, NotFullySigned,
                               NonStandardScript, MalformedInput)
from cksign.script import (Script, ScriptType, match_fragment, output_type, p2pkh_script,
                           INPUT_BARE, INPUT_P2SH, INPUT_P2WPKH, INPUT_P2WSH,
                           INPUT_P2SH_P2WPKH, INPUT_P2SH_P2WSH, SEGWIT_INPUT_TYPES)
from cksign.signature import (TransactionSignature, is_valid_signature_encoding,
                              is_defined_hashtype)
from cksign.utils import B2A

# print details of what we are doing
VERBOSE = False

# version of partial signature blobs we make
PARTIAL_VERSION = 1

# unlocking data for one input
SigValues = namedtuple('SigValues', 'script_sig witness')

# script_pubkey and whatever it wraps, resolved down to the script we sign against
FullyQualifiedScript = namedtuple('FullyQualifiedScript',
            'script_pubkey redeem_script witness_script sign_script input_type is_segwit')


class SignData:
    #
    # How we intend to spend an output.
    #
    # - redeem_script: for P2SH (and P2SH-wrapped segwit)
    # - witness_script: for P2WSH
    # - logical_path: bool per IF/NOTIF we encounter, in order of execution
    # - flags: verification flags used by InputSigner.verify()
    #
    def __init__(self, redeem_script=None, witness_script=None, logical_path=None, flags=None):
        self.redeem_script = Script(bytes(redeem_script)) if redeem_script is not None else None
        self.witness_script = Script(bytes(witness_script)) if witness_script is not None else None
        self.logical_path = list(logical_path) if logical_path is not None else None
        self.flags = flags

    def __repr__(self):
        return '<SignData rs=%s ws=%s path=%r>' % (
                    self.redeem_script is not None, self.witness_script is not None,
                    self.logical_path)


def resolve_script(script_pubkey, sign_data: SignData) -> FullyQualifiedScript:
    """
    Work out how an output is wrapped and which script we sign against.

    Hash of provided redeem/witness script must match what the output commits to.
    """
    spk = Script(bytes(script_pubkey))
    kind = output_type(spk)
    redeem_script = witness_script = None
    program = spk

    if kind == INPUT_P2SH:
        redeem_script = sign_data.redeem_script
        if redeem_script is None:
            raise PreconditionViolation("P2SH output needs a redeem script")
        if hash160(bytes(redeem_script)) != spk.ops()[1][1]:
            raise PreconditionViolation("Redeem script does not match P2SH hash")

        inner = output_type(redeem_script)
        if inner == INPUT_P2WPKH:
            kind = INPUT_P2SH_P2WPKH
        elif inner == INPUT_P2WSH:
            kind = INPUT_P2SH_P2WSH
        program = redeem_script

    if kind in (INPUT_P2WPKH, INPUT_P2SH_P2WPKH):
        # script code is the classic P2PKH template
        sign_script = p2pkh_script(program.ops()[1][1])

    elif kind in (INPUT_P2WSH, INPUT_P2SH_P2WSH):
        witness_script = sign_data.witness_script
        if witness_script is None:
            raise PreconditionViolation("P2WSH output needs a witness script")
        if sha256s(bytes(witness_script)) != program.ops()[1][1]:
            raise PreconditionViolation("Witness script does not match P2WSH hash")
        sign_script = witness_script

    elif kind == INPUT_P2SH:
        sign_script = redeem_script

    else:
        sign_script = spk

    return FullyQualifiedScript(spk, redeem_script, witness_script, sign_script,
                                    kind, kind in SEGWIT_INPUT_TYPES)


def decompose(script: Script, logical_path=None) -> list:
    """
    Break script into Checksig and Conditional steps, following the branches
    chosen by logical_path. Result is in stack order: the reverse of execution.
    """
    ops = script.ops()
    path = list(logical_path or [])
    executed = []
    vf = []             # one bool per open IF: are we in the taken branch
    prev_checksig = None
    pos = 0

    while pos < len(ops):
        op = ops[pos][0]
        running = all(vf)

        if not running:
            # skipping untaken branch, but must track nesting
            if op in (OP_IF, OP_NOTIF):
                vf.append(False)
            elif op == OP_ELSE:
                vf[-1] = not vf[-1]
            elif op == OP_ENDIF:
                vf.pop()
            pos += 1
            continue

        got = match_fragment(ops, pos)
        if got:
            info, pos = got
            step = Checksig(info)
            executed.append(step)
            # non-VERIFY result stays on stack, and might feed a conditional
            prev_checksig = None if info.is_verify else len(executed) - 1
            continue

        if op in (OP_IF, OP_NOTIF):
            if not path:
                raise PreconditionViolation("Logical path has no value for conditional")
            cond = Conditional(op, provided_by=prev_checksig)
            cond.set_value(bool(path.pop(0)))
            executed.append(cond)
            vf.append(cond.branch_taken())

        elif op == OP_ELSE:
            if not vf:
                raise NonStandardScript("ELSE without IF")
            vf[-1] = not vf[-1]

        elif op == OP_ENDIF:
            if not vf:
                raise NonStandardScript("ENDIF without IF")
            vf.pop()

        else:
            raise NonStandardScript("Unsupported opcode in script: 0x%02x" % op)

        prev_checksig = None
        pos += 1

    if vf:
        raise NonStandardScript("Unbalanced conditional in script")
    if path:
        raise PreconditionViolation("Logical path has unused values")

    # stack order, and remap provider indexes to match
    steps = executed[::-1]
    last = len(steps) - 1
    for step in steps:
        if isinstance(step, Conditional) and step.provided_by is not None:
            step.provided_by = last - step.provided_by
            step.receives_value(steps[step.provided_by])

    return steps


def _step_map(obj, what) -> dict:
    # {step: {key index: bytes}} as written by export_partial
    if not isinstance(obj, dict):
        raise MalformedInput(f"Partial signatures: '{what}' is not a map")
    for n, inner in obj.items():
        if not isinstance(n, int) or not isinstance(inner, dict):
            raise MalformedInput(f"Partial signatures: bad entry in '{what}'")
        for idx, val in inner.items():
            if not isinstance(idx, int) or not isinstance(val, bytes):
                raise MalformedInput(f"Partial signatures: bad value for step #{n} in '{what}'")
    return obj


def _private_key_bytes(private_key) -> bytes:
    # accept raw 32 bytes, hex, or a BIP-32 private node
    if isinstance(private_key, PrvKeyNode):
        return private_key.key
    if isinstance(private_key, str):
        private_key = bytes.fromhex(private_key)
    if len(private_key) != 32:
        raise PreconditionViolation("Private key must be 32 bytes")
    return bytes(private_key)


class InputSigner:
    #
    # Signs one input. Holds steps in stack order; only Checksig steps take signatures.
    #
    def __init__(self, tx, n_input: int, txout, sign_data: SignData = None, extract=True):
        if not (0 <= n_input < len(tx.tx_ins)):
            raise PreconditionViolation(f"No input #{n_input} in transaction")

        self.tx = tx
        self.n_input = n_input
        self.txout = txout
        self.sign_data = sign_data or SignData()
        self._sig_hashes = {}

        self.fqs = resolve_script(txout.script_pubkey, self.sign_data)
        self._steps = decompose(self.fqs.sign_script, self.sign_data.logical_path)

        if VERBOSE:
            print(f"Input #{n_input}: {self.fqs.input_type}, script: {self.fqs.sign_script.hex()}")
            for n, step in enumerate(self._steps):
                print(f"  step[{n}] = {step!r}")

        if extract:
            self.extract_signatures()

    def __repr__(self):
        return '<InputSigner #%d %s: %d steps%s>' % (self.n_input, self.fqs.input_type,
                    len(self._steps), ' (signed)' if self.is_fully_signed() else '')

    @property
    def steps(self) -> list:
        return list(self._steps)

    def step(self, idx: int):
        if not (0 <= idx < len(self._steps)):
            raise InvalidStep(f"No step #{idx}")
        return self._steps[idx]

    def _checksig_step(self, idx: int) -> Checksig:
        step = self.step(idx)
        if not isinstance(step, Checksig):
            raise InvalidStep(f"Step #{idx} is a conditional, not a checksig")
        return step

    def checksig_steps(self) -> List[Checksig]:
        return [s for s in self._steps if isinstance(s, Checksig)]

    def get_input_scripts(self) -> FullyQualifiedScript:
        return self.fqs

    def get_sig_hash(self, sig_hash_type=SIGHASH_ALL) -> bytes:
        # digest to sign for our input, using the right algo for the input type
        if sig_hash_type not in self._sig_hashes:
            if self.fqs.is_segwit:
                digest = self.tx.sig_hash_bip143(self.n_input, self.fqs.sign_script,
                                                    self.txout.value, sig_hash_type)
            else:
                digest = self.tx.sig_hash_legacy(self.n_input, self.fqs.sign_script,
                                                    sig_hash_type)
            if VERBOSE:
                print(f"sighash(0x{sig_hash_type:02x}) = {B2A(digest)}")
            self._sig_hashes[sig_hash_type] = digest

        return self._sig_hashes[sig_hash_type]

    # Signing
    #
    def sign_step(self, idx: int, private_key, sig_hash_type=SIGHASH_ALL):
        step = self._checksig_step(idx)

        priv = _private_key_bytes(private_key)
        pubkey = CT_priv_to_pubkey(priv)
        key_idx = step.key_index(pubkey)
        if key_idx is None:
            raise KeyNotFound(f"Signing key {B2A(pubkey)} not used in step #{idx}")
        if not step.accepts_signature(key_idx):
            raise PreconditionViolation(f"Step #{idx} already has enough signatures")

        sig =CT_sign(priv, self.get_sig_hash(sig_hash_type))
        step.set_signature(key_idx, TransactionSignature(sig, sig_hash_type))

        if VERBOSE:
            print(f"Signed step[{idx}] key[{key_idx}] with {B2A(pubkey)}")

        return self

    def sign(self, private_key, sig_hash_type=SIGHASH_ALL):
        # sign everything this key can; others might sign the rest
        for idx, step in enumerate(self._steps):
            if not isinstance(step, Checksig):
                continue
            if not step.is_required() or step.is_fully_signed():
                continue
            try:
                self.sign_step(idx, private_key, sig_hash_type)
            except KeyNotFound:
                continue

        return self

    # Checking
    #
    def check_signature(self, pubkey: Optional[bytes], sig: TransactionSignature, flags) -> bool:
        if pubkey is None:
            return False

        raw = sig.serialize()
        if flags & VERIFY_DERSIG and not is_valid_signature_encoding(raw):
            return False
        if flags & VERIFY_STRICTENC:
            if not is_defined_hashtype(raw):
                return False
            if not ((len(pubkey) == 33 and pubkey[0] in (2, 3))
                        or (len(pubkey) == 65 and pubkey[0] == 4)):
                return False
        if flags & VERIFY_LOW_S and not sig.is_low_s():
            return False

        return CT_sig_verify(pubkey, self.get_sig_hash(sig.hash_type), sig.sig)

    def verify(self, flags=None) -> bool:
        if flags is None:
            flags = self.sign_data.flags
        if flags is None:
            flags = DEFAULT_VERIFY_FLAGS

        for n, step in enumerate(self._steps):
            if not step.is_fully_signed():
                if VERBOSE:
                    print(f"step[{n}] not fully signed")
                return False

            if not isinstance(step, Checksig) or not step.is_required():
                continue

            for idx, sig in enumerate(step.signatures()):
                if sig is None:
                    continue
                if not self.check_signature(step.get_key(idx), sig, flags):
                    if VERBOSE:
                        print(f"step[{n}] key[{idx}]: signature fails")
                    return False

        return True

    def is_fully_signed(self) -> bool:
        return all(s.is_fully_signed() for s in self._steps)

    def get_required_sigs(self) -> int:
        return sum(s.required_sigs for s in self.checksig_steps() if s.is_required())

    def get_signatures(self) -> List[TransactionSignature]:
        return [sig for s in self.checksig_steps() if s.is_required()
                        for sig in s.signatures() if sig is not None]

    def get_public_keys(self) -> List[Optional[bytes]]:
        return [k for s in self.checksig_steps() if s.is_required() for k in s.keys()]

    # Output
    #
    def serialize_signatures(self, allow_partial=False) -> SigValues:
        if not allow_partial and not self.is_fully_signed():
            raise NotFullySigned(f"Input #{self.n_input} is not fully signed")

        items = []
        for step in self._steps:
            items.extend(step.serialize())

        fqs = self.fqs
        kind = fqs.input_type
        script_sig = Script()
        witness = []

        if kind == INPUT_BARE:
            script_sig = Script.push_items(items)
        elif kind == INPUT_P2SH:
            script_sig = Script.push_items(items + [bytes(fqs.redeem_script)])
        elif kind == INPUT_P2WPKH:
            witness = items
        elif kind == INPUT_P2WSH:
            witness = items + [bytes(fqs.witness_script)]
        elif kind == INPUT_P2SH_P2WPKH:
            script_sig = Script.push_items([bytes(fqs.redeem_script)])
            witness = items
        elif kind == INPUT_P2SH_P2WSH:
            script_sig = Script.push_items([bytes(fqs.redeem_script)])
            witness = items + [bytes(fqs.witness_script)]
        else:
            raise NonStandardScript(kind)

        if VERBOSE:
            print(f"script_sig: {script_sig.hex()}")
            print("witness: [%s]" % ', '.join(B2A(w) for w in witness))

        return SigValues(bytes(script_sig), witness)

    def apply(self, allow_partial=False) -> SigValues:
        # write unlock data into our input of the transaction
        rv = self.serialize_signatures(allow_partial=allow_partial)
        tx_in = self.tx.tx_ins[self.n_input]
        tx_in.script_sig = Script(rv.script_sig)
        tx_in.witness = list(rv.witness)
        return rv

    # Reading back existing unlock data
    #
    def _existing_items(self) -> List[bytes]:
        # stack items already in the input, less any script reveal at the end
        tx_in = self.tx.tx_ins[self.n_input]
        fqs = self.fqs
        kind = fqs.input_type

        if fqs.is_segwit:
            items = list(tx_in.witness)
            if kind in (INPUT_P2WSH, INPUT_P2SH_P2WSH) and items \
                    and items[-1] == bytes(fqs.witness_script):
                items.pop()
        else:
            items = tx_in.script_sig.stack_items()
            if kind == INPUT_P2SH and items and items[-1] == bytes(fqs.redeem_script):
                items.pop()

        return items

    def _match_signature(self, step: Checksig, raw: bytes) -> Optional[int]:
        # which unsigned key of this step made this signature?
        try:
            sig = TransactionSignature.parse(raw)
        except MalformedInput:
            return None

        digest = self.get_sig_hash(sig.hash_type)
        for idx, key in enumerate(step.keys()):
            if key is None or step.has_signature(idx):
                continue
            if CT_sig_verify(key, digest, sig.sig):
                step.set_signature(idx, sig)
                return idx

        return None

    def extract_signatures(self):
        # Load signatures already present on the input (from another signer).
        items = self._existing_items()
        if not items:
            return self

        for n, step in enumerate(self._steps):
            if isinstance(step, Conditional):
                if step.provided_by is None and items and items[0] in (b'', b'\x01'):
                    items.pop(0)
                continue

            if step.script_type == ScriptType.P2PK:
                if not step.is_required():
                    if items and items[0] == b'':
                        items.pop(0)
                elif items and self._match_signature(step, items[0]) is not None:
                    items.pop(0)

            elif step.script_type == ScriptType.P2PKH:
                if len(items) >= 2 and hash160(items[1]) == step.info.pubkey_hash:
                    step.set_key(0, items[1])
                    self._match_signature(step, items[0])
                    del items[0:2]

            elif not step.is_required():
                # dummy plus one blank per required signature
                blanks = 1 + step.required_sigs
                if items[:blanks] == [b''] * blanks:
                    del items[:blanks]

            elif items and items[0] == b'':
                # dummy value for CHECKMULTISIG, then signatures in key order;
                # a partly signed step has no padding, so stop at first stranger
                items.pop(0)
                count = 0
                while items and count < step.required_sigs:
                    if items[0] == b'' or self._match_signature(step, items[0]) is None:
                        break
                    items.pop(0)
                    count += 1

            if VERBOSE:
                print(f"extracted step[{n}]: {step!r}")

        return self

    # Cosigning
    #
    def merge(self, other: "InputSigner"):
        # take signatures collected by another signer for same input
        if len(other._steps) != len(self._steps) \
                or other.fqs.sign_script != self.fqs.sign_script \
                or other.get_sig_hash() != self.get_sig_hash():
            raise PreconditionViolation("Cannot merge signer for a different input")

        for mine, theirs in zip(self._steps, other._steps):
            if type(mine) != type(theirs):
                raise PreconditionViolation("Cannot merge signer with different steps")
            if not isinstance(mine, Checksig):
                continue
            for idx in range(mine.key_count):
                if theirs.has_key(idx) and not mine.has_key(idx):
                    mine.set_key(idx, theirs.get_key(idx))
                if theirs.has_signature(idx) and mine.accepts_signature(idx):
                    mine.set_signature(idx, theirs.get_signature(idx))

        return self

    def export_partial(self) -> bytes:
        # CBOR: {v, steps: {step: {key index: signature}}, keys: {step: {key index: pubkey}}}
        steps = {}
        keys = {}
        for n, step in enumerate(self._steps):
            if not isinstance(step, Checksig):
                continue
            got = {idx: sig.serialize() for idx, sig in enumerate(step.signatures())
                                                if sig is not None}
            if got:
                steps[n] = got
            if step.script_type == ScriptType.P2PKH and step.has_key(0):
                # not in script, so must travel with signature
                keys[n] = {0: step.get_key(0)}

        rv = dict(v=PARTIAL_VERSION, steps=steps)
        if keys:
            rv['keys'] = keys
        return cbor2.dumps(rv)

    def import_partial(self, blob: bytes):
        try:
            obj = cbor2.loads(blob)
        except (cbor2.CBORDecodeError, EOFError) as exc:
            raise MalformedInput(f"Partial signatures not CBOR: {exc}")

        if not isinstance(obj, dict) or obj.get('v') != PARTIAL_VERSION:
            raise MalformedInput("Unsupported partial signature format")

        keys = _step_map(obj.get('keys', {}), 'keys')
        steps = _step_map(obj.get('steps', {}), 'steps')

        for n, pubs in keys.items():
            step = self._checksig_step(n)
            for idx, pub in pubs.items():
                if step.script_type == ScriptType.P2PKH and hash160(pub) != step.info.pubkey_hash:
                    raise PreconditionViolation(f"Imported key for step #{n} does not match")
                step.set_key(idx, pub)

        for n, sigs in steps.items():
            step = self._checksig_step(n)
            for idx, raw in sigs.items():
                if not step.accepts_signature(idx):
                    # already have enough; extra would only spoil the stack
                    continue
                sig = TransactionSignature.parse(raw)
                if not self.check_signature(step.get_key(idx), sig, VERIFY_NONE):
                    raise PreconditionViolation(f"Imported signature for step #{n} does not verify")
                step.set_signature(idx, sig)

        return self

# EOF
