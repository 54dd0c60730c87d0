#!/usr/bin/env python
#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# To use this, install with:
#
#   pip install --editable '.[cli]'
#
# That will create the command "cksign" in your path.
#
#
import click, sys, os

from cksign.constants import *
from cksign.exceptions import SignerError
from cksign.signer import InputSigner, SignData
from cksign.tx import Tx, TxOut
from cksign.utils import B2A, force_bytes, str2path, none_hardened
from cksign.xkey import ExtendedKeySerializer
from cksign.bip32 import PrvKeyNode
from cksign import __version__

# dict of options that apply to all commands
global global_opts
global_opts = dict()

# Cleanup display (supress traceback) for user-feedback exceptions
_sys_excepthook = sys.excepthook
def my_hook(ty, val, tb):
    if issubclass(ty, (SignerError, RuntimeError)):
        print("FATAL: %s" % val, file=sys.stderr)
    else:
        return _sys_excepthook(ty, val, tb)
sys.excepthook=my_hook

def fail(msg):
    # show message and stop
    click.echo(f"FAILURE: {msg}", err=True)
    sys.exit(1)

def get_network():
    return TESTNET if global_opts.get('testnet') else MAINNET

def get_serializer():
    return ExtendedKeySerializer(get_network())

def dump_dict(d):
    for k,v in d.items():
        if isinstance(v, (bytes, bytearray)):
            v = B2A(v)
        click.echo('%s: %s' % (k, v))

def parse_logical_path(text):
    # "1,0,1" or "true,false" => list of bools
    if not text:
        return None
    rv = []
    for part in text.split(','):
        part = part.strip().lower()
        if part in ('1', 'true', 't', 'y', 'yes'):
            rv.append(True)
        elif part in ('0', 'false', 'f', 'n', 'no'):
            rv.append(False)
        else:
            fail(f"Logical path values must be 1 or 0, not: {part}")
    return rv

def build_signer(tx_hex, input_num, amount, spk, redeem, witness_script, logical):
    # construct signer for one input, from command line values
    tx = Tx.parse_hex(tx_hex)
    if not (0 <= input_num < len(tx.tx_ins)):
        fail(f"Transaction has only {len(tx.tx_ins)} inputs")

    txout = TxOut(amount, force_bytes(spk))
    sd = SignData(redeem_script=force_bytes(redeem) if redeem else None,
                  witness_script=force_bytes(witness_script) if witness_script else None,
                  logical_path=parse_logical_path(logical))

    return InputSigner(tx, input_num, txout, sd)

def input_options(f):
    # options common to commands which work on a transaction input
    for d in reversed([
        click.option('--tx', '-t', 'tx_hex', required=True, metavar="HEX",
                        help="Unsigned (or partly signed) transaction, in hex"),
        click.option('--input', '-n', 'input_num', type=int, default=0,
                        help="Which input to work on, default: 0"),
        click.option('--amount', '-a', type=int, required=True,
                        help="Value of output being spent, in satoshis"),
        click.option('--spk', '-s', required=True, metavar="HEX",
                        help="Script pubkey of output being spent"),
        click.option('--redeem', '-r', default=None, metavar="HEX",
                        help="Redeem script (P2SH)"),
        click.option('--witness-script', '-w', default=None, metavar="HEX",
                        help="Witness script (P2WSH)"),
        click.option('--logical', '-l', default=None, metavar="1,0",
                        help="Branches to take at each IF/NOTIF"),
    ]):
        f = d(f)
    return f

# Accept any prefix of a command name.
#
# from <https://click.palletsprojects.com/en/8.0.x/advanced/?#command-aliases>
class AliasedGroup(click.Group):
    def get_command(self, ctx, cmd_name):
        rv = click.Group.get_command(self, ctx, cmd_name)
        if rv is not None:
            return rv
        matches = [x for x in self.list_commands(ctx)
                   if x.startswith(cmd_name)]
        if not matches:
            return None
        elif len(matches) == 1:
            return click.Group.get_command(self, ctx, matches[0])
        ctx.fail(f"Abiguous command. Pick one of: {' | '.join(sorted(matches))}")

    def resolve_command(self, ctx, args):
        # always return the full command name
        _, cmd, args = super().resolve_command(ctx, args)
        return cmd.name, cmd, args


#
# Options we want for all commands
#
@click.group(cls=AliasedGroup)
@click.option('--testnet', '-T', is_flag=True,
                    help="Use testnet version bytes (tpub/tprv)")
@click.option('--verbose', '-v', is_flag=True,
                    help="Show details of signing steps.")
@click.option('--pdb', is_flag=True,
                    help="Prepare patient for surgery to remove bugs.")
@click.version_option(version=__version__)
def main(**kws):
    '''
    Decode BIP-32 extended keys, and sign transaction inputs.

    You can use "der" for "derive": any distinct prefix for all commands.
    '''
    # implement PDB option here
    if kws.pop('pdb', False):
        import pdb, sys
        def doit(ex_cls, ex, tb):
            pdb.pm()
        sys.excepthook = doit

    if kws.get('verbose'):
        import cksign.signer as ss
        ss.VERBOSE = True

    # global options
    global global_opts
    global_opts.update(kws)


@main.command('xkey')
@click.argument('xkey', type=str, metavar="XPUB|XPRV|HEX")
@click.option('--hex', '-x', 'as_hex', is_flag=True, help='Show 78-byte binary form, in hex')
def decode_xkey(xkey, as_hex):
    "Decode an extended key and show its fields"
    ser = get_serializer()
    node = ser.decode_any(xkey)

    if as_hex:
        click.echo(B2A(ser.serialize(node)))
        return

    dump_dict(dict(private=node.is_private(), depth=node.depth,
                    parent_fingerprint=node.parent_fingerprint,
                    index=node.index, chain_code=node.chain_code,
                    pubkey=node.sec(), fingerprint=node.fingerprint(),
                    xpub=ser.to_string(node.public_node())))

@main.command('derive')
@click.argument('xkey', type=str, metavar="XPUB|XPRV")
@click.argument('path', type=str, metavar="m/84h/0h/0h")
@click.option('--public', '-p', is_flag=True, help='Show public key (xpub), even if private known')
def derive_key(xkey, path, public):
    "Derive a child key by BIP-32 path"
    ser = get_serializer()
    node = ser.decode_any(xkey)

    try:
        path = str2path(path)
    except ValueError as exc:
        fail(str(exc))

    if not node.is_private() and not none_hardened(path):
        fail("Hardened derivation needs a private key")

    child = node.derive_path(path)
    if public:
        child = child.public_node()

    click.echo(ser.to_string(child))

@main.command('master')
@click.argument('seed', type=str, metavar="HEX")
def make_master(seed):
    "Make master extended private key from a BIP-39 seed (hex)"
    ser = get_serializer()
    node = PrvKeyNode.master_key(force_bytes(seed))
    click.echo(ser.to_string(node))

@main.command('sighash')
@input_options
@click.option('--hashtype', '-h', type=int, default=SIGHASH_ALL, help="Sighash type, default: 1 (ALL)")
def show_sighash(hashtype, **kws):
    "Show the digest that must be signed for one input"
    signer = build_signer(**kws)
    click.echo(B2A(signer.get_sig_hash(hashtype)))

@main.command('sign')
@input_options
@click.option('--key', '-k', 'key', required=True, metavar="XPRV|HEX",
                help="Private key: extended key, or 32 bytes in hex")
@click.option('--path', '-p', 'subpath', default=None, metavar="m/0/1",
                help="Derive this path from extended private key first")
@click.option('--hashtype', '-h', type=int, default=SIGHASH_ALL, help="Sighash type, default: 1 (ALL)")
@click.option('--partial', '-P', default=None, metavar="FILE.cbor",
                help="Load cosigner signatures from file, and save ours back into it")
def sign_input(key, subpath, hashtype, partial, **kws):
    '''
    Sign one input. Shows the script-sig and witness when complete, otherwise
    saves partial signatures (CBOR) for other cosigners.
    '''
    signer = build_signer(**kws)

    if partial and os.path.exists(partial):
        with open(partial, 'rb') as fd:
            signer.import_partial(fd.read())

    if len(key) == 64:
        privkey = force_bytes(key)
    else:
        node = get_serializer().decode_any(key)
        if not node.is_private():
            fail("Need a private key to sign with")
        if subpath:
            node = node.derive_path(str2path(subpath))
        privkey = node

    before = len(signer.get_signatures())
    signer.sign(privkey, hashtype)
    if len(signer.get_signatures()) == before:
        fail("That key cannot sign anything (more) for this input")

    if partial:
        with open(partial, 'wb') as fd:
            fd.write(signer.export_partial())

    if not signer.is_fully_signed():
        have, need = len(signer.get_signatures()), signer.get_required_sigs()
        if partial:
            click.echo(f"Partly signed ({have} of {need}), saved: {partial}")
            return
        fail(f"Partly signed ({have} of {need}), use --partial to save progress")

    if not signer.verify():
        fail("Signatures do not verify")

    rv = signer.serialize_signatures()
    click.echo('script_sig: ' + B2A(rv.script_sig))
    click.echo('witness: ' + ' '.join(B2A(w) or '""' for w in rv.witness))


if __name__ == '__main__':
    main()

# EOF
