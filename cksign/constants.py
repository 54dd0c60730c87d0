#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# System constants.
#
from collections import namedtuple

# HD version bytes (4 bytes each) for extended keys, per network.
# - hd_priv/hd_pub may be None for networks which don't do BIP-32
Network = namedtuple('Network', 'name hd_priv hd_pub testnet')

MAINNET = Network('mainnet', bytes.fromhex('0488ade4'), bytes.fromhex('0488b21e'), False)
TESTNET = Network('testnet', bytes.fromhex('04358394'), bytes.fromhex('043587cf'), True)
REGTEST = Network('regtest', TESTNET.hd_priv, TESTNET.hd_pub, True)

NETWORKS = { n.name: n for n in [MAINNET, TESTNET, REGTEST] }

DEFAULT_NETWORK = MAINNET

# serialized extended key: 4+1+4+4+32+33 bytes
EXTENDED_KEY_SIZE = 78

# high bit set in 32-bit BIP-32 path component
HARDENED = 0x8000_0000

# order of secp256k1 group
N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

# signature hash types
SIGHASH_ALL = 0x01
SIGHASH_NONE = 0x02
SIGHASH_SINGLE = 0x03
SIGHASH_ANYONECANPAY = 0x80

# verification flags for InputSigner.verify()
VERIFY_NONE = 0
VERIFY_DERSIG = 0x01            # BIP-66 strict DER
VERIFY_STRICTENC = 0x02         # defined hashtype, compressed pubkeys
VERIFY_LOW_S = 0x04             # BIP-62 rule 5
DEFAULT_VERIFY_FLAGS = VERIFY_DERSIG | VERIFY_STRICTENC | VERIFY_LOW_S

# script opcodes (just the ones we need)
OP_0 = 0x00
OP_PUSHDATA1 = 0x4c
OP_PUSHDATA2 = 0x4d
OP_PUSHDATA4 = 0x4e
OP_1NEGATE = 0x4f
OP_1 = 0x51
OP_16 = 0x60
OP_NOP = 0x61
OP_IF = 0x63
OP_NOTIF = 0x64
OP_ELSE = 0x67
OP_ENDIF = 0x68
OP_VERIFY = 0x69
OP_DUP = 0x76
OP_EQUAL = 0x87
OP_EQUALVERIFY = 0x88
OP_HASH160 = 0xa9
OP_CHECKSIG = 0xac
OP_CHECKSIGVERIFY = 0xad
OP_CHECKMULTISIG = 0xae
OP_CHECKMULTISIGVERIFY = 0xaf

# largest N we can encode with OP_1..OP_16 in multisig scripts
MAX_MULTISIG_KEYS = 16

# EOF
