#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# Wrappers for choice of crypto libraries. AKA API Cleanup
#
# My standards:
# - pubkeys: 33 bytes, always compressed
# - private key: 32 bytes
# - signature: 64 bytes (compact r|s), DER only at the transaction layer
# - message digests (for sig/verify) are already digested
# - ECDSA verify returns bool, doesn't raise exception
#

__all__ = [ 'sha256s', 'sha256d', 'hash160',
            'CT_sig_verify', 'CT_sign', 'CT_sig_to_der', 'CT_der_to_sig',
            'CT_pick_keypair', 'CT_priv_to_pubkey', 'CT_pubkey_tweak_add',
            'CT_pubkey_check']

from hashlib import sha256

def sha256s(msg):
    # single-shot SHA256
    return sha256(msg).digest()

def sha256d(msg):
    # double SHA256, as used for txids and signature hashes
    return sha256(sha256(msg).digest()).digest()

def hash160(x):
    # classic bitcoin nested hashes
    # - hashlib may not have ripemd160 when built against OpenSSL 3
    from Cryptodome.Hash import RIPEMD160
    return RIPEMD160.new(sha256s(x)).digest()

# Other codes must be implemented elsewhere...
#

def CT_pick_keypair():
    # return (priv, pub)
    raise NotImplementedError

def CT_priv_to_pubkey(pk):
    # return compressed pubkey
    raise NotImplementedError

def CT_sig_verify(pub, msg_digest, sig):
    # returns True or False
    assert len(sig) == 64
    raise NotImplementedError

def CT_sign(privkey, msg_digest):
    # returns 64-byte sig, low-S, deterministic nonce
    raise NotImplementedError

def CT_sig_to_der(sig):
    # 64-byte compact sig => DER encoding
    raise NotImplementedError

def CT_der_to_sig(der):
    # DER encoding => 64-byte compact sig, raises ValueError if not DER
    raise NotImplementedError

def CT_pubkey_tweak_add(pubkey, tweak):
    # return compressed pubkey of (point + tweak*G)
    raise NotImplementedError

def CT_pubkey_check(pubkey):
    # parse any pubkey encoding, return compressed; raises ValueError if not on curve
    raise NotImplementedError


try:
    # Coincurve <https://ofek.dev/coincurve/api/>
    import coincurve

    from cksign.wrap_coincurve import CT_sig_verify, CT_sign, CT_sig_to_der, CT_der_to_sig
    from cksign.wrap_coincurve import CT_pick_keypair, CT_priv_to_pubkey
    from cksign.wrap_coincurve import CT_pubkey_tweak_add, CT_pubkey_check

except ImportError:
    raise RuntimeError("need a crypto library")

# EOF
