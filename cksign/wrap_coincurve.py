#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
#
# Compatibility wrapper for "coincurve".
#
# nice docs: <https://ofek.dev/coincurve/api/>
#
# - generally using terribile serializations for signatures (DER)
# - docs do not make it clear what serialization is needed
#
from coincurve.ecdsa import deserialize_compact, serialize_compact, der_to_cdata, cdata_to_der
from coincurve import PrivateKey, PublicKey

def CT_sig_verify(pub, msg_digest, sig):
    assert len(sig) == 64
    assert len(msg_digest) == 32
    try:
        der = cdata_to_der(deserialize_compact(sig))
        return PublicKey(pub).verify(der, msg_digest, hasher=None)
    except ValueError:
        # bad pubkey, or r/s out of range
        return False

def CT_sign(privkey, msg_digest):
    # libsecp256k1 uses RFC6979 nonces and always produces low-S
    assert len(msg_digest) == 32
    der = PrivateKey(privkey).sign(msg_digest, hasher=None)
    return serialize_compact(der_to_cdata(der))

def CT_sig_to_der(sig):
    assert len(sig) == 64
    return cdata_to_der(deserialize_compact(sig))

def CT_der_to_sig(der):
    return serialize_compact(der_to_cdata(der))

def CT_pick_keypair():
    # Choose pub/private pair, return private key (32 bytes) and compressed pubkey
    pk = PrivateKey()
    return pk.secret, pk.public_key.format()

def CT_priv_to_pubkey(priv):
    pk = PrivateKey(priv)
    return pk.public_key.format()

def CT_pubkey_tweak_add(pubkey, tweak):
    assert len(tweak) == 32
    return PublicKey(pubkey).add(tweak).format()

def CT_pubkey_check(pubkey):
    return PublicKey(pubkey).format()

# EOF
