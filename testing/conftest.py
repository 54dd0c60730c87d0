#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
import pytest

from cksign.compat import CT_priv_to_pubkey
from cksign.tx import Tx, TxIn, TxOut
from cksign.script import p2pkh_script


@pytest.fixture(scope='session')
def keys():
    # three fixed keypairs: (privkey, compressed pubkey)
    rv = []
    for i in range(1, 4):
        priv = bytes([i]) * 32
        rv.append((priv, CT_priv_to_pubkey(priv)))
    return rv

@pytest.fixture(scope='session')
def other_key():
    # a key which is not used in any script
    priv = bytes([0x55]) * 32
    return priv, CT_priv_to_pubkey(priv)

@pytest.fixture
def make_tx():
    # build a transaction spending some inputs to one P2PKH output
    def doit(num_ins=1, value=90_000):
        ins = [TxIn(bytes([0xa0 + i]) * 32, i, sequence=0xfffffffd) for i in range(num_ins)]
        outs = [TxOut(value, p2pkh_script(bytes(range(20))))]
        return Tx(2, ins, outs, locktime=0)
    return doit

# EOF
