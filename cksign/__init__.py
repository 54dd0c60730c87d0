#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#

__version__ = '0.1.0'

__all__ = [ 'xkey', 'bip32', 'checksig', 'signer', 'script', 'tx', 'signature',
            'exceptions', 'constants', 'utils' ]

# encode/decode BIP-32 extended keys
from cksign.xkey import ExtendedKeySerializer

# sign one input of a transaction
from cksign.signer import InputSigner, SignData, SigValues
