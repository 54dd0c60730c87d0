#
# (c) Copyright 2021 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# Exceptions
#

class SignerError(RuntimeError):
    # base class for everything we raise on purpose
    pass

class MalformedInput(SignerError, ValueError):
    # binary data is short, or ill-formed (parser out of range)
    pass

class InvalidExtendedKey(SignerError, ValueError):
    # wrong length, unknown version prefix, or bad key material
    pass

class IndexOutOfRange(SignerError, IndexError):
    # key/signature index outside of declared key count
    def __init__(self, msg, idx=None):
        self.idx = idx
        super().__init__(msg)

class UnsupportedScriptType(SignerError):
    pass

class NonStandardScript(SignerError, ValueError):
    pass

class InvalidStep(SignerError):
    # only Checksig steps can be signed, and only if they exist
    pass

class KeyNotFound(SignerError):
    pass

class PreconditionViolation(SignerError):
    pass

class NotFullySigned(SignerError):
    pass

# EOF
