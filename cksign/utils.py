# (c) Copyright 2021 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
import struct
from binascii import b2a_hex, a2b_hex
from .constants import HARDENED
from .exceptions import MalformedInput

# show bytes as hex in a string
B2A = lambda x: b2a_hex(x).decode('ascii')

def big_endian_to_int(b: bytes) -> int:
    return int.from_bytes(b, "big")

def int_to_big_endian(n: int, length: int) -> bytes:
    return n.to_bytes(length, "big")

def little_endian_to_int(b: bytes) -> int:
    return int.from_bytes(b, "little")

def int_to_little_endian(n: int, length: int) -> bytes:
    return n.to_bytes(length, "little")

def force_bytes(foo):
    # convert hex strings to bytes where needed
    if isinstance(foo, str):
        try:
            return a2b_hex(foo)
        except ValueError:
            raise MalformedInput("not hex: %r" % foo[0:16])
    return bytes(foo)

def read_exact(s, n, what='bytes'):
    # read exactly n bytes from stream, or fail
    rv = s.read(n)
    if len(rv) != n:
        raise MalformedInput(f"Parser out of range: wanted {n} {what}, got {len(rv)}")
    return rv

# Serialization/deserialization tools
def ser_compact_size(l):
    if l < 253:
        return struct.pack("B", l)
    elif l < 0x10000:
        return struct.pack("<BH", 253, l)
    elif l < 0x100000000:
        return struct.pack("<BI", 254, l)
    else:
        return struct.pack("<BQ", 255, l)

def deser_compact_size(s):
    c = read_exact(s, 1, 'compact size')[0]
    if c == 253:
        return struct.unpack("<H", read_exact(s, 2, 'compact size'))[0]
    elif c == 254:
        return struct.unpack("<I", read_exact(s, 4, 'compact size'))[0]
    elif c == 255:
        return struct.unpack("<Q", read_exact(s, 8, 'compact size'))[0]
    return c

def ser_string(b):
    return ser_compact_size(len(b)) + b

def deser_string(s):
    return read_exact(s, deser_compact_size(s), 'string')


def path_component_in_range(num: int) -> bool:
    # cannot be less than 0
    # cannot be more than (2 ** 31) - 1
    if 0 <= num < HARDENED:
        return True
    return False

def path2str(path):
    # take numeric path (list of numbers) and convert to human form
    # - standardizing on "m/84h" style
    return '/'.join(['m'] + [str(i & ~HARDENED)+('h' if i&HARDENED else '') for i in path])

def str2path(path):
    # normalize notation and return numbers, no error checking
    rv = []

    for i in path.split('/'):
        if i in ('m', 'M'):
            continue
        if not i:
            # trailing or duplicated slashes
            continue

        if i[-1] in "'phHP":
            if len(i) < 2:
                raise ValueError(f"Malformed bip32 path component: {i}")
            num = int(i[:-1], 0)
            if not path_component_in_range(num):
                raise ValueError(f"Hardened path component out of range: {i}")
            here = num | HARDENED
        else:
            here = int(i, 0)
            if not path_component_in_range(here):
                # cannot be less than 0
                # cannot be more than (2 ** 31) - 1
                raise ValueError(f"Non-hardened path component out of range: {i}")

        rv.append(here)

    return rv

# predicates for numeric paths. stop giggling
all_hardened = lambda path: all(bool(i & HARDENED) for i in path)
none_hardened = lambda path: not any(bool(i & HARDENED) for i in path)

# EOF
