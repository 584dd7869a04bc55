"""
data.py: Self-describing file content.

Everything written by create and append is a sequence of segments. A
segment is a 16 byte header (payload seed, payload length) followed by
the payload, which is a pseudo random byte stream derived from the seed.
Reads regenerate the stream from the header and compare.
"""

import random
import struct

from slive.fs import DataVerificationError

HEADER = struct.Struct(">QQ")
HEADER_LEN = HEADER.size
GEN_CHUNK = 4096
MAX_SEGMENT = 1 << 40

def payload(seed, length):
    """
    First ``length`` bytes of the stream for ``seed``. Shorter
    requests are always prefixes of longer ones.
    """
    rnd = random.Random(seed)
    out = bytearray()
    while len(out) < length:
        out += rnd.randbytes(GEN_CHUNK)
    return bytes(out[:length])


class DataWriter(object):
    def __init__(self, rnd):
        self._rnd = rnd

    def segment(self, size):
        """
        Build one segment of ``size`` bytes in total. Sizes smaller
        than the header still produce a full header.
        """
        seed = self._rnd.getrandbits(63)
        length = max(0, size - HEADER_LEN)
        return HEADER.pack(seed, length) + payload(seed, length)


class VerifyResult(object):
    def __init__(self):
        self.bytes_read = 0
        self.chunks_verified = 0
        self.chunks_unverified = 0


class DataVerifier(object):
    def verify(self, data):
        """
        Check every segment in ``data``. Complete segments count as
        verified; a trailing partial segment is checked as far as it
        goes and counts as unverified. Raises ``DataVerificationError``
        on any mismatch.
        """
        result = VerifyResult()
        result.bytes_read = len(data)
        offset = 0
        while offset < len(data):
            if len(data) - offset < HEADER_LEN:
                result.chunks_unverified += 1
                break
            seed, length = HEADER.unpack_from(data, offset)
            if length > MAX_SEGMENT:
                raise DataVerificationError(
                    "Bad segment header at offset {} (length {})".format(offset, length))
            offset += HEADER_LEN
            available = min(length, len(data) - offset)
            if data[offset:offset + available] != payload(seed, available):
                raise DataVerificationError(
                    "Segment at offset {} does not match its seed".format(offset - HEADER_LEN))
            offset += available
            if available < length:
                result.chunks_unverified += 1
            else:
                result.chunks_verified += 1
        return result
