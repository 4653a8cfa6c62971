from abc import abstractmethod

WORD = 0x100000000     # 2**32
UINT64_LEN = 8


def _write_word_le(buffer, word, offset):
    for _ in range(4):
        buffer[offset] = word & 0xFF
        word >>= 8
        offset += 1
    return offset


def write_uint64_le(buffer, value, offset=0) -> int:
    """
    Writes an unsigned 64-bit value into buffer, least significant byte first.

    The value is split into its low and high 32-bit words, which are written in that order.
    Values wider than 64 bits are reduced modulo 2**64. The buffer is not resized or bounds
    checked; a buffer that is too short raises its own IndexError.

    >>> buf = bytearray(8)
    >>> write_uint64_le(buf, 0x0102030405060708)
    8
    >>> list(buf)
    [8, 7, 6, 5, 4, 3, 2, 1]

    :param buffer: a mutable sequence of bytes, such as a bytearray
    :param value: a non-negative integer, or a string of decimal digits
    :param offset: the index of the first byte to write
    :return: the offset following the written bytes
    """
    value = int(value)
    if value < 0:
        raise ValueError("value must not be negative: %d" % value)
    low = value % WORD
    high = (value // WORD) % WORD
    offset = _write_word_le(buffer, low, offset)
    return _write_word_le(buffer, high, offset)


def read_uint64_le(buffer, offset=0) -> int:
    """
    Reads an unsigned 64-bit value written by write_uint64_le.

    >>> read_uint64_le(bytes([8, 7, 6, 5, 4, 3, 2, 1]))
    72623859790382856
    """
    value = 0
    for i in reversed(range(UINT64_LEN)):
        value = (value << 8) | buffer[offset + i]
    return value


class Decoder:
    @abstractmethod
    def decode(self, data):
        """
        decodes a value from a buffer of binary data.
        :param data: the encoded bytes
        :returns the decoded value
        """
        raise NotImplementedError


class Encoder:
    @abstractmethod
    def encode(self, value) -> bytes:
        """encodes a given value as a buffer of binary data."""
        raise NotImplementedError


class Codec(Decoder, Encoder):
    """
    Knows how to convert a value to/from the on-wire data format.
    """

    @abstractmethod
    def encoded_len(self) -> int:
        """Determine the number of bytes in the encoded data for this value"""
        raise NotImplementedError


class Uint64LECodec(Codec):
    """ Encodes unsigned 64-bit values in little-endian byte order, as used in WinRM frames. """

    def encoded_len(self):
        return UINT64_LEN

    def encode(self, value):
        buf = bytearray(UINT64_LEN)
        write_uint64_le(buf, value)
        return bytes(buf)

    def decode(self, data):
        if len(data) < UINT64_LEN:
            raise ValueError("expected %d bytes but got %d" % (UINT64_LEN, len(data)))
        return read_uint64_le(data)
