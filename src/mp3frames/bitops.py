def extract_bits(value: int, msb: int, width: int) -> int:
    """Return the `width`-bit field of a 32-bit value whose top bit is bit `msb` (31 = MSB)."""
    shift = msb - width + 1
    return (value >> shift) & ((1 << width) - 1)

def read_uint32_be(buf: bytes) -> int:
    return (buf[0] << 24) | (buf[1] << 16) | (buf[2] << 8) | buf[3]

def synchsafe_to_int(buf: bytes) -> int:
    """Decode a 4-byte synchsafe integer (7 bits per byte, most significant first)."""
    out = 0
    for b in buf[:4]:
        out = (out << 7) | (b & 0x7F)
    return out

def int_to_synchsafe(n: int) -> bytes:
    if n < 0 or n >= 1 << 28:
        raise ValueError("synchsafe value must fit in 28 bits")
    return bytes([(n >> 21) & 0x7F, (n >> 14) & 0x7F, (n >> 7) & 0x7F, n & 0x7F])
