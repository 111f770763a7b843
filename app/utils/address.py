import hashlib, re
import base58

from ..errors import InvalidAddress

TRON_ADDRESS_RE = re.compile(r"^T[1-9A-HJ-NP-Za-km-z]{25,34}$")


def tron_base58_to_hex(addr_b58: str) -> str:
    raw = base58.b58decode(addr_b58)
    if len(raw) != 25:
        raise ValueError("invalid TRON address length")
    body, checksum = raw[:-4], raw[-4:]
    if hashlib.sha256(hashlib.sha256(body).digest()).digest()[:4] != checksum:
        raise ValueError("invalid TRON address checksum")
    if body[0] != 0x41:
        raise ValueError("invalid TRON prefix (expected 0x41)")
    return body.hex()

def tron_hex_to_base58(hex_addr: str) -> str:
    hex_addr = hex_addr.lower()
    if hex_addr.startswith("0x"):
        hex_addr = hex_addr[2:]
    body = bytes.fromhex(hex_addr)
    if not body.startswith(b'\x41'):
        body = b'\x41' + body[-20:]
    checksum = hashlib.sha256(hashlib.sha256(body).digest()).digest()[:4]
    return base58.b58encode(body + checksum).decode()

def validate_address(value) -> str:
    """Return the address stripped, or raise InvalidAddress. No I/O."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidAddress(value, "Invalid TRON address: empty input")
    addr = value.strip()
    if not TRON_ADDRESS_RE.match(addr):
        raise InvalidAddress(addr)
    try:
        tron_base58_to_hex(addr)
    except ValueError as e:
        raise InvalidAddress(addr, f"Invalid TRON address ({e})") from e
    return addr

def abi_encode_address(addr_b58: str) -> str:
    # lower 20 bytes hold the address, upper 12 are zero
    body = tron_base58_to_hex(addr_b58)[2:]
    return body.rjust(64, "0")

def normalize_address(value) -> str:
    """Lowercase 21-byte hex form (41...) for exact comparisons.

    Accepts base58, 41-prefixed hex and 0x hex. Anything that doesn't decode
    is returned stripped so two identical unknown strings still compare equal.
    """
    s = (value or "").strip()
    if not s:
        return ""
    try:
        if s.startswith("T"):
            return tron_base58_to_hex(s)
        h = s.lower()
        if h.startswith("0x"):
            h = h[2:]
        if len(h) == 40:
            h = "41" + h
        if len(h) == 42 and h.startswith("41"):
            bytes.fromhex(h)
            return h
    except ValueError:
        pass
    return s

def display_address(value) -> str:
    """Base58 form of a hex address (41... or 0x...); anything else comes back stripped."""
    s = (value or "").strip()
    h = s.lower()
    if h.startswith("0x") and len(h) == 42:
        h = "41" + h[2:]
    if len(h) == 42 and h.startswith("41"):
        try:
            return tron_hex_to_base58(h)
        except ValueError:
            pass
    return s
