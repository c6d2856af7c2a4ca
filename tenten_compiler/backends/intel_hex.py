"""Intel HEX memory-image backend and record reader.

WHY: Device programmers and the host runtime load the audio region as a
raw memory image rather than as code. Intel HEX is the lowest common
denominator format for that: line-oriented, checksummed, and readable by
every flashing tool.

HOW: All WRITE instructions inside [0x1000, 0x1600) are applied, in IR
order, to a 0x600-byte image (offset 0 = address 0x1000), so the last
write to an address wins. The image is then cut into 16-byte blocks;
each block holding at least one non-zero byte becomes one data record.
An end-of-file record closes the output.

RULES:
- Record: ":" LL AAAA 00 DD... CC, upper-case hex, one record per line
- Checksum: two's complement of the byte sum of length, address high,
  address low and data, masked to 0xFF
- All-zero blocks are omitted entirely
- WRITE values are stored modulo 256, as a byte array would
- The EOF record is always ":00000001FF"
- parse_intel_hex() verifies every checksum and raises ValueError on any
  malformed record
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

from tenten_compiler.config import AUDIO_REGION_SIZE, AUDIO_REGION_START, in_audio_region
from tenten_compiler.core.ir import Instruction, writes
from tenten_compiler.backends.base import BackendOptions, BaseBackend

RECORD_DATA = 0x00
RECORD_EOF = 0x01
EOF_RECORD = ":00000001FF"
BYTES_PER_RECORD = 16


def record_checksum(fields: Iterable[int]) -> int:
    """Intel HEX checksum over length, address bytes and data bytes."""
    return ((~sum(fields)) + 1) & 0xFF


def build_image(ir: List[Instruction]) -> bytearray:
    """Apply audio-region WRITEs to a zeroed 0x600-byte image."""
    image = bytearray(AUDIO_REGION_SIZE)
    for instr in writes(ir):
        if in_audio_region(instr.address):
            image[instr.address - AUDIO_REGION_START] = instr.value & 0xFF
    return image


def data_record(address: int, data: bytes) -> str:
    """Format one type-00 record for ``data`` at a 16-bit address."""
    fields = [len(data), (address >> 8) & 0xFF, address & 0xFF] + list(data)
    body = "{:02X}{:04X}{:02X}{}".format(
        len(data), address & 0xFFFF, RECORD_DATA, "".join("{:02X}".format(b) for b in data),
    )
    return ":{}{:02X}".format(body, record_checksum(fields))


def image_to_records(image: bytes, base_address: int = AUDIO_REGION_START) -> List[str]:
    """Data records for every 16-byte block with a non-zero byte, plus EOF."""
    records: List[str] = []
    for offset in range(0, len(image), BYTES_PER_RECORD):
        block = bytes(image[offset:offset + BYTES_PER_RECORD])
        if any(block):
            records.append(data_record(base_address + offset, block))
    records.append(EOF_RECORD)
    return records


def parse_intel_hex(text: str) -> List[Tuple[int, bytes]]:
    """Read data records from Intel HEX text.

    Blank lines are ignored. Reading stops at the EOF record.

    Returns:
        (address, data) pairs in file order.

    Raises:
        ValueError: On a missing start code, bad hex digits, a length
            that disagrees with the record, a checksum mismatch, or an
            unsupported record type.
    """
    chunks: List[Tuple[int, bytes]] = []
    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        if not line.startswith(":"):
            raise ValueError("Line {}: record does not start with ':'".format(number))
        try:
            payload = bytes.fromhex(line[1:])
        except ValueError:
            raise ValueError("Line {}: invalid hex digits".format(number)) from None
        if len(payload) < 5 or len(payload) != payload[0] + 5:
            raise ValueError("Line {}: record length mismatch".format(number))
        if record_checksum(payload[:-1]) != payload[-1]:
            raise ValueError("Line {}: checksum mismatch".format(number))

        record_type = payload[3]
        if record_type == RECORD_EOF:
            break
        if record_type != RECORD_DATA:
            raise ValueError("Line {}: unsupported record type {:02X}".format(number, record_type))
        address = (payload[1] << 8) | payload[2]
        chunks.append((address, bytes(payload[4:-1])))
    return chunks


class IntelHexBackend(BaseBackend):
    """Emits an Intel HEX image of the audio region."""

    @property
    def name(self) -> str:
        return "Intel HEX"

    @property
    def suffix(self) -> str:
        return ".hex"

    def emit(self, ir: List[Instruction], options: BackendOptions) -> str:
        return "\n".join(image_to_records(build_image(ir))) + "\n"
