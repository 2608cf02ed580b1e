"""
ECG-SMT packet decoding.

Handles:
- Splitting the raw hex stream into fixed 17-byte packets
- Extracting the channel-1 measurement from each packet
- Loading the embedded sample recording
"""

import re
from pathlib import Path
from typing import List
from dataclasses import dataclass, field

import numpy as np

from .config import Config, default_config
from .errors import FormatError

SAMPLE_SIGNAL_PATH = Path(__file__).resolve().parent / "data" / "ecg_smt_sample.hex"


@dataclass
class DecodeResult:
    """Container for decoded channel-1 measurements."""
    values: np.ndarray        # Channel-1 values (unsigned ints), packet order
    n_packets: int            # Number of 34-character chunks in the stream
    skipped_packets: List[int] = field(default_factory=list)  # Chunks failing the pattern

    @property
    def n_measurements(self) -> int:
        """Number of successfully decoded packets."""
        return len(self.values)


def _packet_pattern(config: Config) -> "re.Pattern[str]":
    tail = config.PACKET_HEX_LENGTH - config.CHANNEL_FIELD_OFFSET - config.CHANNEL_FIELD_WIDTH
    return re.compile(
        rf"^[0-9A-Fa-f]{{{config.CHANNEL_FIELD_OFFSET}}}"
        rf"([0-9A-Fa-f]{{{config.CHANNEL_FIELD_WIDTH}}})"
        rf"[0-9A-Fa-f]{{{tail}}}$"
    )


def decode_packets(raw: str, config: Config = default_config) -> DecodeResult:
    """
    Decode a concatenated hex packet stream into channel-1 measurements.

    Parameters
    ----------
    raw : str
        Hex string made of consecutive fixed-size packets. Line breaks
        and whitespace around each line are ignored; whitespace inside a
        line makes the packet holding it malformed.
    config : Config
        Pipeline configuration with the packet layout.

    Returns
    -------
    DecodeResult
        Decoded values in packet order. Packets that do not match the
        fixed layout are skipped and listed in ``skipped_packets``; their
        measurement is absent, not zero.

    Raises
    ------
    FormatError
        If the stream is empty or its length is not a multiple of the
        packet size.
    """
    # Drop line breaks and per-line padding; blanks inside a line stay
    stream = "".join(line.strip() for line in raw.splitlines())
    size = config.PACKET_HEX_LENGTH

    if not stream:
        raise FormatError("Empty packet stream")
    if len(stream) % size != 0:
        raise FormatError(
            f"Stream length {len(stream)} is not a multiple of the packet size ({size} hex chars)"
        )

    pattern = _packet_pattern(config)
    values: List[int] = []
    skipped: List[int] = []

    n_packets = len(stream) // size
    for i in range(n_packets):
        match = pattern.match(stream[i * size:(i + 1) * size])
        if match is None:
            skipped.append(i)
            continue
        values.append(int(match.group(1), 16))

    return DecodeResult(
        values=np.asarray(values, dtype=np.int64),
        n_packets=n_packets,
        skipped_packets=skipped,
    )


def decode(raw: str, config: Config = default_config) -> np.ndarray:
    """Decode a packet stream and return only the channel-1 values."""
    return decode_packets(raw, config).values


def read_signal_file(path: Path) -> str:
    """Read a raw hex packet stream from a text file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Signal file not found: {path}")
    return path.read_text(encoding="ascii")


def load_sample_signal() -> str:
    """Return the embedded 588-packet ECG-SMT recording."""
    return read_signal_file(SAMPLE_SIGNAL_PATH)
