import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from ecg_smt_pipeline.pipeline import run_pipeline

# Header + sequence, channel 1 = 029D, channels 2-6 and trailer
SAMPLE_PACKET = "A55A02B3029D01FF01FA01F501F001E903"


def make_packet(value: int, seq: int = 0) -> str:
    """Build a 34-char packet with the given channel-1 value."""
    return f"A55A02{seq % 256:02X}{value:04X}01FF01FA01F501F001E903"


def synthetic_ecg(n: int = 600, period: int = 150, seed: int = 7) -> np.ndarray:
    """Baseline with slow drift, small noise and sharp beats every ``period`` samples."""
    rng = np.random.default_rng(seed)
    t = np.arange(n)
    values = 500 + 20 * np.sin(2 * np.pi * t / n) + rng.normal(0, 2, n)
    for start in range(period // 2, n, period):
        values[start - 1] += 150
        values[start] += 300
        values[start + 1] += 150
    return values


@pytest.fixture(scope="session")
def sample_result():
    return run_pipeline()
