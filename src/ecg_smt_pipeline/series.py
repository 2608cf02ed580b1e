"""Time series assembly from decoded measurements."""

from typing import Sequence, Union
from dataclasses import dataclass

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class TimeSeries:
    """Ordered samples with their 1-based positions."""
    values: np.ndarray  # Sample values (float), in time order
    index: np.ndarray   # 1..N sample positions

    def __len__(self) -> int:
        return len(self.values)

    def to_frame(self) -> pd.DataFrame:
        """Return the series as a (Point_ID, Measurement) table."""
        return pd.DataFrame({"Point_ID": self.index, "Measurement": self.values})


def build_series(measurements: Union[Sequence[float], np.ndarray]) -> TimeSeries:
    """Wrap measurements as a TimeSeries with the index sequence 1..N."""
    values = np.array(measurements, dtype=np.float64)
    values.setflags(write=False)
    index = np.arange(1, len(values) + 1, dtype=np.int64)
    index.setflags(write=False)
    return TimeSeries(values=values, index=index)
