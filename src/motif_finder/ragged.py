from dataclasses import dataclass
from typing import List

import numpy as np


@dataclass(frozen=True, eq=False)
class RaggedData:
    """
    Batch of integer-encoded DNA sequences of different lengths.

    Sequence ``i`` occupies ``data[offsets[i]:offsets[i + 1]]``; numba kernels
    receive both arrays directly.
    """

    data: np.ndarray
    offsets: np.ndarray


def ragged_from_list(arrays: List[np.ndarray], dtype=np.int8) -> RaggedData:
    """Concatenate encoded sequences and record where each one starts."""
    offsets = np.zeros(len(arrays) + 1, dtype=np.int64)
    offsets[1:] = np.cumsum([len(a) for a in arrays], dtype=np.int64)
    if len(arrays) == 0:
        return RaggedData(np.empty(0, dtype=dtype), offsets)
    return RaggedData(np.concatenate(arrays).astype(dtype, copy=False), offsets)
