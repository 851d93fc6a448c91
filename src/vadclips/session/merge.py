from typing import Iterable
import numpy as np

from vadclips.session.clip_events import AudioBurst


def merge_bursts(bursts: Iterable[AudioBurst | np.ndarray]) -> np.ndarray:
    """
    Concatenate the bursts of one session into a single float32 buffer.

    The total length is known before the buffer is allocated, samples are
    copied in arrival order with no gap, gain change or resampling. An empty
    sequence gives an empty array.
    """
    parts = [b.samples if isinstance(b, AudioBurst) else np.asarray(b, dtype=np.float32).reshape(-1)
             for b in bursts]
    total = sum(part.shape[0] for part in parts)
    merged = np.empty(total, dtype=np.float32)
    offset = 0
    for part in parts:
        merged[offset:offset + part.shape[0]] = part
        offset += part.shape[0]
    return merged
