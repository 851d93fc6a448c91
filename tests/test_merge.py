"""Tests for merge_bursts."""

import numpy as np

from vadclips.session.clip_events import AudioBurst
from vadclips.session.merge import merge_bursts


def test_length_is_sum_and_order_is_kept():
    lengths = [3, 0, 5, 1]
    bursts = []
    start = 0
    for n in lengths:
        bursts.append(AudioBurst.from_samples(np.arange(start, start + n, dtype=np.float32) / 100))
        start += n

    merged = merge_bursts(bursts)

    assert merged.dtype == np.float32
    assert merged.shape == (sum(lengths),)
    np.testing.assert_array_equal(merged, np.arange(sum(lengths), dtype=np.float32) / 100)


def test_empty_input_gives_empty_output():
    merged = merge_bursts([])
    assert merged.shape == (0,)
    assert merged.dtype == np.float32


def test_no_gain_or_clamp_applied():
    """Merging is a plain copy, out of range values pass through untouched."""
    merged = merge_bursts([AudioBurst.from_samples([1.5, -2.0]), AudioBurst.from_samples([0.25])])
    assert merged.tolist() == [1.5, -2.0, 0.25]


def test_inputs_are_not_modified():
    burst = AudioBurst.from_samples([0.1, 0.2])
    merged = merge_bursts([burst, burst])
    merged[0] = 0.9
    assert burst.samples[0] == np.float32(0.1)
    assert len(merged) == 4


def test_plain_arrays_are_accepted():
    merged = merge_bursts([np.ones(2, dtype=np.float32), [0.5, 0.5, 0.5]])
    assert merged.tolist() == [1.0, 1.0, 0.5, 0.5, 0.5]
