"""
Parallel keystream — one logical stream split into counter ranges.

Each worker gets its own copy of the state (same constants, key and
nonce) positioned at the first counter of its range, so no state object
is ever shared between threads and no locking is needed inside the
workers.
"""

import logging
import threading

from config.settings import Settings

from .block import require_rounds, xor_stream_bytes
from .state import BLOCK_SIZE

logger = logging.getLogger("ChaChaCrypt.Parallel")


def partition(n_blocks: int, workers: int) -> list[tuple[int, int]]:
    """
    Split *n_blocks* into at most *workers* contiguous ranges.

    Returns ``[(first_block, block_count), …]`` covering every block
    exactly once, in order.
    """
    if n_blocks <= 0:
        return []
    workers = max(1, min(workers, n_blocks))
    base, extra = divmod(n_blocks, workers)
    ranges, first = [], 0
    for i in range(workers):
        count = base + (1 if i < extra else 0)
        ranges.append((first, count))
        first += count
    return ranges


def parallel_xor(state, data: bytes, double_rounds: int = 10,
                 workers: int | None = None,
                 allow_reduced_rounds: bool = False) -> bytes:
    """
    XOR *data* with the keystream of *state*, range by range.

    *state* is used only as a template; its counter is the first block
    of the stream and it is never mutated. Short inputs (fewer than
    ``Settings.PARALLEL_MIN_BLOCKS`` blocks) run on the calling thread.
    """
    require_rounds(double_rounds, allow_reduced_rounds)
    if workers is None:
        workers = Settings.PARALLEL_WORKERS

    n_blocks = -(-len(data) // BLOCK_SIZE)
    if n_blocks < Settings.PARALLEL_MIN_BLOCKS or workers <= 1:
        return xor_stream_bytes(
            state.copy(), data, double_rounds, allow_reduced_rounds
        )

    ranges  = partition(n_blocks, workers)
    results: list[bytes | None] = [None] * len(ranges)
    errors:  list[BaseException] = []

    def _work(slot: int, first: int, count: int):
        try:
            worker_state = state.with_counter(state.counter + first)
            chunk = data[first * BLOCK_SIZE:(first + count) * BLOCK_SIZE]
            results[slot] = xor_stream_bytes(
                worker_state, chunk, double_rounds, allow_reduced_rounds
            )
        except Exception as exc:
            errors.append(exc)

    threads = [
        threading.Thread(target=_work, args=(slot, first, count),
                         daemon=True)
        for slot, (first, count) in enumerate(ranges)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    if errors:
        raise errors[0]

    logger.debug(
        "Parallel keystream: %d blocks over %d workers", n_blocks, len(ranges)
    )
    return b"".join(results)
