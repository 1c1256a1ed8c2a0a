"""
Data-parallel fan-out over a flat index range.

The range ``[0, n)`` is split into at most ``n_workers`` contiguous chunks.
Chunk ``k`` is processed by worker ``k``, which owns cache slot ``k`` for
the whole call, so workers never share mutable state. The call returns
once every chunk has finished; the first worker exception is re-raised.

Usage
-----
    def body(start, stop, worker, rng):
        for i in range(start, stop):
            out[i] = evaluate(i, worker, rng)

    run_chunked(len(out), n_workers=4, body=body, rng=123)
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Callable

import numpy as np

logger = logging.getLogger(__name__)


def default_worker_count() -> int:
    """Number of workers used when none is requested."""
    return max(1, os.cpu_count() or 1)


def chunk_ranges(n: int, n_chunks: int) -> list[tuple[int, int]]:
    """Split ``range(n)`` into ``n_chunks`` contiguous, nearly equal ranges.

    Empty ranges are dropped, so fewer than ``n_chunks`` pairs are returned
    when ``n < n_chunks``.
    """
    if n_chunks < 1:
        raise ValueError("n_chunks must be >= 1")
    bounds = np.linspace(0, n, n_chunks + 1).round().astype(int)
    return [(int(a), int(b)) for a, b in zip(bounds[:-1], bounds[1:]) if b > a]


def as_generator(rng) -> np.random.Generator:
    """Return ``rng`` if it is a Generator, else ``default_rng(rng)``."""
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


def worker_generators(rng, n_workers: int) -> list[np.random.Generator]:
    """Independent generators, one per worker, derived from ``rng``."""
    return as_generator(rng).spawn(n_workers)


def run_chunked(n: int, n_workers: int, body: Callable, rng=None) -> None:
    """Run ``body(start, stop, worker, rng)`` over ``range(n)`` in parallel.

    Parameters
    ----------
    n : int
        Length of the index range.
    n_workers : int
        Number of workers (and chunks).
    body : callable
        Called once per chunk with its bounds, the worker id and a generator
        private to that worker.
    rng : None, int or numpy Generator
        Seed material for the per-worker generators.
    """
    chunks = chunk_ranges(n, n_workers)
    if not chunks:
        return
    rngs = worker_generators(rng, len(chunks))
    if len(chunks) == 1:
        start, stop = chunks[0]
        body(start, stop, 0, rngs[0])
        return

    logger.debug("Dispatching %d items over %d workers", n, len(chunks))
    with ThreadPoolExecutor(max_workers=len(chunks)) as pool:
        futures = [
            pool.submit(body, start, stop, worker, rngs[worker])
            for worker, (start, stop) in enumerate(chunks)
        ]
        for future in futures:
            future.result()
