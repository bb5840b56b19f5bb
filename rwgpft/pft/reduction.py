"""
Parallel fold of per-edge PFT contributions.
"""

import logging
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from ..utils.constants import NUMPFT

logger = logging.getLogger(__name__)


def fold_edges(row_fn, nedges, nthreads=1, nq=NUMPFT):
    """
    Evaluate row_fn for every source edge and sum the rows.

    The edges are split into contiguous chunks that run on a thread pool.
    Each chunk fills its own columns of the by-edge array and returns its
    partial sums, which are merged after the pool has drained.  Exceptions
    raised by row_fn propagate to the caller.

    Parameters
    ----------
    row_fn : callable
        row_fn(ne) -> ndarray, shape (nq,)
    nedges : int
        Number of source edges
    nthreads : int, optional
        Number of worker threads (1 runs serially)
    nq : int, optional
        Length of a row

    Returns
    -------
    total : ndarray, shape (nq,)
    by_edge : ndarray, shape (nq, nedges)
    """
    by_edge = np.zeros((nq, nedges))
    total = np.zeros(nq)
    if nedges == 0:
        return total, by_edge

    nthreads = max(1, min(int(nthreads or 1), nedges))
    chunks = np.array_split(np.arange(nedges), min(nedges, 4 * nthreads))
    logger.debug("folding %d edges in %d chunks on %d threads",
                 nedges, len(chunks), nthreads)

    def work(chunk):
        rows = np.zeros((nq, len(chunk)))
        for i, ne in enumerate(chunk):
            rows[:, i] = row_fn(int(ne))
        return chunk, rows

    if nthreads == 1:
        results = [work(chunk) for chunk in chunks]
    else:
        with ThreadPoolExecutor(max_workers=nthreads) as pool:
            results = list(pool.map(work, chunks))

    for chunk, rows in results:
        by_edge[:, chunk] = rows
        total += rows.sum(axis=1)

    return total, by_edge
