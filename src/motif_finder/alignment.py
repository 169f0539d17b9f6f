"""
alignment
=========

Smith-Waterman local alignment with full backtracking, and ranking of
candidate motifs by their total alignment score against the input
sequences.
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import List, Sequence, Tuple

import numpy as np
import pandas as pd
from joblib import Parallel, delayed

from motif_finder.errors import InvalidPointerError, NoMotifsFoundError
from motif_finder.functions import (
    POINTER_DIAGONAL,
    POINTER_DOWN,
    POINTER_EMPTY,
    POINTER_RIGHT,
    POINTER_STOP,
    local_alignment_matrices,
)
from motif_finder.models import RankedMotif

logger = logging.getLogger(__name__)

GAP = "-"


class Pointer(IntEnum):
    """Direction stored in a backtrack cell."""

    EMPTY = POINTER_EMPTY
    DOWN = POINTER_DOWN
    RIGHT = POINTER_RIGHT
    DIAGONAL = POINTER_DIAGONAL
    STOP = POINTER_STOP


def max_of_matrix(matrix: np.ndarray) -> Tuple[int, int, int]:
    """Return ``(value, i, j)`` of the first maximum in row-major order."""
    flat_index = int(np.argmax(matrix))
    i, j = np.unravel_index(flat_index, matrix.shape)
    return int(matrix[i, j]), int(i), int(j)


def output_backtrack(backtrack: np.ndarray, v: str, w: str, i: int, j: int) -> Tuple[str, str]:
    """Walk the pointer grid from cell (i, j) back towards the origin.

    Returns the aligned forms of ``v`` and ``w`` with ``-`` marking gaps.
    """
    aligned_v: List[str] = []
    aligned_w: List[str] = []

    while i > 0 or j > 0:
        pointer = int(backtrack[i, j])
        if pointer == Pointer.DOWN:
            aligned_v.append(v[i - 1])
            aligned_w.append(GAP)
            i -= 1
        elif pointer == Pointer.RIGHT:
            aligned_v.append(GAP)
            aligned_w.append(w[j - 1])
            j -= 1
        elif pointer == Pointer.DIAGONAL:
            aligned_v.append(v[i - 1])
            aligned_w.append(w[j - 1])
            i -= 1
            j -= 1
        elif pointer == Pointer.STOP:
            break
        else:
            raise InvalidPointerError(f"Backtrack cell ({i}, {j}) holds no direction (pointer={pointer})")

    return "".join(reversed(aligned_v)), "".join(reversed(aligned_w))


def local_alignment(
    v: str, w: str, match_score: int, mismatch_penalty: int, indel_penalty: int
) -> Tuple[int, str, str]:
    """
    Best-scoring local alignment of ``v`` and ``w``.

    Parameters
    ----------
    v, w : str
        Strings to align; ``N`` always counts as a mismatch.
    match_score : int
        Reward for a matching pair.
    mismatch_penalty : int
        Score of a mismatching pair (normally negative).
    indel_penalty : int
        Score of a gap (normally negative).

    Returns
    -------
    tuple
        ``(score, aligned_v, aligned_w)``
    """
    scores, backtrack = local_alignment_matrices(v, w, match_score, mismatch_penalty, indel_penalty)
    score, i, j = max_of_matrix(scores)
    aligned_v, aligned_w = output_backtrack(backtrack, v, w, i, j)
    return score, aligned_v, aligned_w


def score_motif_against_sequences(
    motif: str, sequences: Sequence[str], match_score: int, mismatch_penalty: int, indel_penalty: int
) -> Tuple[int, str]:
    """Total local alignment score of ``motif`` over all sequences.

    The representative is the aligned motif of the first alignment with the
    highest score.
    """
    total = 0
    best_score = None
    representative = motif
    for seq in sequences:
        score, _, aligned_motif = local_alignment(seq, motif, match_score, mismatch_penalty, indel_penalty)
        total += score
        if best_score is None or score > best_score:
            best_score = score
            representative = aligned_motif
    return total, representative


class AlignmentRanker:
    """
    Rank candidate motifs by how well they align back to the sequences.

    Each motif is scored in its own joblib task; the collected table is
    sorted by total score (stable, so ties keep motif order), exact
    duplicates are dropped and the best ``top_k`` rows are returned.
    """

    def __init__(
        self,
        match_score: int = 1,
        mismatch_penalty: int = -10,
        indel_penalty: int = -100,
        top_k: int = 5,
        n_jobs: int = 1,
    ) -> None:
        self.match_score = match_score
        self.mismatch_penalty = mismatch_penalty
        self.indel_penalty = indel_penalty
        self.top_k = top_k
        self.n_jobs = n_jobs

    def rank(self, sequences: Sequence[str], motifs: Sequence[str]) -> List[RankedMotif]:
        if len(motifs) == 0:
            raise NoMotifsFoundError("No motifs to rank")

        sequences = [seq.upper() for seq in sequences]
        logger.info(
            f"Ranking {len(motifs)} motifs against {len(sequences)} sequences "
            f"(match={self.match_score}, mismatch={self.mismatch_penalty}, indel={self.indel_penalty})"
        )

        results = Parallel(n_jobs=self.n_jobs, backend="loky")(
            delayed(score_motif_against_sequences)(
                motif.upper(), sequences, self.match_score, self.mismatch_penalty, self.indel_penalty
            )
            for motif in motifs
        )

        table = pd.DataFrame(results, columns=["score", "representative"])
        table = table.sort_values("score", ascending=False, kind="stable")
        table = table.drop_duplicates().head(self.top_k)

        ranked = [
            RankedMotif(score=int(row.score), representative=str(row.representative))
            for row in table.itertuples(index=False)
        ]
        for position, item in enumerate(ranked, start=1):
            logger.debug(f"Rank {position}: {item.representative} (score={item.score})")
        return ranked
