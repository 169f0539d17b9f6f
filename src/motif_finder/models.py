"""
Profile Model Module
====================

Count and probability matrices built from a motif set, together with the
immutable result containers returned by the search and ranking code.

Key Features:
- Count/profile matrices as (4, k) numpy arrays, rows ordered A, C, G, T
- Optional pseudocounts (every cell starts at 1) to avoid zero probabilities
- Column-disagreement score and consensus string of a motif set
- Frozen dataclasses for search and ranking results
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from dataclasses import field as dc_field
from typing import Iterator, List, Sequence, Tuple

import numpy as np

from motif_finder.errors import InvalidInputError, InvalidMotifLengthError, InvalidNucleotideError, NoMotifsFoundError
from motif_finder.functions import NUCLEOTIDES, WILDCARD_CODE, encode_patterns

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchResult:
    """Immutable outcome of one motif search.

    Attributes
    ----------
    algorithm : str
        Registry key of the strategy that produced the motifs
    motifs : tuple of str
        Motif set, one k-mer per contributing sequence in input order
    score : int
        Column-disagreement score of ``motifs`` (median string: total Hamming distance)
    restart_scores : tuple of int
        Best score of every restart in submission order
    """

    algorithm: str
    motifs: Tuple[str, ...]
    score: int
    restart_scores: Tuple[int, ...] = dc_field(default_factory=tuple)


@dataclass(frozen=True)
class RankedMotif:
    """Total alignment score of a motif and its best aligned representation."""

    score: int
    representative: str

    def __iter__(self) -> Iterator:
        """Allow unpacking as ``score, representative``."""
        return iter((self.score, self.representative))


def encode_motifs(motifs: Sequence[str]) -> np.ndarray:
    """Encode a motif set into a (t, k) int8 matrix, rejecting empty or ragged sets."""
    if len(motifs) == 0:
        raise InvalidInputError("Motif set is empty")

    k = len(motifs[0])
    if k == 0:
        raise InvalidInputError("Motifs must not be empty strings")
    for motif in motifs:
        if len(motif) != k:
            raise InvalidInputError(f"Inconsistent motif lengths: expected {k}, got {len(motif)} ({motif!r})")

    return encode_patterns(list(motifs), k)


def build_count_matrix(motifs: Sequence[str], pseudocount: bool = False) -> np.ndarray:
    """Count nucleotides per motif position.

    Symbols other than A/C/G/T (the ``N`` wildcard included) are not counted.
    """
    encoded = encode_motifs(motifs)
    k = encoded.shape[1]

    counts = np.full((4, k), 1 if pseudocount else 0, dtype=np.int64)
    for code in range(4):
        counts[code] += (encoded == code).sum(axis=0)
    return counts


def build_profile_matrix(motifs: Sequence[str], pseudocount: bool = False) -> np.ndarray:
    """Divide the count matrix by the number of motifs.

    With pseudocounts the columns sum to (t + 4) / t rather than 1; only the
    relative magnitudes are used by the searches.
    """
    counts = build_count_matrix(motifs, pseudocount)
    if counts.shape[0] != len(NUCLEOTIDES):
        raise InvalidInputError(f"Count matrix has {counts.shape[0]} rows, expected {len(NUCLEOTIDES)}")
    return counts / float(len(motifs))


def probability_of_kmer(kmer: str, profile: np.ndarray) -> float:
    """Probability of ``kmer`` under ``profile``; unknown symbols contribute a factor of 1."""
    probability = 1.0
    for position, nucleotide in enumerate(kmer):
        row = NUCLEOTIDES.find(nucleotide)
        if row >= 0:
            probability *= float(profile[row, position])
    return probability


def score_motifs(motifs: Sequence[str]) -> int:
    """Sum over columns of (t - most frequent symbol count). 0 means fully conserved."""
    encoded = encode_motifs(motifs)
    t, k = encoded.shape

    symbol_counts = np.zeros((WILDCARD_CODE + 1, k), dtype=np.int64)
    for code in range(WILDCARD_CODE + 1):
        symbol_counts[code] = (encoded == code).sum(axis=0)

    return int(np.sum(t - symbol_counts.max(axis=0)))


def consensus_string(motifs: Sequence[str], k: int) -> str:
    """Most frequent nucleotide per column of the pseudo-counted count matrix, ties A<C<G<T."""
    if k <= 0:
        raise InvalidMotifLengthError(f"Motif length must be positive, got {k}")
    if len(motifs) == 0:
        raise NoMotifsFoundError("Cannot build a consensus string from an empty motif set")
    if len(motifs) == 1:
        return motifs[0]
    if any(len(motif) != k for motif in motifs):
        raise InvalidInputError(f"All motifs must have length {k}")

    counts = build_count_matrix(motifs, pseudocount=True)
    column_max = counts.max(axis=0)
    if np.any(column_max <= 0):
        column = int(np.argmax(column_max <= 0))
        raise InvalidNucleotideError(f"No nucleotide observed in column {column}")

    rows = np.argmax(counts, axis=0)
    consensus = "".join(NUCLEOTIDES[row] for row in rows)
    logger.debug(f"Consensus of {len(motifs)} motifs: {consensus}")
    return consensus


def unique_motifs(motifs: Sequence[str]) -> List[str]:
    """Distinct motifs in order of first occurrence."""
    return list(dict.fromkeys(motifs))
