import numpy as np
from numba import njit, prange

from motif_finder.ragged import RaggedData, ragged_from_list

NUCLEOTIDES = "ACGT"
WILDCARD_CODE = 4

POINTER_EMPTY = -1
POINTER_DOWN = 0
POINTER_RIGHT = 1
POINTER_DIAGONAL = 2
POINTER_STOP = 3


def _build_translation_table() -> bytearray:
    """Byte table mapping A/C/G/T (any case) to 0..3 and everything else to the wildcard code."""
    trans_table = bytearray([WILDCARD_CODE] * 256)
    for char, code in zip(b"ACGTacgt", [0, 1, 2, 3] * 2):
        trans_table[char] = code
    return trans_table


_TRANS_TABLE = _build_translation_table()


def encode_sequence(sequence: str) -> np.ndarray:
    """Convert a nucleotide string to an int8 array of codes (A=0, C=1, G=2, T=3, other=4)."""
    raw = sequence.encode("ascii", errors="replace").translate(_TRANS_TABLE)
    return np.frombuffer(raw, dtype=np.int8).copy()


def encode_sequences(sequences) -> RaggedData:
    """Encode a collection of nucleotide strings into RaggedData."""
    return ragged_from_list([encode_sequence(seq) for seq in sequences], dtype=np.int8)


def encode_patterns(patterns, k: int) -> np.ndarray:
    """Encode equal-length patterns into a (n_patterns, k) int8 matrix."""
    if len(patterns) == 0:
        return np.empty((0, k), dtype=np.int8)
    raw = "".join(patterns).encode("ascii", errors="replace").translate(_TRANS_TABLE)
    return np.frombuffer(raw, dtype=np.int8).reshape(len(patterns), k).copy()


@njit(inline="always")
def _is_match(a, b):
    """Two codes match only when equal and not the wildcard."""
    return a == b and a != WILDCARD_CODE


@njit(parallel=True, cache=True)
def _batch_pattern_distances_jit(patterns, data, offsets):
    """Total minimum Hamming distance of every pattern against every sequence."""
    n_patterns = patterns.shape[0]
    k = patterns.shape[1]
    n_seq = len(offsets) - 1
    distances = np.zeros(n_patterns, dtype=np.int64)

    for p in prange(n_patterns):
        total = 0
        for i in range(n_seq):
            start = offsets[i]
            seq_len = offsets[i + 1] - start
            if seq_len < k:
                continue

            best = k + 1
            for s in range(seq_len - k + 1):
                mismatches = 0
                for j in range(k):
                    if not _is_match(patterns[p, j], data[start + s + j]):
                        mismatches += 1
                if mismatches < best:
                    best = mismatches
            total += best
        distances[p] = total

    return distances


def batch_pattern_distances(patterns: np.ndarray, sequences: RaggedData) -> np.ndarray:
    """Compute the distance to the sequence collection for each row of an encoded pattern matrix."""
    return _batch_pattern_distances_jit(patterns, sequences.data, sequences.offsets)


@njit(cache=True)
def _kmer_probabilities_jit(seq, k, profile):
    """Probability of each k-mer of an encoded sequence under a (4, k) profile."""
    n = seq.shape[0] - k + 1
    if n <= 0:
        return np.empty(0, dtype=np.float64)

    probabilities = np.empty(n, dtype=np.float64)
    for s in range(n):
        prob = 1.0
        for j in range(k):
            code = seq[s + j]
            # codes outside A/C/G/T leave the product unchanged
            if code < WILDCARD_CODE:
                prob *= profile[code, j]
        probabilities[s] = prob
    return probabilities


def kmer_probabilities(sequence: str, k: int, profile: np.ndarray) -> np.ndarray:
    """Return the profile probability of every k-mer of ``sequence`` in positional order."""
    profile = np.ascontiguousarray(profile, dtype=np.float64)
    return _kmer_probabilities_jit(encode_sequence(sequence), k, profile)


@njit(cache=True)
def _local_alignment_jit(v, w, match_score, mismatch_penalty, indel_penalty):
    """Fill the Smith-Waterman score grid and its backtrack pointers."""
    n = v.shape[0]
    m = w.shape[0]
    scores = np.zeros((n + 1, m + 1), dtype=np.int64)
    backtrack = np.empty((n + 1, m + 1), dtype=np.int8)
    backtrack[:, :] = POINTER_EMPTY

    for i in range(n + 1):
        scores[i, 0] = indel_penalty * i
        backtrack[i, 0] = POINTER_DOWN
    for j in range(m + 1):
        scores[0, j] = indel_penalty * j
        backtrack[0, j] = POINTER_RIGHT

    for i in range(1, n + 1):
        for j in range(1, m + 1):
            if _is_match(v[i - 1], w[j - 1]):
                diagonal_step = match_score
            else:
                diagonal_step = mismatch_penalty

            down = scores[i - 1, j] + indel_penalty
            right = scores[i, j - 1] + indel_penalty
            diagonal = scores[i - 1, j - 1] + diagonal_step

            best = down
            if right > best:
                best = right
            if diagonal > best:
                best = diagonal
            if best < 0:
                best = 0
            scores[i, j] = best

            # tie precedence: down, right, diagonal, stop
            if best == down:
                backtrack[i, j] = POINTER_DOWN
            elif best == right:
                backtrack[i, j] = POINTER_RIGHT
            elif best == diagonal:
                backtrack[i, j] = POINTER_DIAGONAL
            else:
                backtrack[i, j] = POINTER_STOP

    return scores, backtrack


def local_alignment_matrices(
    v: str, w: str, match_score: int, mismatch_penalty: int, indel_penalty: int
) -> tuple[np.ndarray, np.ndarray]:
    """Return the (|v|+1, |w|+1) score grid and pointer grid for a local alignment of v and w."""
    return _local_alignment_jit(
        encode_sequence(v), encode_sequence(w), int(match_score), int(mismatch_penalty), int(indel_penalty)
    )
