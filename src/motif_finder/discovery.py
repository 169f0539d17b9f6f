"""
discovery
=========

Motif search strategies over a collection of DNA sequences.  Three
interchangeable algorithms are provided: an exhaustive median string
search, randomized motif search and a Gibbs sampler.  The two stochastic
searches are restarted several times on a bounded joblib worker pool;
each restart owns its own generator seeded from one base generator, so a
fixed seed gives the same answer whatever the number of workers.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple

import numpy as np
from joblib import Parallel, delayed

from motif_finder.errors import (
    InvalidInputError,
    InvalidMotifLengthError,
    InvalidNumberOfIterationsError,
    InvalidNumberOfRunsError,
)
from motif_finder.functions import (
    NUCLEOTIDES,
    batch_pattern_distances,
    encode_patterns,
    encode_sequences,
    kmer_probabilities,
)
from motif_finder.models import SearchResult, build_profile_matrix, score_motifs

logger = logging.getLogger(__name__)

WILDCARD = "N"

_ALGORITHM_ALIASES = {
    "median": "median",
    "median-string": "median",
    "randomized": "randomized",
    "randomized-motif-search": "randomized",
    "gibbs": "gibbs",
    "gibbs-sampler": "gibbs",
}


def prepare_sequences(sequences: Sequence[str], k: int) -> List[str]:
    """Validate k and the sequence collection, returning upper-cased copies."""
    if k <= 0:
        raise InvalidMotifLengthError(f"Motif length must be positive, got {k}")
    if len(sequences) == 0:
        raise InvalidInputError("Sequence collection is empty")
    return [seq.upper() for seq in sequences]


def hamming_distance(a: str, b: str) -> int:
    """Number of mismatched positions of two equal-length strings; ``N`` never matches."""
    if len(a) != len(b):
        raise InvalidInputError(f"Hamming distance needs equal lengths, got {len(a)} and {len(b)}")
    return sum(1 for x, y in zip(a, b) if x != y or x == WILDCARD)


def neighbors(pattern: str, d: int) -> Set[str]:
    """All strings over A/C/G/T within Hamming distance ``d`` of ``pattern``."""
    if d == 0 or len(pattern) == 0:
        return {pattern}
    if len(pattern) == 1:
        return set(NUCLEOTIDES)

    neighborhood = set()
    suffix = pattern[1:]
    for text in neighbors(suffix, d):
        if hamming_distance(suffix, text) < d:
            for nucleotide in NUCLEOTIDES:
                neighborhood.add(nucleotide + text)
        else:
            neighborhood.add(pattern[0] + text)
    return neighborhood


def distance_to_collection(pattern: str, sequences: Sequence[str]) -> int:
    """Sum over sequences of the smallest Hamming distance between ``pattern`` and any of its k-mers.

    Sequences shorter than the pattern contribute nothing; ``N`` never matches.
    """
    k = len(pattern)
    encoded = encode_patterns([pattern.upper()], k)
    distances = batch_pattern_distances(encoded, encode_sequences([seq.upper() for seq in sequences]))
    return int(distances[0])


def median_string(k: int, sequences: Sequence[str]) -> Tuple[str, int]:
    """Exhaustively find the k-mer minimising the distance to the collection.

    Candidates are scanned in lexicographic order and the first minimum is
    kept, so ties resolve to the lexicographically smallest k-mer.

    Returns
    -------
    tuple
        ``(median, distance)``
    """
    candidates = sorted(neighbors("A" * k, k))
    distances = batch_pattern_distances(encode_patterns(candidates, k), encode_sequences(sequences))
    best = int(np.argmin(distances))
    return candidates[best], int(distances[best])


def random_motifs(sequences: Sequence[str], k: int, rng: np.random.Generator) -> List[str]:
    """Pick one uniformly random k-mer from every sequence that is at least k long."""
    motifs = []
    for seq in sequences:
        if len(seq) < k:
            continue
        start = int(rng.integers(0, len(seq) - k + 1))
        motifs.append(seq[start : start + k])
    return motifs


def profile_most_probable_kmer(text: str, k: int, profile: np.ndarray) -> str:
    """First k-mer of ``text`` with the highest probability under ``profile``."""
    probabilities = kmer_probabilities(text, k, profile)
    if probabilities.size == 0:
        raise InvalidInputError(f"Sequence of length {len(text)} is shorter than k={k}")
    start = int(np.argmax(probabilities))
    return text[start : start + k]


def profile_randomly_generated_kmer(
    text: str, k: int, profile: np.ndarray, rng: np.random.Generator
) -> Optional[str]:
    """Draw a k-mer of ``text`` with probability proportional to its profile probability.

    Returns None when the probability mass is not a positive finite number.
    """
    probabilities = kmer_probabilities(text, k, profile)
    total = float(probabilities.sum())
    if not np.isfinite(total) or total <= 0.0:
        return None
    start = int(rng.choice(probabilities.size, p=probabilities / total))
    return text[start : start + k]


def randomized_motif_search(sequences: Sequence[str], k: int, rng: np.random.Generator) -> Tuple[int, List[str]]:
    """Single randomized motif search run.

    Starting from random k-mers, repeatedly rebuild the motif set from the
    most probable k-mers of the current profile until the score stops
    improving.
    """
    eligible = [seq for seq in sequences if len(seq) >= k]
    best = random_motifs(eligible, k, rng)
    best_score = score_motifs(best)

    while True:
        profile = build_profile_matrix(best, pseudocount=True)
        motifs = [profile_most_probable_kmer(seq, k, profile) for seq in eligible]
        score = score_motifs(motifs)
        if score < best_score:
            best, best_score = motifs, score
        else:
            return best_score, best


def gibbs_sampler(
    sequences: Sequence[str], k: int, n_iterations: int, rng: np.random.Generator
) -> Tuple[int, List[str]]:
    """Single Gibbs sampling run returning the best motif set seen on the trajectory."""
    eligible = [seq for seq in sequences if len(seq) >= k]
    best = random_motifs(eligible, k, rng)
    best_score = score_motifs(best)

    t = len(best)
    if t == 1:
        logger.debug("Single eligible sequence, nothing to condition on; keeping the seed motif")
        return best_score, best

    for _ in range(n_iterations):
        i = int(rng.integers(0, t))
        working = best[:i] + best[i + 1 :]
        profile = build_profile_matrix(working, pseudocount=True)

        replacement = profile_randomly_generated_kmer(eligible[i], k, profile, rng)
        if replacement is None:
            logger.debug(f"Skipped degenerate draw for sequence {i}")
            continue

        working.insert(i, replacement)
        score = score_motifs(working)
        if score < best_score:
            best, best_score = working, score

    return best_score, best


def _randomized_restart(sequences: List[str], k: int, seed: int) -> Tuple[int, List[str]]:
    """Worker function for one randomized motif search restart."""
    return randomized_motif_search(sequences, k, np.random.default_rng(seed))


def _gibbs_restart(sequences: List[str], k: int, n_iterations: int, seed: int) -> Tuple[int, List[str]]:
    """Worker function for one Gibbs sampler restart."""
    return gibbs_sampler(sequences, k, n_iterations, np.random.default_rng(seed))


def _run_restarts(
    worker: Callable, args: tuple, n_restarts: int, n_jobs: int, seed: Optional[int]
) -> Tuple[int, List[str], List[int]]:
    """Run ``worker(*args, seed_i)`` once per restart and keep the lowest score, first restart on ties."""
    base_rng = np.random.default_rng(seed)
    seeds = base_rng.integers(0, 2**31, size=n_restarts)

    results = Parallel(n_jobs=n_jobs, backend="loky")(
        delayed(worker)(*args, int(seeds[i])) for i in range(n_restarts)
    )

    restart_scores = [int(score) for score, _ in results]
    for i, score in enumerate(restart_scores):
        logger.debug(f"Restart {i}: score={score}")

    best = min(range(len(results)), key=lambda i: results[i][0])
    return restart_scores[best], list(results[best][1]), restart_scores


class MotifSearch(ABC):
    """
    Abstract base class for motif search strategies.

    Concrete strategies implement ``search`` and register themselves in
    ``registry`` under a short key.
    """

    def __init__(self, name: str) -> None:
        self.name = name

    @abstractmethod
    def search(self, sequences: Sequence[str], k: int) -> SearchResult:
        """
        Find a motif set of length ``k`` in ``sequences``.

        Parameters
        ----------
        sequences : sequence of str
            DNA sequences; ``N`` is allowed and never matches.
        k : int
            Motif length.

        Returns
        -------
        SearchResult
            Motifs, their score and per-restart scores.
        """
        raise NotImplementedError


class SearchRegistry:
    """Registry for search strategies using decorator pattern."""

    def __init__(self):
        self._strategies: Dict[str, type] = {}

    def register(self, key: str):
        """Decorator to register a search strategy class."""

        def decorator(strategy_cls):
            self._strategies[key] = strategy_cls
            logger.debug(f"Registered search strategy: {key} -> {strategy_cls.__name__}")
            return strategy_cls

        return decorator

    def get(self, key: str) -> type:
        """Get strategy class by key."""
        if key not in self._strategies:
            available = list(self._strategies.keys())
            raise ValueError(f"Search strategy '{key}' not found. Available: {available}")
        return self._strategies[key]


registry = SearchRegistry()


@dataclass(frozen=True)
class SearchConfig:
    """Parameters selecting and tuning a search strategy."""

    algorithm: str = "gibbs"
    n_restarts: int = 1
    n_iterations: int = 1000
    seed: Optional[int] = None
    n_jobs: int = 1


def create_search_config(
    algorithm: str = "gibbs",
    n_restarts: int = 1,
    n_iterations: int = 1000,
    seed: Optional[int] = None,
    n_jobs: int = 1,
) -> SearchConfig:
    """Build a search config, resolving algorithm aliases."""
    resolved = _ALGORITHM_ALIASES.get(algorithm.lower())
    if resolved is None:
        available = ", ".join(sorted(_ALGORITHM_ALIASES.keys()))
        raise ValueError(f"Unknown algorithm: {algorithm!r}. Available: {available}")

    return SearchConfig(
        algorithm=resolved,
        n_restarts=n_restarts,
        n_iterations=n_iterations,
        seed=seed,
        n_jobs=n_jobs,
    )


@registry.register("median")
class MedianStringSearch(MotifSearch):
    """Exhaustive search over all 4^k candidate k-mers."""

    def __init__(self) -> None:
        super().__init__(name="median")

    @classmethod
    def from_config(cls, config: SearchConfig) -> "MedianStringSearch":
        return cls()

    def search(self, sequences: Sequence[str], k: int) -> SearchResult:
        sequences = prepare_sequences(sequences, k)
        logger.info(f"Median string search: k={k}, {len(sequences)} sequences, {4**k} candidates")

        median, distance = median_string(k, sequences)
        logger.info(f"Median string {median} at total distance {distance}")
        return SearchResult(algorithm=self.name, motifs=(median,), score=distance, restart_scores=(distance,))


@registry.register("randomized")
class RandomizedMotifSearch(MotifSearch):
    """Randomized motif search with independent restarts."""

    def __init__(self, n_restarts: int = 1, n_jobs: int = 1, seed: Optional[int] = None) -> None:
        """
        Initialize the search.

        Parameters
        ----------
        n_restarts : int
            Number of independent runs; the best one is kept.
        n_jobs : int
            Number of parallel jobs. -1 to use all cores.
        seed : int, optional
            Random seed for reproducibility.
        """
        super().__init__(name="randomized")
        if n_restarts <= 0:
            raise InvalidNumberOfRunsError(f"Number of runs must be positive, got {n_restarts}")
        self.n_restarts = n_restarts
        self.n_jobs = n_jobs
        self.seed = seed

    @classmethod
    def from_config(cls, config: SearchConfig) -> "RandomizedMotifSearch":
        return cls(n_restarts=config.n_restarts, n_jobs=config.n_jobs, seed=config.seed)

    def search(self, sequences: Sequence[str], k: int) -> SearchResult:
        sequences = prepare_sequences(sequences, k)
        logger.info(f"Randomized motif search: k={k}, {len(sequences)} sequences, {self.n_restarts} runs")

        score, motifs, restart_scores = _run_restarts(
            _randomized_restart, (sequences, k), self.n_restarts, self.n_jobs, self.seed
        )
        logger.info(f"Best randomized motif set score: {score}")
        return SearchResult(
            algorithm=self.name, motifs=tuple(motifs), score=score, restart_scores=tuple(restart_scores)
        )


@registry.register("gibbs")
class GibbsSampler(MotifSearch):
    """Gibbs sampling with independent restarts."""

    def __init__(
        self, n_restarts: int = 1, n_iterations: int = 1000, n_jobs: int = 1, seed: Optional[int] = None
    ) -> None:
        super().__init__(name="gibbs")
        if n_restarts <= 0:
            raise InvalidNumberOfRunsError(f"Number of runs must be positive, got {n_restarts}")
        if n_iterations <= 0:
            raise InvalidNumberOfIterationsError(f"Number of iterations must be positive, got {n_iterations}")
        self.n_restarts = n_restarts
        self.n_iterations = n_iterations
        self.n_jobs = n_jobs
        self.seed = seed

    @classmethod
    def from_config(cls, config: SearchConfig) -> "GibbsSampler":
        return cls(
            n_restarts=config.n_restarts, n_iterations=config.n_iterations, n_jobs=config.n_jobs, seed=config.seed
        )

    def search(self, sequences: Sequence[str], k: int) -> SearchResult:
        sequences = prepare_sequences(sequences, k)
        logger.info(
            f"Gibbs sampler: k={k}, {len(sequences)} sequences, {self.n_restarts} runs x {self.n_iterations} iterations"
        )

        score, motifs, restart_scores = _run_restarts(
            _gibbs_restart, (sequences, k, self.n_iterations), self.n_restarts, self.n_jobs, self.seed
        )
        logger.info(f"Best Gibbs motif set score: {score}")
        return SearchResult(
            algorithm=self.name, motifs=tuple(motifs), score=score, restart_scores=tuple(restart_scores)
        )


def search(sequences: Sequence[str], k: int, config: Optional[SearchConfig] = None) -> SearchResult:
    """Universal search function that dispatches to the configured strategy."""
    config = config or create_search_config()
    strategy_cls = registry.get(config.algorithm)
    return strategy_cls.from_config(config).search(sequences, k)
