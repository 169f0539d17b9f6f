"""High-level public API for motif discovery."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from motif_finder.alignment import AlignmentRanker
from motif_finder.discovery import (
    GibbsSampler,
    MedianStringSearch,
    RandomizedMotifSearch,
    SearchConfig,
    create_search_config,
    search,
)
from motif_finder.models import RankedMotif, consensus_string, unique_motifs

logger = logging.getLogger(__name__)


def run_median_string_search(sequences: Sequence[str], k: int) -> List[str]:
    """Return the single median string of length ``k`` as a one-element list."""
    return list(MedianStringSearch().search(sequences, k).motifs)


def run_randomized_motif_search(
    sequences: Sequence[str], k: int, restarts: int, seed: Optional[int] = None, n_jobs: int = 1
) -> List[str]:
    """Best motif set over ``restarts`` randomized motif search runs."""
    strategy = RandomizedMotifSearch(n_restarts=restarts, n_jobs=n_jobs, seed=seed)
    return list(strategy.search(sequences, k).motifs)


def run_gibbs_sampler(
    sequences: Sequence[str],
    k: int,
    restarts: int,
    iterations: int,
    seed: Optional[int] = None,
    n_jobs: int = 1,
) -> List[str]:
    """Best motif set over ``restarts`` Gibbs sampler runs of ``iterations`` steps each."""
    strategy = GibbsSampler(n_restarts=restarts, n_iterations=iterations, n_jobs=n_jobs, seed=seed)
    return list(strategy.search(sequences, k).motifs)


def build_consensus(motifs: Sequence[str], k: int) -> str:
    return consensus_string(motifs, k)


def rank_motifs_by_alignment(
    sequences: Sequence[str],
    unique_motifs: Sequence[str],
    match_score: int,
    mismatch_penalty: int,
    indel_penalty: int,
    n_jobs: int = 1,
) -> List[RankedMotif]:
    """At most five ``RankedMotif`` entries, best total alignment score first."""
    ranker = AlignmentRanker(
        match_score=match_score,
        mismatch_penalty=mismatch_penalty,
        indel_penalty=indel_penalty,
        n_jobs=n_jobs,
    )
    return ranker.rank(sequences, unique_motifs)


@dataclass
class DiscoveryConfig:
    """Unified configuration object for library usage."""

    k: int
    search: SearchConfig = field(default_factory=create_search_config)
    align: bool = False
    match_score: int = 1
    mismatch_penalty: int = -10
    indel_penalty: int = -100


def create_config(
    k: int,
    algorithm: str = "gibbs",
    align: bool = False,
    match_score: int = 1,
    mismatch_penalty: int = -10,
    indel_penalty: int = -100,
    search_config: Optional[SearchConfig] = None,
    **search_kwargs,
) -> DiscoveryConfig:
    """Build a unified discovery config."""

    if search_config is not None and search_kwargs:
        raise ValueError("Use either 'search_config' or search kwargs, not both.")

    resolved_search = search_config or create_search_config(algorithm=algorithm, **search_kwargs)

    return DiscoveryConfig(
        k=k,
        search=resolved_search,
        align=align,
        match_score=match_score,
        mismatch_penalty=mismatch_penalty,
        indel_penalty=indel_penalty,
    )


def discover_motifs(sequences: Sequence[str], config: DiscoveryConfig) -> Dict[str, Any]:
    """Execute a search, derive the consensus and optionally rank motifs by alignment.

    Returns a JSON-serialisable dictionary.
    """
    result = search(sequences, config.k, config.search)
    motifs = list(result.motifs)
    distinct = unique_motifs(motifs)
    consensus = consensus_string(motifs, config.k)
    logger.info(f"Consensus string: {consensus}")

    output: Dict[str, Any] = {
        "algorithm": result.algorithm,
        "k": config.k,
        "num_sequences": len(sequences),
        "motifs": motifs,
        "unique_motifs": distinct,
        "score": result.score,
        "consensus": consensus,
    }

    if config.align:
        ranked = rank_motifs_by_alignment(
            sequences,
            distinct,
            config.match_score,
            config.mismatch_penalty,
            config.indel_penalty,
            n_jobs=config.search.n_jobs,
        )
        output["top_motifs"] = [{"score": item.score, "motif": item.representative} for item in ranked]
        output["best_motif"] = ranked[0].representative
        output["best_motif_score"] = ranked[0].score
        logger.info(f"Best motif {ranked[0].representative} with alignment score {ranked[0].score}")

    return output
