"""
motif-finder
============

This package finds short recurring nucleotide patterns (motifs) shared by a
collection of DNA sequences.  Three interchangeable search strategies work
over one profile model, and a local alignment engine ranks the motifs they
return by how well they align back to the input.  Hot loops are compiled
with numba and restarts run on a joblib worker pool.

The top level modules expose the following key components:

``models``
    Count and profile matrices, motif set score and consensus string,
    together with the :class:`SearchResult` and :class:`RankedMotif`
    result containers.

``discovery``
    Median string search, randomized motif search and the Gibbs sampler,
    registered by name so they can be selected from configuration.

``alignment``
    Smith-Waterman local alignment with backtracking and the
    :class:`AlignmentRanker` used to pick the top five motifs.

``api``
    Single-call functions for library use and :func:`discover_motifs`.

``io``
    FASTA reading and the plain-text results report.

``pipeline``
    File-in / file-out orchestration with timing.

``cli``
    Command line interface with ``gibbs``, ``median`` and ``randomized``
    subcommands.
"""

__version__ = "0.9.2"

from motif_finder.api import (  # noqa: E402
    DiscoveryConfig,
    build_consensus,
    create_config,
    discover_motifs,
    rank_motifs_by_alignment,
    run_gibbs_sampler,
    run_median_string_search,
    run_randomized_motif_search,
)
from motif_finder.models import RankedMotif, SearchResult, unique_motifs  # noqa: E402

__all__ = [
    "__version__",
    "DiscoveryConfig",
    "RankedMotif",
    "SearchResult",
    "build_consensus",
    "create_config",
    "discover_motifs",
    "rank_motifs_by_alignment",
    "run_gibbs_sampler",
    "run_median_string_search",
    "run_randomized_motif_search",
    "unique_motifs",
]
