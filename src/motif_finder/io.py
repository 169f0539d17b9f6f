from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from motif_finder import __version__

logger = logging.getLogger(__name__)

RULE = "-" * 60


def read_fasta(path: str | Path, num_entries: Optional[int] = None) -> List[str]:
    """Read a FASTA file and return upper-cased sequence strings.

    Multi-line records are joined. At most ``num_entries`` records are
    returned when it is given.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Sequence file not found: {path}")

    sequences: List[str] = []
    if num_entries is not None and num_entries <= 0:
        return sequences

    with open(path, "r") as handle:
        current: List[str] = []
        for line in handle:
            line = line.strip()
            if not line:
                continue
            if line.startswith(">"):
                if current:
                    sequences.append("".join(current).upper())
                    current = []
                    if num_entries is not None and len(sequences) >= num_entries:
                        break
            else:
                current.append(line)

        if current:
            sequences.append("".join(current).upper())

    logger.info(f"Read {len(sequences)} sequences from {path}")
    return sequences


def default_output_path(k: int, timestamp: str) -> str:
    """File name used when output is requested without an explicit path."""
    return f"motif-finder-output-{timestamp}-{k}.txt"


def write_results(path: str | Path, header: Dict[str, Any], summary: Dict[str, Any], motifs: Sequence[str]) -> None:
    """Write a plain-text report of one discovery run.

    ``header`` carries ``command``, ``k``, ``num_entries``, ``start_time`` and
    optionally ``runs``/``iterations``; ``summary`` carries ``consensus``,
    ``unique_motifs`` and optionally ``best_motif``/``best_motif_score``.
    """
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)

    with open(path, "w") as out:
        out.write(f"motif-finder {__version__}\n")
        out.write(f"Command: {header['command']}\n")
        out.write(f"k: {header['k']}\n")
        out.write(f"number of entries: {header['num_entries']}\n")
        if header.get("runs") is not None:
            out.write(f"runs: {header['runs']}\n")
        if header.get("iterations") is not None:
            out.write(f"iterations: {header['iterations']}\n")
        out.write(f"Start time: {header['start_time']}\n")
        out.write("\n")

        out.write(f"Consensus string: {summary['consensus']}\n")
        out.write(f"Unique motifs: {' '.join(summary['unique_motifs'])}\n")
        if summary.get("best_motif") is not None:
            out.write(f"Best motif: {summary['best_motif']}\n")
            out.write(f"Best motif score: {summary['best_motif_score']}\n")
        out.write(f"{RULE}\n")

        for i, motif in enumerate(motifs, start=1):
            out.write(f">motif {i}\n")
            out.write(f"{motif}\n")

    logger.info(f"Results written to {path}")
