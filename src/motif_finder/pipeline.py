"""
Pipeline for file-based motif discovery.
This module reads sequences from FASTA, runs the selected search and writes the report.
"""

import logging
import time
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from motif_finder.api import create_config, discover_motifs
from motif_finder.errors import InvalidInputError, InvalidMotifLengthError
from motif_finder.io import default_output_path, read_fasta, write_results

COMMAND_NAMES = {
    "gibbs": "Gibbs Sampler",
    "median": "Median String",
    "randomized": "Randomized",
}


class Pipeline:
    """
    Pipeline for motif discovery from a FASTA file.

    This class handles loading sequences, running one of the search strategies
    (median string, randomized motif search, Gibbs sampler), optional alignment
    ranking and writing the results file.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def load_sequences(self, input_file: Union[str, Path], num_entries: Optional[int] = None) -> List[str]:
        """
        Load sequences from a FASTA file.

        Args:
            input_file: Path to the FASTA file
            num_entries: Maximum number of records to read (all when None)

        Returns:
            List of upper-cased sequences
        """
        sequences = read_fasta(input_file, num_entries=num_entries)
        if not sequences:
            raise InvalidInputError(f"No sequences found in {input_file}")
        return sequences

    def write_report(
        self, output_file: Union[str, Path], result: Dict[str, Any], start_time: str, **kwargs
    ) -> None:
        """
        Write the results file for a finished run.

        Args:
            output_file: Destination path
            result: Dictionary returned by ``discover_motifs``
            start_time: Formatted wall-clock start time
            **kwargs: Search parameters shown in the header (runs, iterations)
        """
        header = {
            "command": COMMAND_NAMES.get(result["algorithm"], result["algorithm"]),
            "k": result["k"],
            "num_entries": result["num_sequences"],
            "runs": kwargs.get("n_restarts") if result["algorithm"] != "median" else None,
            "iterations": kwargs.get("n_iterations") if result["algorithm"] == "gibbs" else None,
            "start_time": start_time,
        }
        summary = {
            "consensus": result["consensus"],
            "unique_motifs": result["unique_motifs"],
            "best_motif": result.get("best_motif"),
            "best_motif_score": result.get("best_motif_score"),
        }
        write_results(output_file, header, summary, result["motifs"])

    def run_pipeline(
        self,
        input_file: Union[str, Path],
        k: int,
        algorithm: str = "gibbs",
        num_entries: Optional[int] = None,
        output_file: Optional[Union[str, Path]] = None,
        align: bool = False,
        **kwargs,
    ) -> Dict[str, Any]:
        """
        Main entry point for the pipeline.

        Args:
            input_file: Path to the FASTA file
            k: Motif length
            algorithm: Search strategy ('median', 'randomized', 'gibbs')
            num_entries: Maximum number of records to read
            output_file: Results file path; "" selects the default name, None disables the file
            align: Rank unique motifs by local alignment
            **kwargs: Additional arguments for the search and scoring
                (n_restarts, n_iterations, seed, n_jobs, match_score, mismatch_penalty, indel_penalty)

        Returns:
            Discovery results
        """
        if k <= 0:
            raise InvalidMotifLengthError(f"Motif length must be positive, got {k}")

        started = time.perf_counter()
        start_time = datetime.now()
        self.logger.info(f"Starting pipeline with algorithm='{algorithm}', k={k}")

        self.logger.info(f"Loading sequences from {input_file}")
        sequences = self.load_sequences(input_file, num_entries)

        # Sanitize kwargs for the search config
        search_kwargs = {}
        for param in ["n_restarts", "n_iterations", "seed", "n_jobs"]:
            if kwargs.get(param) is not None:
                search_kwargs[param] = kwargs[param]
        score_kwargs = {}
        for param in ["match_score", "mismatch_penalty", "indel_penalty"]:
            if kwargs.get(param) is not None:
                score_kwargs[param] = kwargs[param]

        config = create_config(k=k, algorithm=algorithm, align=align, **score_kwargs, **search_kwargs)
        result = discover_motifs(sequences, config)

        if output_file is not None:
            if output_file == "":
                output_file = default_output_path(k, start_time.strftime("%Y%m%d-%H%M%S"))
            self.write_report(
                output_file, result, start_time.strftime("%Y-%m-%d %H:%M:%S"), **asdict(config.search)
            )

        elapsed = time.perf_counter() - started
        self.logger.info(f"Pipeline completed in {elapsed:.3f} seconds")

        result["num_entries"] = len(sequences)
        result["output_file"] = str(output_file) if output_file is not None else None
        result["elapsed_seconds"] = round(elapsed, 3)
        return result


def run_pipeline(
    input_file: Union[str, Path],
    k: int,
    algorithm: str = "gibbs",
    num_entries: Optional[int] = None,
    output_file: Optional[Union[str, Path]] = None,
    align: bool = False,
    **kwargs,
) -> Dict[str, Any]:
    """
    Module-level function to run the pipeline.

    Args:
        input_file: Path to the FASTA file
        k: Motif length
        algorithm: Search strategy ('median', 'randomized', 'gibbs')
        num_entries: Maximum number of records to read
        output_file: Results file path; "" selects the default name, None disables the file
        align: Rank unique motifs by local alignment
        **kwargs: Additional arguments for the search and scoring

    Returns:
        Discovery results
    """
    pipeline = Pipeline()
    return pipeline.run_pipeline(
        input_file=input_file,
        k=k,
        algorithm=algorithm,
        num_entries=num_entries,
        output_file=output_file,
        align=align,
        **kwargs,
    )
