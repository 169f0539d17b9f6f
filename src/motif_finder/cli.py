import argparse
import json
import logging
import os
import sys
from typing import Any, Dict

from motif_finder.pipeline import run_pipeline


def setup_logging(verbose: bool):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    logging.getLogger("numba").setLevel(logging.WARNING)


def _add_common_arguments(subparser: argparse.ArgumentParser) -> None:
    """Arguments shared by every search subcommand."""
    subparser.add_argument("input_file", help="Path to a FASTA file with the sequences to search.")

    io_group = subparser.add_argument_group("Input/Output Options")
    io_group.add_argument("-k", type=int, required=True, help="Length of the motifs to search for.")
    io_group.add_argument(
        "-e",
        "--entries",
        type=int,
        default=None,
        help="Number of FASTA records to read from the input file. All records are read when omitted.",
    )
    io_group.add_argument(
        "-o",
        "--output",
        nargs="?",
        const="",
        default=None,
        help=(
            "Write a results file. Without a value the file is named "
            "motif-finder-output-<timestamp>-<k>.txt in the current directory."
        ),
    )

    align_group = subparser.add_argument_group("Alignment Options")
    align_group.add_argument(
        "-a",
        "--align",
        action="store_true",
        help="Rank the unique motifs by local alignment against the input sequences.",
    )
    align_group.add_argument(
        "--match", type=int, default=1, help="Score of a matching pair of nucleotides. (default: %(default)s)"
    )
    align_group.add_argument(
        "--mismatch", type=int, default=-10, help="Score of a mismatching pair of nucleotides. (default: %(default)s)"
    )
    align_group.add_argument("--indel", type=int, default=-100, help="Score of a gap. (default: %(default)s)")

    technical_group = subparser.add_argument_group("Technical Options")
    technical_group.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging to standard output for detailed execution tracking.",
    )
    technical_group.add_argument(
        "--seed",
        type=int,
        help="Set a global random seed for reproducible results of the stochastic searches.",
    )
    technical_group.add_argument(
        "--jobs",
        type=int,
        default=-1,
        help="Number of parallel jobs to run. Set to -1 to use all available CPU cores. (default: %(default)s)",
    )


def create_arg_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        description="motif-finder: find recurring motifs in DNA sequences with median string, "
        "randomized motif search or Gibbs sampling",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
 Examples:
   # Gibbs sampler, 20 runs of 1000 iterations, alignment ranking
   motif-finder gibbs sequences.fa -k 8 -r 20 -t 1000 -a -o

   # Median string over the first 10 records
   motif-finder median sequences.fa -k 6 -e 10

   # Randomized motif search with a fixed seed on 4 cores
   motif-finder randomized sequences.fa -k 8 -r 1000 --seed 42 --jobs 4 -o results.txt
         """,
    )

    subparsers = parser.add_subparsers(dest="mode", help="Search algorithm", required=True)

    gibbs_parser = subparsers.add_parser("gibbs", help="Gibbs sampler with independent restarts.")
    _add_common_arguments(gibbs_parser)
    gibbs_group = gibbs_parser.add_argument_group("Gibbs Options")
    gibbs_group.add_argument(
        "-r", "--runs", type=int, default=20, help="Number of independent runs. (default: %(default)s)"
    )
    gibbs_group.add_argument(
        "-t", "--iters", type=int, default=1000, help="Number of iterations per run. (default: %(default)s)"
    )

    median_parser = subparsers.add_parser("median", help="Exhaustive median string search over all 4^k k-mers.")
    _add_common_arguments(median_parser)

    randomized_parser = subparsers.add_parser("randomized", help="Randomized motif search with restarts.")
    _add_common_arguments(randomized_parser)
    randomized_group = randomized_parser.add_argument_group("Randomized Options")
    randomized_group.add_argument(
        "-r", "--runs", type=int, default=1000, help="Number of independent runs. (default: %(default)s)"
    )

    return parser


def validate_inputs(args) -> None:
    """Validate input files and parameters."""
    logger = logging.getLogger(__name__)
    if not os.path.exists(args.input_file):
        logger.error(f"FASTA file not found: {args.input_file}")
        sys.exit(1)
    if args.k <= 0:
        logger.error(f"Motif length must be positive, got {args.k}")
        sys.exit(1)
    if args.entries is not None and args.entries <= 0:
        logger.error(f"Number of entries must be positive, got {args.entries}")
        sys.exit(1)


def map_args_to_pipeline_kwargs(args) -> Dict[str, Any]:
    """Map CLI arguments to pipeline keyword arguments."""
    kwargs = {
        "n_jobs": getattr(args, "jobs", -1),
        "seed": getattr(args, "seed", None),
        "match_score": getattr(args, "match", 1),
        "mismatch_penalty": getattr(args, "mismatch", -10),
        "indel_penalty": getattr(args, "indel", -100),
    }

    if args.mode in ["gibbs", "randomized"]:
        kwargs["n_restarts"] = args.runs
    if args.mode == "gibbs":
        kwargs["n_iterations"] = args.iters

    return kwargs


def main_cli():
    """Main CLI entry point."""
    parser = create_arg_parser()

    if len(sys.argv) == 1:
        parser.print_help(sys.stderr)
        sys.exit(1)

    args = parser.parse_args()

    setup_logging(args.verbose)

    validate_inputs(args)

    pipeline_kwargs = map_args_to_pipeline_kwargs(args)

    if args.verbose:
        logger = logging.getLogger(__name__)
        logger.info("=" * 60)
        logger.info(f"motif-finder - {args.mode.capitalize()} Mode")
        logger.info("=" * 60)
        logger.info(f"Input: {args.input_file}")
        logger.info(f"k: {args.k}")
        logger.info(f"Entries: {args.entries or 'all'}")
        logger.info(f"Alignment ranking: {args.align}")
        logger.info("=" * 60)

    try:
        result = run_pipeline(
            input_file=args.input_file,
            k=args.k,
            algorithm=args.mode,
            num_entries=args.entries,
            output_file=args.output,
            align=args.align,
            **pipeline_kwargs,
        )

        print(json.dumps(result))

    except Exception as e:
        print(f"ERROR: Pipeline execution failed: {e}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main_cli()
