"""
Pytest configuration and common fixtures for motif_finder tests.
"""
import tempfile
from pathlib import Path

import pytest

PLANTED_MOTIF = "GATTACA"


def _planted_sequences():
    """Five sequences carrying GATTACA at different offsets in a poly-T background."""
    return ["T" * offset + PLANTED_MOTIF + "T" * (8 - offset) for offset in (0, 2, 4, 6, 8)]


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def planted_sequences():
    """Sequences sharing one exact motif and no other common 7-mer."""
    return _planted_sequences()


@pytest.fixture
def sample_sequences():
    """Short DNA collection used for the stochastic searches."""
    return [
        "CGCCCCTCTCGGGGGTGTTCAGTAAACGGCCA",
        "GGGCGAGGTATGTGTAAGTGCCAAGGTGCCAG",
        "TAGTACCGAGACCGAAAGAAGTATACAGGCGT",
        "TAGATCAAGTTTCAGGTGCACGTCGGTGAACC",
        "AATCCACCAGCTCCACGTGCAATGTTGGCCTA",
    ]


@pytest.fixture
def fasta_file(tmp_path):
    """FASTA file with the planted sequences, wrapped over two lines per record."""
    path = tmp_path / "planted.fa"
    with open(path, "w") as handle:
        for i, seq in enumerate(_planted_sequences()):
            handle.write(f">seq{i} planted\n")
            handle.write(f"{seq[:8].lower()}\n{seq[8:]}\n")
    return path
