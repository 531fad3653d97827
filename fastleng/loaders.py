"""
Sequence length loaders.

Reads sequence files with pysam and folds every record length into a
length -> count distribution (a collections.Counter). Sequence content is
never kept.

Supported inputs:
- FASTA/FASTQ, plain or gzip/bgzip compressed (pysam.FastxFile)
- SAM/BAM/CRAM (pysam.AlignmentFile); unaligned reads are expected,
  aligned reads are counted with a one-time warning per file

Usage:
    from fastleng.loaders import gather_multifastx_stats

    counts = gather_multifastx_stats(["run1.fq.gz", "run2.bam"])
"""

import gzip
from collections import Counter
from functools import reduce
from pathlib import Path
from typing import Iterable, Iterator, Optional, Sequence, Union

import pysam

from .errors import DecodeError, SourceUnavailableError
from .logging_config import get_logger

logger = get_logger(__name__)

# Sequence length -> number of sequences with that length
LengthCounts = Counter

PathLike = Union[str, Path]

# Progress is logged every this many records
PROGRESS_INTERVAL = 1000000

ALIGNMENT_SUFFIXES = (".bam", ".sam", ".cram")

GZIP_MAGIC = b"\x1f\x8b"
FASTX_START_BYTES = (b">", b"@")


def is_alignment_file(filename: PathLike) -> bool:
    """Return True for SAM/BAM/CRAM paths (optionally .gz compressed SAM)."""
    name = Path(filename).name.lower()
    if name.endswith(".gz"):
        name = name[:-3]
    return name.endswith(ALIGNMENT_SUFFIXES)


def _alignment_mode(filename: PathLike) -> str:
    name = str(filename).lower()
    if name.endswith(".bam"):
        return "rb"
    if name.endswith(".cram"):
        return "rc"
    return "r"


def _check_source(filename: PathLike, file_format: str) -> None:
    """Reject paths that are not regular files before pysam opens them."""
    path = Path(filename)
    if not path.exists():
        raise SourceUnavailableError(
            f"Input file not found: {filename}",
            path=str(filename),
            file_format=file_format
        )
    if not path.is_file():
        raise SourceUnavailableError(
            f"Input is not a regular file: {filename}",
            path=str(filename),
            file_format=file_format
        )


def _first_fastx_byte(filename: PathLike) -> bytes:
    """First non-whitespace byte after decompression, b"" for an empty file."""
    with open(filename, "rb") as f:
        compressed = f.read(2) == GZIP_MAGIC
    opener = gzip.open if compressed else open
    with opener(filename, "rb") as f:
        while True:
            chunk = f.read(65536)
            if not chunk:
                return b""
            chunk = chunk.lstrip()
            if chunk:
                return chunk[:1]


def _check_fastx_format(filename: PathLike) -> None:
    """Raise SourceUnavailableError unless the file is empty or starts like FASTA/FASTQ."""
    try:
        first = _first_fastx_byte(filename)
    except (OSError, EOFError) as e:
        raise SourceUnavailableError(
            f"Could not read sequence file {filename}: {e}",
            path=str(filename),
            file_format="fastx",
            cause=e
        ) from e

    if first and first not in FASTX_START_BYTES:
        raise SourceUnavailableError(
            f"Not a FASTA/FASTQ file (starts with {first!r}): {filename}",
            path=str(filename),
            file_format="fastx",
            suggestions=["FASTA records start with '>', FASTQ records with '@'"]
        )


def _decoded_records(records: Iterable, filename: PathLike) -> Iterator:
    """Yield records from a pysam iterator, turning parse failures into DecodeError."""
    records = iter(records)
    index = 0
    while True:
        try:
            record = next(records)
        except StopIteration:
            return
        except (OSError, ValueError, NotImplementedError) as e:
            raise DecodeError(
                f"Failed to decode record {index + 1} of {filename}: {e}",
                path=str(filename),
                record_index=index,
                cause=e
            ) from e
        yield record
        index += 1


def _count_lengths(
    lengths: Iterable[int],
    initial_counts: Optional[LengthCounts],
    filename: PathLike,
    progress_interval: int
) -> LengthCounts:
    """Fold lengths into a copy of initial_counts."""
    length_counts = Counter(initial_counts) if initial_counts else Counter()

    count = 0
    logger.info(f'Loading file "{filename}"...')
    for seq_len in lengths:
        length_counts[seq_len] += 1
        count += 1
        if count % progress_interval == 0:
            logger.info(f"Processed {count:,} sequences")
    logger.info(f"Finished loading file with {count:,} sequences.")

    return length_counts


def gather_fastx_stats(
    filename: PathLike,
    initial_counts: Optional[LengthCounts] = None,
    progress_interval: int = PROGRESS_INTERVAL
) -> LengthCounts:
    """
    Gather sequence lengths from a FASTA/FASTQ file.

    Args:
        filename: File to read; gzip/bgzip compression is detected
        initial_counts: Distribution to add to; it is copied, not modified
        progress_interval: Log progress every this many records

    Returns:
        initial_counts plus one count per record in the file

    Raises:
        SourceUnavailableError: the file is missing, not a regular file,
            not FASTA/FASTQ, or cannot be opened
        DecodeError: a record cannot be parsed
    """
    _check_source(filename, "fastx")
    _check_fastx_format(filename)

    try:
        handle = pysam.FastxFile(str(filename))
    except (OSError, ValueError) as e:
        raise SourceUnavailableError(
            f"Could not open sequence file {filename}: {e}",
            path=str(filename),
            file_format="fastx",
            cause=e
        ) from e

    with handle:
        lengths = (
            len(record.sequence or "")
            for record in _decoded_records(handle, filename)
        )
        return _count_lengths(lengths, initial_counts, filename, progress_interval)


def gather_bam_stats(
    filename: PathLike,
    initial_counts: Optional[LengthCounts] = None,
    progress_interval: int = PROGRESS_INTERVAL
) -> LengthCounts:
    """
    Gather sequence lengths from an unaligned SAM/BAM/CRAM file.

    Every record is counted, including aligned ones. The first record that is
    not flagged unmapped triggers a single warning for the file.

    Args:
        filename: File to read
        initial_counts: Distribution to add to; it is copied, not modified
        progress_interval: Log progress every this many records

    Returns:
        initial_counts plus one count per record in the file

    Raises:
        SourceUnavailableError: the file is missing, not a regular file,
            or cannot be opened
        DecodeError: a record cannot be parsed
    """
    _check_source(filename, "alignment")

    try:
        handle = pysam.AlignmentFile(str(filename), _alignment_mode(filename), check_sq=False)
    except (OSError, ValueError) as e:
        raise SourceUnavailableError(
            f"Could not open alignment file {filename}: {e}",
            path=str(filename),
            file_format="alignment",
            cause=e
        ) from e

    def record_lengths():
        warning_triggered = False
        # until_eof reads files without @SQ lines or an index
        records = handle.fetch(until_eof=True)
        for record in _decoded_records(records, filename):
            if not warning_triggered and not record.is_unmapped:
                logger.warning(f"Detected aligned reads, this is not properly handled: {filename}")
                warning_triggered = True
            yield record.query_length

    with handle:
        return _count_lengths(record_lengths(), initial_counts, filename, progress_interval)


def gather_stats(
    filename: PathLike,
    initial_counts: Optional[LengthCounts] = None,
    progress_interval: int = PROGRESS_INTERVAL
) -> LengthCounts:
    """Gather lengths from any supported file, choosing the loader by extension."""
    if is_alignment_file(filename):
        return gather_bam_stats(filename, initial_counts, progress_interval)
    return gather_fastx_stats(filename, initial_counts, progress_interval)


def gather_multifastx_stats(
    filenames: Sequence[PathLike],
    progress_interval: int = PROGRESS_INTERVAL
) -> LengthCounts:
    """
    Gather lengths from several files into one distribution.

    Files are read in order, each seeded with the distribution built so far.
    The first failure propagates with the failing file in the error and
    nothing accumulated so far is returned.

    Args:
        filenames: Files to read, any mix of supported formats
        progress_interval: Log progress every this many records

    Returns:
        Combined length distribution
    """
    return reduce(
        lambda counts, filename: gather_stats(filename, counts, progress_interval),
        filenames,
        Counter()
    )
