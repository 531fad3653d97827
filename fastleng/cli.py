"""
fastleng command line interface

Computes length statistics (totals, mean, median, N-scores) for one or more
sequence files and writes them as JSON.

Examples:
  # Report to stdout
  fastleng reads.fq.gz

  # Several inputs merged into one report, raw distribution dumped too
  fastleng run1.bam run2.bam -o stats.json -l lengths.json

  # Extra percentiles and a histogram
  fastleng contigs.fa --n-score 95 --plot lengths.png
"""

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional

from . import __version__
from .config import load_config
from .errors import ConfigurationError, FastlengError, handle_error
from .io import atomic_write, check_writable, save_json, to_json
from .length_stats import LengthStats, compute_length_stats
from .loaders import LengthCounts, gather_multifastx_stats
from .logging_config import add_logging_args, get_logger, setup_logging

logger = get_logger(__name__)


def n_score_target(value: str) -> int:
    """argparse type for an N-score percentile"""
    try:
        target = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid percentile: {value!r}") from None
    if not 1 <= target <= 99:
        raise argparse.ArgumentTypeError(f"percentile must be in 1..99, got {target}")
    return target


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='fastleng',
        description='Sequence length statistics for FASTA/FASTQ/SAM/BAM files',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Examples:" + __doc__.split("Examples:", 1)[1],
    )

    parser.add_argument('inputs', nargs='+', type=Path, metavar='INPUT',
                        help='Sequence files (FASTA/FASTQ, optionally gzipped, or SAM/BAM/CRAM)')
    parser.add_argument('-o', '--out-json', type=Path, metavar='FILE',
                        help='Write the report to FILE instead of stdout')
    parser.add_argument('-l', '--length-json', type=Path, metavar='FILE',
                        help='Write the raw length distribution to FILE')
    parser.add_argument('--format', choices=['json', 'text'], default='json',
                        help='Report format (default: json)')
    parser.add_argument('--plot', type=Path, metavar='FILE',
                        help='Write a length histogram (PNG/PDF, requires matplotlib)')
    parser.add_argument('--n-score', type=n_score_target, action='append', default=[],
                        metavar='N', dest='n_scores',
                        help='Additional N-score percentile to report (repeatable)')
    parser.add_argument('--config', type=Path, metavar='YAML',
                        help='Configuration file (default: ~/.config/fastleng/config.yaml)')
    parser.add_argument('--version', action='version', version=f'fastleng {__version__}')

    add_logging_args(parser)
    return parser


def format_summary_table(stats: LengthStats) -> str:
    """Render a report as an ASCII table"""

    rows = [
        ('Total sequences', f"{stats.total_sequences:,}"),
        ('Total bases', f"{stats.total_bases:,}"),
        ('Mean length', f"{stats.mean_length:,.1f}"),
        ('Median length', f"{stats.median_length:,.1f}"),
    ]
    for key, value in stats.to_dict().items():
        if key.startswith('n') and key[1:].isdigit():
            rows.append((key.upper(), f"{value:,}"))

    headers = ('Metric', 'Value')
    widths = [max(len(row[i]) for row in [headers] + rows) for i in range(2)]

    sep = '+' + '+'.join('-' * (w + 2) for w in widths) + '+'
    header_row = '|' + '|'.join(f' {headers[i]:<{widths[i]}} ' for i in range(2)) + '|'

    lines = [sep, header_row, sep]
    for row in rows:
        lines.append('|' + f' {row[0]:<{widths[0]}} ' + '|' + f' {row[1]:>{widths[1]}} ' + '|')
    lines.append(sep)

    return '\n'.join(lines)


def length_counts_to_dict(length_counts: LengthCounts) -> Dict[str, int]:
    """Raw distribution as {"<length>": count} in ascending length order"""
    return {str(length): count for length, count in sorted(length_counts.items())}


def _config_n_scores(config) -> List[int]:
    targets = config.get('report.n_scores', [])
    if isinstance(targets, int) and not isinstance(targets, bool):
        targets = [targets]
    if not isinstance(targets, list):
        raise ConfigurationError(
            f"report.n_scores must be a list of percentiles, got {targets!r}",
            config_key='report.n_scores'
        )
    for target in targets:
        if isinstance(target, bool) or not isinstance(target, int) or not 1 <= target <= 99:
            raise ConfigurationError(
                f"report.n_scores entries must be integers in 1..99, got {target!r}",
                config_key='report.n_scores'
            )
    return targets


def run(args: argparse.Namespace) -> LengthStats:
    """Load inputs, compute the report and write every requested output"""

    config = load_config(args.config)
    progress_interval = config.get_int('loading.progress_interval', minimum=1)
    indent = config.get_int('report.indent', minimum=0)
    extra_targets = sorted(set(_config_n_scores(config)) | set(args.n_scores))

    # Fail on unwritable destinations or a missing plot backend before reading any input
    for destination in (args.out_json, args.length_json, args.plot):
        if destination is not None:
            check_writable(destination)
    if args.plot is not None:
        from .plotting import require_matplotlib
        require_matplotlib()

    length_counts = gather_multifastx_stats(args.inputs, progress_interval=progress_interval)
    stats = compute_length_stats(length_counts, extra_targets=extra_targets)
    logger.info(f"Computed statistics for {stats.total_sequences:,} sequences "
                f"from {len(args.inputs)} file(s)")

    if args.format == 'text':
        report = format_summary_table(stats)
    else:
        report = to_json(stats, indent=indent)

    if args.out_json:
        with atomic_write(args.out_json) as f:
            f.write(report + '\n')
        logger.info(f"Report saved: {args.out_json}")
    else:
        print(report)

    if args.length_json:
        save_json(args.length_json, length_counts_to_dict(length_counts), indent=indent)
        logger.info(f"Length distribution saved: {args.length_json}")

    if args.plot:
        from .plotting import plot_length_distribution
        plot_length_distribution(
            length_counts, stats, args.plot,
            bins=config.get_int('plot.bins', minimum=1),
            log_scale=bool(config.get('plot.log_scale', False)),
        )
        logger.info(f"Plot saved: {args.plot}")

    return stats


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose, quiet=args.quiet, debug=args.debug,
                  log_file=args.log_file)

    try:
        run(args)
    except FastlengError as e:
        handle_error(e, verbose=args.verbose or args.debug)
    except ImportError as e:
        handle_error(e, verbose=args.debug)

    return 0


if __name__ == '__main__':
    sys.exit(main())
