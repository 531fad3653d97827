#!/usr/bin/env python3
"""
fastleng - sequence length statistics from a source checkout

Usage:
    fastleng.py reads.fq.gz
    fastleng.py run1.bam run2.bam -o stats.json -l lengths.json

Installed copies provide the same command as `fastleng`.
"""

import sys
from pathlib import Path

# Add repository root so the fastleng package imports without installation
bin_dir = Path(__file__).parent
sys.path.insert(0, str(bin_dir.parent))

from fastleng.cli import main  # noqa: E402

if __name__ == '__main__':
    sys.exit(main())
