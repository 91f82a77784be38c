"""
Run the walkthrough, then the full pytest suite in this directory.

Usage:
    python src/test/run_tests.py [extra pytest args]
"""

import sys
from pathlib import Path

import pytest

TEST_DIR = Path(__file__).parent

# Add src to path
sys.path.insert(0, str(TEST_DIR.parent))

from test_foundation import main as run_foundation_walkthrough


def main(argv=None) -> int:
    run_foundation_walkthrough()
    args = [str(TEST_DIR), "-q"] + list(argv if argv is not None else sys.argv[1:])
    return int(pytest.main(args))


if __name__ == "__main__":
    sys.exit(main())
