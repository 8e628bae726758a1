#!/usr/bin/env python3
"""
S3 Bucket Module Acceptance Tester

Run this script to apply the bucket module's examples and verify the
resulting buckets against the module's security defaults.

Usage:
    python run.py                          # Run all scenarios
    python run.py -c custom.json           # Use custom config
    python run.py -s basic,production      # Run specific scenarios
    python run.py --module-root ../examples
    python run.py -q                       # Quiet mode (summary only)
    python run.py -j results.json          # Output JSON results
    python run.py --github-actions         # GitHub Actions mode
"""

import sys
from bucket_acceptance.cli import main

if __name__ == "__main__":
    sys.exit(main())
