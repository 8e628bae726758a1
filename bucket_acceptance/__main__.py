import sys

from bucket_acceptance.cli import main

sys.exit(main())
