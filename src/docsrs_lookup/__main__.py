import sys

from docsrs_lookup.cli import main

sys.exit(main())
