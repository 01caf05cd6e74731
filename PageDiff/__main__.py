import sys

from PageDiff.cli import main

sys.exit(main())
