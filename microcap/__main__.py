import sys

from microcap.cli import main

sys.exit(main())
