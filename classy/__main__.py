import sys

from classy.cli import main

sys.exit(main())
