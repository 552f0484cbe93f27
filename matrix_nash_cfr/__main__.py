import sys

from matrix_nash_cfr.cli import main

sys.exit(main())
