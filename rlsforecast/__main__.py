import sys

from rlsforecast.cli import main

sys.exit(main())
