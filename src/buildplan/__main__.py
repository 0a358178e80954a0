import sys

from buildplan.cli import main

sys.exit(main())
