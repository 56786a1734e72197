import sys

from benchls.cli import main

sys.exit(main())
