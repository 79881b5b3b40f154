import sys

from unfolder.cli import main

sys.exit(main())
