import sys

from sprout.cli.main import main

sys.exit(main())
