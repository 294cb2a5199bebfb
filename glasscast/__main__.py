import sys

from glasscast.cli import main

sys.exit(main())
