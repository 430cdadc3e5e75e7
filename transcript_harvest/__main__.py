import sys

from transcript_harvest.engine.cli import main

sys.exit(main())
