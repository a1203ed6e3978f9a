import sys

from flow_layout.cli import main

sys.exit(main())
