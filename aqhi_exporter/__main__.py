import sys

from aqhi_exporter.cli import main

sys.exit(main())
