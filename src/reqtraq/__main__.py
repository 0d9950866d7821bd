import sys

from reqtraq.cli import main

sys.exit(main())
