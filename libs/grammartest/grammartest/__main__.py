import sys

from grammartest.cli import main

sys.exit(main())
