import sys

from transaction_analyser.cli import main

sys.exit(main())
