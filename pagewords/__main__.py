import sys

from pagewords.cli import main

sys.exit(main())
