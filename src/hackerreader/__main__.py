import sys

from hackerreader.cli import main

sys.exit(main())
