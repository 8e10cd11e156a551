"""Allow running as: python -m feature_analyzer"""

import sys

from feature_analyzer.main import main

if __name__ == "__main__":
    sys.exit(main())
