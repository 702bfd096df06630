# =============================================================================
# nbayes Entry Point for `python -m nbayes`
# =============================================================================
# This module allows nbayes to be run as a Python module:
#
#   python -m nbayes classify "some text"
#
# This is equivalent to running the 'nbayes' command after installation.
# =============================================================================

import sys

from nbayes.app import main

if __name__ == "__main__":
    sys.exit(main())
