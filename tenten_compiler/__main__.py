"""Package entry point for ``python -m tenten_compiler``.

Delegates to the CLI's main() and exits with its status.
"""

import sys

from tenten_compiler.cli import main

if __name__ == "__main__":
    sys.exit(main())
