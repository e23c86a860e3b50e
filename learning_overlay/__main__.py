"""Package entry point for ``python -m learning_overlay``.

WHY: Lets users run the CLI without an installed console script.

HOW: Delegates straight to the CLI's main() function.
"""

from learning_overlay.cli import main

if __name__ == "__main__":
    main()
