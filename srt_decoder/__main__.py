"""Package entry point for ``python -m srt_decoder``.

Python's ``-m`` flag looks for ``__main__.py`` inside the package and
executes it; this delegates to the CLI's main().
"""

from srt_decoder.cli import main

if __name__ == "__main__":
    main()
