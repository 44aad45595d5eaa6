"""Package entry point for ``python -m pipeline_reassembler``.

WHY: Users run the reassembler as ``python -m pipeline_reassembler
records.txt`` or pipe records in on stdin. Python's ``-m`` flag looks for
``__main__.py`` inside the package and executes it.

HOW: Delegates to the CLI's main() function.
"""

from pipeline_reassembler.cli import main

if __name__ == "__main__":
    main()
