"""Package entry point for ``python -m dialogflow_converter``.

WHY: Users run the converter as ``python -m dialogflow_converter import
agent/`` or ``python -m dialogflow_converter export model.json -o agent/``.
Python's ``-m`` flag looks for ``__main__.py`` inside the package.

HOW: Delegates to the CLI's main() function.
"""

from dialogflow_converter.cli import main

if __name__ == "__main__":
    main()
