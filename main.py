#main.py
"""
Main entry point for the SMS UPS status tool.
Runs the command line front end and exits with its status code.
"""

import sys  # Imports sys to pass the exit code back to the shell

from sms_ups.cli import main


if __name__ == "__main__":
    # Entry point to run the main function
    sys.exit(main())
