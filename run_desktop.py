#!/usr/bin/env python
"""Desktop app entrypoint for the Study Habit Tracker."""

from studyhabits.desktop.app import run

if __name__ == "__main__":
    run()
