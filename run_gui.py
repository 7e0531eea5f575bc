#!/usr/bin/env python3
"""Launcher for the Sadaam Editor GUI (PyQt6)."""

import sys

if __name__ == "__main__":
    from sadaam_editor.gui import main
    sys.exit(main())
