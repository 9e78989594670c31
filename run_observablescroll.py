#!/usr/bin/env python3
"""
Observable Scroll demo launcher.

Run this from the project root to open the demo window.
"""

if __name__ == '__main__':
    from observablescroll.run_gui import main
    main()
