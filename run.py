"""
Development Runner
==================
Starts the garden editor straight from a source checkout.

The installed package exposes the `gardenplanner` gui-script instead; this
file only exists so that `python run.py` works without `pip install -e .`.
It puts 'src' on 'sys.path' so that 'gardenplanner' resolves to the checkout.

Usage:
    $ python run.py [share_link] [--debug] [--log-file PATH]
"""
import sys
import os

current_dir: str = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, os.path.join(current_dir, 'src'))

# On Windows the taskbar groups windows by AppUserModelID. Without one the
# editor is grouped under python.exe and shows the interpreter's icon.
appid = 'gardenplanner.editor'
try:
    import ctypes
    ctypes.windll.shell32.SetCurrentProcessExplicitAppUserModelID(appid)
except (AttributeError, ImportError):
    pass

from gardenplanner.main import main

if __name__ == "__main__":
    main()
