"""
Maze Race: generate a perfect maze and race the computer through it.

    python main.py --gui                 # open the race window
    python main.py --seed 7 --solve --ascii
"""
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "src"))

from maze_race.cli import main

if __name__ == "__main__":
    main()
