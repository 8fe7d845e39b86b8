import argparse

from .maze import MAZE_COLS, MAZE_ROWS, Maze
from .solver import solve


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Generate a perfect maze and race the computer through it")
    p.add_argument("--rows", type=int, default=MAZE_ROWS, help="Maze rows (odd)")
    p.add_argument("--cols", type=int, default=MAZE_COLS, help="Maze columns (odd)")
    p.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    p.add_argument("--solve", action="store_true", help="Solve the maze and overlay the route")
    p.add_argument("--ascii", action="store_true", help="Print the maze as text")
    p.add_argument("--gui", action="store_true", help="Launch the race window")
    p.add_argument("--out", type=str, default=None, help="Output filename for a rendered image of the maze")
    args = p.parse_args(argv)

    # ensure odd sizes
    if args.rows % 2 == 0:
        args.rows += 1
    if args.cols % 2 == 0:
        args.cols += 1
    if args.rows < 3 or args.cols < 3 or (args.rows, args.cols) == (3, 3):
        p.error(f"maze of {args.rows}x{args.cols} is too small; use at least 3x5 or 5x3")
    return args


def main(argv=None) -> None:
    args = parse_args(argv)

    if args.gui:
        import tkinter as tk
        from .gui import RaceGUI
        root = tk.Tk()
        app = RaceGUI(root, rows=args.rows, cols=args.cols, seed=args.seed)
        root.mainloop()
        return

    maze = Maze(rows=args.rows, cols=args.cols, seed=args.seed)
    print(f"Maze size: {args.rows}x{args.cols}. Start={maze.start} Goal={maze.goal}")

    route = None
    if args.solve:
        route = solve(maze.grid, maze.start, maze.goal)
        if route is None:
            print("No route found.")
        else:
            print(f"Route length: {len(route)} cells ({len(route) - 1} moves)")

    if args.ascii:
        print(maze.to_ascii(route))

    if args.out:
        maze.render(path_positions=route, savepath=args.out)

    print("Done.")


if __name__ == "__main__":
    main()
