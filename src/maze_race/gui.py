import tkinter as tk
from tkinter import ttk
import matplotlib.pyplot as plt
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg
from typing import Optional
import numpy as np

from .maze import MAZE_COLS, MAZE_ROWS
from .race import Direction
from .scheduler import TkScheduler
from .session import RaceSession

# Tk keysyms for each intent
KEY_DIRECTIONS = {
    "Up": Direction.UP, "w": Direction.UP, "W": Direction.UP,
    "Down": Direction.DOWN, "s": Direction.DOWN, "S": Direction.DOWN,
    "Left": Direction.LEFT, "a": Direction.LEFT, "A": Direction.LEFT,
    "Right": Direction.RIGHT, "d": Direction.RIGHT, "D": Direction.RIGHT,
}
RESTART_KEYS = {"r", "R"}


class RaceGUI:
    def __init__(self, root, rows: int = MAZE_ROWS, cols: int = MAZE_COLS, seed: Optional[int] = None):
        self.root = root
        self.root.title("Maze Race")
        self.root.geometry("900x700")

        self.session = RaceSession(TkScheduler(root), rows=rows, cols=cols, verbose=True)
        self.session.add_listener(self.refresh)

        self.setup_ui()
        self.setup_plot()

        self.root.bind("<KeyPress>", self.on_key)
        self.root.protocol("WM_DELETE_WINDOW", self.on_close)

        # Generate the first maze
        self.session.generate_maze(seed=seed)

    def setup_ui(self):
        main_container = ttk.Frame(self.root)
        main_container.pack(fill=tk.BOTH, expand=True)

        left_frame = ttk.Frame(main_container, width=220)
        left_frame.pack(side=tk.LEFT, fill=tk.Y, padx=10, pady=10)

        right_frame = ttk.Frame(main_container)
        right_frame.pack(side=tk.RIGHT, fill=tk.BOTH, expand=True, padx=10, pady=10)

        self.fig, self.ax_maze = plt.subplots(figsize=(7, 5))
        self.canvas = FigureCanvasTkAgg(self.fig, master=right_frame)
        self.canvas.get_tk_widget().pack(fill=tk.BOTH, expand=True)

        ttk.Label(left_frame, text="Maze", font=("Arial", 12, "bold")).pack(anchor="w", pady=5)
        self.btn_generate = ttk.Button(left_frame, text="Generate Maze", command=self.on_generate)
        self.btn_generate.pack(fill=tk.X, pady=5)
        self.btn_solve = ttk.Button(left_frame, text="Show Solution", command=self.session.reveal_solution)
        self.btn_solve.pack(fill=tk.X, pady=5)
        self.btn_clear = ttk.Button(left_frame, text="Clear Path", command=self.session.clear_visualization)
        self.btn_clear.pack(fill=tk.X, pady=5)
        self.btn_reset = ttk.Button(left_frame, text="Reset", command=self.on_generate)
        self.btn_reset.pack(fill=tk.X, pady=5)

        ttk.Separator(left_frame, orient=tk.HORIZONTAL).pack(fill=tk.X, pady=10)
        ttk.Label(left_frame, text="Race", font=("Arial", 12, "bold")).pack(anchor="w", pady=5)
        self.btn_start = ttk.Button(left_frame, text="Start Race", command=self.session.start_race)
        self.btn_start.pack(fill=tk.X, pady=5)

        self.score_var = tk.StringVar(value="You 0 : 0 Computer")
        ttk.Label(left_frame, textvariable=self.score_var, font=("Arial", 11)).pack(anchor="w", pady=10)

        self.status_var = tk.StringVar(value=self.session.status)
        ttk.Label(left_frame, textvariable=self.status_var, relief=tk.SUNKEN, wraplength=200).pack(fill=tk.X, pady=10)

    def setup_plot(self):
        self.ax_maze.set_xticks([])
        self.ax_maze.set_yticks([])
        # We create the imshow object once we have a maze
        self.img_maze = None
        self.line_path, = self.ax_maze.plot([], [], linewidth=2, color="orange", alpha=0.7)
        self.scat_endpoints = self.ax_maze.scatter([], [], s=120, marker="s")
        self.scat_user = self.ax_maze.scatter([], [], c="blue", s=80, label="You")
        self.scat_computer = self.ax_maze.scatter([], [], c="magenta", s=80, label="Computer")

    def on_generate(self):
        self.session.generate_maze()

    def on_key(self, event):
        if event.keysym in RESTART_KEYS:
            self.session.restart_intent()
            return
        direction = KEY_DIRECTIONS.get(event.keysym)
        if direction is not None:
            self.session.movement_intent(direction)

    def refresh(self):
        snap = self.session.snapshot()
        self.status_var.set(snap.status)
        self.score_var.set(f"You {snap.score[0]} : {snap.score[1]} Computer")

        controls = self.session.controls()
        self.btn_generate.config(state=tk.NORMAL if controls["generate"] else tk.DISABLED)
        self.btn_reset.config(state=tk.NORMAL if controls["reset"] else tk.DISABLED)
        self.btn_clear.config(state=tk.NORMAL if controls["clear"] else tk.DISABLED)
        self.btn_start.config(state=tk.NORMAL if controls["start"] else tk.DISABLED)
        self.btn_solve.config(state=tk.NORMAL if controls["generate"] else tk.DISABLED)

        if snap.start is None:
            return
        self.render_maze(snap)

    def render_maze(self, snap):
        if self.img_maze is None:
            self.img_maze = self.ax_maze.imshow(snap.grid, cmap="gray_r", interpolation="nearest")
        else:
            self.img_maze.set_data(snap.grid)
            # Update extent and limits for new dimensions
            h, w = snap.grid.shape
            self.img_maze.set_extent((-0.5, w - 0.5, h - 0.5, -0.5))
            self.ax_maze.set_xlim(-0.5, w - 0.5)
            self.ax_maze.set_ylim(h - 0.5, -0.5)

        self.scat_endpoints.set_offsets(np.c_[[snap.start[1], snap.goal[1]], [snap.start[0], snap.goal[0]]])
        self.scat_endpoints.set_color(["green", "red"])

        if snap.solution:
            self.line_path.set_data([p[1] for p in snap.solution], [p[0] for p in snap.solution])
        else:
            self.line_path.set_data([], [])

        self.set_marker(self.scat_user, snap.user, snap.goal)
        self.set_marker(self.scat_computer, snap.computer, snap.goal)
        self.canvas.draw_idle()

    @staticmethod
    def set_marker(scatter, pos, goal):
        # Agents standing on the goal are hidden so the goal stays visible
        if pos is None or pos == goal:
            scatter.set_offsets(np.empty((0, 2)))
        else:
            scatter.set_offsets(np.c_[[pos[1]], [pos[0]]])

    def on_close(self):
        self.session.close()
        self.root.destroy()
        plt.close('all')
