import matplotlib
import matplotlib.pyplot as plt
from mpl_toolkits.mplot3d import Axes3D  # noqa: F401
import matplotlib.animation as animation
from typing import Dict, Optional, Tuple
from dataclasses import dataclass
from .effects_simulation import Trajectory


@dataclass
class AnimationConfig:
    figure_size: Tuple[int, int] = (12, 8)
    playback_speed: float = 1.0
    show_court: bool = True


class TennisCourt3D:
    """Court outline in plot axes: (lateral x, forward -z, height y)"""

    def __init__(self):
        self.half_length = 11.885
        self.half_width_doubles = 5.485
        self.half_width_singles = 4.115
        self.service_line = 6.4
        self.net_height = 0.914

    def draw_court(self, ax):
        hl, hw, hs, sl = self.half_length, self.half_width_doubles, self.half_width_singles, self.service_line
        ax.plot([-hw, hw, hw, -hw, -hw], [-hl, -hl, hl, hl, -hl], [0] * 5, 'k-', linewidth=2, alpha=0.8)
        for x in (-hs, hs):
            ax.plot([x, x], [-hl, hl], [0, 0], 'k-', linewidth=1, alpha=0.6)
        for y in (-sl, sl):
            ax.plot([-hs, hs], [y, y], [0, 0], 'k-', linewidth=1, alpha=0.6)
        ax.plot([0, 0], [-sl, sl], [0, 0], 'k-', linewidth=1, alpha=0.6)

        # Net
        ax.plot([-hw, hw], [0, 0], [self.net_height, self.net_height], 'b-', linewidth=2)
        ax.plot([-hw, -hw], [0, 0], [0, self.net_height], 'b-', linewidth=2)
        ax.plot([hw, hw], [0, 0], [0, self.net_height], 'b-', linewidth=2)


def _plot_coords(trajectory: Trajectory):
    # Forward travel is -z in the simulation frame
    return ([p.x for p in trajectory], [-p.z for p in trajectory], [p.y for p in trajectory])


def _prepare_axes(config: AnimationConfig, title: str):
    fig = plt.figure(figsize=config.figure_size)
    ax = fig.add_subplot(111, projection='3d')
    if config.show_court:
        TennisCourt3D().draw_court(ax)
    ax.set_xlabel('Lateral (m)')
    ax.set_ylabel('Court length (m)')
    ax.set_zlabel('Height (m)')
    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.set_xlim(-8, 8)
    ax.set_ylim(-14, 14)
    ax.set_zlim(0, 5)
    return fig, ax


def plot_trajectories(trajectories: Dict[str, Trajectory], title: str = "Predicted Ball Flight",
                      save_path: Optional[str] = None, show: bool = False,
                      config: Optional[AnimationConfig] = None):
    """
    Draw one or more predicted paths over the court.

    Args:
        trajectories: Mapping of label to trajectory
        title: Plot title
        save_path: PNG path to save to (optional)
        show: Open an interactive window

    Returns:
        The matplotlib figure
    """
    config = config or AnimationConfig()
    fig, ax = _prepare_axes(config, title)

    colors = ['red', 'blue', 'green', 'orange', 'purple']
    for i, (label, trajectory) in enumerate(trajectories.items()):
        xs, ys, zs = _plot_coords(trajectory)
        color = colors[i % len(colors)]
        ax.plot(xs, ys, zs, '--', color=color, linewidth=2, label=label)
        ax.scatter([xs[-1]], [ys[-1]], [zs[-1]], color=color, s=40)

    if trajectories:
        ax.legend(loc='upper right')
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight')
    if show:
        plt.show()
    return fig


def create_trajectory_gif(trajectories: Dict[str, Trajectory], output_path: str,
                          title: str = "Shot Comparison", fps: int = 30, dpi: int = 100,
                          config: Optional[AnimationConfig] = None) -> bool:
    """
    Animate ball flight along the predicted paths and save as GIF.

    Returns:
        True if the GIF was written
    """
    if not trajectories:
        return False

    config = config or AnimationConfig()
    fig, ax = _prepare_axes(config, title)

    colors = ['red', 'blue', 'green', 'orange', 'purple']
    data = []
    for i, (label, trajectory) in enumerate(trajectories.items()):
        xs, ys, zs = _plot_coords(trajectory)
        color = colors[i % len(colors)]
        line, = ax.plot([], [], [], color=color, linewidth=2, label=label)
        ball, = ax.plot([], [], [], 'o', color=color, markersize=8)
        data.append((xs, ys, zs, line, ball))
    ax.legend(loc='upper right')

    max_frames = max(len(traj) for traj in trajectories.values())

    def animate_frame(frame):
        artists = []
        for xs, ys, zs, line, ball in data:
            end = min(frame, len(xs) - 1)
            line.set_data(xs[:end + 1], ys[:end + 1])
            line.set_3d_properties(zs[:end + 1])
            ball.set_data([xs[end]], [ys[end]])
            ball.set_3d_properties([zs[end]])
            artists.extend([line, ball])
        return artists

    anim = animation.FuncAnimation(fig, animate_frame, frames=max_frames + 15,
                                   interval=int(1000 / (fps * config.playback_speed)),
                                   blit=False, repeat=False)
    try:
        anim.save(output_path, writer='pillow', fps=fps, dpi=dpi)
    except (ValueError, RuntimeError, OSError) as e:
        print(f"⚠️  Could not write GIF ({e}); saving last frame as PNG")
        fig.savefig(output_path.replace('.gif', '.png'), dpi=dpi, bbox_inches='tight')
        plt.close(fig)
        return False
    plt.close(fig)
    return True


def use_headless_backend() -> None:
    matplotlib.use("Agg")
