import logging
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

log = logging.getLogger(__name__)

STYLE_PATH = Path(__file__).resolve().parent / "galerkin.mplstyle"


def setup_style():
    """Apply shared matplotlib style."""
    if STYLE_PATH.exists():
        plt.style.use(STYLE_PATH)
    plt.rcParams.setdefault("savefig.bbox", "tight")


def save_figure(fig, filename: str | Path):
    """
    Save figure to the specified path.
    """
    filepath = Path(filename)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(filepath, bbox_inches="tight")
    log.info(f"Saved: {filepath}")
    return filepath


def plot_solution(samples, mesh=None, title: str | None = None):
    """
    Plot u_h (and the exact solution, if tabulated) from a sample table.

    Parameters
    ----------
    samples : DataFrame
        Output of ``sample_solution`` with columns x, u_h [, u_exact, error]
    mesh : Mesh1d, optional
        Mesh nodes are marked on the x axis
    title : str, optional
        Figure title

    Returns
    -------
    fig : matplotlib Figure
    """
    has_exact = "u_exact" in samples
    fig, axes = plt.subplots(1, 2 if has_exact else 1, figsize=(10 if has_exact else 5, 4))
    ax = axes[0] if has_exact else axes

    ax.plot(samples["x"], samples["u_h"], "o-", label=r"$u_h$")
    if has_exact:
        ax.plot(samples["x"], samples["u_exact"], "--", label=r"$u$")
    if mesh is not None:
        ax.plot(mesh.VX, np.zeros(mesh.nonodes), "k|", markersize=12, label="nodes")
    ax.set_xlabel(r"$x$")
    ax.legend()

    if has_exact:
        axes[1].plot(samples["x"], samples["error"], "o-")
        axes[1].axhline(0.0, color="k", linewidth=0.5)
        axes[1].set_xlabel(r"$x$")
        axes[1].set_ylabel(r"$u_h - u$")

    if title:
        fig.suptitle(title)
    return fig
