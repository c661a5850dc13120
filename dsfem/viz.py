# dsfem/viz.py
"""
VISUALIZATION: MESH, DEFORMED SHAPE AND STRESS PLOTS
====================================================

PURPOSE:
--------
Numbers in a result file are hard to check by eye. Two plots cover most
sanity checks of a membrane model:

1. **Deformed shape**: undeformed mesh, deformed mesh (displacements
   scaled up) and the restrained nodes. Does the structure move the way
   the loads push it? Do the supports stay put?

2. **Stress field**: a scatter of the sampled stress component over every
   membrane, colored by value. Peaks should sit where the load paths
   concentrate (supports, load points, re-entrant corners).

Both functions write a PNG and close the figure, so they work headless.
"""

import logging
import os
from typing import List, Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from matplotlib.patches import Polygon

from .config import CONFIG
from .kernel.dof import DOF_RESTRAINED
from .model.membrane import Membrane

logger = logging.getLogger(__name__)

COLORS = {
    'structure_primary': '#2C3E50',      # Undeformed mesh
    'structure_secondary': '#E74C3C',    # Deformed mesh
    'background': '#FAFAFA',
    'grid': '#E0E0E0',
    'support': '#27AE60',
    'text': '#2C3E50',
}

STRESS_LABELS = {
    'sx': 'σx',
    'sy': 'σy',
    'sxy': 'τxy',
}


def _outline(element, scale: float = 0.0) -> np.ndarray:
    """Corner coordinates of an element, optionally displaced by scale·u."""
    points = []
    for node in element.get_nodes():
        points.append((
            node.x + scale * node.get_displacement(1),
            node.y + scale * node.get_displacement(2),
        ))
    return np.array(points)


def _save(fig, outpath: str) -> None:
    os.makedirs(os.path.dirname(outpath) if os.path.dirname(outpath) else '.', exist_ok=True)
    fig.tight_layout()
    fig.savefig(outpath, dpi=150, bbox_inches='tight', facecolor=COLORS['background'])
    plt.close(fig)
    logger.info("Plot saved to %s", outpath)


def plot_deformed(
    model,
    outpath: str,
    scale: float = 1.0,
    title: str = "Membrane Model: Deformed Shape",
) -> None:
    """
    Plot the undeformed and deformed mesh of a solved model.

    Parameters:
    -----------
    model : Model
        Solved model (displacements written by update())
    outpath : str
        PNG path, parent folders are created
    scale : float
        Displacement magnification
    title : str
        Figure title
    """
    fig, ax = plt.subplots(figsize=(10, 8), facecolor=COLORS['background'])
    ax.set_facecolor(COLORS['background'])

    for i, element in enumerate(model.get_elements()):
        ax.add_patch(Polygon(
            _outline(element), closed=True, fill=False,
            edgecolor=COLORS['structure_primary'], linewidth=2, alpha=0.7,
            label='Undeformed' if i == 0 else None, zorder=1,
        ))
        ax.add_patch(Polygon(
            _outline(element, scale), closed=True, fill=False,
            edgecolor=COLORS['structure_secondary'], linewidth=1.5, linestyle='--',
            label=f'Deformed (×{scale:g} scale)' if i == 0 else None, zorder=2,
        ))

    nodes = model.get_nodes()
    xs = np.array([n.x for n in nodes])
    ys = np.array([n.y for n in nodes])
    ax.plot(xs, ys, 'o', color=COLORS['structure_primary'], markersize=6, zorder=3)
    for node in nodes:
        ax.annotate(node.tag, (node.x, node.y), textcoords='offset points',
                    xytext=(5, 5), fontsize=9, color=COLORS['text'])

    supports = [n for n in nodes if DOF_RESTRAINED in (n.get_dof(1), n.get_dof(2))]
    if supports:
        ax.plot([n.x for n in supports], [n.y for n in supports], '^',
                color=COLORS['support'], markersize=12, label='Support', zorder=4)

    ax.set_xlabel('x', fontsize=12, fontweight='bold')
    ax.set_ylabel('y', fontsize=12, fontweight='bold')
    ax.set_title(title, fontsize=14, fontweight='bold', pad=20)
    ax.grid(True, color=COLORS['grid'], linestyle='--')
    ax.set_aspect('equal')
    ax.autoscale_view()
    ax.legend(loc='best', fontsize=10, framealpha=0.9)

    _save(fig, outpath)


def stress_table(model, npoints: Optional[int] = None) -> pd.DataFrame:
    """All membrane stress samples of a model in one table, with an element column."""
    frames: List[pd.DataFrame] = []
    for element in model.get_elements():
        if isinstance(element, Membrane):
            samples = element.stress_samples(npoints)
            samples.insert(0, 'element', element.tag)
            frames.append(samples)
    if not frames:
        raise ValueError("Model has no membrane elements to sample")
    return pd.concat(frames, ignore_index=True)


def plot_stress(
    model,
    outpath: str,
    component: str = 'sx',
    npoints: Optional[int] = None,
    title: Optional[str] = None,
) -> Tuple[float, float]:
    """
    Scatter plot of one stress component over every membrane.

    Parameters:
    -----------
    model : Model
        Solved model
    outpath : str
        PNG path
    component : str
        'sx', 'sy' or 'sxy'
    npoints : int, optional
        Grid subdivisions per element side
        (default CONFIG.membrane_integration_npoints)

    Returns:
    --------
    (min, max) : tuple of float
        Range of the plotted component
    """
    if component not in STRESS_LABELS:
        raise ValueError(f"Unknown stress component '{component}', use one of {sorted(STRESS_LABELS)}")
    npoints = CONFIG.membrane_integration_npoints if npoints is None else npoints
    table = stress_table(model, npoints)

    fig, ax = plt.subplots(figsize=(10, 8), facecolor=COLORS['background'])
    ax.set_facecolor(COLORS['background'])

    sc = ax.scatter(table['X'], table['Y'], c=table[component], cmap='coolwarm', s=18, zorder=1)
    cbar = fig.colorbar(sc, ax=ax)
    cbar.set_label(STRESS_LABELS[component], fontsize=12)

    for element in model.get_elements():
        ax.add_patch(Polygon(_outline(element), closed=True, fill=False,
                             edgecolor=COLORS['structure_primary'], linewidth=1.5, zorder=2))

    ax.set_xlabel('x', fontsize=12, fontweight='bold')
    ax.set_ylabel('y', fontsize=12, fontweight='bold')
    ax.set_title(title or f"Stress field {STRESS_LABELS[component]}", fontsize=14, fontweight='bold', pad=20)
    ax.set_aspect('equal')

    _save(fig, outpath)
    return float(table[component].min()), float(table[component].max())
