# dsfem/report.py
"""
Result file writer.

The report is plain text, tab-separated, in this order:

    header
    node coordinates
    element properties
    node displacements
    node reactions
    membrane stress samples, (N+1)² rows per element

Nothing reads it back, it is meant for people and spreadsheets.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from .config import CONFIG
from .model.membrane import STRESS_COLUMNS, Membrane

logger = logging.getLogger(__name__)


def _section(title: str) -> List[str]:
    return ["", title, "-" * len(title)]


def format_results(model, npoints: Optional[int] = None) -> str:
    """Build the report text for a solved model."""
    npoints = CONFIG.membrane_integration_npoints if npoints is None else npoints
    nodes = model.get_nodes()
    elements = model.get_elements()

    lines = [
        "dsfem static analysis results",
        f"Created: {datetime.now():%Y-%m-%d %H:%M:%S}",
        f"Nodes: {len(nodes)}\tElements: {len(elements)}\tDimension: {model.ndim}",
    ]

    lines += _section("Node coordinates")
    for node in nodes:
        lines.append(f"{node.tag}\t{node.get_coordinates().to_string_line()}")

    lines += _section("Element properties")
    for element in elements:
        lines.append(f"{element.tag}\t{type(element).__name__}")
        for label, value in element.properties():
            lines.append(f"\t{label}:\t{value}")

    lines += _section("Node displacements")
    for node in nodes:
        lines.append(f"{node.tag}\t{node.get_displacements().to_string_line()}")

    lines += _section("Node reactions")
    for node in nodes:
        lines.append(f"{node.tag}\t{node.get_reactions().to_string_line()}")

    lines += _section("Membrane stresses")
    for element in elements:
        if not isinstance(element, Membrane):
            continue
        samples = element.stress_samples(npoints)
        lines.append(f"{element.tag}\t{len(samples)} points")
        lines.append("\t".join(STRESS_COLUMNS))
        for row in samples.itertuples(index=False):
            lines.append("\t".join(f"{value:g}" for value in row))

    return "\n".join(lines) + "\n"


def save_results(model, path: Union[str, Path], npoints: Optional[int] = None) -> Path:
    """
    Write the result report of a solved model.

    Parameters:
    -----------
    model : Model
        Solved model
    path : str or Path
        Output file, parent folders are created
    npoints : int, optional
        Stress grid subdivisions per membrane side
        (default CONFIG.membrane_integration_npoints)

    Returns:
    --------
    Path
        The written file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_results(model, npoints), encoding="utf-8")
    logger.info("Results saved to %s", path)
    return path
