import logging
import os

import graphviz

from scalargrad.engine import Value, trace

logger = logging.getLogger(__name__)

# Global configuration for graph rendering
_GRAPH_CONFIG = {
    'directory': 'graph',  # Folder the rendered files are written to
    'format': 'png',
    'rankdir': 'LR',  # Left-to-right layout
    'view': False,  # Open the rendered file with the system viewer
}


def set_graph_config(
    directory: str = None,
    format: str = None,
    rankdir: str = None,
    view: bool = None
):
    """
    Configure graph rendering settings globally.

    Args:
        directory: Folder rendered graphs are written to
        format: Output format understood by Graphviz (png, svg, pdf, ...)
        rankdir: Layout direction (LR, TB, ...)
        view: Open the rendered file after writing it
    """
    if directory is not None:
        _GRAPH_CONFIG['directory'] = directory
    if format is not None:
        _GRAPH_CONFIG['format'] = format
    if rankdir is not None:
        _GRAPH_CONFIG['rankdir'] = rankdir
    if view is not None:
        _GRAPH_CONFIG['view'] = view


def get_graph_config() -> dict:
    """Get the current graph rendering configuration."""
    return _GRAPH_CONFIG.copy()


def _node_label(v: Value) -> str:
    label = f"data={v.data:.4f}\\ngrad={v.grad:.4f}"
    if v.label:
        label = f"{v.label}\\n{label}"
    return label


def draw_dot(root: Value, rankdir: str = None) -> graphviz.Digraph:
    """
    Build a Graphviz digraph of the computational graph ending at ``root``.

    Every Value becomes a box showing its data and gradient; every operation
    becomes an ellipse between its operands and its result. The graph is only
    read, never modified.

    Args:
        root (Value): The output node.
        rankdir (str, optional): Layout direction, defaults to the configured one.

    Returns:
        graphviz.Digraph: The unrendered digraph.
    """
    dot = graphviz.Digraph(comment='Computational Graph')
    dot.attr(rankdir=rankdir or _GRAPH_CONFIG['rankdir'])

    nodes, edges = trace(root)
    for v in nodes:
        uid = str(id(v))
        dot.node(uid, _node_label(v), shape='box')
        if v.op is not None:
            dot.node(uid + v.op.name, v.op_label, shape='ellipse')
            dot.edge(uid + v.op.name, uid)

    for parent, child in edges:
        dot.edge(str(id(parent)), str(id(child)) + child.op.name)

    return dot


def visualize_graph(root: Value, filename='computational_graph') -> str:
    """
    Render the computational graph to a file.

    Args:
        root (Value): The root node of the computational graph.
        filename (str, optional): Base name of the output file. Defaults to 'computational_graph'.

    Returns:
        str: Path of the rendered file.
    """
    config = get_graph_config()
    os.makedirs(config['directory'], exist_ok=True)
    file_path = os.path.join(config['directory'], filename)

    dot = draw_dot(root, rankdir=config['rankdir'])
    rendered = dot.render(file_path, view=config['view'], format=config['format'])
    logger.info("Graph visualization saved as %s", rendered)
    return rendered
