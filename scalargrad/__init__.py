"""
ScalarGrad: a reverse-mode autograd engine over scalar values, with a small
neural-network library and gradient descent on top.
"""

from scalargrad.engine import Op, Value, topological_order, trace
from scalargrad.nn import Module, Neuron, Layer, MLP, RandomSource, mse_loss
from scalargrad.optim import SGD
from scalargrad.viz import draw_dot, visualize_graph, set_graph_config, get_graph_config

__version__ = "0.1.0"

__all__ = [
    'Op',
    'Value',
    'topological_order',
    'trace',
    'Module',
    'Neuron',
    'Layer',
    'MLP',
    'RandomSource',
    'mse_loss',
    'SGD',
    'draw_dot',
    'visualize_graph',
    'set_graph_config',
    'get_graph_config',
]
