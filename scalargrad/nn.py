"""
Feed-forward network building blocks on top of the scalar engine:
Neuron, Layer and MLP, plus a squared-error loss.
"""

import logging
from typing import List, Optional, Protocol, Sequence, Union, runtime_checkable

import numpy as np

from scalargrad.engine import Value

logger = logging.getLogger(__name__)

Input = Union[Value, int, float]


@runtime_checkable
class RandomSource(Protocol):
    """
    Source of the initial weights.

    ``numpy.random.Generator`` and ``random.Random`` both satisfy it; pass a
    seeded one to make network construction reproducible.
    """

    def uniform(self, low: float, high: float) -> float:
        """Return a number drawn uniformly from [low, high)."""
        ...


def _default_rng() -> RandomSource:
    return np.random.default_rng()


class Module:
    """Base class for everything that owns trainable parameters."""

    def zero_grad(self):
        """Reset the gradient of every parameter to zero."""
        for p in self.parameters():
            p.grad = 0.0

    def parameters(self) -> List[Value]:
        return []


class Neuron(Module):
    """
    A single neuron: ``tanh(w1*x1 + ... + wn*xn + b)``, or the plain weighted
    sum when ``nonlin`` is False.
    """

    def __init__(self, nin: int, nonlin: bool = True, rng: Optional[RandomSource] = None):
        """
        Initialize a neuron.

        Args:
            nin: Number of inputs.
            nonlin: Apply tanh to the weighted sum. Defaults to True.
            rng: Random source for the weights, drawn from [-1, 1). A fresh
                numpy generator is used when omitted.
        """
        if nin < 1:
            raise ValueError(f"a neuron needs at least one input, got nin={nin}")
        rng = rng if rng is not None else _default_rng()
        self.w = [Value(rng.uniform(-1.0, 1.0)) for _ in range(nin)]
        self.b = Value(0.0)
        self.nonlin = nonlin

    def __call__(self, x: Sequence[Input]) -> Value:
        if len(x) != len(self.w):
            raise ValueError(
                f"neuron expects {len(self.w)} inputs, got {len(x)}"
            )
        act = sum((wi * xi for wi, xi in zip(self.w, x)), self.b)
        return act.tanh() if self.nonlin else act

    def parameters(self) -> List[Value]:
        return self.w + [self.b]

    def __repr__(self):
        return f"{'Tanh' if self.nonlin else 'Linear'}Neuron({len(self.w)})"


class Layer(Module):
    """A fully connected layer: ``nout`` neurons reading the same inputs."""

    def __init__(self, nin: int, nout: int, nonlin: bool = True, rng: Optional[RandomSource] = None):
        if nout < 1:
            raise ValueError(f"a layer needs at least one neuron, got nout={nout}")
        rng = rng if rng is not None else _default_rng()
        self.neurons = [Neuron(nin, nonlin=nonlin, rng=rng) for _ in range(nout)]

    def __call__(self, x: Sequence[Input]) -> List[Value]:
        return [n(x) for n in self.neurons]

    def parameters(self) -> List[Value]:
        return [p for n in self.neurons for p in n.parameters()]

    def __repr__(self):
        return f"Layer of [{', '.join(str(n) for n in self.neurons)}]"


class MLP(Module):
    """
    Multi-layer perceptron.

    ``MLP(2, [4, 4, 1])`` chains Layer(2->4), Layer(4->4) and Layer(4->1).
    Every layer applies tanh except the last one, which stays linear so the
    output range is unconstrained.
    """

    def __init__(self, nin: int, nouts: Sequence[int], rng: Optional[RandomSource] = None):
        """
        Initialize a multi-layer perceptron.

        Args:
            nin: Number of input features.
            nouts: Width of each layer, the last entry being the output width.
            rng: Random source shared by all layers.
        """
        if not nouts:
            raise ValueError("an MLP needs at least one layer")
        rng = rng if rng is not None else _default_rng()
        sz = [nin] + list(nouts)
        self.layers = [
            Layer(sz[i], sz[i + 1], nonlin=i != len(nouts) - 1, rng=rng)
            for i in range(len(nouts))
        ]
        logger.debug("Built MLP %s with %d parameters", sz, len(self.parameters()))

    def __call__(self, x: Sequence[Input]) -> List[Value]:
        for layer in self.layers:
            x = layer(x)
        return x

    def parameters(self) -> List[Value]:
        return [p for layer in self.layers for p in layer.parameters()]

    def __repr__(self):
        return f"MLP of [{', '.join(str(layer) for layer in self.layers)}]"


def mse_loss(predictions: Sequence[Value], targets: Sequence[Input], reduction: str = 'mean') -> Value:
    """
    Squared-error loss between predictions and targets.

    Args:
        predictions: Network outputs.
        targets: Expected values, numbers or Values.
        reduction: 'mean' averages the squared errors, 'sum' adds them up.

    Returns:
        Value: The loss, ready for ``backward()``.
    """
    if len(predictions) != len(targets):
        raise ValueError(
            f"got {len(predictions)} predictions for {len(targets)} targets"
        )
    if not predictions:
        raise ValueError("cannot compute a loss over zero predictions")
    if reduction not in ('mean', 'sum'):
        raise ValueError(f"unknown reduction {reduction!r}, expected 'mean' or 'sum'")

    total = sum(((p - t) ** 2 for p, t in zip(predictions, targets)), Value(0.0))
    if reduction == 'mean':
        return total * (1.0 / len(predictions))
    return total
