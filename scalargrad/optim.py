import logging
from typing import Iterable

from scalargrad.engine import Value

logger = logging.getLogger(__name__)


class SGD:
    """
    Plain gradient descent over a fixed list of parameters.

    ``step()`` only moves the parameter values; it never resets gradients, so
    call ``zero_grad()`` (here or on the module) before the next backward pass.

    Attributes:
        params (list): The leaf Values being optimized.
        lr (float): The learning rate.
    """

    def __init__(self, params: Iterable[Value], lr: float = 0.01):
        if lr <= 0:
            raise ValueError(f"learning rate must be positive, got {lr}")
        self.params = list(params)
        self.lr = lr

    def step(self):
        """Update every parameter in place: ``data -= lr * grad``."""
        for p in self.params:
            p.data -= self.lr * p.grad
        logger.debug("SGD step over %d parameters (lr=%g)", len(self.params), self.lr)

    def zero_grad(self):
        """Reset the gradient of every held parameter to zero."""
        for p in self.params:
            p.grad = 0.0
