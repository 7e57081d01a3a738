"""
Train a [2, 4, 4, 1] network on exclusive-or with plain gradient descent.

    python examples/xor.py
"""

import logging

import numpy as np

from scalargrad import MLP, SGD, Value, mse_loss

logging.basicConfig(level=logging.INFO, format="%(message)s")
log = logging.getLogger("xor")

INPUTS = [(0.0, 0.0), (0.0, 1.0), (1.0, 0.0), (1.0, 1.0)]
TARGETS = [0.0, 1.0, 1.0, 0.0]


def main(seed: int = 0, epochs: int = 100, lr: float = 0.1):
    model = MLP(2, [4, 4, 1], rng=np.random.default_rng(seed))
    optimizer = SGD(model.parameters(), lr=lr)
    xs = [[Value(a), Value(b)] for a, b in INPUTS]

    for epoch in range(epochs):
        preds = [model(x)[0] for x in xs]
        loss = mse_loss(preds, TARGETS, reduction='sum')

        model.zero_grad()
        loss.backward()
        optimizer.step()

        if epoch % 20 == 0:
            log.info("Epoch %d: loss %.4f", epoch, loss.data)

    for (a, b), target in zip(INPUTS, TARGETS):
        pred = model([a, b])[0].data
        log.info("In: (%g, %g) target: %g pred: %.4f", a, b, target, pred)


if __name__ == "__main__":
    main()
