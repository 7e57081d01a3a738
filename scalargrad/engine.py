import numpy as np
from enum import Enum
from typing import List, Optional, Tuple, Union


class Op(str, Enum):
    """The closed set of operations a non-leaf Value can record."""

    ADD = '+'
    SUB = '-'
    MUL = '*'
    POW = '**'
    TANH = 'tanh'
    EXP = 'exp'
    LOG = 'log'
    RELU = 'ReLU'


Number = Union[int, float]


class Value:
    """
    A class representing a scalar value in the computational graph.

    Arithmetic on Values builds the graph as it goes: every result remembers
    its operands (``parents``), the operation that produced it and the forward
    values its local derivative needs. ``backward()`` then accumulates the
    gradient of the result into every Value that contributed to it.

    Attributes:
        data (float): The result of the operation, or the literal for leaves.
        grad (float): Gradient accumulator, summed into by backward passes.
        label (str): Optional name shown when the graph is rendered.
    """

    __slots__ = ('data', 'grad', 'label', '_prev', '_op', '_saved')

    def __init__(self, data, _children=(), _op: Optional[Op] = None, label=None, _saved=()):
        """
        Initialize a Value object.

        Args:
            data: The number to be stored in the Value object.
            _children (tuple, optional): Operand nodes, in order. Defaults to ().
            _op (Op, optional): The operation that produced this Value. Defaults to None.
            label (str, optional): A label for the Value. Defaults to None.
            _saved (tuple, optional): Forward values captured for the derivative rule.
        """
        self.data = float(data)
        self.grad = 0.0
        self.label = label
        self._prev: Tuple['Value', ...] = tuple(_children)
        self._op = _op
        self._saved = tuple(_saved)

    # -- inspection ---------------------------------------------------------

    @property
    def parents(self) -> Tuple['Value', ...]:
        """The operands that produced this Value; empty for leaves."""
        return self._prev

    @property
    def op(self) -> Optional[Op]:
        """The operation that produced this Value, None for leaves."""
        return self._op

    @property
    def exponent(self) -> Optional[float]:
        """The exponent of a power node, None for every other node."""
        return self._saved[1] if self._op is Op.POW else None

    @property
    def op_label(self) -> str:
        """Short operation label such as '+', '**-1' or 'tanh'; '' for leaves."""
        if self._op is None:
            return ''
        if self._op is Op.POW:
            return f'**{self.exponent}'
        return self._op.value

    @property
    def is_leaf(self) -> bool:
        """True when this Value has no parents."""
        return not self._prev

    # -- graph builder --------------------------------------------------------

    def __add__(self, other):
        """Add two Values."""
        return self._binary_op(other, Op.ADD)

    def __radd__(self, other):
        """Reverse add two Values."""
        return self + other

    def __sub__(self, other):
        """Subtract two Values."""
        other = other if isinstance(other, Value) else Value(other)
        return self + (-other)

    def __rsub__(self, other):
        """Reverse subtract two Values."""
        return Value(other) + (-self)

    def __mul__(self, other):
        """Multiply two Values."""
        return self._binary_op(other, Op.MUL)

    def __rmul__(self, other):
        """Reverse multiply two Values."""
        return self * other

    def __neg__(self):
        """Negate a Value."""
        return self * -1

    def __truediv__(self, other):
        """Divide two Values."""
        other = other if isinstance(other, Value) else Value(other)
        return self * other**-1

    def __rtruediv__(self, other):
        """Reverse divide two Values."""
        return Value(other) * self**-1

    def __pow__(self, other):
        """Raise a Value to a constant real power."""
        assert isinstance(other, (int, float)), "only supporting int/float powers for now"
        return self._unary_op(Op.POW, lambda x: np.power(x, other), exponent=other)

    def relu(self):
        """Apply the ReLU function to this Value."""
        return self._unary_op(Op.RELU, lambda x: np.maximum(0.0, x))

    def tanh(self):
        """Apply the tanh function to this Value."""
        return self._unary_op(Op.TANH, np.tanh)

    def exp(self):
        """Apply the exponential function to this Value."""
        return self._unary_op(Op.EXP, np.exp)

    def log(self):
        """Apply the natural logarithm function to this Value."""
        return self._unary_op(Op.LOG, np.log)

    def _binary_op(self, other, op: Op) -> 'Value':
        """
        Perform a binary operation.

        Plain numbers are promoted to fresh leaves before the operation is
        recorded.

        Args:
            other: The other Value (or number) to perform the operation with.
            op (Op): Either Op.ADD or Op.MUL.

        Returns:
            Value: The result of the operation.
        """
        other = other if isinstance(other, Value) else Value(other)
        if op is Op.ADD:
            return Value(self.data + other.data, (self, other), op)
        return Value(self.data * other.data, (self, other), op,
                     _saved=(self.data, other.data))

    def _unary_op(self, op: Op, op_func, exponent: Optional[Number] = None) -> 'Value':
        """
        Perform a unary operation.

        The forward value goes through numpy so that log of a non-positive
        number or a fractional power of a negative one yields nan (and
        overflow yields inf) instead of raising.

        Args:
            op (Op): The operation being recorded.
            op_func (function): The numpy function computing the forward value.
            exponent (int or float, optional): The exponent, for Op.POW only.

        Returns:
            Value: The result of the operation.
        """
        x = self.data
        with np.errstate(all='ignore'):
            out = float(op_func(np.float64(x)))

        if op is Op.POW:
            saved = (x, exponent)
        elif op in (Op.TANH, Op.EXP):
            saved = (out,)
        else:
            saved = (x,)
        return Value(out, (self,), op, _saved=saved)

    # -- autodiff -------------------------------------------------------------

    def backward(self):
        """
        Perform backpropagation starting from this Value.

        Seeds this Value's gradient with 1.0 and propagates into every
        ancestor. Gradients are accumulated, not reset: call ``zero_grad`` on
        the parameters before reusing them for another pass.
        """
        topo = topological_order(self)

        self.grad = 1.0
        for v in reversed(topo):
            if v._op is None:
                continue
            for parent, local in zip(v._prev, _local_grads(v)):
                parent.grad += local * v.grad

    def __repr__(self):
        return f"Value(data={self.data:.4f}, grad={self.grad:.4f})"


def _local_grads(v: Value) -> Tuple[float, ...]:
    """Local derivative of ``v`` with respect to each of its parents, in order."""
    op = v._op
    saved = v._saved
    with np.errstate(all='ignore'):
        if op is Op.ADD:
            return (1.0, 1.0)
        if op is Op.MUL:
            left, right = saved
            return (right, left)
        if op is Op.POW:
            x, k = saved
            return (float(k * np.power(np.float64(x), k - 1)),)
        if op is Op.TANH:
            t, = saved
            return (1.0 - t * t,)
        if op is Op.EXP:
            e, = saved
            return (e,)
        if op is Op.LOG:
            x, = saved
            return (float(1.0 / np.float64(x)),)
        if op is Op.RELU:
            x, = saved
            return (1.0 if x > 0 else 0.0,)
    raise ValueError(f"no derivative rule for operation {op!r}")


def topological_order(root: Value) -> List[Value]:
    """
    Order every node reachable from ``root`` so each appears after its parents.

    Nodes are keyed by identity, so two distinct nodes holding equal numbers
    are both kept. The walk uses an explicit stack rather than recursion. The
    graph is assumed to be acyclic; a cycle makes this loop forever.

    Args:
        root (Value): The node to start from.

    Returns:
        list: Nodes in post-order, ``root`` last.
    """
    topo = []
    visited = set()
    stack = [(root, False)]

    while stack:
        v, expanded = stack.pop()
        if expanded:
            topo.append(v)
            continue
        if id(v) in visited:
            continue
        visited.add(id(v))
        stack.append((v, True))
        for parent in reversed(v._prev):
            if id(parent) not in visited:
                stack.append((parent, False))

    return topo


def trace(root: Value) -> Tuple[List[Value], List[Tuple[Value, Value]]]:
    """
    Collect the nodes and edges of the graph ending at ``root``.

    Read-only: nothing on the graph is modified.

    Args:
        root (Value): The output node.

    Returns:
        tuple: ``(nodes, edges)`` where edges are ``(parent, child)`` pairs,
        one per operand slot (``a + a`` yields two edges from ``a``).
    """
    nodes = topological_order(root)
    edges = [(parent, v) for v in nodes for parent in v._prev]
    return nodes, edges
