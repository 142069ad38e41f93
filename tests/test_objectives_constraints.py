"""Tests of the objective functions and of the linear constraint blocks."""

import numpy as np
import pytest

from cdpr_inv_dyn import DynamicsSnapshot
from cdpr_inv_dyn import IDObjectiveMinQuadCableForce, IDObjectiveMinLinCableForce, IDObjectiveMinForceDeviation
from cdpr_inv_dyn import IDConstraintFixedLinear, IDConstraintCableForceSum, IDConstraintCableForceRate


def two_cable_snapshot():
    return DynamicsSnapshot.fromConstraints([[1.0, 1.0]], [10.0], [0.0, 0.0], [20.0, 20.0])


def test_quadratic_objective():
    obj = IDObjectiveMinQuadCableForce([1.0, 2.0])
    (A, b) = obj.updateObjective(two_cable_snapshot())
    np.testing.assert_allclose(A, np.diag([1.0, 2.0]))
    np.testing.assert_allclose(b, [0.0, 0.0])
    assert obj.evaluateFunction([3.0, 1.0]) == pytest.approx(9.0 + 2.0)


def test_linear_objective():
    obj = IDObjectiveMinLinCableForce([1.0, 2.0])
    (A, b) = obj.updateObjective(two_cable_snapshot())
    np.testing.assert_allclose(A, np.zeros((2, 2)))
    assert obj.evaluateFunction([3.0, 1.0]) == pytest.approx(5.0)


def test_force_deviation_objective():
    """The cost differs from the weighted distance only by a constant."""
    f_ref = np.array([4.0, 6.0])
    obj = IDObjectiveMinForceDeviation([1.0, 1.0], f_ref)
    obj.updateObjective(two_cable_snapshot())
    const = np.dot(f_ref, f_ref)
    for f in ([4.0, 6.0], [5.0, 5.0], [0.0, 10.0]):
        f = np.array(f)
        assert obj.evaluateFunction(f) + const == pytest.approx(np.sum((f - f_ref)**2))


def test_objective_is_deterministic():
    obj = IDObjectiveMinQuadCableForce([1.0, 3.0])
    (A1, b1) = obj.updateObjective(two_cable_snapshot())
    (A2, b2) = obj.updateObjective(two_cable_snapshot())
    np.testing.assert_array_equal(A1, A2)
    np.testing.assert_array_equal(b1, b2)


def test_objective_weights_size_mismatch():
    obj = IDObjectiveMinQuadCableForce([1.0, 1.0, 1.0])
    with pytest.raises(ValueError):
        obj.updateObjective(two_cable_snapshot())


def test_update_weights():
    obj = IDObjectiveMinQuadCableForce([1.0, 1.0, 1.0])
    obj.updateWeights([1.0, 5.0])
    (A, _) = obj.updateObjective(two_cable_snapshot())
    np.testing.assert_allclose(np.diag(A), [1.0, 5.0])


def test_fixed_linear_constraint():
    c = IDConstraintFixedLinear([[1.0, -1.0]], [2.0])
    (A, b) = c.updateConstraint(two_cable_snapshot())
    np.testing.assert_allclose(A, [[1.0, -1.0]])
    np.testing.assert_allclose(b, [2.0])
    assert c.rows() == 1


def test_fixed_linear_constraint_wrong_columns():
    c = IDConstraintFixedLinear([[1.0, -1.0, 0.0]], [2.0])
    with pytest.raises(ValueError):
        c.updateConstraint(two_cable_snapshot())


def test_fixed_linear_constraint_wrong_rows():
    with pytest.raises(ValueError):
        IDConstraintFixedLinear([[1.0, -1.0]], [2.0, 3.0])


def test_force_sum_constraint():
    c = IDConstraintCableForceSum(15.0)
    (A, b) = c.updateConstraint(two_cable_snapshot())
    np.testing.assert_allclose(A, [[1.0, 1.0]])
    np.testing.assert_allclose(b, [15.0])


def test_force_rate_constraint_without_reference():
    c = IDConstraintCableForceRate(1.0)
    (A, b) = c.updateConstraint(two_cable_snapshot())
    assert A.shape == (0, 2)
    assert b.shape == (0,)
    assert c.rows() == 0


def test_force_rate_constraint():
    c = IDConstraintCableForceRate(1.0)
    c.setReference([4.0, 6.0])
    (A, b) = c.updateConstraint(two_cable_snapshot())
    assert A.shape == (4, 2)
    assert c.rows() == 4
    inside = np.array([4.5, 5.0])
    outside = np.array([2.0, 6.0])
    assert (np.dot(A, inside) <= b).all()
    assert not (np.dot(A, outside) <= b).all()


def test_force_rate_constraint_reference_size_mismatch():
    c = IDConstraintCableForceRate(1.0)
    c.setReference([4.0, 6.0, 1.0])
    with pytest.raises(ValueError):
        c.updateConstraint(two_cable_snapshot())
