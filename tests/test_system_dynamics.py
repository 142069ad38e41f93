"""Tests of the dynamics snapshot and of the equations of motion constraint."""

import numpy as np
import pytest

from cdpr_inv_dyn import DynamicsSnapshot, IDSolverAbstract


def make_planar_snapshot():
    M = 2.0*np.identity(2)
    q_ddot = np.array([1.0, 0.0])
    C = np.array([0.0, 1.0])
    G = np.array([0.0, 9.81])
    L = np.array([[1.0, 0.0],
                  [0.0, 1.0],
                  [-0.7, -0.7]])
    return DynamicsSnapshot(M, q_ddot, C, G, L, np.zeros(3), 100.0*np.ones(3))


def test_eom_constraints():
    """A_eq = -L^T and b_eq = M q_ddot + C + G + w_e."""
    dyn = make_planar_snapshot()
    (A_eq, b_eq) = IDSolverAbstract.GetEoMConstraints(dyn)
    np.testing.assert_allclose(A_eq, -dyn.L.T)
    np.testing.assert_allclose(b_eq, [2.0, 10.81])
    assert dyn.numCables == 3
    assert dyn.numDofs == 2


def test_external_wrench_enters_b_eq():
    dyn = make_planar_snapshot()
    dyn_we = DynamicsSnapshot(dyn.M, dyn.q_ddot, dyn.C, dyn.G, dyn.L, dyn.forcesMin, dyn.forcesMax,
                              w_e=[1.0, -1.0])
    (_, b_eq) = IDSolverAbstract.GetEoMConstraints(dyn_we)
    np.testing.assert_allclose(b_eq, [3.0, 9.81])


def test_from_constraints():
    dyn = DynamicsSnapshot.fromConstraints([[1.0, 1.0]], [10.0], [0.0, 0.0], [20.0, 20.0])
    (A_eq, b_eq) = IDSolverAbstract.GetEoMConstraints(dyn)
    np.testing.assert_allclose(A_eq, [[1.0, 1.0]])
    np.testing.assert_allclose(b_eq, [10.0])
    assert dyn.numCables == 2
    assert dyn.numDofs == 1


def test_snapshot_is_read_only():
    dyn = make_planar_snapshot()
    with pytest.raises(ValueError):
        dyn.forcesMax[0] = 1.0
    with pytest.raises(ValueError):
        dyn.L[0, 0] = 1.0


def test_snapshot_copies_inputs():
    fmax = np.array([20.0, 20.0])
    dyn = DynamicsSnapshot.fromConstraints([[1.0, 1.0]], [10.0], [0.0, 0.0], fmax)
    fmax[0] = 3.0
    assert dyn.forcesMax[0] == 20.0


def test_wrong_bound_size():
    with pytest.raises(ValueError):
        DynamicsSnapshot.fromConstraints([[1.0, 1.0]], [10.0], [0.0], [20.0, 20.0])


def test_lower_bound_above_upper_bound():
    with pytest.raises(ValueError):
        DynamicsSnapshot.fromConstraints([[1.0, 1.0]], [10.0], [0.0, 5.0], [20.0, 4.0])


def test_wrong_b_eq_size():
    with pytest.raises(ValueError):
        DynamicsSnapshot.fromConstraints([[1.0, 1.0]], [10.0, 1.0], [0.0, 0.0], [20.0, 20.0])


def test_wrong_mass_matrix_size():
    L = np.ones((3, 2))
    with pytest.raises(ValueError):
        DynamicsSnapshot(np.identity(3), np.zeros(2), np.zeros(2), np.zeros(2), L, np.zeros(3), np.ones(3))


def test_with_force_bounds():
    dyn = make_planar_snapshot()
    tight = dyn.withForceBounds(np.ones(3), 2.0*np.ones(3))
    np.testing.assert_allclose(tight.forcesMax, [2.0, 2.0, 2.0])
    np.testing.assert_allclose(tight.L, dyn.L)
    np.testing.assert_allclose(dyn.forcesMax, [100.0, 100.0, 100.0])
