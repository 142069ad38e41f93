import numpy as np

class IDConstraintLinear (object):
    """
    Linear inequality constraint on the cable forces:  A f <= b
    updateConstraint() computes the block for the current dynamics and
    returns it. The number of rows is chosen by each constraint.
    """

    def __init__(self, name="IDConstraintLinear"):
        self.name = name;
        self.A = None;
        self.b = None;

    def updateConstraint(self, dynamics):
        raise NotImplementedError();

    def rows(self):
        return 0 if self.A is None else self.A.shape[0];


class IDConstraintFixedLinear (IDConstraintLinear):
    ''' Constant constraint block A f <= b. '''

    def __init__(self, A, b, name="FixedLinear"):
        IDConstraintLinear.__init__(self, name);
        A = np.atleast_2d(np.asarray(A, dtype=float));
        b = np.asarray(b, dtype=float).reshape(-1);
        if(A.shape[0]!=b.shape[0]):
            raise ValueError("[%s] Wrong size of b, %d rather than %d" % (name, b.shape[0], A.shape[0]));
        self._A = A;
        self._b = b;

    def updateConstraint(self, dynamics):
        if(self._A.shape[1]!=dynamics.numCables):
            raise ValueError("[%s] Wrong number of columns, %d rather than %d" % (
                              self.name, self._A.shape[1], dynamics.numCables));
        self.A = self._A;
        self.b = self._b;
        return (self.A, self.b);


class IDConstraintCableForceSum (IDConstraintLinear):
    ''' Upper bound on the total cable force: sum(f) <= maxSum '''

    def __init__(self, maxSum, name="CableForceSum"):
        IDConstraintLinear.__init__(self, name);
        self.maxSum = float(maxSum);

    def updateConstraint(self, dynamics):
        self.A = np.ones((1, dynamics.numCables));
        self.b = np.array([self.maxSum]);
        return (self.A, self.b);


class IDConstraintCableForceRate (IDConstraintLinear):
    """
    Limit on the variation of every cable force with respect to a reference
    (typically the forces applied at the previous control step):
        -maxDelta <= f - f_ref <= maxDelta
    Without a reference the block has no rows.
    """

    def __init__(self, maxDelta, name="CableForceRate"):
        IDConstraintLinear.__init__(self, name);
        self.maxDelta = maxDelta;
        self.f_ref = None;

    def setReference(self, f_ref):
        self.f_ref = None if f_ref is None else np.asarray(f_ref, dtype=float).reshape(-1);

    def updateConstraint(self, dynamics):
        n = dynamics.numCables;
        if(self.f_ref is None):
            self.A = np.zeros((0,n));
            self.b = np.zeros(0);
            return (self.A, self.b);
        if(self.f_ref.shape[0]!=n):
            raise ValueError("[%s] Wrong size of the reference forces, %d rather than %d" % (
                              self.name, self.f_ref.shape[0], n));
        delta = self.maxDelta*np.ones(n) if np.isscalar(self.maxDelta) else np.asarray(self.maxDelta, dtype=float).reshape(-1);
        if(delta.shape[0]!=n):
            raise ValueError("[%s] Wrong size of maxDelta, %d rather than %d" % (self.name, delta.shape[0], n));
        I = np.identity(n);
        self.A = np.vstack((I, -I));
        self.b = np.concatenate((self.f_ref + delta, delta - self.f_ref));
        return (self.A, self.b);
