import numpy as np

def _readonly(v):
    v = np.array(v, dtype=float);
    v.setflags(write=False);
    return v;

class DynamicsSnapshot (object):
    """
    Equations of motion of a cable-driven parallel robot at one control instant:
        M(q) q_ddot + C(q,q_dot) + G(q) + w_e = -L(q)^T f
    where f is the vector of cable forces and L is the cable Jacobian
    (numCables x numDofs). Together with the cable force bounds
    forcesMin <= f <= forcesMax this is everything the inverse dynamics
    solvers read. All the arrays are copied and read-only.
    """

    def __init__(self, M, q_ddot, C, G, L, forcesMin, forcesMax, w_e=None):
        self.L = _readonly(np.atleast_2d(L));
        (n_cables, n_dofs) = self.L.shape;
        self.M = _readonly(np.atleast_2d(M));
        self.q_ddot = _readonly(np.asarray(q_ddot, dtype=float).reshape(-1));
        self.C = _readonly(np.asarray(C, dtype=float).reshape(-1));
        self.G = _readonly(np.asarray(G, dtype=float).reshape(-1));
        self.w_e = _readonly(np.zeros(n_dofs) if w_e is None else np.asarray(w_e, dtype=float).reshape(-1));
        self.forcesMin = _readonly(np.asarray(forcesMin, dtype=float).reshape(-1));
        self.forcesMax = _readonly(np.asarray(forcesMax, dtype=float).reshape(-1));

        if(self.M.shape!=(n_dofs, n_dofs)):
            raise ValueError("Wrong size of the mass matrix %s rather than (%d, %d)" % (str(self.M.shape), n_dofs, n_dofs));
        for (name, v) in (("q_ddot", self.q_ddot), ("C", self.C), ("G", self.G), ("w_e", self.w_e)):
            if(v.shape[0]!=n_dofs):
                raise ValueError("Wrong size of %s, %d rather than %d" % (name, v.shape[0], n_dofs));
        if(self.forcesMin.shape[0]!=n_cables or self.forcesMax.shape[0]!=n_cables):
            raise ValueError("Wrong size of the force bounds, %d and %d rather than %d" % (
                              self.forcesMin.shape[0], self.forcesMax.shape[0], n_cables));
        if((self.forcesMin > self.forcesMax).any()):
            raise ValueError("Force lower bounds exceed upper bounds: %s > %s" % (
                              str(self.forcesMin), str(self.forcesMax)));

    @classmethod
    def fromConstraints(cls, A_eq, b_eq, forcesMin, forcesMax):
        ''' Build a snapshot from an already formulated equality constraint
            A_eq f = b_eq, i.e. L = -A_eq^T and all the dynamics terms are
            lumped into C = b_eq.
        '''
        A_eq = np.atleast_2d(np.asarray(A_eq, dtype=float));
        b_eq = np.asarray(b_eq, dtype=float).reshape(-1);
        n_dofs = A_eq.shape[0];
        if(b_eq.shape[0]!=n_dofs):
            raise ValueError("Wrong size of b_eq, %d rather than %d" % (b_eq.shape[0], n_dofs));
        return cls(np.zeros((n_dofs, n_dofs)), np.zeros(n_dofs), b_eq, np.zeros(n_dofs),
                   -A_eq.T, forcesMin, forcesMax);

    @property
    def numCables(self):
        return self.L.shape[0];

    @property
    def numDofs(self):
        return self.L.shape[1];

    def withForceBounds(self, forcesMin, forcesMax):
        ''' Copy of this snapshot with different cable force bounds. '''
        return DynamicsSnapshot(self.M, self.q_ddot, self.C, self.G, self.L,
                                forcesMin, forcesMax, self.w_e);
