import numpy as np

class IDObjectiveAbstract (object):
    """
    Quadratic objective of the inverse dynamics problem:
        Q(f) = f' A f + b' f
    updateObjective() computes A and b for the current dynamics and
    returns them, evaluateFunction() computes Q for a given force vector.
    """

    def __init__(self, name="IDObjective"):
        self.name = name;
        self.A = None;
        self.b = None;

    def updateObjective(self, dynamics):
        raise NotImplementedError();

    def evaluateFunction(self, x):
        x = np.asarray(x, dtype=float).reshape(-1);
        return float(np.dot(x, np.dot(self.A, x)) + np.dot(self.b, x));

    def _checkWeights(self, weights, dynamics):
        if(weights.shape[0]!=dynamics.numCables):
            raise ValueError("[%s] Wrong size of the weights, %d rather than %d" % (
                              self.name, weights.shape[0], dynamics.numCables));


class IDObjectiveMinQuadCableForce (IDObjectiveAbstract):
    ''' Minimize the weighted sum of squared cable forces: f' diag(w) f '''

    def __init__(self, weights, name="MinQuadCableForce"):
        IDObjectiveAbstract.__init__(self, name);
        self.updateWeights(weights);

    def updateWeights(self, weights):
        self.weights = np.asarray(weights, dtype=float).reshape(-1);

    def updateObjective(self, dynamics):
        self._checkWeights(self.weights, dynamics);
        self.A = np.diag(self.weights);
        self.b = np.zeros(dynamics.numCables);
        return (self.A, self.b);


class IDObjectiveMinLinCableForce (IDObjectiveAbstract):
    ''' Minimize the weighted sum of cable forces: w' f '''

    def __init__(self, weights, name="MinLinCableForce"):
        IDObjectiveAbstract.__init__(self, name);
        self.updateWeights(weights);

    def updateWeights(self, weights):
        self.weights = np.asarray(weights, dtype=float).reshape(-1);

    def updateObjective(self, dynamics):
        self._checkWeights(self.weights, dynamics);
        n = dynamics.numCables;
        self.A = np.zeros((n,n));
        self.b = np.copy(self.weights);
        return (self.A, self.b);


class IDObjectiveMinForceDeviation (IDObjectiveAbstract):
    """
    Minimize the weighted distance from a reference force vector:
        (f - f_ref)' W (f - f_ref) = f' W f - 2 f_ref' W f + const
    The constant term is not part of the reported cost.
    """

    def __init__(self, weights, f_ref, name="MinForceDeviation"):
        IDObjectiveAbstract.__init__(self, name);
        self.updateWeights(weights);
        self.setReference(f_ref);

    def updateWeights(self, weights):
        self.weights = np.asarray(weights, dtype=float).reshape(-1);

    def setReference(self, f_ref):
        self.f_ref = np.asarray(f_ref, dtype=float).reshape(-1);

    def updateObjective(self, dynamics):
        self._checkWeights(self.weights, dynamics);
        self._checkWeights(self.f_ref, dynamics);
        W = np.diag(self.weights);
        self.A = W;
        self.b = -2.0*np.dot(W, self.f_ref);
        return (self.A, self.b);
