import logging

import numpy as np

from .abstract_solver import ID_exit_type, ID_exit_type_string

logger = logging.getLogger(__name__)

class InverseDynamicsSimulator (object):
    """
    Run an inverse dynamics solver over a sequence of dynamics snapshots,
    one resolve per time step. Failed steps do not stop the run: their
    forces are the invalid value and their cost is infinite.
    """

    def __init__(self, id_solver, name="InverseDynamicsSimulator", verb=0):
        self.name = name;
        self.verb = verb;
        self.id_solver = id_solver;
        self.cableForces = [];
        self.costs = [];
        self.exitTypes = [];
        self.computationTimes = [];

    def run(self, snapshots):
        self.cableForces = [];
        self.costs = [];
        self.exitTypes = [];
        self.computationTimes = [];
        for (i, dynamics) in enumerate(snapshots):
            (forces, cost, exitType) = self.id_solver.resolve(dynamics);
            self.cableForces.append(forces);
            self.costs.append(cost);
            self.exitTypes.append(exitType);
            self.computationTimes.append(self.id_solver.computationTime);
            if(exitType!=ID_exit_type.NO_ERROR and self.verb>0):
                logger.warning("[%s] Step %d: %s", self.name, i, ID_exit_type_string[exitType]);
        if(self.verb>0):
            logger.info("[%s] %d steps, %d failures, total time %.4f s", self.name, len(self.exitTypes),
                        self.getNumberOfFailures(), float(np.sum(self.computationTimes)));
        return (self.cableForces, self.costs, self.exitTypes);

    def getFeasibleMask(self):
        return np.array([e==ID_exit_type.NO_ERROR for e in self.exitTypes], dtype=bool);

    def getNumberOfFailures(self):
        return int(np.count_nonzero(~self.getFeasibleMask()));

    def getCableForcesArray(self):
        ''' Cable forces as an array (steps x cables). '''
        return np.array(self.cableForces);
