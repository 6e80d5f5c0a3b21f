import numpy as np

from .state import AgentState, WorldBounds


class Obstacle:
    def __init__(self, id: int, center, radius: float = 50.0):
        self.id = id
        self.center = np.array(center, dtype=float)
        self.radius = float(radius)  # avoidance radius, not the physical size


class SwarmEnv:
    def __init__(self, world: WorldBounds | None = None, obstacles=None):
        self.world = world or WorldBounds()
        self.obstacles: list[Obstacle] = list(obstacles or [])

    @classmethod
    def with_obstacle_field(cls, world=None, count: int = 10, radius: float = 50.0,
                            extent: float = 500.0, altitude=(50.0, 150.0), rng=None):
        """Scatter `count` static obstacles over the horizontal square [-extent, extent]."""
        rng = rng or np.random.default_rng()
        obstacles = []
        for i in range(count):
            x, z = rng.uniform(-extent, extent, size=2)
            y = rng.uniform(altitude[0], altitude[1])
            obstacles.append(Obstacle(i, [x, y, z], radius))
        return cls(world=world, obstacles=obstacles)

    def enforce_constraints(self, st: AgentState):
        """
        Elastic bounce off the horizontal boundary and clamp into the altitude
        band. Returns True if any limit was hit.
        """
        b = self.world.boundary
        hit = False
        for axis in (0, 2):
            if abs(st.pos[axis]) > b:
                st.vel[axis] = -st.vel[axis]
                st.pos[axis] = np.sign(st.pos[axis]) * b
                hit = True

        if st.pos[1] < self.world.min_altitude:
            st.pos[1] = self.world.min_altitude
            st.vel[1] = abs(st.vel[1])
            hit = True
        elif st.pos[1] > self.world.max_altitude:
            st.pos[1] = self.world.max_altitude
            st.vel[1] = -abs(st.vel[1])
            hit = True
        return hit
