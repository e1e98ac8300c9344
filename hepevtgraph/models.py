"""
Event graph data model for hepevtgraph.

Particles and vertices live in arenas owned by a GenEvent. Edges between
them are plain integer handles (0-based positions in the owning event's
``particles`` / ``vertices`` lists), which keeps the graph acyclic in
memory and makes two reconstructions of the same record compare equal.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class FourVector:
    """A 4-component value: (x, y, z, t) or, kinematically, (px, py, pz, e)."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    t: float = 0.0

    @property
    def px(self) -> float:
        return self.x

    @property
    def py(self) -> float:
        return self.y

    @property
    def pz(self) -> float:
        return self.z

    @property
    def e(self) -> float:
        return self.t

    def scaled(self, factor: float) -> FourVector:
        return FourVector(self.x * factor, self.y * factor, self.z * factor, self.t * factor)

    def is_zero(self) -> bool:
        return self.x == 0.0 and self.y == 0.0 and self.z == 0.0 and self.t == 0.0

    @property
    def pt(self) -> float:
        """Transverse momentum."""
        return math.sqrt(self.x**2 + self.y**2)

    @property
    def eta(self) -> float:
        """Pseudorapidity."""
        p = math.sqrt(self.x**2 + self.y**2 + self.z**2)
        if p == abs(self.z):
            return float("inf") if self.z >= 0 else float("-inf")
        return 0.5 * math.log((p + self.z) / (p - self.z))

    @property
    def phi(self) -> float:
        """Azimuthal angle."""
        return math.atan2(self.y, self.x)

    @property
    def m(self) -> float:
        """Invariant mass.

        m^2 = E^2 - |p|^2 can drift slightly negative for ultra-relativistic
        particles; small negative values are clamped to zero.
        """
        m2 = self.t**2 - self.x**2 - self.y**2 - self.z**2
        if m2 < 0 and abs(m2) < 1e-8:
            m2 = 0.0
        return math.sqrt(m2) if m2 >= 0 else -math.sqrt(-m2)

    def __iter__(self):
        return iter((self.x, self.y, self.z, self.t))


@dataclass
class GenParticle:
    """A single particle node.

    Attributes:
        momentum: Four-momentum (px, py, pz, E).
        generated_mass: Mass as stored in the input record.
        status: Generator status code.
        pid: PDG Monte Carlo particle ID.
        id: 1-based position in the owning event (0 until inserted).
        production_vertex: Handle of the vertex producing this particle.
        end_vertex: Handle of the first vertex this particle is incoming to.
    """

    momentum: FourVector = field(default_factory=FourVector)
    generated_mass: float = 0.0
    status: int = 0
    pid: int = 0
    id: int = 0
    production_vertex: Optional[int] = None
    end_vertex: Optional[int] = None

    @property
    def is_beam(self) -> bool:
        return self.production_vertex is None


@dataclass
class GenVertex:
    """A vertex node.

    Attributes:
        position: Spacetime position (x, y, z, t).
        particles_in: Handles of incoming particles, in attachment order.
        particles_out: Handles of outgoing particles, in attachment order.
        id: Negative identifier, -(index + 1) (0 until inserted).
        status: Vertex status code.
    """

    position: FourVector = field(default_factory=FourVector)
    particles_in: list[int] = field(default_factory=list)
    particles_out: list[int] = field(default_factory=list)
    id: int = 0
    status: int = 0


@dataclass
class GenEvent:
    """All particle and vertex nodes of one event.

    Attributes:
        event_number: Event identifier.
        particles: Particle arena, in insertion order.
        vertices: Vertex arena, in insertion order.
    """

    event_number: int = 0
    particles: list[GenParticle] = field(default_factory=list)
    vertices: list[GenVertex] = field(default_factory=list)

    def add_particle(self, particle: GenParticle) -> int:
        handle = len(self.particles)
        particle.id = handle + 1
        self.particles.append(particle)
        return handle

    def add_vertex(self, vertex: GenVertex) -> int:
        handle = len(self.vertices)
        vertex.id = -(handle + 1)
        self.vertices.append(vertex)
        return handle

    def particle(self, handle: int) -> GenParticle:
        if not 0 <= handle < len(self.particles):
            raise IndexError(
                f"particle handle {handle} out of range for event with {len(self.particles)} particles"
            )
        return self.particles[handle]

    def vertex(self, handle: int) -> GenVertex:
        if not 0 <= handle < len(self.vertices):
            raise IndexError(
                f"vertex handle {handle} out of range for event with {len(self.vertices)} vertices"
            )
        return self.vertices[handle]

    def add_particle_in(self, vertex: int, particle: int) -> None:
        v = self.vertex(vertex)
        p = self.particle(particle)
        v.particles_in.append(particle)
        if p.end_vertex is None:
            p.end_vertex = vertex

    def add_particle_out(self, vertex: int, particle: int) -> None:
        v = self.vertex(vertex)
        p = self.particle(particle)
        v.particles_out.append(particle)
        p.production_vertex = vertex

    def incoming(self, vertex: int) -> list[GenParticle]:
        return [self.particles[i] for i in self.vertex(vertex).particles_in]

    def outgoing(self, vertex: int) -> list[GenParticle]:
        return [self.particles[i] for i in self.vertex(vertex).particles_out]

    def beam_particles(self) -> list[GenParticle]:
        return [p for p in self.particles if p.is_beam]

    def is_empty(self) -> bool:
        return not self.particles and not self.vertices

    def clear(self) -> None:
        self.event_number = 0
        self.particles.clear()
        self.vertices.clear()
