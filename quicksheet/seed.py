# SPDX-License-Identifier: MIT
"""Built-in reference items loaded into an empty store."""

from typing import List

from quicksheet.models import Item, ItemKind

_C = ItemKind.CONSTANT
_E = ItemKind.EQUATION

SEED_ITEMS = [
    # Constants
    Item(id="g", kind=_C, name="Standard gravity", symbol="g", value="9.80665",
         units="m s^-2", latex="g = 9.80665\\,\\text{m s}^{-2}",
         text="Standard acceleration due to gravity at Earth's surface",
         tags=["gravity", "acceleration"], category="Constants",
         source="CODATA 2018", popularity=10, rank=1),
    Item(id="k_B", kind=_C, name="Boltzmann constant", symbol="k_B", value="1.380649e-23",
         units="J K^-1", text="Relates temperature to energy per degree of freedom",
         tags=["thermal", "entropy"], category="Constants",
         source="CODATA 2018", popularity=5, rank=2),
    Item(id="c", kind=_C, name="Speed of light in vacuum", symbol="c", value="299792458",
         units="m s^-1", text="Exact by definition of the metre",
         tags=["light", "relativity"], category="Constants",
         source="CODATA 2018", popularity=9, rank=3),
    Item(id="G", kind=_C, name="Gravitational constant", symbol="G", value="6.67430e-11",
         units="m^3 kg^-1 s^-2", text="Newtonian constant of gravitation",
         tags=["gravity", "newton"], category="Constants",
         source="CODATA 2018", popularity=7, rank=4),
    Item(id="h", kind=_C, name="Planck constant", symbol="h", value="6.62607015e-34",
         units="J s", text="Quantum of action", tags=["quantum"],
         category="Constants", source="CODATA 2018", popularity=6, rank=5),
    Item(id="N_A", kind=_C, name="Avogadro constant", symbol="N_A", value="6.02214076e23",
         units="mol^-1", text="Particles per mole", tags=["mole", "chemistry"],
         category="Constants", source="CODATA 2018", popularity=5, rank=6),
    Item(id="R", kind=_C, name="Molar gas constant", symbol="R", value="8.314462618",
         units="J mol^-1 K^-1", text="Ideal gas constant", tags=["gas", "thermal"],
         category="Constants", source="CODATA 2018", popularity=6, rank=7),
    # Kinematics
    Item(id="suvat-v", kind=_E, name="Velocity under constant acceleration", symbol="v",
         latex="v = u + a t", text="Final velocity after time t",
         tags=["suvat", "velocity"], category="Kinematics", popularity=8, rank=1),
    Item(id="suvat-s", kind=_E, name="Displacement under constant acceleration", symbol="s",
         latex="s = u t + \\tfrac{1}{2} a t^2", text="Distance covered from initial velocity u",
         tags=["suvat", "displacement"], category="Kinematics", popularity=8, rank=2),
    Item(id="suvat-v2", kind=_E, name="Velocity-displacement relation",
         latex="v^2 = u^2 + 2 a s", text="Timeless SUVAT equation",
         tags=["suvat"], category="Kinematics", popularity=6, rank=3),
    # Dynamics
    Item(id="newton-2", kind=_E, name="Newton's second law", symbol="F",
         latex="F = m a", text="Net force equals mass times acceleration",
         tags=["force", "newton"], category="Dynamics", popularity=10, rank=1),
    Item(id="weight", kind=_E, name="Weight", symbol="W", latex="W = m g",
         text="Gravitational force near Earth's surface", tags=["gravity", "force"],
         category="Dynamics", popularity=6, rank=2),
    Item(id="friction", kind=_E, name="Kinetic friction", symbol="f",
         latex="f = \\mu N", text="Friction from coefficient and normal force",
         tags=["force"], category="Dynamics", popularity=5, rank=3),
    # Work & Energy
    Item(id="kinetic-energy", kind=_E, name="Kinetic energy", symbol="KE",
         latex="E_k = \\tfrac{1}{2} m v^2", text="Energy of motion",
         tags=["energy"], category="Work & Energy", popularity=9, rank=1),
    Item(id="potential-energy", kind=_E, name="Gravitational potential energy", symbol="PE",
         latex="E_p = m g h", text="Near-surface potential energy",
         tags=["energy", "gravity"], category="Work & Energy", popularity=7, rank=2),
    Item(id="power", kind=_E, name="Power", symbol="P", latex="P = \\frac{W}{t}",
         text="Rate of doing work", tags=["energy", "work"],
         category="Work & Energy", popularity=5, rank=3),
    # Momentum
    Item(id="momentum", kind=_E, name="Linear momentum", symbol="p", latex="p = m v",
         text="Mass times velocity", tags=["momentum"], category="Momentum",
         popularity=7, rank=1),
    Item(id="impulse", kind=_E, name="Impulse", symbol="J", latex="J = F \\Delta t",
         text="Change in momentum", tags=["momentum", "force"], category="Momentum",
         popularity=4, rank=2),
    # Rotation
    Item(id="torque", kind=_E, name="Torque", symbol="\\tau",
         latex="\\tau = r F \\sin\\theta", text="Turning effect of a force",
         tags=["rotation", "force"], category="Rotation", popularity=5, rank=1),
    Item(id="centripetal", kind=_E, name="Centripetal acceleration", symbol="a_c",
         latex="a_c = \\frac{v^2}{r}", text="Acceleration towards the centre of a circle",
         tags=["circular", "acceleration"], category="Rotation", popularity=6, rank=2),
    # Oscillations
    Item(id="shm-period", kind=_E, name="Pendulum period", symbol="T",
         latex="T = 2\\pi \\sqrt{\\frac{L}{g}}", text="Small-angle simple pendulum",
         tags=["pendulum", "shm"], category="Oscillations", popularity=6, rank=1),
    Item(id="hooke", kind=_E, name="Hooke's law", symbol="F",
         latex="F = -k x", text="Restoring force of an ideal spring",
         tags=["spring", "shm"], category="Oscillations", popularity=5, rank=2),
    # Thermodynamics
    Item(id="ideal-gas", kind=_E, name="Ideal gas law", latex="p V = n R T",
         text="Equation of state of an ideal gas", tags=["gas", "thermal"],
         category="Thermodynamics", popularity=8, rank=1),
    Item(id="heat", kind=_E, name="Specific heat", symbol="Q",
         latex="Q = m c \\Delta T", text="Heat needed to change temperature",
         tags=["heat", "thermal"], category="Thermodynamics", popularity=5, rank=2),
]


def seed_items() -> List[Item]:
    """Fresh copies of the built-in items."""
    return [Item.from_dict(item.to_dict()) for item in SEED_ITEMS]
