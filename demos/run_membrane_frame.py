import logging

from dsfem import (
    LoadMembraneDistributed,
    LoadNode,
    LoadPatternConstant,
    Matrix,
    Membrane,
    Model,
    Node,
    RestraintNode,
    StaticAnalysis,
    setup_logging,
)
from dsfem.viz import plot_deformed, plot_stress


def main():
    """
    TWO-MEMBRANE FRAME
    ==================
    Two 2 m × 2 m membranes side by side, fixed at the two outer bottom
    corners, with a 1000 point load pulling the top middle node down:

        N2 ---- N4 ---- N6
        |  MEM1 |  MEM2 |
        N1 ---- N3 ---- N5
        ^               ^

    Run it, then look at out/membrane-frame.txt and the two plots.
    """
    setup_logging(logging.INFO)

    # ========================================================================
    # GEOMETRY AND MATERIAL
    # ========================================================================
    E = 2000.0       # Elastic modulus
    nu = 0.2         # Poisson ratio
    t = 1.0          # Thickness
    P = 1000.0       # Point load at N4 (downward)

    n1 = Node("N1", 0, 0)
    n2 = Node("N2", 0, 2)
    n3 = Node("N3", 2, 0)
    n4 = Node("N4", 2, 2)
    n5 = Node("N5", 4, 0)
    n6 = Node("N6", 4, 2)
    nodes = [n1, n2, n3, n4, n5, n6]

    # Nodes counter-clockwise from the lower-left corner of each element
    mem1 = Membrane("MEM1", n1, n3, n4, n2, E, nu, t)
    mem2 = Membrane("MEM2", n3, n5, n6, n4, E, nu, t)

    # ========================================================================
    # SUPPORTS AND LOADS
    # ========================================================================
    r1 = RestraintNode("R1", n1)
    r5 = RestraintNode("R5", n5)
    r1.add_all()
    r5.add_all()

    loads = [
        LoadNode("P", n4, Matrix.column([0.0, -P])),
        # Light wind on the left edge, growing toward the top
        LoadMembraneDistributed("WIND", mem1, 1, 4, 0.0, 0.0, 20.0, 1.0),
    ]

    model = Model(2, 2)
    model.add_nodes(nodes)
    model.add_elements([mem1, mem2])
    model.add_restraints([r1, r5])
    model.add_load_patterns([LoadPatternConstant("Service", loads)])

    # ========================================================================
    # SOLVE
    # ========================================================================
    analysis = StaticAnalysis(model, inversion="cpu")
    analysis.analyze()
    print(analysis.summary())

    # ========================================================================
    # RESULTS
    # ========================================================================
    print()
    print("Two-Membrane Frame")
    print("=" * 50)
    for node in nodes:
        ux, uy = node.get_displacements().get_array()
        print(f"{node.tag}: ux = {ux:+.5f}   uy = {uy:+.5f}")

    ry = n1.get_reaction(2) + n5.get_reaction(2)
    rx = n1.get_reaction(1) + n5.get_reaction(1)
    print()
    print(f"Sum of vertical reactions: {ry:.2f} (applied {P:.2f} down)")
    print(f"Sum of horizontal reactions: {rx:.2f} (wind pushes {20.0 * 2 / 2:.2f} toward +x)")

    model.save_results("out/membrane-frame.txt")
    plot_deformed(model, "out/membrane-frame-deformed.png", scale=0.2)
    plot_stress(model, "out/membrane-frame-sy.png", component="sy")


if __name__ == "__main__":
    main()
