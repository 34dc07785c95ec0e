"""Example: Bell pairs with focused registers

Builds a Bell pair on two wires of a larger register, samples it, and
renders the circuit as qcircuit LaTeX.
"""

import torch

import qfocus as qf


def example_bell_on_subset():
    """Prepare a Bell pair on qubits 1 and 3 of a four-qubit register."""
    print("=" * 60)
    print("Example 1: Bell pair on a focused subset")
    print("=" * 60)

    reg = qf.zero_register(4, nbatch=2)
    bell = qf.chain(2, qf.put(2, 0, "H"), qf.control(2, 0, 1, "X"))

    # The circuit sees only the two focused wires.
    reg.focus_(1, 3)
    qf.apply_block_(reg, bell)
    print(f"Register after the circuit:\n{reg}")

    samples = reg.measure(8, generator=torch.Generator().manual_seed(7))
    print(f"Samples (rows = shots, columns = batch):\n{samples}")

    reg.relax_()
    outcome = reg.measure_collapse_()
    print(f"Collapsed full register to: {outcome.tolist()}")
    print()


def example_select_and_render():
    """Post-select one qubit and render the circuit."""
    print("=" * 60)
    print("Example 2: Post-selection and LaTeX output")
    print("=" * 60)

    circuit = (
        qf.ChainBlock(3)
        .add_gate("H", [0])
        .add_gate("X", [1], controls=[0])
        .add_gate("RZ", [2], params=[torch.pi / 2])
        .add_gate("SWAP", [1, 2])
    )
    reg = qf.zero_register(3)
    qf.apply_block_(reg, circuit)

    # Keep the branch where qubit 0 is |1>.
    branch = reg.focus_(0).select(1)
    print(f"Post-selected branch norm^2: {branch.raw_state().abs().pow(2).sum().item():.3f}")

    print(qf.texcircuit(circuit, style=qf.TexStyle(col_spacing=0.8)))
    print()


if __name__ == "__main__":
    example_bell_on_subset()
    example_select_and_render()
