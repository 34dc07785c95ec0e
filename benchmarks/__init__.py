"""Performance benchmarks for qfocus.

Microbenchmarks for the register hot paths: layout changes (focus/relax),
gate application on focused qubits, and measurement sampling.
"""
