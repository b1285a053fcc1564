"""
RNG backed by simulated qubit measurements.

Each sample measures a register of qubits held in superposition, half of
them in the X basis, on the local Aer simulator. That makes it a
demonstration source rather than hardware entropy.
"""

from __future__ import annotations

import hashlib
import struct
from dataclasses import dataclass

from loguru import logger
from qiskit import QuantumCircuit, transpile
from qiskit_aer import AerSimulator

from .errors import RngError
from .rng import RNG, UINT32_RANGE


@dataclass
class QuantumConfig:
    # one measured bit per qubit per run; must fit the simulator
    num_qubits: int = 20
    # runs XOR-ed together per sample
    quantum_streams: int = 2
    # SHA-256 passes when folding a sample into the pool
    entropy_rounds: int = 2


def bits_to_bytes(bits: list[int]) -> bytes:
    """Big-endian packing, the last byte zero-filled on the right."""
    if not bits:
        return b""
    padded = bits + [0] * (-len(bits) % 8)
    return int("".join(map(str, padded)), 2).to_bytes(len(padded) // 8, "big")


class QuantumEngine:
    """Runs the measurement circuit and XORs independent runs together."""

    def __init__(self, config: QuantumConfig | None = None) -> None:
        self.config = config or QuantumConfig()
        self.backend = AerSimulator()

        self.last_raw_bits: list[int] | None = None
        self.last_measurement_basis: list[str] | None = None

        max_qubits = getattr(self.backend, "num_qubits", None)
        if max_qubits is not None and self.config.num_qubits > max_qubits:
            raise RngError(
                f"{self.config.num_qubits} qubits requested but the simulator "
                f"supports at most {max_qubits}"
            )

    def _build_circuit(self) -> tuple[QuantumCircuit, list[str]]:
        size = self.config.num_qubits
        circuit = QuantumCircuit(size, size)
        bases = ["X" if qubit % 2 else "Z" for qubit in range(size)]

        # Z-basis qubits are prepared in |+>, X-basis qubits stay in |0> and
        # get the basis change; either way each outcome is a fair coin
        for qubit in range(size):
            circuit.h(qubit)
            circuit.measure(qubit, qubit)

        return circuit, bases

    def get_raw_bits(self) -> list[int]:
        """One shot of the circuit, qubit 0 first."""
        circuit, bases = self._build_circuit()
        job = self.backend.run(transpile(circuit, self.backend), shots=1)
        (bitstring,) = job.result().get_counts()

        # counts keys list the highest qubit first
        bits = [int(bit) for bit in reversed(bitstring)]

        self.last_raw_bits = bits
        self.last_measurement_basis = bases
        return bits

    def sample(self) -> list[int]:
        bits = self.get_raw_bits()
        for _ in range(self.config.quantum_streams - 1):
            bits = [a ^ b for a, b in zip(bits, self.get_raw_bits())]
        return bits


class QuantumRNG(RNG):
    """
    Floats from simulated qubit measurements.

    Every sample is hashed into a running SHA-256 pool; each digest yields
    eight 32-bit numbers.
    """

    def __init__(self, config: QuantumConfig | None = None) -> None:
        self.engine = QuantumEngine(config)
        self._pool = b""

    def _mix(self, bits: list[int]) -> bytes:
        data = self._pool + bits_to_bytes(bits)
        for _ in range(max(1, self.engine.config.entropy_rounds)):
            data = hashlib.sha256(data).digest()
        self._pool = data
        return data

    def random_numbers(self, count: int) -> list[float]:
        numbers: list[float] = []
        while len(numbers) < max(1, count):
            digest = self._mix(self.engine.sample())
            numbers.extend(value / UINT32_RANGE for value in struct.unpack(">8I", digest))
        logger.debug(f"quantum engine produced {len(numbers)} random numbers")
        return numbers

    def source(self) -> str:
        return (
            f"{super().source()} ({self.engine.config.num_qubits} qubits, "
            f"{self.engine.config.quantum_streams} streams)"
        )
