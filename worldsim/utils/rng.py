"""Seedable RNG for deterministic world histories."""


class WorldRNG:
    """Deterministic 32-bit linear-congruential generator.

    All randomness in the simulation should go through this class so that the
    same seed text and the same sequence of calls always reproduce the same
    world. The state is a single 32-bit integer, which keeps it trivially
    serializable.
    """

    _FNV_OFFSET = 2166136261
    _FNV_PRIME = 16777619
    _LCG_MULTIPLIER = 1664525
    _LCG_INCREMENT = 1013904223
    _MASK = 0xFFFFFFFF

    def __init__(self, seed_text: str = "719-SUNDER"):
        """Initialize RNG from seed text.

        Args:
            seed_text: Arbitrary string hashed into the 32-bit starting state
        """
        self.seed_text = seed_text
        self.state = 0
        self.reseed(seed_text)

    @classmethod
    def hash_text(cls, text: str) -> int:
        """FNV-1a hash of a string into a 32-bit integer."""
        h = cls._FNV_OFFSET
        for ch in text:
            h ^= ord(ch)
            h = (h * cls._FNV_PRIME) & cls._MASK
        return h

    def reseed(self, seed_text: str) -> None:
        """Reset the generator from seed text.

        Args:
            seed_text: String to hash into the new state
        """
        self.seed_text = seed_text
        self.state = self.hash_text(seed_text)

    def random(self) -> float:
        """Advance the state and return a float in [0.0, 1.0).

        Returns:
            Random float between 0.0 (inclusive) and 1.0 (exclusive)
        """
        self.state = (self._LCG_MULTIPLIER * self.state + self._LCG_INCREMENT) & self._MASK
        return self.state / 4294967296.0

    def uniform(self, a: float, b: float) -> float:
        """Return random float in [a, b)."""
        return a + (b - a) * self.random()

    def randint(self, a: int, b: int) -> int:
        """Return random integer in range [a, b], inclusive.

        Args:
            a: Lower bound (inclusive)
            b: Upper bound (inclusive)

        Returns:
            Random integer between a and b
        """
        return int(self.uniform(a, b + 1) // 1)

    def choice(self, seq):
        """Choose random element from non-empty sequence.

        Args:
            seq: Sequence to choose from

        Returns:
            Random element from sequence

        Raises:
            IndexError: If the sequence is empty
        """
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[int(self.random() * len(seq))]

    def swing(self, amplitude: float) -> float:
        """Return a multiplicative noise factor in [1 - amplitude, 1 + amplitude)."""
        return 1 + (self.random() * 2 - 1) * amplitude

    def get_state(self) -> int:
        """Get the current state of the RNG for serialization."""
        return self.state

    def set_state(self, state: int) -> None:
        """Set the state of the RNG for deserialization.

        Args:
            state: 32-bit state from get_state
        """
        self.state = int(state) & self._MASK
