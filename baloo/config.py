"""
Baloo configuration
Defaults for the pairing curve, transcript label and prover parallelism
"""

import os

# Pairing curve; SS512 has a 2^107 subgroup in its scalar field, which the FFT domains need
DEFAULT_PAIRING_CURVE = os.getenv('BALOO_PAIRING_CURVE', 'SS512')

# Domain-separation label seeding every transcript
DEFAULT_TRANSCRIPT_LABEL = os.getenv('BALOO_TRANSCRIPT_LABEL', 'baloo-lookup-v1').encode('utf-8')

# Worker threads for independent commitments inside one round (1 = sequential)
DEFAULT_WORKERS = int(os.getenv('BALOO_WORKERS', 1))


class Config:
    """Runtime configuration shared by prover and verifier."""

    def __init__(self, pairing_curve=None, transcript_label=None, workers=None):
        self.pairing_curve = pairing_curve or DEFAULT_PAIRING_CURVE
        self.transcript_label = transcript_label or DEFAULT_TRANSCRIPT_LABEL
        self.workers = workers if workers is not None else DEFAULT_WORKERS
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")


# Global configuration instance
config = Config()
