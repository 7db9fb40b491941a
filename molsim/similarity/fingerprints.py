"""
Fingerprint generation for molsim.

One `FingerprintAlgorithm` is configured per run and applied uniformly to every
record of both collections, so scores are comparable across the whole matrix.

Supported bit-vector fingerprints:
- Morgan (ECFP-like circular fingerprints, the default: radius 2, 2048 bits)
- Morgan with feature invariants (FCFP-like)
- MACCS (166-bit structural keys)
- RDKit (RDKit topological fingerprint)
- Atom Pair
- Topological Torsion
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from rdkit import Chem, DataStructs
from rdkit.Chem import MACCSkeys, rdFingerprintGenerator
from tqdm import tqdm

from molsim.errors import FingerprintGenerationError

LOGGER = logging.getLogger(__name__)


# Fingerprint type configurations
FINGERPRINT_TYPES = {
    "morgan": {
        "description": "Morgan circular fingerprint (ECFP-like)",
        "default_params": {"radius": 2, "n_bits": 2048},
    },
    "morgan_feat": {
        "description": "Morgan fingerprint with pharmacophoric features (FCFP-like)",
        "default_params": {"radius": 2, "n_bits": 2048},
    },
    "maccs": {
        "description": "MACCS 166-bit structural keys",
        "default_params": {},
    },
    "rdkit": {
        "description": "RDKit topological fingerprint",
        "default_params": {"n_bits": 2048},
    },
    "atompair": {
        "description": "Atom pair fingerprint",
        "default_params": {"n_bits": 2048},
    },
    "torsion": {
        "description": "Topological torsion fingerprint",
        "default_params": {"n_bits": 2048},
    },
}


@dataclass(frozen=True)
class FingerprintAlgorithm:
    """Fingerprint configuration shared by the query and database encodings."""

    fp_type: str = "morgan"
    radius: int = 2
    n_bits: int = 2048
    use_chirality: bool = False

    def __post_init__(self):
        if self.fp_type not in FINGERPRINT_TYPES:
            raise ValueError(
                f"Unknown fingerprint type: {self.fp_type}. "
                f"Available: {list(FINGERPRINT_TYPES.keys())}"
            )
        if self.radius < 0:
            raise ValueError(f"Fingerprint radius must be >= 0, got {self.radius}")
        if self.n_bits <= 0:
            raise ValueError(f"Fingerprint size must be > 0, got {self.n_bits}")

    @classmethod
    def from_name(cls, fp_type: str = "morgan", **overrides) -> "FingerprintAlgorithm":
        """Build an algorithm from a fingerprint type name plus parameter overrides."""
        fp_type = fp_type.lower()
        if fp_type not in FINGERPRINT_TYPES:
            raise ValueError(
                f"Unknown fingerprint type: {fp_type}. "
                f"Available: {list(FINGERPRINT_TYPES.keys())}"
            )
        params = FINGERPRINT_TYPES[fp_type]["default_params"].copy()
        params.update({k: v for k, v in overrides.items() if v is not None})
        return cls(fp_type=fp_type, **params)

    @property
    def n_bits_out(self) -> int:
        # MACCS keys have a fixed width of 167 (bit 0 unused).
        return 167 if self.fp_type == "maccs" else self.n_bits

    def describe(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"fp_type": self.fp_type, "n_bits": self.n_bits_out}
        if self.fp_type in ("morgan", "morgan_feat"):
            out["radius"] = self.radius
            out["use_chirality"] = self.use_chirality
        return out

    def generator(self):
        """Return the RDKit fingerprint generator, or None for MACCS keys."""
        if self.fp_type == "morgan":
            return rdFingerprintGenerator.GetMorganGenerator(
                radius=self.radius,
                fpSize=self.n_bits,
                includeChirality=self.use_chirality,
            )
        if self.fp_type == "morgan_feat":
            return rdFingerprintGenerator.GetMorganGenerator(
                radius=self.radius,
                fpSize=self.n_bits,
                includeChirality=self.use_chirality,
                atomInvariantsGenerator=rdFingerprintGenerator.GetMorganFeatureAtomInvGen(),
            )
        if self.fp_type == "rdkit":
            return rdFingerprintGenerator.GetRDKitFPGenerator(fpSize=self.n_bits)
        if self.fp_type == "atompair":
            return rdFingerprintGenerator.GetAtomPairGenerator(fpSize=self.n_bits)
        if self.fp_type == "torsion":
            return rdFingerprintGenerator.GetTopologicalTorsionGenerator(fpSize=self.n_bits)
        return None


@dataclass(frozen=True)
class FingerprintSet:
    """Fingerprints index-aligned 1:1 with the collection they were encoded from."""

    algorithm: FingerprintAlgorithm
    fingerprints: Tuple[Any, ...] = field(default_factory=tuple)
    label: str = ""

    def __len__(self) -> int:
        return len(self.fingerprints)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.fingerprints)

    def __getitem__(self, index: int) -> Any:
        return self.fingerprints[index]


def get_fingerprint(
    mol: Optional[Chem.Mol],
    algorithm: FingerprintAlgorithm,
    generator: Any = None,
) -> Optional["DataStructs.ExplicitBitVect"]:
    """
    Generate a bit-vector fingerprint for one molecule.

    Parameters
    ----------
    mol : Mol
        RDKit Mol object
    algorithm : FingerprintAlgorithm
        Fingerprint configuration
    generator : optional
        Pre-built generator from `algorithm.generator()`; built on demand if omitted

    Returns
    -------
    ExplicitBitVect or None
        Fingerprint, or None if the molecule is missing or RDKit rejects it

    Examples
    --------
    >>> fp = get_fingerprint(Chem.MolFromSmiles("CCO"), FingerprintAlgorithm())
    """
    if mol is None:
        return None

    try:
        if algorithm.fp_type == "maccs":
            return MACCSkeys.GenMACCSKeys(mol)
        gen = generator if generator is not None else algorithm.generator()
        return gen.GetFingerprint(mol)
    except (RuntimeError, ValueError) as e:
        LOGGER.debug("Fingerprint generation failed: %s", e)
        return None


def encode(
    collection: Sequence[Chem.Mol],
    algorithm: Optional[FingerprintAlgorithm] = None,
    *,
    show_progress: bool = False,
    logger: Optional[logging.Logger] = None,
) -> FingerprintSet:
    """
    Encode every molecule of a collection with one algorithm.

    Parameters
    ----------
    collection : Collection or sequence of Mol
        Records to encode, in index order
    algorithm : FingerprintAlgorithm, optional
        Fingerprint configuration (default: Morgan, radius 2, 2048 bits)
    show_progress : bool
        Show a progress bar
    logger : logging.Logger, optional
        Destination for diagnostics

    Returns
    -------
    FingerprintSet
        One fingerprint per record, same order

    Raises
    ------
    FingerprintGenerationError
        A record produced no fingerprint. Records are never skipped here since
        that would break index alignment with the collection.
    """
    log = logger or LOGGER
    algorithm = algorithm or FingerprintAlgorithm()
    label = str(getattr(collection, "label", ""))

    generator = algorithm.generator()

    iterator = collection
    if show_progress:
        iterator = tqdm(collection, desc=f"Fingerprinting {label or 'molecules'}")

    fps: List[Any] = []
    for index, mol in enumerate(iterator):
        fp = get_fingerprint(mol, algorithm, generator)
        if fp is None:
            where = f" in {label}" if label else ""
            raise FingerprintGenerationError(
                f"Could not generate {algorithm.fp_type} fingerprint for record {index}{where}"
            )
        fps.append(fp)

    log.info("Encoded %d %s fingerprint(s)%s", len(fps), algorithm.fp_type, f" for {label}" if label else "")
    return FingerprintSet(algorithm=algorithm, fingerprints=tuple(fps), label=label)
