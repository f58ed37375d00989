"""
Synthetic dataset generation for the DynamoDB adapter bench.

Every record has the same shape; `id`, `string` and `number` are random.
Generation is not seeded: calling `generate_dataset` twice yields two
different datasets, so the canonical dataset is generated once per run and
handed to both the table seeding and the verifier.
"""

from __future__ import annotations

import copy
import json
import random
import uuid
from pathlib import Path
from typing import List, Optional

from ddb_bench.domain.models import Record

ANIMALS = ("Lion", "Monkey", "Elephant")
EXTERNAL_IDS = ("some-external-id-1", "some-external-id-2", "some-external-id-3")
NUMBER_LIST = (1, 2, 3)
NESTED = {"any": {"level": {"supported": True}}}
NUMBER_UPPER_BOUND = 1_000_000
DEFAULT_DATASET_SIZE = 1_000


def generate_record(rng: Optional[random.Random] = None) -> Record:
    rng = rng or random
    return Record(
        id=str(uuid.uuid4()),
        boolean=False,
        string=rng.choice(ANIMALS),
        nullable=None,
        number=rng.randrange(NUMBER_UPPER_BOUND),
        external_id_list=list(EXTERNAL_IDS),
        number_list=list(NUMBER_LIST),
        nested=copy.deepcopy(NESTED),
    )


def generate_dataset(count: int = DEFAULT_DATASET_SIZE, rng: Optional[random.Random] = None) -> List[Record]:
    """
    Produce `count` synthetic records.

    Parameters
    ----------
    count : int
        Number of records to generate.
    rng : random.Random | None
        Optional random source for `string` and `number`; defaults to the
        process-wide one. Ids are always fresh uuid4 values.
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    return [generate_record(rng) for _ in range(count)]


def save_dataset(records: List[Record], path: Path | str) -> Path:
    """Write a dataset as a JSON array keyed by wire attribute names."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as f:
        json.dump([r.to_item() for r in records], f, indent=2)
    return target


def load_dataset(path: Path | str) -> List[Record]:
    with Path(path).open("r", encoding="utf-8") as f:
        return [Record.model_validate(item) for item in json.load(f)]


__all__ = [
    "ANIMALS",
    "DEFAULT_DATASET_SIZE",
    "generate_dataset",
    "generate_record",
    "load_dataset",
    "save_dataset",
]
