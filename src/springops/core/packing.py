from __future__ import annotations

import math
from dataclasses import dataclass

from springops.core.forms import FormValidationError, coerce_float, validate_packing


@dataclass(frozen=True)
class PackingPlan:
    """Weights for packing one verified batch.

    ``grams_per_product`` is the weight of a single spring, ``packing_size``
    the springs per pack.
    """

    batch: dict
    total_kg: float
    grams_per_product: float
    packing_size: int

    @classmethod
    def from_batch(cls, batch: dict) -> "PackingPlan":
        total = coerce_float(batch.get("available_kg"))
        if total is None:
            total = coerce_float(batch.get("quantity_kg")) or 0.0
        return cls(
            batch=dict(batch),
            total_kg=total,
            grams_per_product=coerce_float(batch.get("grams_per_product")) or 0.0,
            packing_size=int(coerce_float(batch.get("packing_size")) or 0),
        )

    @property
    def pack_kg(self) -> float:
        return self.packing_size * self.grams_per_product / 1000

    @property
    def theoretical_packs(self) -> int:
        if self.pack_kg <= 0:
            return 0
        return math.floor(self.total_kg / self.pack_kg)

    def loose_pieces(self, loose_kg) -> int:
        kg = coerce_float(loose_kg) or 0.0
        if self.grams_per_product <= 0:
            return 0
        return math.floor(kg / (self.grams_per_product / 1000))

    def packed_kg(self, actual_packs) -> float:
        return (int(coerce_float(actual_packs) or 0)) * self.pack_kg

    def variance_kg(self, actual_packs, loose_kg) -> float:
        return round(self.packed_kg(actual_packs) + (coerce_float(loose_kg) or 0.0) - self.total_kg, 3)

    def payload(self, actual_packs, loose_kg) -> dict:
        errors = validate_packing(actual_packs, loose_kg)
        if errors:
            raise FormValidationError(errors)
        product = self.batch.get("product")
        if isinstance(product, dict):
            product = product.get("id")
        return {
            "batch_ids": [self.batch.get("id")],
            "product_code": self.batch.get("product_code"),
            "product": product if product is not None else self.batch.get("product_id"),
            "ipc": self.batch.get("ipc"),
            "heat_no": self.batch.get("heat_no"),
            "total_weight_kg": round(self.total_kg, 3),
            "grams_per_product": self.grams_per_product,
            "packing_size": self.packing_size,
            "theoretical_packs": self.theoretical_packs,
            "actual_packs": int(coerce_float(actual_packs)),
            "loose_weight_kg": coerce_float(loose_kg),
            "loose_pieces": self.loose_pieces(loose_kg),
            "variance_kg": self.variance_kg(actual_packs, loose_kg),
        }
