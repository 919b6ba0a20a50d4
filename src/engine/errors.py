"""Errors raised for caller mistakes (unknown ids); store failures are logged, never raised."""


class TrackerError(Exception):
    """Base class for adherence tracker errors."""


class UnknownMedicationError(TrackerError):
    def __init__(self, medication_id: str):
        super().__init__(f"Unknown medication: {medication_id!r}")
        self.medication_id = medication_id


class UnknownProductError(TrackerError):
    def __init__(self, product_id: str):
        super().__init__(f"Unknown product: {product_id!r}")
        self.product_id = product_id
