from __future__ import annotations


class FieldValidationError(ValueError):
    """Carries every violated constraint, keyed by the offending field."""

    def __init__(self, errors: dict[str, list[str]]):
        self.errors = errors
        parts = [f"{field}: {'; '.join(msgs)}" for field, msgs in errors.items()]
        super().__init__(" | ".join(parts))


class AnalysisValidationError(FieldValidationError):
    pass


class InvalidRentalInputError(FieldValidationError):
    pass
