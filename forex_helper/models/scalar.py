from typing import Any

from pydantic import BaseModel, ConfigDict, model_serializer, model_validator


class ScalarValue(BaseModel):
    """Frozen single-field value type that reads and writes as its bare ``value``.

    ``LotSize(value=0.5)``, ``LotSize.model_validate(0.5)`` and a nested
    ``"lot_size": 0.5`` all build the same object, and it dumps back to ``0.5``.
    """

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _from_scalar(cls, data: Any) -> Any:
        if isinstance(data, (dict, BaseModel)):
            return data
        return {"value": data}

    @model_serializer
    def _serialize(self) -> Any:
        return self.value
