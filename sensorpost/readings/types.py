"""Sensor reading payload."""

from pydantic import BaseModel, Field, ValidationError

from sensorpost.core.errors import PayloadParseError


class SensorReading(BaseModel):
    """One home environment sample as posted by the sensor job."""

    datetime: str
    temperature: float
    humidity: float
    pressure: float
    co2: int = Field(ge=0)


def parse_reading(json_text: str) -> SensorReading:
    """Decode the JSON payload given on the command line."""
    try:
        return SensorReading.model_validate_json(json_text)
    except ValidationError as exc:
        raise PayloadParseError(f"invalid sensor reading: {exc}") from exc
