"""
Weather lookup against open-meteo.

    OPENAI_API_KEY=... python examples/weather.py
    curl -d "what's the weather in Lisbon? answer in json" localhost:8080
"""

import os

import httpx
from pydantic import BaseModel, Field

from openaci.http import HttpIntentRouter
from openaci.intent import IntentRequest

router = HttpIntentRouter(model=os.environ.get("OPENAI_MODEL", "gpt-4o-mini"))


class CheckWeather(BaseModel):
    lat: float = Field(description="Latitude of the location")
    lng: float = Field(description="Longitude of the location")


@router.intent("Check the weather", CheckWeather)
async def check_weather(request: IntentRequest) -> dict:
    params = {
        "latitude": request.entities.lat,
        "longitude": request.entities.lng,
        "current_weather": "true",
    }
    async with httpx.AsyncClient(timeout=10.0) as client:
        response = await client.get("https://api.open-meteo.com/v1/forecast", params=params)
        response.raise_for_status()
        return response.json()


if __name__ == "__main__":
    router.listen(port=int(os.environ.get("PORT", "8080")))
