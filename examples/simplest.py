"""
Smallest possible app: one intent that base64-encodes a name.

    openaci examples.simplest:router
    curl -d "please base64 encode Alice" localhost:8080
"""

import base64

from pydantic import BaseModel

from openaci.http import HttpIntentRouter
from openaci.intent import IntentRequest

router = HttpIntentRouter(model="gpt-4o-mini")


class Name(BaseModel):
    name: str


@router.intent("Convert name to base64", Name)
async def convert_name(request: IntentRequest) -> str:
    return base64.b64encode(request.entities.name.encode()).decode()


if __name__ == "__main__":
    router.listen(port=3000)
